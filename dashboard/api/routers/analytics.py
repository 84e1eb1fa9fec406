"""
Channel Hub — Analytics Router
================================
Cross-channel summary, chart series and report export over filtered entries.

Endpoints:
  GET /api/analytics/summary  - Totals, orders by product, revenue over time,
                                progress vs target (uncapped)
  GET /api/analytics/export   - Analytics CSV of the filtered entries
"""
from __future__ import annotations

import asyncio
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import Response

from dashboard.api.deps import current_session, get_store, http_error
from hub.lib.entity_store import EntityStore
from hub.lib.errors import HubError
from hub.lib.logger import setup_logger
from hub.lib.session import Session
from hub.reporting.aggregation import (
    orders_by_product,
    progress_vs_targets,
    revenue_over_time,
    summarize,
)
from hub.reporting.export import CSV_MEDIA_TYPE, export_analytics_csv, export_filename
from hub.reporting.filters import EntryFilter, filter_entries, normalize_filter

logger = setup_logger("analytics_router")

router = APIRouter(prefix="/api/analytics", tags=["analytics"])


def analytics_filter(
    date_from: Optional[str] = Query(None, alias="dateFrom", description="Inclusive YYYY-MM-DD"),
    date_to: Optional[str] = Query(None, alias="dateTo", description="Inclusive YYYY-MM-DD"),
    product: Optional[str] = Query(None, description="Product name or 'all'"),
    channel: Optional[str] = Query(None, description="Channel id or 'all'"),
) -> EntryFilter:
    try:
        return normalize_filter({
            "date_from": date_from,
            "date_to": date_to,
            "product": product,
            "channel": channel,
        })
    except HubError as e:
        raise http_error(e) from e


@router.get("/summary")
async def analytics_summary(
    spec: EntryFilter = Depends(analytics_filter),
    session: Session = Depends(current_session),
    store: EntityStore = Depends(get_store),
):
    """Everything the analytics view draws, for one filter selection."""
    try:
        entries, targets, products = await asyncio.gather(
            asyncio.to_thread(store.list_entries, session),
            asyncio.to_thread(store.list_targets, session),
            asyncio.to_thread(store.list_products, session),
        )
    except HubError as e:
        raise http_error(e) from e
    except Exception as e:
        logger.error("Analytics load failed: %s", e)
        raise HTTPException(status_code=500, detail="Failed to load analytics data")

    filtered = filter_entries(entries, spec)
    return {
        "filters": spec.to_dict(),
        "count": len(filtered),
        "summary": summarize(filtered).to_dict(),
        "charts": {
            "orders_by_product": orders_by_product(filtered),
            "revenue_over_time": revenue_over_time(filtered),
            "progress_vs_target": [p.to_dict() for p in progress_vs_targets(targets, filtered)],
        },
        "products": [p["name"] for p in products],
    }


@router.get("/export")
async def analytics_export(
    spec: EntryFilter = Depends(analytics_filter),
    session: Session = Depends(current_session),
    store: EntityStore = Depends(get_store),
):
    """Download the filtered entries as an analytics report. 204 when empty."""
    try:
        entries = filter_entries(store.list_entries(session), spec)
    except HubError as e:
        raise http_error(e) from e
    except Exception as e:
        logger.error("Analytics export failed: %s", e)
        raise HTTPException(status_code=500, detail="Failed to export report")

    if not entries:
        return Response(status_code=204)

    filename = export_filename("analytics-report")
    return Response(
        content=export_analytics_csv(entries),
        media_type=CSV_MEDIA_TYPE,
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )
