"""
Channel Hub — CSV Export
==========================

Serializes filtered entries for download. Two layouts:

- analytics: fixed columns across all channels
- channel:   Date, Product, Team Member, then the first entry's own fields

Fields are written with the csv module, so a value containing a comma or quote
is quoted instead of shifting the row.
"""
from __future__ import annotations

import csv
import io
from datetime import date
from typing import Any, Iterable, List, Mapping, Optional, Sequence

from hub.reporting.aggregation import entry_revenue, first_number

ANALYTICS_HEADERS = ["Date", "Channel", "Product", "Revenue/Value", "Orders", "Team Member"]
CHANNEL_BASE_HEADERS = ["Date", "Product", "Team Member"]

# Keys never emitted as dynamic channel columns
RESERVED_KEYS = ("id", "channel", "date", "product", "teamMember", "createdAt")

# Orders column falls back through these, in order
ORDER_FIELDS = ("orders", "leadsGenerated", "abandonedCarts")

CSV_MEDIA_TYPE = "text/csv"


def _cell(value: Any) -> Any:
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def _write(headers: Sequence[str], rows: Iterable[Sequence[Any]]) -> str:
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(headers)
    for row in rows:
        writer.writerow([_cell(v) for v in row])
    return buf.getvalue().rstrip("\n")


def export_analytics_csv(entries: Iterable[Mapping[str, Any]]) -> str:
    """Analytics report: one row per entry. Empty input yields an empty string."""
    entries = list(entries)
    if not entries:
        return ""

    rows = (
        [
            e.get("date"),
            e.get("channel"),
            e.get("product") or "",
            entry_revenue(e),
            first_number(e, ORDER_FIELDS),
            e.get("teamMember") or "",
        ]
        for e in entries
    )
    return _write(ANALYTICS_HEADERS, rows)


def channel_columns(entries: Sequence[Mapping[str, Any]]) -> List[str]:
    """Dynamic columns: the first entry's non-reserved keys in its key order."""
    if not entries:
        return []
    return [k for k in entries[0].keys() if k not in RESERVED_KEYS]


def export_channel_csv(entries: Iterable[Mapping[str, Any]]) -> str:
    """Per-channel entries table. Empty input yields an empty string."""
    entries = list(entries)
    if not entries:
        return ""

    extra = channel_columns(entries)
    rows = (
        [e.get("date"), e.get("product") or "", e.get("teamMember") or ""]
        + [e.get(k) for k in extra]
        for e in entries
    )
    return _write(CHANNEL_BASE_HEADERS + extra, rows)


def export_filename(context: str, today: Optional[date] = None) -> str:
    """<context>-<YYYY-MM-DD>.csv"""
    today = today or date.today()
    return f"{context}-{today.isoformat()}.csv"
