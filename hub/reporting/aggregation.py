"""
Channel Hub — Aggregation
===========================

Summary totals, per-target progress, and the chart series the dashboard draws.
All functions are pure reductions over in-memory entry dicts: missing or
malformed numbers count as 0 and nothing raises on bad data.
"""
from __future__ import annotations

import math
from collections import OrderedDict
from dataclasses import asdict, dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional

from hub.reporting.channels import get_registry

# Revenue-like fields, highest priority first. One entry contributes one of them.
REVENUE_FIELDS = ("orderValue", "revenue", "value")

STATUS_ACHIEVED = "Achieved"
STATUS_ON_TRACK = "On Track"
STATUS_BEHIND = "Behind"
STATUS_CRITICAL = "Critical"


def to_number(value: Any) -> float:
    """Float value of a record field; None, garbage, NaN and inf become 0."""
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        out = float(value)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(out) or math.isinf(out):
        return 0.0
    return out


def first_number(entry: Mapping[str, Any], fields: Iterable[str]) -> float:
    """First non-zero numeric among fields, in order; 0 when none is set."""
    for name in fields:
        value = to_number(entry.get(name))
        if value:
            return value
    return 0.0


def entry_revenue(entry: Mapping[str, Any]) -> float:
    return first_number(entry, REVENUE_FIELDS)


# ─── Summary Totals ──────────────────────────────────────────

@dataclass(frozen=True)
class SummaryTotals:
    total_revenue: float = 0.0
    total_orders: float = 0.0
    total_leads: float = 0.0
    distinct_product_count: int = 0

    def __add__(self, other: "SummaryTotals") -> "SummaryTotals":
        # Product counts only add up for disjoint product sets
        return SummaryTotals(
            total_revenue=self.total_revenue + other.total_revenue,
            total_orders=self.total_orders + other.total_orders,
            total_leads=self.total_leads + other.total_leads,
            distinct_product_count=self.distinct_product_count + other.distinct_product_count,
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def summarize(entries: Iterable[Mapping[str, Any]]) -> SummaryTotals:
    """Revenue, orders, leads and distinct product count for a collection."""
    revenue = 0.0
    orders = 0.0
    leads = 0.0
    products = set()

    for entry in entries:
        revenue += entry_revenue(entry)
        orders += to_number(entry.get("orders"))
        leads += to_number(entry.get("leadsGenerated"))
        product = entry.get("product")
        if product:
            products.add(product)

    return SummaryTotals(
        total_revenue=revenue,
        total_orders=orders,
        total_leads=leads,
        distinct_product_count=len(products),
    )


# ─── Target Progress ─────────────────────────────────────────

def progress_status(percentage: float) -> str:
    """Status bucket for an uncapped percentage. Boundaries go to the higher bucket."""
    if percentage >= 100:
        return STATUS_ACHIEVED
    if percentage >= 75:
        return STATUS_ON_TRACK
    if percentage >= 50:
        return STATUS_BEHIND
    return STATUS_CRITICAL


def progress_field_for(channel: str) -> Optional[str]:
    schema = get_registry().get(channel)
    return schema.progress_field if schema else None


@dataclass(frozen=True)
class TargetProgress:
    target_id: Optional[str]
    channel: str
    product: str
    amount: float
    progress: float
    percentage: float

    @property
    def capped_percentage(self) -> float:
        return min(self.percentage, 100.0)

    @property
    def status(self) -> str:
        return progress_status(self.percentage)

    @property
    def label(self) -> str:
        return f"{self.product} ({self.channel})"

    def to_dict(self, capped: bool = False) -> Dict[str, Any]:
        return {
            "target_id": self.target_id,
            "channel": self.channel,
            "product": self.product,
            "label": self.label,
            "amount": self.amount,
            "progress": self.progress,
            "percentage": self.capped_percentage if capped else self.percentage,
            "status": self.status,
        }


def compute_progress(target: Mapping[str, Any], entries: Iterable[Mapping[str, Any]]) -> float:
    """Sum of the channel's progress field over entries matching channel and product."""
    channel = target.get("channel")
    product = target.get("product")
    field_name = progress_field_for(channel)
    if field_name is None:
        return 0.0
    return sum(
        to_number(e.get(field_name))
        for e in entries
        if e.get("channel") == channel and e.get("product") == product
    )


def target_progress(target: Mapping[str, Any], entries: Iterable[Mapping[str, Any]]) -> TargetProgress:
    amount = to_number(target.get("amount"))
    progress = compute_progress(target, entries)
    percentage = (progress / amount) * 100 if amount > 0 else 0.0
    return TargetProgress(
        target_id=target.get("id"),
        channel=target.get("channel") or "",
        product=target.get("product") or "",
        amount=amount,
        progress=progress,
        percentage=percentage,
    )


def progress_vs_targets(
    targets: Iterable[Mapping[str, Any]], entries: Iterable[Mapping[str, Any]]
) -> List[TargetProgress]:
    entries = list(entries)
    return [target_progress(t, entries) for t in targets]


# ─── Chart Series ────────────────────────────────────────────

def orders_by_product(entries: Iterable[Mapping[str, Any]]) -> Dict[str, float]:
    """Orders per product, in order of first appearance."""
    totals: Dict[str, float] = OrderedDict()
    for entry in entries:
        product = entry.get("product")
        orders = to_number(entry.get("orders"))
        if product and orders:
            totals[product] = totals.get(product, 0.0) + orders
    return dict(totals)


def revenue_over_time(entries: Iterable[Mapping[str, Any]]) -> List[Dict[str, Any]]:
    """Daily revenue, ascending by date; days without revenue are omitted."""
    daily: Dict[str, float] = {}
    for entry in entries:
        revenue = entry_revenue(entry)
        date = entry.get("date")
        if revenue > 0 and date:
            daily[date] = daily.get(date, 0.0) + revenue
    return [{"date": d, "revenue": daily[d]} for d in sorted(daily)]
