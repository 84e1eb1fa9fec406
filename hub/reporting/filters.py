"""Entry filtering by date range, product, channel and team member."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import date
from typing import Any, Dict, Iterable, List, Mapping, Optional

from hub.lib.errors import ValidationError

ALL = "all"

_DATE_PARAMS = {"date_from": "dateFrom", "date_to": "dateTo"}

# Accepted spellings for each filter dimension
_ALIASES = {
    "date_from": ("date_from", "dateFrom"),
    "date_to": ("date_to", "dateTo"),
    "product": ("product",),
    "channel": ("channel",),
    "team_member": ("team_member", "teamMember"),
}


@dataclass(frozen=True)
class EntryFilter:
    date_from: Optional[str] = None
    date_to: Optional[str] = None
    product: Optional[str] = None
    channel: Optional[str] = None
    team_member: Optional[str] = None

    def __post_init__(self):
        # Bounds are compared as strings, so hold them in canonical form
        for attr, param in _DATE_PARAMS.items():
            value = getattr(self, attr)
            if value is not None:
                object.__setattr__(self, attr, iso_date(value, field=param))

    @property
    def is_empty(self) -> bool:
        return not any(asdict(self).values())

    def to_dict(self) -> Dict[str, Optional[str]]:
        return asdict(self)


def _clean(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    if not text or text.lower() == ALL:
        return None
    return text


def iso_date(value: Any, field: str = "date") -> str:
    """
    Canonical zero-padded YYYY-MM-DD form of a date value.

    Range filtering compares these strings, so every stored or queried date
    goes through here first.

    Raises:
        ValidationError: value is not a calendar date in YYYY-MM-DD form.
    """
    if isinstance(value, date):
        return date(value.year, value.month, value.day).isoformat()
    text = str(value).strip()
    try:
        parsed = date.fromisoformat(text)
    except ValueError:
        raise ValidationError("Date must be YYYY-MM-DD", field=field) from None
    # fromisoformat also takes compact forms like 20240201 on newer Pythons
    if len(text) != 10:
        raise ValidationError("Date must be YYYY-MM-DD", field=field)
    return parsed.isoformat()


def normalize_filter(raw: Optional[Mapping[str, Any]]) -> EntryFilter:
    """
    Build an EntryFilter from request params; blank and "all" impose nothing.

    Raises:
        ValidationError: dateFrom or dateTo is not a YYYY-MM-DD date.
    """
    raw = raw or {}
    values = {}
    for attr, keys in _ALIASES.items():
        picked = None
        for key in keys:
            if key in raw:
                picked = _clean(raw[key])
                if picked is not None:
                    break
        values[attr] = picked
    return EntryFilter(**values)


def _matches(entry: Mapping[str, Any], spec: EntryFilter) -> bool:
    # ISO YYYY-MM-DD strings order lexicographically
    entry_date = entry.get("date")
    if spec.date_from is not None:
        if not entry_date or str(entry_date) < spec.date_from:
            return False
    if spec.date_to is not None:
        if not entry_date or str(entry_date) > spec.date_to:
            return False
    if spec.product is not None and entry.get("product") != spec.product:
        return False
    if spec.channel is not None and entry.get("channel") != spec.channel:
        return False
    if spec.team_member is not None and entry.get("teamMember") != spec.team_member:
        return False
    return True


def filter_entries(entries: Iterable[Mapping[str, Any]], spec: Optional[EntryFilter] = None) -> List[Mapping[str, Any]]:
    """Entries satisfying every set predicate, in input order. Inputs are not modified."""
    entries = list(entries)
    if spec is None or spec.is_empty:
        return entries
    return [e for e in entries if _matches(e, spec)]
