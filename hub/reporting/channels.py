"""
Channel Hub — Channel Form Registry
=====================================

Loads hub/reporting/channel_forms.yaml into frozen dataclasses. The registry is
the one definition of which fields a channel's entries carry; entry creation,
entry editing and required-field validation all read from it.

Usage:
    from hub.reporting.channels import get_channel, build_entry_record

    schema = get_channel("sales-campaign")
    record = build_entry_record("sales-campaign", payload)
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml

from hub.lib.errors import ConfigError, UnknownChannelError, ValidationError
from hub.lib.logger import setup_logger
from hub.reporting.filters import iso_date

logger = setup_logger("channels")

CONFIG_PATH = Path(__file__).resolve().parent / "channel_forms.yaml"

FIELD_KINDS = ("product-select", "team-select", "number", "text")
DATE_FIELD = "date"


@dataclass(frozen=True)
class FieldSpec:
    name: str
    label: str
    kind: str
    required: bool = False
    prefix: Optional[str] = None
    suffix: Optional[str] = None

    @property
    def is_numeric(self) -> bool:
        return self.kind == "number"


@dataclass(frozen=True)
class ChannelSchema:
    id: str
    label: str
    title: str
    progress_field: str
    fields: Tuple[FieldSpec, ...] = field(default_factory=tuple)

    @property
    def field_names(self) -> List[str]:
        return [f.name for f in self.fields]

    def get_field(self, name: str) -> Optional[FieldSpec]:
        for f in self.fields:
            if f.name == name:
                return f
        return None


def _parse_field(raw: dict, channel_id: str) -> FieldSpec:
    kind = raw.get("kind", "text")
    if kind not in FIELD_KINDS:
        raise ConfigError(
            f"Channel '{channel_id}' field '{raw.get('name')}' has unknown kind '{kind}'",
            config_path=str(CONFIG_PATH),
        )
    return FieldSpec(
        name=raw["name"],
        label=raw.get("label", raw["name"]),
        kind=kind,
        required=bool(raw.get("required", False)),
        prefix=raw.get("prefix"),
        suffix=raw.get("suffix"),
    )


def load_yaml(path: Path = CONFIG_PATH) -> Dict[str, ChannelSchema]:
    """Load channel definitions from YAML, keyed by channel id in file order."""
    if not path.exists():
        raise ConfigError(f"Channel config not found: {path}", config_path=str(path))

    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    registry: Dict[str, ChannelSchema] = {}
    for raw in data.get("channels", []):
        channel_id = raw["id"]
        fields = tuple(_parse_field(f, channel_id) for f in raw.get("fields", []))
        progress_field = raw.get("progress_field")
        if progress_field not in {f.name for f in fields}:
            raise ConfigError(
                f"Channel '{channel_id}' progress_field '{progress_field}' is not one of its fields",
                config_path=str(path),
            )
        registry[channel_id] = ChannelSchema(
            id=channel_id,
            label=raw.get("label", channel_id),
            title=raw.get("title", channel_id),
            progress_field=progress_field,
            fields=fields,
        )

    logger.debug("Loaded %d channels from %s", len(registry), path.name)
    return registry


@lru_cache(maxsize=1)
def get_registry() -> Dict[str, ChannelSchema]:
    """Cached registry loaded from the bundled YAML."""
    return load_yaml()


def channel_ids() -> List[str]:
    return list(get_registry().keys())


def is_data_channel(channel_id: str) -> bool:
    return channel_id in get_registry()


def get_channel(channel_id: str) -> ChannelSchema:
    try:
        return get_registry()[channel_id]
    except (KeyError, TypeError):
        raise UnknownChannelError(channel_id) from None


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str) and not value.strip():
        return True
    return False


def _coerce_number(value: Any, spec: FieldSpec) -> float:
    try:
        out = float(value)
    except (TypeError, ValueError):
        logger.warning("Non-numeric value %r for %s, storing 0", value, spec.name)
        return 0.0
    if math.isnan(out) or math.isinf(out):
        return 0.0
    return out


def validate_entry(channel_id: str, payload: Dict[str, Any], partial: bool = False) -> ChannelSchema:
    """
    Check required-field presence for a channel's entry payload.

    Args:
        channel_id: Channel identifier.
        payload: Submitted values keyed by field name.
        partial: Only check the fields present in payload (edit flow).

    Returns:
        The channel schema, for callers that go on to build the record.

    Raises:
        UnknownChannelError: channel is not registered.
        ValidationError: a required field is missing; message names it.
    """
    schema = get_channel(channel_id)

    for spec in schema.fields:
        if not spec.required:
            continue
        if partial and spec.name not in payload:
            continue
        if _is_blank(payload.get(spec.name)):
            raise ValidationError(f"{spec.label} is required", field=spec.name)

    if (not partial or DATE_FIELD in payload) and _is_blank(payload.get(DATE_FIELD)):
        raise ValidationError("Date is required", field=DATE_FIELD)

    return schema


def build_entry_record(channel_id: str, payload: Dict[str, Any], partial: bool = False) -> Dict[str, Any]:
    """
    Validate a payload and shape it into a store record for the channel.

    Only ``date`` and the channel's registered fields are kept; the date is
    stored as zero-padded YYYY-MM-DD and numeric fields are coerced to float. The ``channel`` key is set on full records only,
    since an update never moves an entry between channels.
    """
    schema = validate_entry(channel_id, payload, partial=partial)

    record: Dict[str, Any] = {}
    if not partial:
        record["channel"] = schema.id
    if DATE_FIELD in payload:
        record[DATE_FIELD] = iso_date(payload[DATE_FIELD], field=DATE_FIELD)

    dropped = []
    for key, value in payload.items():
        if key in (DATE_FIELD, "channel"):
            continue
        spec = schema.get_field(key)
        if spec is None:
            dropped.append(key)
            continue
        if _is_blank(value):
            continue
        record[key] = _coerce_number(value, spec) if spec.is_numeric else str(value).strip()

    if dropped:
        logger.debug("Dropped fields %s not defined for channel %s", dropped, schema.id)
    return record


def schema_as_dict(schema: ChannelSchema) -> Dict[str, Any]:
    """JSON-friendly view of one channel for form rendering."""
    return {
        "id": schema.id,
        "label": schema.label,
        "title": schema.title,
        "progress_field": schema.progress_field,
        "fields": [
            {
                "name": f.name,
                "label": f.label,
                "kind": f.kind,
                "required": f.required,
                "prefix": f.prefix,
                "suffix": f.suffix,
            }
            for f in schema.fields
        ],
    }


def registry_as_dict() -> List[Dict[str, Any]]:
    return [schema_as_dict(s) for s in get_registry().values()]
