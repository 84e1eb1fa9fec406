"""
Channel Hub — Entity Store
============================

CRUD for the four record kinds over Supabase tables:

  products      (id, name, created_at)
  team_members  (id, name, created_at)
  entries       (id, channel, date, product, team_member, fields jsonb, created_at)
  targets       (id, channel, product, amount, created_at)

Rows are mapped to flat records using the dashboard's key names
(teamMember, createdAt, channel fields at top level). Every call takes the
caller's Session first and refuses logged-out sessions. Any failure from
Supabase is re-raised as StoreError with the store's own message.
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

from hub.lib.errors import DuplicateTargetError, HubError, NotFoundError, StoreError
from hub.lib.logger import setup_logger
from hub.lib.session import Session
from hub.lib.supabase_client import get_session_client
from hub.reporting.channels import get_registry

logger = setup_logger("entity_store")

PRODUCTS = "products"
TEAM_MEMBERS = "team_members"
ENTRIES = "entries"
TARGETS = "targets"

# Entry keys stored as real columns; everything else goes to the fields jsonb
_ENTRY_COLUMNS = {"channel": "channel", "date": "date", "product": "product", "teamMember": "team_member"}


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _store_message(exc: Exception) -> str:
    # postgrest APIError carries .message; fall back to str()
    return getattr(exc, "message", None) or str(exc) or type(exc).__name__


def _named_record(row: Dict[str, Any]) -> Dict[str, Any]:
    return {"id": row.get("id"), "name": row.get("name"), "createdAt": row.get("created_at")}


def _entry_record(row: Dict[str, Any]) -> Dict[str, Any]:
    """Flatten an entries row; channel fields follow the registry's field order."""
    record: Dict[str, Any] = {
        "id": row.get("id"),
        "channel": row.get("channel"),
        "date": row.get("date"),
    }
    if row.get("product"):
        record["product"] = row["product"]
    if row.get("team_member"):
        record["teamMember"] = row["team_member"]

    fields = dict(row.get("fields") or {})
    schema = get_registry().get(row.get("channel"))
    if schema:
        for name in schema.field_names:
            if name in fields:
                record[name] = fields.pop(name)
    record.update(fields)

    record["createdAt"] = row.get("created_at")
    return record


def _entry_row(record: Dict[str, Any]) -> Dict[str, Any]:
    row: Dict[str, Any] = {}
    fields: Dict[str, Any] = {}
    for key, value in record.items():
        if key in _ENTRY_COLUMNS:
            row[_ENTRY_COLUMNS[key]] = value
        elif key not in ("id", "createdAt"):
            fields[key] = value
    row["fields"] = fields
    return row


def _target_record(row: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "id": row.get("id"),
        "channel": row.get("channel"),
        "product": row.get("product"),
        "amount": row.get("amount"),
        "createdAt": row.get("created_at"),
    }


class EntityStore:
    """Supabase-backed store for products, team members, entries and targets."""

    def __init__(self, client_factory: Callable[[str], Any] = get_session_client):
        self._client_factory = client_factory

    def _table(self, session: Session, table: str):
        session.require_active()
        return self._client_factory(session.access_token).table(table)

    def _run(self, operation: str, fn: Callable[[], Any]) -> Any:
        try:
            return fn()
        except HubError:
            raise
        except Exception as e:
            message = _store_message(e)
            logger.error("%s failed: %s", operation, message)
            raise StoreError(message, operation=operation) from e

    def _insert(self, session: Session, table: str, row: Dict[str, Any], operation: str) -> str:
        def go():
            result = self._table(session, table).insert({**row, "created_at": _now()}).execute()
            if not result.data:
                raise StoreError(f"Insert into {table} returned no row", operation=operation)
            return str(result.data[0]["id"])

        record_id = self._run(operation, go)
        logger.info("%s -> %s", operation, record_id)
        return record_id

    def _delete(self, session: Session, table: str, kind: str, record_id: str) -> None:
        def go():
            result = self._table(session, table).delete().eq("id", record_id).execute()
            if not result.data:
                raise NotFoundError(kind, record_id)

        self._run(f"delete_{kind}", go)
        logger.info("Deleted %s %s", kind, record_id)

    def _list(self, session: Session, table: str, operation: str,
              order_by: str, desc: bool, filters: Dict[str, Any] = None) -> List[Dict[str, Any]]:
        def go():
            query = self._table(session, table).select("*")
            for col, val in (filters or {}).items():
                query = query.eq(col, val)
            return query.order(order_by, desc=desc).execute().data or []

        return self._run(operation, go)

    # ─── Products ─────────────────────────────────────────────

    def create_product(self, session: Session, name: str) -> str:
        return self._insert(session, PRODUCTS, {"name": name}, "create_product")

    def list_products(self, session: Session) -> List[Dict[str, Any]]:
        rows = self._list(session, PRODUCTS, "list_products", "name", desc=False)
        return [_named_record(r) for r in rows]

    def delete_product(self, session: Session, product_id: str) -> None:
        self._delete(session, PRODUCTS, "product", product_id)

    # ─── Team Members ─────────────────────────────────────────

    def create_team_member(self, session: Session, name: str) -> str:
        return self._insert(session, TEAM_MEMBERS, {"name": name}, "create_team_member")

    def list_team_members(self, session: Session) -> List[Dict[str, Any]]:
        rows = self._list(session, TEAM_MEMBERS, "list_team_members", "name", desc=False)
        return [_named_record(r) for r in rows]

    def delete_team_member(self, session: Session, member_id: str) -> None:
        self._delete(session, TEAM_MEMBERS, "team_member", member_id)

    # ─── Data Entries ─────────────────────────────────────────

    def create_entry(self, session: Session, record: Dict[str, Any]) -> str:
        return self._insert(session, ENTRIES, _entry_row(record), "create_entry")

    def list_entries(self, session: Session, channel: Optional[str] = None) -> List[Dict[str, Any]]:
        filters = {"channel": channel} if channel else None
        rows = self._list(session, ENTRIES, "list_entries", "created_at", desc=True, filters=filters)
        return [_entry_record(r) for r in rows]

    def get_entry(self, session: Session, entry_id: str) -> Dict[str, Any]:
        def go():
            result = (
                self._table(session, ENTRIES)
                .select("*")
                .eq("id", entry_id)
                .limit(1)
                .execute()
            )
            if not result.data:
                raise NotFoundError("entry", entry_id)
            return result.data[0]

        return _entry_record(self._run("get_entry", go))

    def update_entry(self, session: Session, entry_id: str, partial: Dict[str, Any]) -> None:
        """Replace the supplied keys; a None value removes a channel field."""
        updates: Dict[str, Any] = {}
        field_updates: Dict[str, Any] = {}
        for key, value in partial.items():
            if key in _ENTRY_COLUMNS:
                updates[_ENTRY_COLUMNS[key]] = value
            elif key not in ("id", "createdAt"):
                field_updates[key] = value

        def go():
            if field_updates:
                # jsonb column is replaced whole, so merge with the stored fields
                current = (
                    self._table(session, ENTRIES)
                    .select("fields")
                    .eq("id", entry_id)
                    .limit(1)
                    .execute()
                )
                if not current.data:
                    raise NotFoundError("entry", entry_id)
                fields = dict(current.data[0].get("fields") or {})
                for key, value in field_updates.items():
                    if value is None:
                        fields.pop(key, None)
                    else:
                        fields[key] = value
                updates["fields"] = fields

            if not updates:
                return
            result = self._table(session, ENTRIES).update(updates).eq("id", entry_id).execute()
            if not result.data:
                raise NotFoundError("entry", entry_id)

        self._run("update_entry", go)
        logger.info("Updated entry %s (%s)", entry_id, ", ".join(sorted(partial)))

    def delete_entry(self, session: Session, entry_id: str) -> None:
        self._delete(session, ENTRIES, "entry", entry_id)

    # ─── Targets ──────────────────────────────────────────────

    def create_target(self, session: Session, record: Dict[str, Any]) -> str:
        """Insert a target, refusing a second one for the same channel and product."""
        channel = record["channel"]
        product = record["product"]

        def existing():
            return (
                self._table(session, TARGETS)
                .select("id")
                .eq("channel", channel)
                .eq("product", product)
                .limit(1)
                .execute()
                .data
            )

        if self._run("create_target", existing):
            raise DuplicateTargetError(channel, product)

        row = {"channel": channel, "product": product, "amount": record["amount"]}
        return self._insert(session, TARGETS, row, "create_target")

    def list_targets(self, session: Session) -> List[Dict[str, Any]]:
        rows = self._list(session, TARGETS, "list_targets", "created_at", desc=True)
        return [_target_record(r) for r in rows]

    def delete_target(self, session: Session, target_id: str) -> None:
        self._delete(session, TARGETS, "target", target_id)
