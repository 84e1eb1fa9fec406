"""Shared fixtures: an in-memory entity store and an authenticated API client."""

import os
import uuid
from datetime import datetime, timezone

os.environ.setdefault("LOG_TO_FILE", "false")

import pytest

from hub.lib.errors import DuplicateTargetError, NotFoundError
from hub.lib.session import SessionRegistry


class MemoryStore:
    """EntityStore stand-in keeping records in dicts, same signatures."""

    def __init__(self):
        self.products = {}
        self.team_members = {}
        self.entries = {}
        self.targets = {}
        self.fail_with = None
        self._seq = 0

    def _check(self, session):
        session.require_active()
        if self.fail_with is not None:
            raise self.fail_with

    def _add(self, bucket, record):
        self._seq += 1
        record_id = str(uuid.uuid4())
        bucket[record_id] = {
            "id": record_id,
            **record,
            # monotonic so newest-first ordering is stable
            "createdAt": f"{datetime.now(timezone.utc).isoformat()}#{self._seq:06d}",
        }
        return record_id

    def _remove(self, bucket, kind, record_id):
        if record_id not in bucket:
            raise NotFoundError(kind, record_id)
        del bucket[record_id]

    def create_product(self, session, name):
        self._check(session)
        return self._add(self.products, {"name": name})

    def list_products(self, session):
        self._check(session)
        return sorted(self.products.values(), key=lambda r: r["name"])

    def delete_product(self, session, product_id):
        self._check(session)
        self._remove(self.products, "product", product_id)

    def create_team_member(self, session, name):
        self._check(session)
        return self._add(self.team_members, {"name": name})

    def list_team_members(self, session):
        self._check(session)
        return sorted(self.team_members.values(), key=lambda r: r["name"])

    def delete_team_member(self, session, member_id):
        self._check(session)
        self._remove(self.team_members, "team_member", member_id)

    def create_entry(self, session, record):
        self._check(session)
        return self._add(self.entries, dict(record))

    def list_entries(self, session, channel=None):
        self._check(session)
        rows = [dict(e) for e in self.entries.values() if channel is None or e["channel"] == channel]
        return sorted(rows, key=lambda r: r["createdAt"], reverse=True)

    def get_entry(self, session, entry_id):
        self._check(session)
        if entry_id not in self.entries:
            raise NotFoundError("entry", entry_id)
        return dict(self.entries[entry_id])

    def update_entry(self, session, entry_id, partial):
        self._check(session)
        if entry_id not in self.entries:
            raise NotFoundError("entry", entry_id)
        self.entries[entry_id].update(partial)

    def delete_entry(self, session, entry_id):
        self._check(session)
        self._remove(self.entries, "entry", entry_id)

    def create_target(self, session, record):
        self._check(session)
        for t in self.targets.values():
            if t["channel"] == record["channel"] and t["product"] == record["product"]:
                raise DuplicateTargetError(record["channel"], record["product"])
        return self._add(self.targets, dict(record))

    def list_targets(self, session):
        self._check(session)
        return sorted(self.targets.values(), key=lambda r: r["createdAt"], reverse=True)

    def delete_target(self, session, target_id):
        self._check(session)
        self._remove(self.targets, "target", target_id)


@pytest.fixture
def widget_entries():
    return [
        {"id": "e1", "channel": "sales-campaign", "product": "Widget",
         "orderValue": 100, "orders": 2, "date": "2024-01-01"},
        {"id": "e2", "channel": "sales-campaign", "product": "Widget",
         "orderValue": 50, "orders": 1, "date": "2024-01-05"},
    ]


@pytest.fixture
def registry():
    return SessionRegistry()


@pytest.fixture
def session(registry):
    return registry.acquire(user_id="user-1", email="owner@example.com", access_token="access-1")


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def app(store, registry):
    from dashboard.api.deps import get_store
    from dashboard.api.main import app as fastapi_app

    saved_sessions = fastapi_app.state.sessions
    saved_interval = fastapi_app.state.live_refresh_seconds
    fastapi_app.state.sessions = registry
    fastapi_app.state.auth.registry = registry
    fastapi_app.dependency_overrides[get_store] = lambda: store
    yield fastapi_app
    fastapi_app.dependency_overrides.clear()
    fastapi_app.state.sessions = saved_sessions
    fastapi_app.state.auth.registry = saved_sessions
    fastapi_app.state.live_refresh_seconds = saved_interval


@pytest.fixture
def client(app, session):
    from fastapi.testclient import TestClient

    with TestClient(app) as test_client:
        test_client.headers.update({"Authorization": f"Bearer {session.token}"})
        yield test_client
