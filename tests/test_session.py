"""Tests for sessions and the Supabase Auth integration."""

from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest

from hub.lib import supabase_client
from hub.lib.errors import ConfigError, SessionError
from hub.lib.session import SessionRegistry
from integrations.supabase_auth import SupabaseAuth, end_remote_session


@pytest.fixture(autouse=True)
def _clean_clients():
    supabase_client.reset_clients()
    yield
    supabase_client.reset_clients()


def _auth_response(user_id="u-1", email="owner@example.com", access_token="jwt-1"):
    return SimpleNamespace(
        user=SimpleNamespace(id=user_id, email=email),
        session=SimpleNamespace(access_token=access_token),
    )


class TestSessionRegistry:
    def test_acquire_and_get(self, registry):
        session = registry.acquire("u-1", "a@example.com", "jwt")
        assert registry.get(session.token) is session
        assert registry.active_count == 1

    def test_tokens_are_unique(self, registry):
        a = registry.acquire("u-1", None, "jwt-a")
        b = registry.acquire("u-1", None, "jwt-b")
        assert a.token != b.token

    def test_missing_token(self, registry):
        with pytest.raises(SessionError) as exc:
            registry.get(None)
        assert exc.value.message == "Missing session token"

    def test_unknown_token(self, registry):
        with pytest.raises(SessionError) as exc:
            registry.get("nope")
        assert exc.value.message == "Unknown or expired session"

    def test_invalidate_deactivates(self):
        ended = []
        registry = SessionRegistry(on_invalidate=ended.append)
        session = registry.acquire("u-1", None, "jwt")

        assert registry.invalidate(session.token) is session
        assert session.active is False
        assert ended == [session]
        with pytest.raises(SessionError):
            session.require_active()
        with pytest.raises(SessionError):
            registry.get(session.token)

    def test_invalidate_unknown_returns_none(self, registry):
        assert registry.invalidate("nope") is None

    def test_invalidate_all(self, registry):
        registry.acquire("u-1", None, "a")
        registry.acquire("u-2", None, "b")
        assert registry.invalidate_all() == 2
        assert registry.active_count == 0

    def test_public_dict_hides_tokens(self, session):
        data = session.public_dict()
        assert data["email"] == "owner@example.com"
        assert "access_token" not in data
        assert "token" not in data


class TestSupabaseAuth:
    def test_not_configured_without_url(self, registry):
        with patch.object(supabase_client.config, "SUPABASE_URL", ""):
            auth = SupabaseAuth(registry)
            assert auth.is_configured is False
            assert auth.get_status()["configured"] is False

    def test_new_client_requires_config(self):
        with patch.object(supabase_client.config, "SUPABASE_URL", ""):
            with pytest.raises(ConfigError):
                supabase_client.new_client()

    def test_sign_in_opens_session(self, registry):
        client = MagicMock()
        client.auth.sign_in_with_password.return_value = _auth_response()
        with patch("integrations.supabase_auth.new_client", return_value=client):
            session = SupabaseAuth(registry).sign_in("owner@example.com", "secret")

        assert session.user_id == "u-1"
        assert session.access_token == "jwt-1"
        assert registry.get(session.token) is session
        assert supabase_client.get_session_client("jwt-1") is client
        client.auth.sign_in_with_password.assert_called_once_with(
            {"email": "owner@example.com", "password": "secret"}
        )

    def test_sign_in_bad_credentials(self, registry):
        client = MagicMock()
        client.auth.sign_in_with_password.side_effect = Exception("Invalid login credentials")
        with patch("integrations.supabase_auth.new_client", return_value=client):
            with pytest.raises(SessionError) as exc:
                SupabaseAuth(registry).sign_in("owner@example.com", "wrong")
        assert exc.value.message == "Invalid login credentials"
        assert registry.active_count == 0

    def test_sign_in_without_session(self, registry):
        client = MagicMock()
        client.auth.sign_in_with_password.return_value = SimpleNamespace(user=None, session=None)
        with patch("integrations.supabase_auth.new_client", return_value=client):
            with pytest.raises(SessionError):
                SupabaseAuth(registry).sign_in("owner@example.com", "secret")

    def test_sign_out_ends_remote_session(self):
        registry = SessionRegistry(on_invalidate=end_remote_session)
        client = MagicMock()
        client.auth.sign_in_with_password.return_value = _auth_response()
        auth = SupabaseAuth(registry)
        with patch("integrations.supabase_auth.new_client", return_value=client):
            session = auth.sign_in("owner@example.com", "secret")

        assert auth.sign_out(session.token) is True
        client.auth.sign_out.assert_called_once()
        assert supabase_client.release_session_client("jwt-1") is None
        assert auth.sign_out(session.token) is False

    def test_remote_sign_out_failure_is_logged_not_raised(self, session):
        client = MagicMock()
        client.auth.sign_out.side_effect = Exception("network down")
        supabase_client.register_session_client(session.access_token, client)
        end_remote_session(session)
        client.auth.sign_out.assert_called_once()
