# =============================================================================
# tests/unit/test_session_manager.py
# Unit Tests for SessionManager and LocalSessionCache
# =============================================================================

import asyncio
import json
from unittest.mock import AsyncMock

import pytest

from taskhub_core.auth import LocalSessionCache, SessionManager, USER_KEY
from taskhub_core.errors import AuthError, ValidationError
from taskhub_core.models import User


class TestEnsureSession:
    """Anonymous fallback and session adoption"""

    async def test_signs_in_anonymously_when_no_session(self, session, fake_supabase):
        identity = await session.ensure_session()

        assert identity is not None
        assert identity.is_anonymous is True
        assert fake_supabase.auth.session is not None

    async def test_reuses_identity_once_established(self, session, fake_supabase):
        first = await session.ensure_session()
        fake_supabase.auth.sign_in_anonymously = AsyncMock()

        second = await session.ensure_session()

        assert second == first
        fake_supabase.auth.sign_in_anonymously.assert_not_called()

    async def test_adopts_existing_remote_session(self, session, fake_supabase, registered_user):
        await fake_supabase.auth.sign_in_with_password(
            {"email": registered_user["email"], "password": registered_user["password"]}
        )

        identity = await session.ensure_session()

        assert identity.uid == registered_user["id"]
        assert identity.is_anonymous is False

    async def test_returns_none_when_anonymous_auth_fails(self, session, fake_supabase):
        fake_supabase.auth.anonymous_enabled = False

        assert await session.ensure_session() is None
        assert session.identity is None


def slow_anonymous_sign_in(fake_supabase, delay=0.01):
    """Make anonymous sign-in suspend; returns the list of recorded calls"""
    original = fake_supabase.auth.sign_in_anonymously
    calls = []

    async def sign_in(credentials=None):
        calls.append(credentials)
        await asyncio.sleep(delay)
        return await original(credentials)

    fake_supabase.auth.sign_in_anonymously = sign_in
    return calls


class TestBootstrapSerialization:
    """Anonymous bootstrap vs concurrent callers and mutators"""

    async def test_concurrent_callers_share_one_anonymous_identity(self, session, fake_supabase):
        calls = slow_anonymous_sign_in(fake_supabase)

        first, second = await asyncio.gather(session.ensure_session(), session.ensure_session())

        assert len(calls) == 1
        assert first == second

    async def test_login_wins_over_pending_bootstrap(self, session, gateway, fake_supabase, registered_user):
        slow_anonymous_sign_in(fake_supabase)
        pending_list = asyncio.create_task(gateway.list("tasks"))
        await asyncio.sleep(0)

        user = await session.login(registered_user["email"], registered_user["password"])
        await pending_list
        await gateway.create("tasks", {"title": "Beli susu"})

        assert session.identity.uid == registered_user["id"]
        assert fake_supabase.tables["tasks"][0]["user_id"] == user.id


class TestLogin:
    """Email/password login"""

    async def test_login_shapes_and_caches_user(self, session, session_cache, registered_user):
        user = await session.login(registered_user["email"], registered_user["password"])

        assert user.username == "ana"
        assert user.email == registered_user["email"]
        assert user.id == registered_user["id"]
        assert session.current_user == user
        assert session.identity.email == registered_user["email"]
        assert session.is_authenticated
        assert session_cache.load_user() == user

    async def test_login_persists_user_as_json(self, session, settings, registered_user):
        await session.login(registered_user["email"], registered_user["password"])

        with open(settings.session_cache_path, encoding="utf-8") as f:
            stored = json.load(f)

        assert json.loads(stored[USER_KEY])["username"] == "ana"

    async def test_login_with_bad_password_raises_auth_error(self, session, registered_user):
        with pytest.raises(AuthError) as excinfo:
            await session.login(registered_user["email"], "wrong")

        assert excinfo.value.code == "AUTH_001"
        assert "Invalid login credentials" in excinfo.value.message
        assert session.current_user is None


class TestRegister:
    """Account creation"""

    async def test_password_mismatch_makes_no_remote_call(self, session, fake_supabase):
        fake_supabase.auth.sign_up = AsyncMock()

        with pytest.raises(ValidationError) as excinfo:
            await session.register("ana", "ana@example.com", "secret1", "secret2")

        assert excinfo.value.message == "Passwords do not match"
        fake_supabase.auth.sign_up.assert_not_called()

    async def test_register_leaves_user_signed_out(self, session, session_cache, fake_supabase):
        assert await session.register("ana", "ana@example.com", "secret1", "secret1") is True

        assert session.identity is None
        assert session.current_user is None
        assert session_cache.load_user() is None
        assert fake_supabase.auth.session is None
        assert "ana@example.com" in fake_supabase.auth.users

    async def test_registered_account_can_log_in(self, session):
        await session.register("ana", "ana@example.com", "secret1", "secret1")

        user = await session.login("ana@example.com", "secret1")

        assert user.email == "ana@example.com"

    async def test_duplicate_registration_raises_auth_error(self, session, registered_user):
        with pytest.raises(AuthError):
            await session.register(
                "ana", registered_user["email"], "x", "x"
            )


class TestLogout:
    """Logout and its idempotence"""

    async def test_logout_clears_everything(self, session, session_cache, registered_user):
        await session.login(registered_user["email"], registered_user["password"])

        await session.logout()

        assert session.identity is None
        assert session.current_user is None
        assert session_cache.load_user() is None

    async def test_logout_twice_is_safe(self, session):
        await session.logout()
        await session.logout()

        assert session.current_user is None

    async def test_remote_sign_out_failure_is_not_raised(self, session, fake_supabase):
        fake_supabase.auth.sign_out = AsyncMock(side_effect=RuntimeError("network down"))

        await session.logout()

        assert session.current_user is None


class TestSessionObservation:
    """Auth-state notifications"""

    async def test_callback_receives_user_after_login(self, session, registered_user):
        seen = []
        session.observe_session_changes(seen.append)

        await session.login(registered_user["email"], registered_user["password"])

        assert seen[-1] is not None
        assert seen[-1].email == registered_user["email"]

    async def test_first_login_notifies_only_the_new_user(self, session, registered_user):
        seen = []
        session.observe_session_changes(seen.append)

        user = await session.login(registered_user["email"], registered_user["password"])

        assert seen == [user]

    async def test_sign_in_event_keeps_user_when_cache_is_empty(
        self, session, session_cache, fake_supabase, registered_user
    ):
        seen = []
        session.observe_session_changes(seen.append)
        user = await session.login(registered_user["email"], registered_user["password"])
        session_cache.clear_user()

        await fake_supabase.auth.sign_in_with_password(
            {"email": registered_user["email"], "password": registered_user["password"]}
        )

        assert session.current_user == user
        assert session.identity is None
        assert seen[-1] == user

    async def test_remote_sign_out_clears_state(self, session, session_cache, fake_supabase, registered_user):
        seen = []
        session.observe_session_changes(seen.append)
        await session.login(registered_user["email"], registered_user["password"])

        await fake_supabase.auth.sign_out()

        assert seen[-1] is None
        assert session.current_user is None
        assert session_cache.load_user() is None

    async def test_sign_in_without_cached_user_leaves_user_unset(self, session, fake_supabase, registered_user):
        session.observe_session_changes(lambda user: None)

        await fake_supabase.auth.sign_in_with_password(
            {"email": registered_user["email"], "password": registered_user["password"]}
        )

        assert session.current_user is None
        assert session.identity is None

    async def test_sign_in_with_cached_user_restores_identity(
        self, session, session_cache, fake_supabase, registered_user
    ):
        session_cache.save_user(User.from_login(registered_user["id"], registered_user["email"]))
        session.observe_session_changes(lambda user: None)

        await fake_supabase.auth.sign_in_with_password(
            {"email": registered_user["email"], "password": registered_user["password"]}
        )

        assert session.current_user.username == "ana"
        assert session.identity.uid == registered_user["id"]

    async def test_unsubscribe_stops_notifications(self, session, registered_user):
        seen = []
        unsubscribe = session.observe_session_changes(seen.append)
        unsubscribe()

        await session.login(registered_user["email"], registered_user["password"])

        assert seen == []

    async def test_failing_callback_does_not_break_login(self, session, registered_user):
        def broken(user):
            raise RuntimeError("boom")

        session.observe_session_changes(broken)

        user = await session.login(registered_user["email"], registered_user["password"])

        assert user.username == "ana"


class TestRestore:
    """Cold start from the local cache"""

    def test_restore_paints_cached_user(self, fake_supabase, settings):
        cache = LocalSessionCache(settings.session_cache_path)
        cache.save_user(User.from_login("user-ana", "ana@example.com"))

        session = SessionManager(fake_supabase, LocalSessionCache(settings.session_cache_path), settings)
        user = session.restore()

        assert user is not None
        assert user.username == "ana"
        assert session.is_authenticated

    def test_restore_with_empty_cache(self, session):
        assert session.restore() is None
        assert not session.is_authenticated


class TestLocalSessionCache:
    """JSON-file key-value store"""

    def test_values_survive_reopen(self, tmp_path):
        path = tmp_path / "nested" / "session.json"
        LocalSessionCache(path).set("theme", "dark")

        assert LocalSessionCache(path).get("theme") == "dark"

    def test_remove_missing_key_is_ignored(self, tmp_path):
        cache = LocalSessionCache(tmp_path / "session.json")
        cache.remove("nothing")

        assert cache.get("nothing") is None

    def test_corrupt_file_is_ignored(self, tmp_path):
        path = tmp_path / "session.json"
        path.write_text("{not json", encoding="utf-8")

        cache = LocalSessionCache(path)

        assert cache.load_user() is None

    def test_malformed_user_is_discarded(self, tmp_path):
        cache = LocalSessionCache(tmp_path / "session.json")
        cache.set(USER_KEY, json.dumps({"username": "no-id"}))

        assert cache.load_user() is None
        assert cache.get(USER_KEY) is None
