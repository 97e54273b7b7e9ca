# =============================================================================
# tests/conftest.py
# Pytest Configuration and Fixtures
# =============================================================================

from unittest.mock import AsyncMock

import pytest

from taskhub_core.auth import LocalSessionCache, SessionManager
from taskhub_core.config import Settings
from taskhub_core.data import CollectionGateway
from taskhub_core.network import ConnectivityProbe
from taskhub_core.repositories import ProductRepository, TaskRepository
from tests.fakes import FakeSupabase


# =============================================================================
# CORE FIXTURES
# =============================================================================

@pytest.fixture
def settings(tmp_path):
    """Settings pointing at a throwaway session cache, English messages"""
    return Settings(
        supabase_url="https://demo.supabase.co",
        supabase_key="anon-key",
        session_cache_path=tmp_path / "session.json",
        connection_timeout=0.5,
        locale="en",
    )


@pytest.fixture
def fake_supabase():
    return FakeSupabase()


@pytest.fixture
def session_cache(settings):
    return LocalSessionCache(settings.session_cache_path)


@pytest.fixture
def session(fake_supabase, session_cache, settings):
    return SessionManager(fake_supabase, session_cache, settings)


@pytest.fixture
def gateway(fake_supabase, session, settings):
    return CollectionGateway(fake_supabase, session, settings)


@pytest.fixture
def task_repo(gateway):
    return TaskRepository(gateway)


@pytest.fixture
def product_repo(gateway):
    return ProductRepository(gateway)


@pytest.fixture
def online_probe(settings):
    """ConnectivityProbe whose network checks always succeed"""
    probe = ConnectivityProbe(settings)
    probe._check_internet = AsyncMock(return_value=True)
    probe._check_supabase = AsyncMock(return_value=True)
    return probe


@pytest.fixture
def offline_probe(settings):
    """ConnectivityProbe with no internet"""
    probe = ConnectivityProbe(settings)
    probe._check_internet = AsyncMock(return_value=False)
    probe._check_supabase = AsyncMock(return_value=False)
    return probe


@pytest.fixture
def registered_user(fake_supabase):
    """An account that exists remotely"""
    fake_supabase.auth.users["ana@example.com"] = {"id": "user-ana", "password": "rahasia123"}
    return {"email": "ana@example.com", "password": "rahasia123", "id": "user-ana"}
