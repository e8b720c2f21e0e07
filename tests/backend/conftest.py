"""
Backend-specific test fixtures and configuration.

These fixtures extend the global fixtures with backend-specific helpers
for testing FastAPI routes, services, and database operations.
"""

import sys
from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest
import pytest_asyncio

# Add backend to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent / "backend"))


# =============================================================================
# Redis Override Fixtures
# =============================================================================

@pytest.fixture
def patched_redis(mock_async_redis):
    """
    Route the rate limiter to fakeredis.

    Usage in tests:
        async def test_something(patched_redis):
            allowed = await check_rate_limit("1.2.3.4", "/auth/login")
    """
    with patch(
        "app.core.rate_limit.get_redis_client",
        new=AsyncMock(return_value=mock_async_redis),
    ):
        yield mock_async_redis


# =============================================================================
# Service Fixtures
# =============================================================================

@pytest_asyncio.fixture
async def user_service(seeded_campus_db):
    """UserService over the seeded campus database."""
    from app.services.user_service import UserService

    return UserService(seeded_campus_db)


@pytest_asyncio.fixture
async def auth_service(mock_auth_db, mock_campus_db):
    """AuthService over the mock auth and campus databases."""
    from app.services.auth_service import AuthService

    return AuthService(mock_auth_db, mock_campus_db)


# =============================================================================
# App Override Helpers
# =============================================================================

@pytest.fixture
def console_app(app, seeded_campus_db, operator_account):
    """
    App with the users router bound to the seeded database and the admin
    check bypassed for operator_account.
    """
    from app.dependencies.roles import get_current_admin
    from app.routers.users import get_user_service
    from app.services.user_service import UserService

    app.dependency_overrides[get_user_service] = lambda: UserService(seeded_campus_db)
    app.dependency_overrides[get_current_admin] = lambda: operator_account
    return app


@pytest.fixture
def auth_app(app, auth_service):
    """App whose auth dependencies use the mock databases."""
    from app.dependencies.auth import get_auth_service

    app.dependency_overrides[get_auth_service] = lambda: auth_service
    return app


# =============================================================================
# Response Assertion Helpers
# =============================================================================

@pytest.fixture
def assert_error_response():
    """Helper to assert error response structure."""
    def _assert(response, status_code: int, detail_contains: str = None):
        assert response.status_code == status_code
        data = response.json()
        assert "detail" in data
        if detail_contains:
            assert detail_contains.lower() in str(data["detail"]).lower()
    return _assert
