"""
Global test fixtures for the Campus Admin Console.

This module provides shared fixtures for all tests including:
- Mock MongoDB (mongomock-motor) with seeded campus data
- Mock Redis (fakeredis)
- Operator account factories and tokens
- FastAPI app and clients
"""

import sys
from datetime import datetime
from pathlib import Path

import pytest
import pytest_asyncio

# Add backend to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "backend"))


OPERATOR_UID = "op-0001"
OPERATOR_EMAIL = "admin@example.com"
OPERATOR_PASSWORD = "AdminPassword123!"


# =============================================================================
# MongoDB Fixtures (mongomock-motor)
# =============================================================================

@pytest_asyncio.fixture
async def mock_async_mongo_client():
    """
    Create an async mock MongoDB client using mongomock-motor.
    """
    try:
        from mongomock_motor import AsyncMongoMockClient
    except ImportError:
        pytest.skip("mongomock-motor not installed")
    client = AsyncMongoMockClient()
    yield client
    client.close()


@pytest_asyncio.fixture
async def mock_campus_db(mock_async_mongo_client):
    """Provide an empty mock campus_db database."""
    yield mock_async_mongo_client["campus_db"]


@pytest_asyncio.fixture
async def mock_auth_db(mock_async_mongo_client):
    """Provide mock auth_db database with the unique email index."""
    db = mock_async_mongo_client["auth_db"]
    await db.accounts.create_index("email", unique=True)
    yield db


# =============================================================================
# Redis Fixtures (fakeredis)
# =============================================================================

@pytest_asyncio.fixture
async def mock_async_redis():
    """
    Create an async mock Redis client using fakeredis.
    """
    try:
        import fakeredis.aioredis
    except ImportError:
        pytest.skip("fakeredis with aioredis not installed")
    redis_client = fakeredis.aioredis.FakeRedis(decode_responses=True)
    yield redis_client
    await redis_client.flushall()
    await redis_client.close()


# =============================================================================
# Campus Data Fixtures
# =============================================================================

@pytest.fixture
def user_documents() -> list[dict]:
    """
    User profile documents as stored in campus_db.users.

    Names are deliberately out of alphabetical order.
    """
    return [
        {
            "_id": "uid-claire",
            "fullName": "Claire Benali",
            "email": "claire.benali@example.com",
            "matricule": "2021A0042",
            "year": "2ème Année",
            "speciality": "Informatique",
            "phoneNumber": "0550000001",
            "section": "A",
            "group": "3",
            "profilePicUrl": "https://cdn.example.com/claire.png",
            "createdAt": datetime(2024, 9, 1, 8, 30),
            "isVerified": True,
        },
        {
            "_id": "uid-amine",
            "fullName": "Amine Kaci",
            "email": "amine.kaci@example.com",
            "matricule": "2022B0007",
            "year": "1ère Année",
            "speciality": "Mathématiques",
            "phoneNumber": None,
            "section": "B",
            "group": "1",
            "profilePicUrl": None,
            "createdAt": datetime(2024, 9, 2, 10, 0),
        },
        {
            "_id": "uid-bruno",
            "fullName": "Bruno Lefèvre",
            "email": "bruno@example.com",
            "matricule": None,
            "year": None,
            "speciality": None,
            "createdAt": datetime(2024, 9, 3, 14, 15),
            "isVerified": False,
        },
    ]


@pytest_asyncio.fixture
async def seeded_campus_db(mock_campus_db, user_documents):
    """campus_db with three users, Claire being the only admin."""
    await mock_campus_db.users.insert_many(user_documents)
    await mock_campus_db.admins.insert_one({
        "_id": "uid-claire",
        "grantedAt": datetime(2024, 9, 5),
        "grantedBy": "bootstrap",
    })
    yield mock_campus_db


# =============================================================================
# Operator Fixtures
# =============================================================================

@pytest.fixture
def operator_account():
    """The authenticated console operator."""
    from app.models.account import Account, AccountStatus

    return Account(
        id=OPERATOR_UID,
        email=OPERATOR_EMAIL,
        hashed_password="not-used",
        status=AccountStatus.ACTIVE,
        created_at=datetime(2024, 1, 1),
    )


@pytest_asyncio.fixture
async def registered_operator(mock_auth_db, mock_campus_db):
    """
    A real operator: account with bcrypt hash, profile and admin flag.

    Returns the uid.
    """
    from app.core.security import hash_password

    await mock_auth_db.accounts.insert_one({
        "_id": OPERATOR_UID,
        "email": OPERATOR_EMAIL,
        "hashed_password": hash_password(OPERATOR_PASSWORD),
        "status": "active",
        "created_at": datetime(2024, 1, 1),
    })
    await mock_campus_db.users.insert_one({
        "_id": OPERATOR_UID,
        "fullName": "Console Admin",
        "email": OPERATOR_EMAIL,
        "isVerified": True,
    })
    await mock_campus_db.admins.insert_one({"_id": OPERATOR_UID})
    return OPERATOR_UID


@pytest.fixture
def operator_token() -> str:
    """A valid JWT for the operator."""
    from app.core.security import create_access_token

    return create_access_token(uid=OPERATOR_UID)


# =============================================================================
# FastAPI Fixtures
# =============================================================================

@pytest.fixture
def app():
    """
    The FastAPI app, with dependency overrides cleared after each test.

    Lifespan is not run by the clients below, so no real database is touched.
    """
    from app.main import app

    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(app):
    """Synchronous TestClient (lifespan not started)."""
    from fastapi.testclient import TestClient

    return TestClient(app)


@pytest_asyncio.fixture
async def async_client(app):
    """
    Create an async test client.

    Use this for tests that also touch the mock databases.
    """
    from httpx import AsyncClient, ASGITransport

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as ac:
        yield ac
