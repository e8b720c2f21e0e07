"""
Frontend test fixtures and mocks.

Mocks Streamlit session_state and API responses for isolated testing.
"""
import pytest
from unittest.mock import patch


class MockSessionState(dict):
    """Mock st.session_state that behaves like both dict and attribute access."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        # Default state
        self.update({
            "is_authenticated": False,
            "user_id": None,
            "token": None,
            "nav_page": "Tableau de bord",
            "nav_override": None,
        })

    def __getattr__(self, name):
        try:
            return self[name]
        except KeyError:
            raise AttributeError(f"'SessionState' has no attribute '{name}'")

    def __setattr__(self, name, value):
        self[name] = value


@pytest.fixture
def mock_session_state():
    """Provide a mock session state for testing."""
    return MockSessionState()


@pytest.fixture
def authenticated_session_state():
    """Provide an authenticated mock session state."""
    state = MockSessionState()
    state.update({
        "is_authenticated": True,
        "user_id": "op-0001",
        "token": "test-jwt-token",
    })
    return state


@pytest.fixture
def patched_api_session(authenticated_session_state):
    """Bind the API client's st.session_state to the authenticated mock."""
    with patch("frontend.utils.api.st") as st_mock:
        st_mock.session_state = authenticated_session_state
        yield st_mock


@pytest.fixture
def api_users():
    """Rows as returned by GET /users."""
    return [
        {
            "uid": "uid-amine",
            "full_name": "Amine Kaci",
            "email": "amine.kaci@example.com",
            "matricule": "2022B0007",
            "year": "1ère Année",
            "speciality": "Mathématiques",
            "phone_number": None,
            "section": "B",
            "group": "1",
            "profile_pic_url": None,
            "created_at": "2024-09-02T10:00:00",
            "is_admin": False,
            "is_verified": False,
        },
        {
            "uid": "uid-claire",
            "full_name": "Claire Benali",
            "email": "claire.benali@example.com",
            "matricule": "2021A0042",
            "year": "2ème Année",
            "speciality": "Informatique",
            "phone_number": "0550000001",
            "section": "A",
            "group": "3",
            "profile_pic_url": "https://cdn.example.com/claire.png",
            "created_at": "2024-09-01T08:30:00Z",
            "is_admin": True,
            "is_verified": True,
        },
    ]


@pytest.fixture
def mock_api_responses():
    """Common API response fixtures."""
    return {
        "login_invalid": {
            "status": 401,
            "data": {"detail": "Invalid email or password"},
        },
        "validation_error": {
            "status": 422,
            "data": {
                "detail": [
                    {"loc": ["body", "email"], "msg": "value is not a valid email address"},
                    {"loc": ["query", "page"], "msg": "Input should be greater than or equal to 1"},
                ]
            },
        },
        "non_json": {"status": 502, "data": {"raw": "Bad Gateway"}},
        "connection_error": {"status": 0, "error": "Cannot connect to backend"},
    }
