"""
Tests for frontend/views/users.py - session state kept between reruns.

Streamlit is patched, the page itself is not rendered.
"""
from unittest.mock import patch

import pytest

from frontend.views import users as users_view


@pytest.fixture
def users_state(mock_session_state):
    mock_session_state.update({
        "users_page": 3,
        "users_table_version": 0,
        "users_flash": None,
        "users_export": {"data": b"UID\r\nuid-claire\r\n", "filename": "users_export_x.csv"},
    })
    with patch("frontend.views.users.st") as st_mock:
        st_mock.session_state = mock_session_state
        yield mock_session_state


class TestExportInvalidation:
    """A built CSV is dropped once the data it was built from changes."""

    @pytest.mark.parametrize("level,message", [
        ("success", "Utilisateur « Claire B » mis à jour."),
        ("error", "Échec de la suppression des utilisateurs sélectionnés : erreur"),
    ])
    def test_flash_drops_export(self, users_state, level, message):
        users_view._flash(level, message)

        assert users_state["users_export"] is None
        assert users_state["users_flash"] == (level, message)

    def test_filter_change_drops_export(self, users_state):
        users_view._on_filter_change()

        assert users_state["users_export"] is None
        assert users_state["users_page"] == 1
        assert users_state["users_table_version"] == 1

    def test_paging_keeps_export(self, users_state):
        users_view._reset_selection()

        assert users_state["users_export"]["filename"] == "users_export_x.csv"
