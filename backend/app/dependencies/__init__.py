"""
Dependencies for dependency injection in routes.
"""
from app.dependencies.auth import (
    get_auth_service,
    get_current_account,
    get_current_active_account,
)
from app.dependencies.roles import get_current_admin, CurrentAdmin

__all__ = [
    "get_auth_service",
    "get_current_account",
    "get_current_active_account",
    "get_current_admin",
    "CurrentAdmin",
]
