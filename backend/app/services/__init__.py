"""
Service layer for business logic.
"""
from app.services.auth_service import AuthService
from app.services.user_service import UserService
from app.services import export_service

__all__ = [
    "AuthService",
    "UserService",
    "export_service",
]
