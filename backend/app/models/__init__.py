"""
Pydantic models for database documents.
"""
from app.models.user import UserProfile, EDITABLE_FIELDS
from app.models.account import Account, AccountStatus

__all__ = [
    "UserProfile",
    "EDITABLE_FIELDS",
    "Account",
    "AccountStatus",
]
