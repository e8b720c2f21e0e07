"""
Request and response schemas for API endpoints.
"""
from app.schemas.auth import (
    LoginRequest,
    LoginResponse,
    OperatorInfoResponse,
)
from app.schemas.user import (
    UserRow,
    UserListResponse,
    UserProfileUpdate,
    VerifiedUpdate,
    AdminStatusResponse,
    VerifiedStatusResponse,
    BulkVerifyRequest,
    BulkDeleteRequest,
    BulkActionResponse,
    UserStats,
)

__all__ = [
    # Auth
    "LoginRequest",
    "LoginResponse",
    "OperatorInfoResponse",
    # Users
    "UserRow",
    "UserListResponse",
    "UserProfileUpdate",
    "VerifiedUpdate",
    "AdminStatusResponse",
    "VerifiedStatusResponse",
    "BulkVerifyRequest",
    "BulkDeleteRequest",
    "BulkActionResponse",
    "UserStats",
]
