"""
Core module - password hashing, JWT tokens and login rate limiting.
"""
from app.core.security import (
    ADMIN_ROLE,
    create_access_token,
    decode_token,
    hash_password,
    verify_password,
)
from app.core.rate_limit import (
    check_rate_limit,
    check_user_lockout,
    increment_failed_login,
    reset_failed_attempts,
    set_user_lockout,
)

__all__ = [
    # Security
    "ADMIN_ROLE",
    "create_access_token",
    "decode_token",
    "hash_password",
    "verify_password",
    # Rate limiting
    "check_rate_limit",
    "check_user_lockout",
    "increment_failed_login",
    "reset_failed_attempts",
    "set_user_lockout",
]
