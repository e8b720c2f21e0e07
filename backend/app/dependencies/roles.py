"""
Admin flag enforcement.

The flag is read from campus_db.admins on every request rather than
trusted from the token, so a revoked operator is shut out immediately.
"""
from typing import Annotated

from fastapi import Depends, HTTPException, status

from app.dependencies.auth import get_auth_service, get_current_active_account
from app.models.account import Account
from app.services.auth_service import ADMIN_REQUIRED, AuthService


async def get_current_admin(
    current_account: Annotated[Account, Depends(get_current_active_account)],
    auth_service: AuthService = Depends(get_auth_service),
) -> Account:
    """
    Dependency for console routes: active account with the admin flag.
    
    Usage:
        @router.get("/users")
        async def list_users(operator: CurrentAdmin):
            ...
    
    Raises:
        HTTPException 403: If the uid has no admin flag
    """
    if not await auth_service.user_service.is_admin(current_account.id):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=ADMIN_REQUIRED,
        )
    return current_account


# Type alias for cleaner route signatures
CurrentAdmin = Annotated[Account, Depends(get_current_admin)]
