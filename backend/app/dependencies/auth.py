"""
Authentication dependencies for route protection.
"""
from typing import Annotated

from fastapi import Depends, HTTPException, Query, status
from jose import JWTError

from app.core.security import decode_token
from app.database.connections import get_mongo_client
from app.database.databases import auth_db, campus_db
from app.models.account import Account, AccountStatus
from app.services.auth_service import AuthService


async def get_auth_service() -> AuthService:
    """Dependency to get AuthService instance."""
    client = await get_mongo_client()
    return AuthService(client[auth_db.DB_NAME], client[campus_db.DB_NAME])


async def get_current_account(
    token: Annotated[str, Query(description="JWT access token")],
    auth_service: AuthService = Depends(get_auth_service),
) -> Account:
    """
    Dependency to get the current operator account from the JWT token.
    
    Token is passed as query parameter: ?token=xxx
    
    Raises:
        HTTPException 401: If token is invalid, expired, or the account is gone
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    
    try:
        payload = decode_token(token)
    except JWTError:
        raise credentials_exception
    
    uid = payload.get("sub")
    if uid is None:
        raise credentials_exception
    
    account = await auth_service.get_account_by_id(uid)
    if account is None:
        raise credentials_exception
    
    return account


async def get_current_active_account(
    current_account: Annotated[Account, Depends(get_current_account)]
) -> Account:
    """
    Dependency to ensure the current account is active (not disabled).
    
    Raises:
        HTTPException 403: If the account is disabled
    """
    if current_account.status == AccountStatus.DISABLED.value:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account is disabled",
        )
    return current_account
