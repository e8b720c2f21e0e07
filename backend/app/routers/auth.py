"""
Authentication router for console login.
"""
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Request, status

from app.core.rate_limit import check_rate_limit
from app.dependencies.auth import get_auth_service
from app.dependencies.roles import get_current_admin
from app.models.account import Account
from app.schemas.auth import LoginRequest, LoginResponse, OperatorInfoResponse
from app.services.auth_service import AuthService

router = APIRouter(prefix="/auth", tags=["Authentication"])


def get_client_ip(request: Request) -> str:
    """Extract client IP from request."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


@router.post(
    "/login",
    response_model=LoginResponse,
    summary="Login and get access token",
)
async def login(
    request: Request,
    body: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service),
):
    """
    Authenticate an operator with email and password to receive a JWT token.
    
    Only accounts whose uid carries the admin flag can log in. The token
    should be passed as a query parameter `token` to protected endpoints.
    
    **Rate limited** per IP, account lockout after repeated failures.
    """
    client_ip = get_client_ip(request)
    if not await check_rate_limit(client_ip, "/auth/login"):
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail="Too many login attempts. Please try again later.",
        )
    
    try:
        return await auth_service.login(body)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        )


@router.get(
    "/me",
    response_model=OperatorInfoResponse,
    summary="Get current operator info",
)
async def get_current_operator_info(
    operator: Annotated[Account, Depends(get_current_admin)],
    auth_service: AuthService = Depends(get_auth_service),
):
    """
    Get information about the currently authenticated operator.
    
    Requires valid token as query parameter: `?token=xxx`
    """
    return await auth_service.get_operator_info(operator)
