"""
Authentication request/response schemas.
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field

from app.models.account import AccountStatus


class LoginRequest(BaseModel):
    """Login request body."""
    email: EmailStr = Field(..., description="Operator email address")
    password: str = Field(..., min_length=1, description="Operator password")


class LoginResponse(BaseModel):
    """Login response with JWT token."""
    access_token: str = Field(..., description="JWT access token")
    token_type: str = Field(default="bearer", description="Token type")
    expires_in: int = Field(..., description="Token expiration time in seconds")
    user_id: str = Field(..., description="Authenticated operator uid")
    roles: list[str] = Field(..., description="Operator roles")


class OperatorInfoResponse(BaseModel):
    """Current operator information."""
    id: str = Field(..., description="Operator uid")
    email: str = Field(..., description="Operator email")
    full_name: Optional[str] = Field(None, description="Name from the user profile")
    status: AccountStatus = Field(..., description="Account status")
    created_at: Optional[datetime] = Field(None, description="Account creation timestamp")
