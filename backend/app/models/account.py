"""
Console account model for the auth database.
"""
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, EmailStr, Field


class AccountStatus(str, Enum):
    """Account status."""
    ACTIVE = "active"
    DISABLED = "disabled"


class Account(BaseModel):
    """
    Account document model for MongoDB auth_db.accounts collection.
    
    _id is the same uid as the user's profile document.
    """
    id: str = Field(..., alias="_id", description="User id")
    email: EmailStr = Field(..., description="Unique email address")
    hashed_password: str = Field(..., description="Bcrypt hashed password")
    status: AccountStatus = Field(
        default=AccountStatus.ACTIVE,
        description="Account status"
    )
    created_at: Optional[datetime] = Field(
        None,
        description="Account creation timestamp"
    )

    class Config:
        populate_by_name = True
        use_enum_values = True
