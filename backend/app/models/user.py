"""
User profile model for the campus database.
"""
from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

# Profile fields an operator may edit, as stored (camelCase)
EDITABLE_FIELDS = (
    "fullName",
    "email",
    "matricule",
    "year",
    "speciality",
    "phoneNumber",
    "section",
    "group",
    "profilePicUrl",
)


class UserProfile(BaseModel):
    """
    User document model for MongoDB campus_db.users collection.
    
    Documents are written by the platform's other clients too, so field
    names stay camelCase in storage and values are coerced leniently.
    """
    uid: str = Field(..., alias="_id", description="User id issued by the auth service")
    full_name: Optional[str] = Field(None, alias="fullName")
    email: Optional[str] = Field(None, alias="email")
    matricule: Optional[str] = Field(None, alias="matricule")
    year: Optional[str] = Field(None, alias="year")
    speciality: Optional[str] = Field(None, alias="speciality")
    phone_number: Optional[str] = Field(None, alias="phoneNumber")
    section: Optional[str] = Field(None, alias="section")
    group: Optional[str] = Field(None, alias="group")
    profile_pic_url: Optional[str] = Field(None, alias="profilePicUrl")
    created_at: Optional[datetime] = Field(None, alias="createdAt")
    is_verified: bool = Field(False, alias="isVerified", description="Manually verified by staff")

    class Config:
        populate_by_name = True

    @field_validator("uid", mode="before")
    @classmethod
    def _uid_as_str(cls, value: Any) -> str:
        return str(value)

    @field_validator(
        "full_name", "email", "matricule", "year", "speciality",
        "phone_number", "section", "group", "profile_pic_url",
        mode="before",
    )
    @classmethod
    def _text_or_none(cls, value: Any) -> Optional[str]:
        if value is None:
            return None
        return str(value)

    @field_validator("is_verified", mode="before")
    @classmethod
    def _missing_is_false(cls, value: Any) -> bool:
        return bool(value)

