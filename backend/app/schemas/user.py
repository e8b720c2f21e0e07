"""
User management request/response schemas.
"""
from datetime import datetime
from typing import Any, Literal, Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from app.models.user import EDITABLE_FIELDS, UserProfile

# Table columns the list endpoint can sort on, mapped to stored field names
SORTABLE_FIELDS = {
    "full_name": "fullName",
    "email": "email",
    "matricule": "matricule",
    "year": "year",
    "speciality": "speciality",
    "phone_number": "phoneNumber",
    "section": "section",
    "group": "group",
    "created_at": "createdAt",
}


# Request field -> stored field, in EDITABLE_FIELDS order
PROFILE_FIELD_NAMES = dict(zip(
    (
        "full_name", "email", "matricule", "year", "speciality",
        "phone_number", "section", "group", "profile_pic_url",
    ),
    EDITABLE_FIELDS,
))


class UserRow(BaseModel):
    """One row of the user management table."""
    uid: str = Field(..., description="User id")
    full_name: Optional[str] = None
    email: Optional[str] = None
    matricule: Optional[str] = None
    year: Optional[str] = None
    speciality: Optional[str] = None
    phone_number: Optional[str] = None
    section: Optional[str] = None
    group: Optional[str] = None
    profile_pic_url: Optional[str] = None
    created_at: Optional[datetime] = None
    is_admin: bool = Field(False, description="Has a document in the admins collection")
    is_verified: bool = Field(False, description="isVerified on the user document")

    @classmethod
    def from_profile(cls, profile: UserProfile, is_admin: bool) -> "UserRow":
        return cls(**profile.model_dump(by_alias=False), is_admin=is_admin)


class UserListResponse(BaseModel):
    """Paginated user list."""
    users: list[UserRow]
    total: int = Field(..., description="Users matching the search")
    page: int
    page_size: int
    has_more: bool


class UserProfileUpdate(BaseModel):
    """
    Profile edit form.
    
    Only the fields present in the body are written; blank strings clear
    a field. full_name and email cannot be cleared, which the service
    checks so the caller gets a single message naming both.
    """
    full_name: Optional[str] = None
    email: Optional[EmailStr] = None
    matricule: Optional[str] = None
    year: Optional[str] = None
    speciality: Optional[str] = None
    phone_number: Optional[str] = None
    section: Optional[str] = None
    group: Optional[str] = None
    profile_pic_url: Optional[str] = None

    @field_validator("*", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        if isinstance(value, str):
            value = value.strip()
            return value or None
        return value

    def to_document(self) -> dict[str, Optional[str]]:
        """
        Stored (camelCase) representation of the fields present in the body.

        Fields left out of the request are not included, so PATCH leaves
        them untouched; fields sent blank or null are cleared.
        """
        sent = self.model_dump(include=self.model_fields_set)
        return {
            stored: sent[field]
            for field, stored in PROFILE_FIELD_NAMES.items()
            if field in sent
        }


class VerifiedUpdate(BaseModel):
    """Explicit verified flag value."""
    verified: bool


class AdminStatusResponse(BaseModel):
    uid: str
    is_admin: bool


class VerifiedStatusResponse(BaseModel):
    uid: str
    is_verified: bool


class BulkVerifyRequest(BaseModel):
    """Verify or unverify a selection of users."""
    uids: list[str] = Field(default_factory=list, description="Selected user ids")
    verified: bool = Field(..., description="Value written to every selected user")


class BulkDeleteRequest(BaseModel):
    """Delete a selection of users."""
    uids: list[str] = Field(default_factory=list, description="Selected user ids")


class BulkActionResponse(BaseModel):
    """Outcome of a bulk action, per user id."""
    action: Literal["verify", "unverify", "delete"]
    succeeded: list[str] = Field(default_factory=list)
    failed: dict[str, str] = Field(
        default_factory=dict,
        description="uid -> error message"
    )


class UserStats(BaseModel):
    """Counts shown on the dashboard."""
    total: int
    admins: int
    verified: int
    unverified: int
