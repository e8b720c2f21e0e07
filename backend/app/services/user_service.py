"""
User management service: profiles, admin flags and verification.

The admin flag lives in its own collection (campus_db.admins, presence
means admin) while the verified flag is the isVerified field of the
profile document itself.
"""
import asyncio
import logging
import re
from datetime import datetime, timezone
from typing import Any, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING, ReturnDocument

from app.database.databases import campus_db
from app.models.user import UserProfile
from app.schemas.user import (
    SORTABLE_FIELDS,
    BulkActionResponse,
    UserListResponse,
    UserProfileUpdate,
    UserRow,
    UserStats,
)

logger = logging.getLogger(__name__)

# Stored fields the search box matches against
SEARCH_FIELDS = ("fullName", "email", "matricule")

REQUIRED_FIELDS_MESSAGE = "Full name and email are required."
USER_NOT_FOUND = "User not found"


def build_search_query(search: Optional[str]) -> dict[str, Any]:
    """
    Build the MongoDB filter for the search box.

    Case-insensitive substring match on full name, email or matricule.
    The text is matched literally. A blank search matches every user.
    """
    if not search or not search.strip():
        return {}
    pattern = re.escape(search.strip())
    return {
        "$or": [
            {field: {"$regex": pattern, "$options": "i"}}
            for field in SEARCH_FIELDS
        ]
    }


class UserService:
    """Service for the user management screen."""

    def __init__(self, db: AsyncIOMotorDatabase):
        """Initialize with the campus database."""
        self.db = db
        self.users = db[campus_db.Collections.USERS]
        self.admins = db[campus_db.Collections.ADMINS]

    # ==================== Reads ====================

    async def list_users(
        self,
        search: Optional[str] = None,
        page: int = 1,
        page_size: int = 25,
        sort_by: str = "full_name",
        descending: bool = False,
    ) -> UserListResponse:
        """List users matching the search, one page at a time."""
        query = build_search_query(search)
        total = await self.users.count_documents(query)

        skip = (page - 1) * page_size
        cursor = (
            self.users.find(query)
            .sort(self._sort_spec(sort_by, descending))
            .skip(skip)
            .limit(page_size)
        )
        docs = await cursor.to_list(length=page_size)

        return UserListResponse(
            users=await self._to_rows(docs),
            total=total,
            page=page,
            page_size=page_size,
            has_more=skip + len(docs) < total,
        )

    async def export_users(
        self,
        search: Optional[str] = None,
        sort_by: str = "full_name",
        descending: bool = False,
    ) -> list[UserRow]:
        """Every user matching the search, in table order (no pagination)."""
        cursor = self.users.find(build_search_query(search)).sort(
            self._sort_spec(sort_by, descending)
        )
        docs = await cursor.to_list(length=None)
        return await self._to_rows(docs)

    async def get_user(self, uid: str) -> Optional[UserRow]:
        """Get one user with both flags, or None."""
        doc = await self.users.find_one({"_id": uid})
        if not doc:
            return None
        rows = await self._to_rows([doc])
        return rows[0]

    async def get_stats(self) -> UserStats:
        """Counts for the dashboard."""
        total = await self.users.count_documents({})
        verified = await self.users.count_documents({"isVerified": True})
        # Grants left behind by other clients are not counted
        admin_ids = await self.admins.distinct("_id")
        admins = await self.users.count_documents({"_id": {"$in": admin_ids}})
        return UserStats(
            total=total,
            admins=admins,
            verified=verified,
            unverified=total - verified,
        )

    # ==================== Profile writes ====================

    async def update_profile(
        self,
        uid: str,
        update: UserProfileUpdate,
        operator_uid: Optional[str] = None,
    ) -> Optional[UserRow]:
        """
        Write the editable profile fields present in the update.

        Fields the update does not carry keep their stored value.

        Raises:
            ValueError: If full name or email is sent empty

        Returns:
            The updated row, or None if the user does not exist
        """
        fields = update.to_document()
        if any(key in fields and not fields[key] for key in ("fullName", "email")):
            raise ValueError(REQUIRED_FIELDS_MESSAGE)

        if not fields:
            return await self.get_user(uid)

        doc = await self.users.find_one_and_update(
            {"_id": uid},
            {"$set": fields},
            return_document=ReturnDocument.AFTER,
        )
        if not doc:
            return None

        logger.info(f"Profile of {uid} updated by {operator_uid}")
        rows = await self._to_rows([doc])
        return rows[0]

    async def delete_user(self, uid: str, operator_uid: Optional[str] = None) -> bool:
        """
        Delete a user's profile document and admin flag.

        The credentials in auth_db are left untouched.
        """
        result = await self.users.delete_one({"_id": uid})
        if result.deleted_count == 0:
            return False

        await self.admins.delete_one({"_id": uid})
        logger.info(f"User document {uid} deleted by {operator_uid}")
        return True

    # ==================== Admin flag ====================

    async def is_admin(self, uid: str) -> bool:
        """True if the uid has a document in the admins collection."""
        return await self.admins.find_one({"_id": uid}, {"_id": 1}) is not None

    async def grant_admin(self, uid: str, operator_uid: Optional[str] = None) -> bool:
        """Grant the admin flag. Returns False if the user does not exist."""
        if not await self._exists(uid):
            return False

        await self.admins.update_one(
            {"_id": uid},
            {
                "$set": {"grantedBy": operator_uid},
                "$setOnInsert": {"grantedAt": datetime.now(timezone.utc)},
            },
            upsert=True,
        )
        logger.info(f"Admin granted to {uid} by {operator_uid}")
        return True

    async def revoke_admin(self, uid: str, operator_uid: Optional[str] = None) -> None:
        """Remove the admin flag (no-op when absent)."""
        result = await self.admins.delete_one({"_id": uid})
        if result.deleted_count:
            logger.info(f"Admin revoked from {uid} by {operator_uid}")

    async def toggle_admin(
        self, uid: str, operator_uid: Optional[str] = None
    ) -> Optional[bool]:
        """Flip the admin flag. Returns the new value, or None for an unknown user."""
        if await self.is_admin(uid):
            await self.revoke_admin(uid, operator_uid)
            return False

        if not await self.grant_admin(uid, operator_uid):
            return None
        return True

    # ==================== Verified flag ====================

    async def set_verified(
        self, uid: str, verified: bool, operator_uid: Optional[str] = None
    ) -> bool:
        """Write isVerified. Returns False if the user does not exist."""
        result = await self.users.update_one(
            {"_id": uid},
            {"$set": {"isVerified": verified}},
        )
        if result.matched_count == 0:
            return False

        logger.info(
            f"User {uid} {'verified' if verified else 'unverified'} by {operator_uid}"
        )
        return True

    async def toggle_verified(
        self, uid: str, operator_uid: Optional[str] = None
    ) -> Optional[bool]:
        """Flip isVerified. Returns the new value, or None for an unknown user."""
        doc = await self.users.find_one({"_id": uid}, {"isVerified": 1})
        if not doc:
            return None

        new_value = not bool(doc.get("isVerified"))
        if not await self.set_verified(uid, new_value, operator_uid):
            return None
        return new_value

    # ==================== Bulk actions ====================

    async def bulk_set_verified(
        self,
        uids: list[str],
        verified: bool,
        operator_uid: Optional[str] = None,
    ) -> BulkActionResponse:
        """Set isVerified on every selected user concurrently."""
        action = "verify" if verified else "unverify"
        selection = list(dict.fromkeys(uids))
        results = await asyncio.gather(
            *(self.set_verified(uid, verified, operator_uid) for uid in selection),
            return_exceptions=True,
        )
        return self._bulk_response(action, selection, results)

    async def bulk_delete(
        self, uids: list[str], operator_uid: Optional[str] = None
    ) -> BulkActionResponse:
        """Delete every selected user concurrently."""
        selection = list(dict.fromkeys(uids))
        results = await asyncio.gather(
            *(self.delete_user(uid, operator_uid) for uid in selection),
            return_exceptions=True,
        )
        return self._bulk_response("delete", selection, results)

    # ==================== Helpers ====================

    async def _exists(self, uid: str) -> bool:
        return await self.users.find_one({"_id": uid}, {"_id": 1}) is not None

    async def _admin_flags(self, uids: list[str]) -> set[str]:
        """Uids among `uids` that carry the admin flag, in one query."""
        if not uids:
            return set()
        cursor = self.admins.find({"_id": {"$in": uids}}, {"_id": 1})
        docs = await cursor.to_list(length=None)
        return {doc["_id"] for doc in docs}

    async def _to_rows(self, docs: list[dict]) -> list[UserRow]:
        profiles = [UserProfile(**doc) for doc in docs]
        admins = await self._admin_flags([p.uid for p in profiles])
        return [UserRow.from_profile(p, is_admin=p.uid in admins) for p in profiles]

    @staticmethod
    def _sort_spec(sort_by: str, descending: bool) -> list[tuple[str, int]]:
        field = SORTABLE_FIELDS.get(sort_by, "fullName")
        direction = DESCENDING if descending else ASCENDING
        # _id keeps pages stable when names collide
        return [(field, direction), ("_id", ASCENDING)]

    @staticmethod
    def _bulk_response(
        action: str, selection: list[str], results: list
    ) -> BulkActionResponse:
        response = BulkActionResponse(action=action)
        for uid, result in zip(selection, results):
            if isinstance(result, BaseException):
                logger.error(f"Bulk {action} failed for {uid}: {result}")
                response.failed[uid] = str(result) or type(result).__name__
            elif not result:
                response.failed[uid] = USER_NOT_FOUND
            else:
                response.succeeded.append(uid)
        return response
