"""
Authentication service for console operators.

Operators log in with credentials from auth_db.accounts, and only uids
that carry the admin flag in campus_db.admins are let in.
"""
import logging
import uuid
from datetime import datetime, timezone
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorDatabase

from app.config import get_settings
from app.core.rate_limit import (
    check_user_lockout,
    increment_failed_login,
    reset_failed_attempts,
    set_user_lockout,
)
from app.core.security import ADMIN_ROLE, create_access_token, hash_password, verify_password
from app.database.databases import auth_db, campus_db
from app.models.account import Account, AccountStatus
from app.schemas.auth import LoginRequest, LoginResponse, OperatorInfoResponse
from app.services.user_service import UserService

logger = logging.getLogger(__name__)

ADMIN_REQUIRED = "Admin privileges required"


class AuthService:
    """Service for console login and operator lookup."""

    def __init__(self, db: AsyncIOMotorDatabase, campus_db_instance: AsyncIOMotorDatabase):
        """Initialize with the auth database and the campus database."""
        self.db = db
        self.accounts = db[auth_db.Collections.ACCOUNTS]
        self.campus_users = campus_db_instance[campus_db.Collections.USERS]
        self.user_service = UserService(campus_db_instance)
        self.settings = get_settings()

    async def login(self, request: LoginRequest) -> LoginResponse:
        """
        Authenticate an operator and return a JWT token.

        Args:
            request: Login request with email and password

        Returns:
            LoginResponse with JWT token

        Raises:
            ValueError: If credentials are invalid, the account is locked or
                disabled, or the uid has no admin flag
        """
        account_doc = await self.accounts.find_one({"email": request.email})

        if not account_doc:
            raise ValueError("Invalid email or password")

        uid = str(account_doc["_id"])

        if await check_user_lockout(uid):
            raise ValueError("Account temporarily locked due to too many failed attempts")

        if account_doc.get("status") == AccountStatus.DISABLED.value:
            raise ValueError("Account is disabled")

        if not verify_password(request.password, account_doc.get("hashed_password", "")):
            failed_count = await increment_failed_login(uid)
            if failed_count >= self.settings.user_lockout_threshold:
                await set_user_lockout(uid, self.settings.user_lockout_duration_minutes)
            raise ValueError("Invalid email or password")

        if not await self.user_service.is_admin(uid):
            logger.warning(f"Login refused for {uid}: no admin flag")
            raise ValueError(ADMIN_REQUIRED)

        await reset_failed_attempts(uid)

        roles = [ADMIN_ROLE]
        logger.info(f"Operator {uid} logged in")
        return LoginResponse(
            access_token=create_access_token(uid=uid, roles=roles),
            token_type="bearer",
            expires_in=self.settings.jwt_access_token_expire_minutes * 60,
            user_id=uid,
            roles=roles,
        )

    async def get_account_by_id(self, uid: str) -> Optional[Account]:
        """Get an account by uid, or None."""
        account_doc = await self.accounts.find_one({"_id": uid})
        if not account_doc:
            return None
        account_doc["_id"] = str(account_doc["_id"])
        return Account(**account_doc)

    async def get_operator_info(self, account: Account) -> OperatorInfoResponse:
        """Account details completed with the name from the user profile."""
        profile = await self.campus_users.find_one({"_id": account.id}, {"fullName": 1})
        return OperatorInfoResponse(
            id=account.id,
            email=account.email,
            full_name=profile.get("fullName") if profile else None,
            status=account.status,
            created_at=account.created_at,
        )

    async def ensure_bootstrap_admin(
        self, email: str, password: str, full_name: str
    ) -> str:
        """
        Make sure an operator exists for the given email.

        Creates the account, a verified profile document and the admin flag
        when missing. An existing account keeps its password.

        Returns:
            The operator's uid
        """
        account_doc = await self.accounts.find_one({"email": email})
        now = datetime.now(timezone.utc)

        if account_doc:
            uid = str(account_doc["_id"])
        else:
            uid = uuid.uuid4().hex
            await self.accounts.insert_one({
                "_id": uid,
                "email": email,
                "hashed_password": hash_password(password),
                "status": AccountStatus.ACTIVE.value,
                "created_at": now,
            })
            logger.info(f"Bootstrap operator account created for {email}")

        await self.campus_users.update_one(
            {"_id": uid},
            {
                "$setOnInsert": {
                    "fullName": full_name,
                    "email": email,
                    "createdAt": now,
                    "isVerified": True,
                }
            },
            upsert=True,
        )
        await self.user_service.grant_admin(uid, operator_uid="bootstrap")
        return uid
