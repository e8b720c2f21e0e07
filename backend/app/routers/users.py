"""
Users router: the user management screen.

Every route requires an operator with the admin flag, token passed as
query parameter: `?token=xxx`
"""
from typing import Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from app.database.connections import get_database
from app.database.databases import campus_db
from app.dependencies.roles import CurrentAdmin
from app.schemas.user import (
    AdminStatusResponse,
    BulkActionResponse,
    BulkDeleteRequest,
    BulkVerifyRequest,
    UserListResponse,
    UserProfileUpdate,
    UserRow,
    UserStats,
    VerifiedStatusResponse,
    VerifiedUpdate,
)
from app.services.export_service import export_filename, users_to_csv
from app.services.user_service import USER_NOT_FOUND, UserService

router = APIRouter(prefix="/users", tags=["Users"])


async def get_user_service() -> UserService:
    """Dependency to get UserService instance."""
    return UserService(await get_database(campus_db.DB_NAME))


def _not_found() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=USER_NOT_FOUND,
    )


# ==================== Listing ====================


@router.get(
    "",
    response_model=UserListResponse,
    summary="List users with admin and verified flags",
)
async def list_users(
    operator: CurrentAdmin,
    search: Optional[str] = Query(None, description="Matches full name, email or matricule"),
    page: int = Query(1, ge=1, description="Page number"),
    page_size: int = Query(25, ge=1, le=100, description="Rows per page"),
    sort_by: str = Query("full_name", description="Column to sort on"),
    sort_order: Literal["asc", "desc"] = Query("asc", description="Sort direction"),
    user_service: UserService = Depends(get_user_service),
):
    """
    List users, filtered by a case-insensitive search on full name, email
    or matricule, sorted by full name unless told otherwise.
    """
    return await user_service.list_users(
        search=search,
        page=page,
        page_size=page_size,
        sort_by=sort_by,
        descending=sort_order == "desc",
    )


@router.get(
    "/stats",
    response_model=UserStats,
    summary="User counts",
)
async def get_user_stats(
    operator: CurrentAdmin,
    user_service: UserService = Depends(get_user_service),
):
    """Total, admin, verified and unverified user counts."""
    return await user_service.get_stats()


@router.get(
    "/export",
    summary="Export users as CSV",
    response_class=Response,
    responses={200: {"content": {"text/csv": {}}}},
)
async def export_users(
    operator: CurrentAdmin,
    search: Optional[str] = Query(None, description="Same filter as the list"),
    sort_by: str = Query("full_name", description="Same column as the list"),
    sort_order: Literal["asc", "desc"] = Query("asc", description="Sort direction"),
    user_service: UserService = Depends(get_user_service),
):
    """
    Download every user matching the search (all pages) as CSV, in the
    order of the table.
    """
    rows = await user_service.export_users(
        search=search,
        sort_by=sort_by,
        descending=sort_order == "desc",
    )
    return Response(
        content=users_to_csv(rows),
        media_type="text/csv",
        headers={
            "Content-Disposition": f'attachment; filename="{export_filename()}"'
        },
    )


# ==================== Bulk actions ====================


@router.post(
    "/bulk/verify",
    response_model=BulkActionResponse,
    summary="Verify or unverify selected users",
)
async def bulk_verify(
    body: BulkVerifyRequest,
    operator: CurrentAdmin,
    user_service: UserService = Depends(get_user_service),
):
    """
    Set the verified flag on every selected user.
    
    Failures are reported per uid in `failed`.
    """
    return await user_service.bulk_set_verified(body.uids, body.verified, operator.id)


@router.post(
    "/bulk/delete",
    response_model=BulkActionResponse,
    summary="Delete selected users",
)
async def bulk_delete(
    body: BulkDeleteRequest,
    operator: CurrentAdmin,
    user_service: UserService = Depends(get_user_service),
):
    """
    Delete the profile documents of every selected user.
    
    **Warning**: authentication accounts are not deleted.
    """
    return await user_service.bulk_delete(body.uids, operator.id)


# ==================== Single user ====================


@router.get(
    "/{uid}",
    response_model=UserRow,
    summary="Get one user",
)
async def get_user(
    uid: str,
    operator: CurrentAdmin,
    user_service: UserService = Depends(get_user_service),
):
    user = await user_service.get_user(uid)
    if not user:
        raise _not_found()
    return user


@router.patch(
    "/{uid}",
    response_model=UserRow,
    summary="Edit a user profile",
)
async def update_user(
    uid: str,
    body: UserProfileUpdate,
    operator: CurrentAdmin,
    user_service: UserService = Depends(get_user_service),
):
    """
    Update the editable profile fields sent in the body. Fields left out
    keep their value, blank fields are cleared.
    
    - **full_name** and **email** cannot be cleared
    """
    try:
        user = await user_service.update_profile(uid, body, operator.id)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )
    
    if not user:
        raise _not_found()
    return user


@router.delete(
    "/{uid}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a user document",
)
async def delete_user(
    uid: str,
    operator: CurrentAdmin,
    user_service: UserService = Depends(get_user_service),
):
    """
    Delete the user's profile document and admin flag.
    
    **Warning**: the authentication account is NOT deleted.
    """
    if not await user_service.delete_user(uid, operator.id):
        raise _not_found()


# ==================== Admin flag ====================


@router.post(
    "/{uid}/admin",
    response_model=AdminStatusResponse,
    summary="Grant admin",
)
async def grant_admin(
    uid: str,
    operator: CurrentAdmin,
    user_service: UserService = Depends(get_user_service),
):
    if not await user_service.grant_admin(uid, operator.id):
        raise _not_found()
    return AdminStatusResponse(uid=uid, is_admin=True)


@router.delete(
    "/{uid}/admin",
    response_model=AdminStatusResponse,
    summary="Revoke admin",
)
async def revoke_admin(
    uid: str,
    operator: CurrentAdmin,
    user_service: UserService = Depends(get_user_service),
):
    await user_service.revoke_admin(uid, operator.id)
    return AdminStatusResponse(uid=uid, is_admin=False)


@router.post(
    "/{uid}/admin/toggle",
    response_model=AdminStatusResponse,
    summary="Toggle admin",
)
async def toggle_admin(
    uid: str,
    operator: CurrentAdmin,
    user_service: UserService = Depends(get_user_service),
):
    """Grant admin if the user is not one, revoke it otherwise."""
    is_admin = await user_service.toggle_admin(uid, operator.id)
    if is_admin is None:
        raise _not_found()
    return AdminStatusResponse(uid=uid, is_admin=is_admin)


# ==================== Verified flag ====================


@router.put(
    "/{uid}/verified",
    response_model=VerifiedStatusResponse,
    summary="Set verified",
)
async def set_verified(
    uid: str,
    body: VerifiedUpdate,
    operator: CurrentAdmin,
    user_service: UserService = Depends(get_user_service),
):
    if not await user_service.set_verified(uid, body.verified, operator.id):
        raise _not_found()
    return VerifiedStatusResponse(uid=uid, is_verified=body.verified)


@router.post(
    "/{uid}/verified/toggle",
    response_model=VerifiedStatusResponse,
    summary="Toggle verified",
)
async def toggle_verified(
    uid: str,
    operator: CurrentAdmin,
    user_service: UserService = Depends(get_user_service),
):
    is_verified = await user_service.toggle_verified(uid, operator.id)
    if is_verified is None:
        raise _not_found()
    return VerifiedStatusResponse(uid=uid, is_verified=is_verified)
