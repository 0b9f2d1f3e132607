"""
User API Endpoints.
"""

from typing import List
from fastapi import APIRouter, Depends, Path, Query
from backend.app.core.dependencies import get_user_directory
from backend.app.core.guards import AuthContext, Guard, require_guards
from backend.app.schemas.user import (
    ModifiedResult,
    RoleResponse,
    RoleUpdate,
    UserLogin,
    UserLoginResponse,
    UserResponse,
)
from backend.app.services.user_directory import UserDirectory

router = APIRouter(prefix="/users", tags=["Users"])

credential_guard = require_guards(Guard.CREDENTIAL)
admin_guards = require_guards(Guard.CREDENTIAL, Guard.SUBJECT_MATCH, Guard.ADMIN)


@router.post("", response_model=UserLoginResponse)
async def record_login(
    login: UserLogin,
    ctx: AuthContext = Depends(credential_guard),
    directory: UserDirectory = Depends(get_user_directory)
):
    """
    Called by the client after every sign-in.

    Creates the user with role "user" on first contact, otherwise only
    refreshes last_log_in.
    """
    user, created = await directory.record_login(login.email, login.name, login.photo_url)
    return UserLoginResponse(user=UserResponse.model_validate(user), created=created)


@router.get("/search", response_model=List[UserResponse])
async def search_users(
    q: str = Query(..., min_length=1, description="Part of the email address"),
    ctx: AuthContext = Depends(admin_guards),
    directory: UserDirectory = Depends(get_user_directory)
):
    """Find up to 10 admins or users by partial, case-insensitive email (Admin only)."""
    return await directory.search(q)


@router.get("/{email}/role", response_model=RoleResponse)
async def get_user_role(
    email: str = Path(..., description="User email"),
    ctx: AuthContext = Depends(credential_guard),
    directory: UserDirectory = Depends(get_user_directory)
):
    return RoleResponse(role=await directory.get_role(email))


@router.patch("/{user_id}/role", response_model=ModifiedResult)
async def update_user_role(
    update: RoleUpdate,
    user_id: int = Path(..., description="User ID"),
    ctx: AuthContext = Depends(admin_guards),
    directory: UserDirectory = Depends(get_user_directory)
):
    """Change a user's role (Admin only)."""
    modified = await directory.set_role(user_id, update.role)
    return ModifiedResult(modified_count=modified)
