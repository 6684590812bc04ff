"""Profile API."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from rehabcompanion.core.deps import get_current_user, get_storage, http_error
from rehabcompanion.core.errors import RehabError
from rehabcompanion.models.user import User
from rehabcompanion.schemas.user import ProfileUpdate, ProfileUpdateResponse, UserResponse
from rehabcompanion.services.profile_service import update_profile
from rehabcompanion.services.storage import SqlAlchemyStorage

router = APIRouter(prefix="/profile", tags=["profile"])


@router.get("", response_model=UserResponse)
def read_profile(current_user: User = Depends(get_current_user)):
    return current_user


@router.put("", response_model=ProfileUpdateResponse)
def edit_profile(
    data: ProfileUpdate,
    storage: SqlAlchemyStorage = Depends(get_storage),
    current_user: User = Depends(get_current_user),
):
    """Update names and emergency contact. Omitted or blank fields are kept."""
    try:
        user = update_profile(storage, current_user.id, **data.model_dump())
    except RehabError as e:
        raise http_error(e)
    return ProfileUpdateResponse(user=UserResponse.model_validate(user))
