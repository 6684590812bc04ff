"""Garden API."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from rehabcompanion.core.deps import get_storage, require_patient
from rehabcompanion.models.user import User
from rehabcompanion.schemas.garden import GardenOverviewResponse, garden_fields
from rehabcompanion.services.garden_service import get_garden_overview
from rehabcompanion.services.storage import SqlAlchemyStorage

router = APIRouter(prefix="/garden", tags=["garden"])


@router.get("", response_model=GardenOverviewResponse)
def garden_state(
    storage: SqlAlchemyStorage = Depends(get_storage),
    current_user: User = Depends(require_patient),
):
    """Current garden with progress towards the next stage."""
    overview = get_garden_overview(storage, current_user.id)
    return GardenOverviewResponse(
        **garden_fields(overview.garden),
        next_stage_xp=overview.next_stage_xp,
        progress_percentage=overview.progress_percentage,
    )
