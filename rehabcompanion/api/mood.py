"""Daily mood check-in API."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status

from rehabcompanion.core.deps import get_messaging, get_storage, http_error, require_patient
from rehabcompanion.core.errors import RehabError
from rehabcompanion.models.user import User
from rehabcompanion.schemas.mood_check import (
    MoodCheckCreate,
    MoodCheckResponse,
    MoodHistoryResponse,
    MoodSubmissionResponse,
)
from rehabcompanion.services.messaging import SqlAlchemyMessaging
from rehabcompanion.services.mood_service import apply_mood_submission, get_mood_history
from rehabcompanion.services.storage import SqlAlchemyStorage

router = APIRouter(prefix="/mood", tags=["mood"])


@router.post("", response_model=MoodSubmissionResponse, status_code=status.HTTP_201_CREATED)
def submit_mood(
    data: MoodCheckCreate,
    storage: SqlAlchemyStorage = Depends(get_storage),
    messaging: SqlAlchemyMessaging = Depends(get_messaging),
    current_user: User = Depends(require_patient),
):
    """Submit today's mood. One per day; an emergency request notifies assigned doctors."""
    try:
        result = apply_mood_submission(
            storage,
            messaging,
            current_user.id,
            data.mood_level,
            notes=data.notes,
            requested_emergency_call=data.requested_emergency_call,
        )
    except RehabError as e:
        raise http_error(e)
    return MoodSubmissionResponse(
        mood_check=MoodCheckResponse.model_validate(result.mood_check),
        consecutive_bad_days=result.consecutive_bad_days,
        show_motivational_message=result.show_motivational_message,
        show_emergency_contact=result.show_emergency_contact,
        xp_earned=result.xp_earned,
        emergency_notified=result.emergency_notified,
    )


@router.get("/history", response_model=MoodHistoryResponse)
def mood_history(
    days: int = Query(default=30, ge=1, le=365),
    storage: SqlAlchemyStorage = Depends(get_storage),
    current_user: User = Depends(require_patient),
):
    """Mood checks of the last ``days`` days, oldest first."""
    history = get_mood_history(storage, current_user.id, days)
    return MoodHistoryResponse(
        mood_checks=[MoodCheckResponse.model_validate(c) for c in history.mood_checks],
        today_submitted=history.today_submitted,
        today_mood=MoodCheckResponse.model_validate(history.today_mood) if history.today_mood else None,
        consecutive_bad_days=history.consecutive_bad_days,
        stats=history.stats,
    )
