"""Daily tasks API."""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Body, Depends, Query

from rehabcompanion.core.deps import get_storage, http_error, require_patient
from rehabcompanion.core.errors import RehabError
from rehabcompanion.models.user import User
from rehabcompanion.schemas.garden import GardenResponse, garden_fields
from rehabcompanion.schemas.task import (
    MoodAlertResponse,
    RewardResponse,
    TaskCompleteRequest,
    TaskCompletionResponse,
    TaskResponse,
)
from rehabcompanion.services.storage import SqlAlchemyStorage
from rehabcompanion.services.task_service import apply_task_completion, list_tasks_for_day

router = APIRouter(prefix="/tasks", tags=["tasks"])


@router.get("", response_model=list[TaskResponse])
def list_tasks(
    day: date | None = Query(default=None, alias="date"),
    storage: SqlAlchemyStorage = Depends(get_storage),
    current_user: User = Depends(require_patient),
):
    """Tasks of the current user for one day (today by default)."""
    return list_tasks_for_day(storage, current_user.id, day)


@router.post("/{task_id}/complete", response_model=TaskCompletionResponse)
def complete(
    task_id: int,
    data: TaskCompleteRequest | None = Body(default=None),
    storage: SqlAlchemyStorage = Depends(get_storage),
    current_user: User = Depends(require_patient),
):
    """Complete a task. Awards XP and may return a mood alert for EMOTION_CHECK tasks."""
    d = data or TaskCompleteRequest()
    try:
        result = apply_task_completion(storage, current_user.id, task_id, notes=d.notes, mood=d.mood)
    except RehabError as e:
        raise http_error(e)

    alert = result.mood_alert
    return TaskCompletionResponse(
        task=TaskResponse.model_validate(result.task),
        garden=GardenResponse(**garden_fields(result.garden)),
        reward=RewardResponse(
            xp_gained=result.reward.xp_gained,
            leveled_up=result.reward.leveled_up,
            old_stage=result.reward.old_stage.value,
            new_stage=result.reward.new_stage.value,
        ),
        mood_alert=MoodAlertResponse(
            type=alert.type.value,
            message=alert.message,
            contact_name=alert.contact_name,
            contact_phone=alert.contact_phone,
        )
        if alert
        else None,
    )
