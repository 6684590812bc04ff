"""Daily task schemas."""

import datetime as dt

from pydantic import Field

from rehabcompanion.schemas.common import CamelModel
from rehabcompanion.schemas.garden import GardenResponse


class TaskCompleteRequest(CamelModel):
    notes: str | None = Field(default=None, max_length=2000)
    mood: str | None = Field(default=None, description="excelente | bien | mal, required for EMOTION_CHECK")


class TaskAssignRequest(CamelModel):
    description: str = Field(min_length=1, max_length=500)
    type: str = Field(..., pattern="^(MEDICATION|ACTIVITY|EMOTION_CHECK)$")
    date: dt.date | None = None


class TaskResponse(CamelModel):
    id: int
    user_id: int
    description: str
    type: str
    date: dt.date
    is_completed: bool
    completed_at: dt.datetime | None
    mood: str | None


class RewardResponse(CamelModel):
    xp_gained: int
    leveled_up: bool
    old_stage: str
    new_stage: str


class MoodAlertResponse(CamelModel):
    type: str
    message: str
    contact_name: str | None = None
    contact_phone: str | None = None


class TaskCompletionResponse(CamelModel):
    message: str = "Task completed successfully!"
    task: TaskResponse
    garden: GardenResponse
    reward: RewardResponse
    mood_alert: MoodAlertResponse | None = None
