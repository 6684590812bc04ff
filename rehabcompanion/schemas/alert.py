"""Doctor dashboard and alert schemas."""

from datetime import datetime

from pydantic import Field

from rehabcompanion.schemas.common import CamelModel
from rehabcompanion.schemas.garden import GardenResponse
from rehabcompanion.schemas.mood_check import MoodCheckResponse
from rehabcompanion.schemas.task import TaskResponse


class AlertStatusResponse(CamelModel):
    has_active_alert: bool
    active_alert_id: int | None = None


class DismissAlertRequest(CamelModel):
    mood_check_id: int | None = Field(default=None, alias="moodCheckId")


class DismissAlertResponse(CamelModel):
    success: bool = True
    message: str = "Alert dismissed successfully"
    mood_check: MoodCheckResponse


class PatientSummary(AlertStatusResponse):
    id: int
    email: str
    first_name: str
    last_name: str
    emergency_contact_name: str | None = None
    emergency_contact_phone: str | None = None
    garden_state: GardenResponse | None = None


class PatientDetailResponse(PatientSummary):
    role: str
    is_active: bool
    created_at: datetime | None = None
    daily_tasks: list[TaskResponse] = []
