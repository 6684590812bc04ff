"""Garden schemas."""

from datetime import date

from pydantic import Field

from rehabcompanion.schemas.common import CamelModel


class GardenResponse(CamelModel):
    user_id: int
    plant_stage: str
    current_xp: int = Field(alias="currentXP")
    streak_days: int
    total_tasks_completed: int
    last_action_date: date | None = None


class GardenOverviewResponse(GardenResponse):
    next_stage_xp: int | None = Field(default=None, alias="nextStageXP")
    progress_percentage: float


def garden_fields(snapshot) -> dict:
    """Field values of a ``GardenSnapshot`` for the garden schemas."""
    return {
        "user_id": snapshot.user_id,
        "plant_stage": snapshot.plant_stage.value,
        "current_xp": snapshot.current_xp,
        "streak_days": snapshot.streak_days,
        "total_tasks_completed": snapshot.total_tasks_completed,
        "last_action_date": snapshot.last_action_date,
    }
