"""Garden progression: XP, plant stage and streak rules.

Every function here is pure. Callers load the current garden, pass it in with
the event, and persist the snapshot they get back.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, replace
from datetime import date

from rehabcompanion.core.progression_policies import (
    STAGE_THRESHOLDS,
    XP_ACTIVITY,
    XP_DAILY_MOOD_SUBMIT,
    XP_MEDICATION,
    XP_TASK_EMOTION_CHECK,
)
from rehabcompanion.core.errors import ValidationError


class PlantStage(str, enum.Enum):
    SEED = "SEED"
    SPROUT = "SPROUT"
    PLANT = "PLANT"
    FLOWER = "FLOWER"

    @property
    def rank(self) -> int:
        return _STAGE_ORDER.index(self)


_STAGE_ORDER = [PlantStage.SEED, PlantStage.SPROUT, PlantStage.PLANT, PlantStage.FLOWER]


class TaskType(str, enum.Enum):
    MEDICATION = "MEDICATION"
    ACTIVITY = "ACTIVITY"
    EMOTION_CHECK = "EMOTION_CHECK"


class EventKind(str, enum.Enum):
    """Things that earn XP. Mood via a task and the daily check-in are rewarded differently."""

    MEDICATION = "MEDICATION"
    ACTIVITY = "ACTIVITY"
    TASK_EMOTION_CHECK = "TASK_EMOTION_CHECK"
    DAILY_MOOD_SUBMIT = "DAILY_MOOD_SUBMIT"

    @property
    def is_task(self) -> bool:
        return self is not EventKind.DAILY_MOOD_SUBMIT


XP_REWARDS = {
    EventKind.MEDICATION: XP_MEDICATION,
    EventKind.ACTIVITY: XP_ACTIVITY,
    EventKind.TASK_EMOTION_CHECK: XP_TASK_EMOTION_CHECK,
    EventKind.DAILY_MOOD_SUBMIT: XP_DAILY_MOOD_SUBMIT,
}

_TASK_EVENTS = {
    TaskType.MEDICATION: EventKind.MEDICATION,
    TaskType.ACTIVITY: EventKind.ACTIVITY,
    TaskType.EMOTION_CHECK: EventKind.TASK_EMOTION_CHECK,
}


@dataclass(frozen=True)
class GardenSnapshot:
    """Value copy of a patient's garden."""

    user_id: int
    plant_stage: PlantStage = PlantStage.SEED
    current_xp: int = 0
    streak_days: int = 0
    total_tasks_completed: int = 0
    last_action_date: date | None = None

    @classmethod
    def new(cls, user_id: int) -> GardenSnapshot:
        return cls(user_id=user_id)


def parse_task_type(value: str | TaskType) -> TaskType:
    try:
        return TaskType(value)
    except ValueError:
        raise ValidationError(f"Unknown task type: {value}") from None


def event_kind_for_task(task_type: str | TaskType) -> EventKind:
    return _TASK_EVENTS[parse_task_type(task_type)]


def reward_for(kind: EventKind) -> int:
    return XP_REWARDS[kind]


def stage_for_xp(xp: int, thresholds: dict[str, int] | None = None) -> PlantStage:
    """Stage reached with ``xp`` cumulative points, checked from the top stage down."""
    table = thresholds if thresholds is not None else STAGE_THRESHOLDS
    for stage in reversed(_STAGE_ORDER):
        if xp >= table[stage.value]:
            return stage
    return PlantStage.SEED


def compute_streak(streak_days: int, last_action_date: date | None, today: date) -> int:
    """Streak after an action on ``today``.

    Same day keeps the streak, the next day extends it, anything else (a gap,
    or a last action in the future) starts over at 1.
    """
    if last_action_date is None:
        return 1
    diff = (today - last_action_date).days
    if diff == 0:
        return streak_days
    if diff == 1:
        return streak_days + 1
    return 1


def apply_event(state: GardenSnapshot, kind: EventKind, xp_reward: int, today: date) -> GardenSnapshot:
    """Return the garden after one XP-earning event. The stage never moves backwards."""
    new_xp = state.current_xp + xp_reward
    reached = stage_for_xp(new_xp)
    new_stage = reached if reached.rank > state.plant_stage.rank else state.plant_stage

    return replace(
        state,
        plant_stage=new_stage,
        current_xp=new_xp,
        streak_days=compute_streak(state.streak_days, state.last_action_date, today),
        total_tasks_completed=state.total_tasks_completed + (1 if kind.is_task else 0),
        last_action_date=today,
    )


def stage_progress(state: GardenSnapshot) -> tuple[int | None, float]:
    """XP needed for the next stage and percent of the way there (0-100)."""
    if state.plant_stage is PlantStage.FLOWER:
        return None, 100.0
    current_floor = STAGE_THRESHOLDS[state.plant_stage.value]
    next_stage = _STAGE_ORDER[state.plant_stage.rank + 1]
    next_xp = STAGE_THRESHOLDS[next_stage.value]
    pct = (state.current_xp - current_floor) / (next_xp - current_floor) * 100
    return next_xp, min(100.0, max(0.0, pct))
