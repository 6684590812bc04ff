"""Task completion: garden reward plus the EMOTION_CHECK mood alert."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date

from rehabcompanion.core.errors import AlreadyCompletedError, ForbiddenError
from rehabcompanion.engine.garden import (
    GardenSnapshot,
    PlantStage,
    TaskType,
    apply_event,
    event_kind_for_task,
    parse_task_type,
    reward_for,
)
from rehabcompanion.engine.mood import EmergencyContact, MoodAlert, TaskMood, TaskMoodStreak, parse_task_mood


@dataclass(frozen=True)
class Reward:
    xp_gained: int
    leveled_up: bool
    old_stage: PlantStage
    new_stage: PlantStage


@dataclass(frozen=True)
class TaskCompletion:
    garden: GardenSnapshot
    reward: Reward
    mood: TaskMood | None
    mood_alert: MoodAlert | None


def complete_task(
    task,
    user_id: int,
    garden: GardenSnapshot,
    previous_task_moods: Sequence[str | None],
    mood: str | None,
    today: date,
    contact: EmergencyContact | None = None,
    streak: TaskMoodStreak | None = None,
) -> TaskCompletion:
    """Evaluate completing ``task`` without touching storage.

    ``previous_task_moods`` are moods of earlier completed EMOTION_CHECK
    tasks, newest first. Raises before computing anything if the task
    belongs to someone else or is already done.
    """
    if task.user_id != user_id:
        raise ForbiddenError("Task does not belong to this user")
    if task.is_completed:
        raise AlreadyCompletedError("Task already completed")

    task_type = parse_task_type(task.type)
    task_mood = None
    mood_alert = None
    if task_type is TaskType.EMOTION_CHECK:
        task_mood = parse_task_mood(mood)
        mood_alert = (streak or TaskMoodStreak()).evaluate(previous_task_moods, task_mood, contact)

    kind = event_kind_for_task(task_type)
    xp = reward_for(kind)
    updated = apply_event(garden, kind, xp, today)
    reward = Reward(
        xp_gained=xp,
        leveled_up=updated.plant_stage != garden.plant_stage,
        old_stage=garden.plant_stage,
        new_stage=updated.plant_stage,
    )
    return TaskCompletion(garden=updated, reward=reward, mood=task_mood, mood_alert=mood_alert)
