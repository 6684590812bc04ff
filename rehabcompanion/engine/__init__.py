"""Rules engine: garden progression, mood escalation and alert lifecycle."""

from rehabcompanion.engine.alerts import AlertState, AlertStatus, compute_active_alert
from rehabcompanion.engine.completion import Reward, TaskCompletion, complete_task
from rehabcompanion.engine.garden import (
    EventKind,
    GardenSnapshot,
    PlantStage,
    TaskType,
    apply_event,
    compute_streak,
    stage_for_xp,
)
from rehabcompanion.engine.mood import DailyMoodStreak, MoodAlert, MoodLevel, TaskMood, TaskMoodStreak

__all__ = [
    "AlertState",
    "AlertStatus",
    "compute_active_alert",
    "Reward",
    "TaskCompletion",
    "complete_task",
    "EventKind",
    "GardenSnapshot",
    "PlantStage",
    "TaskType",
    "apply_event",
    "compute_streak",
    "stage_for_xp",
    "DailyMoodStreak",
    "MoodAlert",
    "MoodLevel",
    "TaskMood",
    "TaskMoodStreak",
]
