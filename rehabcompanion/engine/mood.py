"""Bad-mood streak detection for the daily check-in and for EMOTION_CHECK tasks."""

from __future__ import annotations

import enum
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from rehabcompanion.core.errors import ValidationError
from rehabcompanion.core.progression_policies import (
    EMERGENCY_AFTER_BAD_DAYS,
    MOTIVATIONAL_AFTER_BAD_DAYS,
    TASK_EMERGENCY_COUNT,
    TASK_MOOD_LOOKBACK,
    TASK_MOTIVATIONAL_COUNT,
)


class MoodLevel(str, enum.Enum):
    """Daily check-in vocabulary."""

    GOOD = "GOOD"
    NEUTRAL = "NEUTRAL"
    BAD = "BAD"


class TaskMood(str, enum.Enum):
    """Mood recorded when completing an EMOTION_CHECK task."""

    EXCELENTE = "excelente"
    BIEN = "bien"
    MAL = "mal"


class MoodAlertType(str, enum.Enum):
    MOTIVATIONAL = "MOTIVATIONAL"
    EMERGENCY = "EMERGENCY"


MOTIVATIONAL_MESSAGE = (
    "Vemos que has tenido un par de días difíciles. Recuerda que no estás solo "
    "y cada pequeño paso cuenta. ¡Tú puedes!"
)
EMERGENCY_MESSAGE = (
    "Has tenido varios días complicados. ¿Te gustaría llamar a tu contacto de "
    "emergencia o hablar con alguien?"
)


def parse_mood_level(value: str | MoodLevel | None) -> MoodLevel:
    try:
        return MoodLevel(value)
    except ValueError:
        raise ValidationError("Valid mood level required (GOOD, NEUTRAL, BAD)") from None


def parse_task_mood(value: str | TaskMood | None) -> TaskMood:
    try:
        return TaskMood(value)
    except ValueError:
        raise ValidationError("Valid mood required for emotion check (excelente, bien, mal)") from None


@dataclass(frozen=True)
class MoodEscalation:
    consecutive_bad_days: int
    show_motivational: bool
    show_emergency_prompt: bool


@dataclass(frozen=True)
class EmergencyContact:
    name: str | None = None
    phone: str | None = None


@dataclass(frozen=True)
class MoodAlert:
    type: MoodAlertType
    message: str
    contact_name: str | None = None
    contact_phone: str | None = None


class DailyMoodStreak:
    """Open-ended backward scan over daily mood checks."""

    def __init__(
        self,
        motivational_after: int = MOTIVATIONAL_AFTER_BAD_DAYS,
        emergency_after: int = EMERGENCY_AFTER_BAD_DAYS,
    ):
        self.motivational_after = motivational_after
        self.emergency_after = emergency_after

    def count(self, recent_checks: Iterable, new_mood: MoodLevel) -> int:
        """Run of BAD days ending with ``new_mood``.

        ``recent_checks`` are the earlier check-ins (any order, each with
        ``date`` and ``mood_level``); the new submission is day 0.
        """
        if MoodLevel(new_mood) is not MoodLevel.BAD:
            return 0
        return 1 + self.current_run(recent_checks)

    @staticmethod
    def current_run(checks: Iterable) -> int:
        """BAD check-ins counted back from the newest one."""
        run = 0
        for check in sorted(checks, key=lambda c: c.date, reverse=True):
            if MoodLevel(check.mood_level) is not MoodLevel.BAD:
                break
            run += 1
        return run

    def evaluate(self, recent_checks: Iterable, new_mood: MoodLevel) -> MoodEscalation:
        run = self.count(recent_checks, new_mood)
        return MoodEscalation(
            consecutive_bad_days=run,
            show_motivational=run >= self.motivational_after,
            show_emergency_prompt=run >= self.emergency_after,
        )


class TaskMoodStreak:
    """Short fixed window over the last completed EMOTION_CHECK tasks."""

    def __init__(self, lookback: int = TASK_MOOD_LOOKBACK):
        self.lookback = lookback

    def count(self, previous_moods: Sequence[str | None], current_mood: TaskMood) -> int:
        """Count of "mal" among the newest ``lookback`` previous moods, plus the current one."""
        if TaskMood(current_mood) is not TaskMood.MAL:
            return 0
        window = previous_moods[: self.lookback]
        return sum(1 for mood in window if mood == TaskMood.MAL.value) + 1

    def evaluate(
        self,
        previous_moods: Sequence[str | None],
        current_mood: TaskMood,
        contact: EmergencyContact | None = None,
    ) -> MoodAlert | None:
        """``previous_moods`` are ordered newest first and exclude the task being completed."""
        total = self.count(previous_moods, current_mood)
        if total == TASK_MOTIVATIONAL_COUNT:
            return MoodAlert(type=MoodAlertType.MOTIVATIONAL, message=MOTIVATIONAL_MESSAGE)
        if total == TASK_EMERGENCY_COUNT:
            contact = contact or EmergencyContact()
            return MoodAlert(
                type=MoodAlertType.EMERGENCY,
                message=EMERGENCY_MESSAGE,
                contact_name=contact.name,
                contact_phone=contact.phone,
            )
        return None


def mood_stats(checks: Iterable) -> dict[str, int]:
    counts = {"total": 0, "good": 0, "neutral": 0, "bad": 0}
    for check in checks:
        counts["total"] += 1
        counts[MoodLevel(check.mood_level).value.lower()] += 1
    return counts
