"""Daily mood check-in service."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, timedelta

from rehabcompanion.core.config import settings
from rehabcompanion.core.errors import DuplicateSubmissionError, NotFoundError
from rehabcompanion.engine.garden import EventKind, GardenSnapshot, apply_event, reward_for
from rehabcompanion.engine.mood import DailyMoodStreak, mood_stats, parse_mood_level
from rehabcompanion.models.mood_check import MoodCheck
from rehabcompanion.services.messaging import Messaging
from rehabcompanion.services.storage import Storage

logger = logging.getLogger(__name__)

EMERGENCY_NOTICE = (
    "🚨 ALERTA: El paciente {name} ha solicitado contactar con su persona de emergencia. "
    "Lleva {days} días consecutivos con estado de ánimo bajo."
)


@dataclass
class SubmissionResult:
    mood_check: MoodCheck
    consecutive_bad_days: int
    show_motivational_message: bool
    show_emergency_contact: bool
    xp_earned: int
    emergency_notified: bool = False
    notified_doctor_ids: list[int] = field(default_factory=list)


@dataclass
class MoodHistory:
    mood_checks: list[MoodCheck]
    today_mood: MoodCheck | None
    consecutive_bad_days: int
    stats: dict[str, int]

    @property
    def today_submitted(self) -> bool:
        return self.today_mood is not None


def _notify_doctors(storage: Storage, messaging: Messaging, user_id: int, consecutive_bad_days: int) -> list[int]:
    """Send one alert message per assigned doctor. No doctor means no message."""
    user = storage.get_user(user_id)
    name = user.full_name if user else str(user_id)
    doctor_ids = storage.list_assigned_doctors(user_id)
    if not doctor_ids:
        logger.warning("Emergency call requested by user=%s but no doctor is assigned", user_id)
    for doctor_id in doctor_ids:
        messaging.send_message(user_id, doctor_id, EMERGENCY_NOTICE.format(name=name, days=consecutive_bad_days))
    return doctor_ids


def apply_mood_submission(
    storage: Storage,
    messaging: Messaging,
    user_id: int,
    mood_level: str,
    notes: str | None = None,
    requested_emergency_call: bool = False,
    today: date | None = None,
    streak: DailyMoodStreak | None = None,
) -> SubmissionResult:
    """Record today's mood, reward it, and escalate when needed.

    Raises ValidationError for an unknown mood level and
    DuplicateSubmissionError when the day already has a check; neither
    leaves anything written.
    """
    level = parse_mood_level(mood_level)
    today = today or date.today()

    if storage.get_user(user_id) is None:
        raise NotFoundError("User not found")
    if storage.find_mood_check(user_id, today) is not None:
        raise DuplicateSubmissionError("Mood already registered for today")

    since = today - timedelta(days=settings.mood_lookback_days)
    previous = storage.list_recent_mood_checks(user_id, since=since, until=today)

    check = storage.create_mood_check(
        user_id=user_id,
        day=today,
        mood_level=level.value,
        notes=notes or None,
        requested_emergency_call=bool(requested_emergency_call),
    )

    xp = reward_for(EventKind.DAILY_MOOD_SUBMIT)
    garden = storage.load_garden_state(user_id) or GardenSnapshot.new(user_id)
    storage.save_garden_state(apply_event(garden, EventKind.DAILY_MOOD_SUBMIT, xp, today))

    escalation = (streak or DailyMoodStreak()).evaluate(previous, level)
    logger.debug("Mood check user=%s level=%s bad_run=%s", user_id, level.value, escalation.consecutive_bad_days)

    result = SubmissionResult(
        mood_check=check,
        consecutive_bad_days=escalation.consecutive_bad_days,
        show_motivational_message=escalation.show_motivational,
        show_emergency_contact=escalation.show_emergency_prompt,
        xp_earned=xp,
    )

    if requested_emergency_call:
        result.notified_doctor_ids = _notify_doctors(storage, messaging, user_id, escalation.consecutive_bad_days)
        storage.update_mood_check(check, doctor_notified=True)
        result.emergency_notified = True
        logger.info(
            "Emergency call requested user=%s mood_check=%s doctors_notified=%s",
            user_id,
            check.id,
            len(result.notified_doctor_ids),
        )

    storage.commit()
    return result


def get_mood_history(storage: Storage, user_id: int, days: int = 30, today: date | None = None) -> MoodHistory:
    """Check-ins of the last ``days`` days (oldest first) with today's status and stats."""
    today = today or date.today()
    window = storage.list_recent_mood_checks(user_id, since=today - timedelta(days=days), until=today)
    window.reverse()
    latest = storage.list_recent_mood_checks(user_id, until=today, limit=settings.mood_lookback_days)
    return MoodHistory(
        mood_checks=window,
        today_mood=storage.find_mood_check(user_id, today),
        consecutive_bad_days=DailyMoodStreak.current_run(latest),
        stats=mood_stats(window),
    )
