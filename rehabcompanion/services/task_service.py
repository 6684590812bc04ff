"""Daily task service."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timezone

from rehabcompanion.core.encryption import NotesCipher
from rehabcompanion.core.errors import ForbiddenError, NotFoundError, ValidationError
from rehabcompanion.core.progression_policies import TASK_MOOD_LOOKBACK
from rehabcompanion.engine.completion import Reward, complete_task
from rehabcompanion.engine.garden import GardenSnapshot, parse_task_type
from rehabcompanion.engine.mood import EmergencyContact, MoodAlert
from rehabcompanion.models.daily_task import DailyTask
from rehabcompanion.services.storage import Storage

logger = logging.getLogger(__name__)


@dataclass
class CompletionResult:
    task: DailyTask
    garden: GardenSnapshot
    reward: Reward
    mood_alert: MoodAlert | None


def apply_task_completion(
    storage: Storage,
    user_id: int,
    task_id: int,
    notes: str | None = None,
    mood: str | None = None,
    today: date | None = None,
    cipher: NotesCipher | None = None,
) -> CompletionResult:
    """Complete a task, award XP and evaluate the EMOTION_CHECK mood window.

    Garden and task are flushed together and committed once.
    """
    today = today or date.today()
    task = storage.find_task(task_id)
    if task is None:
        raise NotFoundError("Task not found")
    user = storage.get_user(user_id)
    if user is None:
        raise NotFoundError("User not found")

    garden = storage.load_garden_state(user_id) or GardenSnapshot.new(user_id)
    previous_moods = storage.list_completed_task_moods(user_id, exclude_task_id=task.id, limit=TASK_MOOD_LOOKBACK)
    contact = EmergencyContact(name=user.emergency_contact_name, phone=user.emergency_contact_phone)

    outcome = complete_task(task, user_id, garden, previous_moods, mood, today, contact)

    encrypted_notes = (cipher or NotesCipher()).encrypt(notes, user.encryption_key)
    storage.update_task(
        task,
        is_completed=True,
        completed_at=datetime.now(timezone.utc),
        notes=encrypted_notes,
        mood=outcome.mood.value if outcome.mood else mood,
    )
    storage.save_garden_state(outcome.garden)
    storage.commit()

    if outcome.reward.leveled_up:
        logger.info(
            "Garden level up user=%s %s -> %s",
            user_id,
            outcome.reward.old_stage.value,
            outcome.reward.new_stage.value,
        )
    if outcome.mood_alert:
        logger.info("Task mood alert user=%s type=%s", user_id, outcome.mood_alert.type.value)

    return CompletionResult(task=task, garden=outcome.garden, reward=outcome.reward, mood_alert=outcome.mood_alert)


def list_tasks_for_day(storage: Storage, user_id: int, day: date | None = None) -> list[DailyTask]:
    return storage.list_tasks(user_id, day or date.today())


def assign_task(
    storage: Storage,
    doctor_id: int | None,
    patient_id: int,
    description: str,
    task_type: str,
    day: date | None = None,
) -> DailyTask:
    """Doctor assigns a task to one of their patients. ``doctor_id=None`` skips the assignment check."""
    if not description or not description.strip():
        raise ValidationError("Missing required fields")
    parsed = parse_task_type(task_type)
    if storage.get_user(patient_id) is None:
        raise NotFoundError("Patient not found")
    if doctor_id is not None and not storage.is_assigned(doctor_id, patient_id):
        raise ForbiddenError("Not authorized to assign tasks to this patient")
    task = storage.create_task(patient_id, description.strip(), parsed.value, day or date.today())
    storage.commit()
    logger.info("Task assigned doctor=%s patient=%s task=%s", doctor_id, patient_id, task.id)
    return task
