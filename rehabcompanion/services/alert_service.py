"""Doctor-facing alert status, dismissal and patient views."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, timedelta

from rehabcompanion.core.errors import ForbiddenError, NotFoundError
from rehabcompanion.engine.alerts import AlertStatus, compute_active_alert
from rehabcompanion.engine.garden import GardenSnapshot
from rehabcompanion.models.daily_task import DailyTask
from rehabcompanion.models.mood_check import MoodCheck
from rehabcompanion.models.user import User
from rehabcompanion.services.storage import Storage

logger = logging.getLogger(__name__)

# Patient detail view: tasks of the last week, capped
DETAIL_TASK_DAYS = 7
DETAIL_TASK_LIMIT = 20


@dataclass
class PatientOverview:
    patient: User
    garden: GardenSnapshot | None
    alert: AlertStatus


@dataclass
class PatientDetail:
    patient: User
    garden: GardenSnapshot | None
    alert: AlertStatus
    recent_tasks: list[DailyTask] = field(default_factory=list)


def compute_patient_alert_status(storage: Storage, patient_id: int) -> AlertStatus:
    if storage.get_user(patient_id) is None:
        raise NotFoundError("Patient not found")
    return compute_active_alert(storage.list_recent_mood_checks(patient_id))


def dismiss_alert(storage: Storage, mood_check_id: int, doctor_id: int | None = None) -> MoodCheck:
    """Mark a mood check's alert as dismissed.

    Dismissal is unconditional and permanent: recovery is not re-evaluated
    and later bad days do not bring this alert back. When ``doctor_id`` is
    given the doctor must be assigned to the patient.
    """
    check = storage.get_mood_check(mood_check_id)
    if check is None:
        raise NotFoundError("Mood check not found")
    if doctor_id is not None and not storage.is_assigned(doctor_id, check.user_id):
        raise ForbiddenError("Not authorized to manage alerts for this patient")
    storage.update_mood_check(check, is_dismissed=True)
    storage.commit()
    logger.info("Alert dismissed mood_check=%s patient=%s by=%s", check.id, check.user_id, doctor_id)
    return check


def list_doctor_patients(storage: Storage, doctor_id: int) -> list[PatientOverview]:
    """Actively assigned patients with their garden and current alert."""
    patients = storage.list_assigned_patients(doctor_id)
    ids = [p.id for p in patients]
    gardens = storage.load_garden_states(ids)
    histories = storage.list_mood_checks_for_users(ids)
    return [
        PatientOverview(
            patient=p,
            garden=gardens.get(p.id),
            alert=compute_active_alert(histories.get(p.id, [])),
        )
        for p in patients
    ]


def get_patient_detail(
    storage: Storage,
    patient_id: int,
    doctor_id: int | None = None,
    today: date | None = None,
) -> PatientDetail:
    """Profile, garden, alert and last week's tasks of one patient.

    A given ``doctor_id`` must be actively assigned to the patient.
    """
    if doctor_id is not None and not storage.is_assigned(doctor_id, patient_id):
        raise ForbiddenError("Not authorized to view this patient")
    patient = storage.get_user(patient_id)
    if patient is None:
        raise NotFoundError("Patient not found")
    today = today or date.today()
    return PatientDetail(
        patient=patient,
        garden=storage.load_garden_state(patient_id),
        alert=compute_active_alert(storage.list_recent_mood_checks(patient_id)),
        recent_tasks=storage.list_recent_tasks(
            patient_id, since=today - timedelta(days=DETAIL_TASK_DAYS), limit=DETAIL_TASK_LIMIT
        ),
    )
