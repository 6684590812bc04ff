"""Doctor dashboard API: patients, alerts, task assignment and messages."""

from __future__ import annotations

from fastapi import APIRouter, Body, Depends, HTTPException, status

from rehabcompanion.core.deps import get_messaging, get_storage, http_error, require_doctor
from rehabcompanion.core.errors import ForbiddenError, RehabError
from rehabcompanion.models.user import User
from rehabcompanion.schemas.alert import (
    AlertStatusResponse,
    DismissAlertRequest,
    DismissAlertResponse,
    PatientDetailResponse,
    PatientSummary,
)
from rehabcompanion.schemas.garden import GardenResponse, garden_fields
from rehabcompanion.schemas.message import (
    GeneratedMessageResponse,
    GenerateMessageRequest,
    MessageCreate,
    MessageResponse,
)
from rehabcompanion.schemas.mood_check import MoodCheckResponse
from rehabcompanion.schemas.task import TaskAssignRequest, TaskResponse
from rehabcompanion.services.alert_service import (
    compute_patient_alert_status,
    dismiss_alert,
    get_patient_detail,
    list_doctor_patients,
)
from rehabcompanion.services.messaging import SqlAlchemyMessaging, generate_motivational_message
from rehabcompanion.services.storage import SqlAlchemyStorage
from rehabcompanion.services.task_service import assign_task

router = APIRouter(prefix="/doctor", tags=["doctor"])


def _scoped_doctor_id(user: User) -> int | None:
    """Admins act on any patient; doctors only on the ones assigned to them."""
    return None if user.role == "ADMIN" else user.id


def _check_assignment(storage: SqlAlchemyStorage, user: User, patient_id: int, detail: str) -> None:
    doctor_id = _scoped_doctor_id(user)
    if doctor_id is not None and not storage.is_assigned(doctor_id, patient_id):
        raise http_error(ForbiddenError(detail))


@router.get("/patients", response_model=list[PatientSummary])
def list_patients(
    storage: SqlAlchemyStorage = Depends(get_storage),
    current_user: User = Depends(require_doctor),
):
    """Assigned patients with garden and active alert status."""
    summaries = []
    for overview in list_doctor_patients(storage, current_user.id):
        p = overview.patient
        summaries.append(
            PatientSummary(
                id=p.id,
                email=p.email,
                first_name=p.first_name,
                last_name=p.last_name,
                emergency_contact_name=p.emergency_contact_name,
                emergency_contact_phone=p.emergency_contact_phone,
                garden_state=GardenResponse(**garden_fields(overview.garden)) if overview.garden else None,
                has_active_alert=overview.alert.has_active_alert,
                active_alert_id=overview.alert.active_alert_id,
            )
        )
    return summaries


@router.get("/patients/{patient_id}", response_model=PatientDetailResponse)
def patient_detail(
    patient_id: int,
    storage: SqlAlchemyStorage = Depends(get_storage),
    current_user: User = Depends(require_doctor),
):
    """Profile, garden, alert status and last week's tasks of an assigned patient."""
    try:
        detail = get_patient_detail(storage, patient_id, doctor_id=_scoped_doctor_id(current_user))
    except RehabError as e:
        raise http_error(e)
    p = detail.patient
    return PatientDetailResponse(
        id=p.id,
        email=p.email,
        first_name=p.first_name,
        last_name=p.last_name,
        role=p.role,
        is_active=p.is_active,
        created_at=p.created_at,
        emergency_contact_name=p.emergency_contact_name,
        emergency_contact_phone=p.emergency_contact_phone,
        garden_state=GardenResponse(**garden_fields(detail.garden)) if detail.garden else None,
        has_active_alert=detail.alert.has_active_alert,
        active_alert_id=detail.alert.active_alert_id,
        daily_tasks=[TaskResponse.model_validate(t) for t in detail.recent_tasks],
    )


@router.get("/patients/{patient_id}/alert", response_model=AlertStatusResponse)
def patient_alert(
    patient_id: int,
    storage: SqlAlchemyStorage = Depends(get_storage),
    current_user: User = Depends(require_doctor),
):
    """Whether the patient has an unresolved emergency request."""
    _check_assignment(storage, current_user, patient_id, "Not authorized to view this patient")
    try:
        alert = compute_patient_alert_status(storage, patient_id)
    except RehabError as e:
        raise http_error(e)
    return AlertStatusResponse(has_active_alert=alert.has_active_alert, active_alert_id=alert.active_alert_id)


@router.post("/dismiss-alert", response_model=DismissAlertResponse)
def dismiss(
    data: DismissAlertRequest,
    storage: SqlAlchemyStorage = Depends(get_storage),
    current_user: User = Depends(require_doctor),
):
    """Dismiss the alert raised by a mood check."""
    if data.mood_check_id is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Mood check ID is required")
    try:
        check = dismiss_alert(storage, data.mood_check_id, doctor_id=_scoped_doctor_id(current_user))
    except RehabError as e:
        raise http_error(e)
    return DismissAlertResponse(mood_check=MoodCheckResponse.model_validate(check))


@router.post("/patients/{patient_id}/tasks", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
def assign(
    patient_id: int,
    data: TaskAssignRequest,
    storage: SqlAlchemyStorage = Depends(get_storage),
    current_user: User = Depends(require_doctor),
):
    """Assign a daily task to a patient."""
    try:
        task = assign_task(
            storage, _scoped_doctor_id(current_user), patient_id, data.description, data.type, data.date
        )
    except RehabError as e:
        raise http_error(e)
    return task


@router.post("/patients/{patient_id}/messages", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
def send_to_patient(
    patient_id: int,
    data: MessageCreate,
    storage: SqlAlchemyStorage = Depends(get_storage),
    messaging: SqlAlchemyMessaging = Depends(get_messaging),
    current_user: User = Depends(require_doctor),
):
    """Send a message to an assigned patient."""
    _check_assignment(storage, current_user, patient_id, "Not authorized to send messages to this patient")
    try:
        return messaging.send_direct(current_user.id, patient_id, data.content)
    except RehabError as e:
        raise http_error(e)


@router.post("/generate-message", response_model=GeneratedMessageResponse)
def generate_message(
    data: GenerateMessageRequest | None = Body(default=None),
    current_user: User = Depends(require_doctor),
):
    """Suggest an encouragement message for a patient."""
    d = data or GenerateMessageRequest()
    return GeneratedMessageResponse(**generate_motivational_message(d.patient_name))
