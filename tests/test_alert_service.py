"""Alert status and dismissal through the SQLAlchemy storage."""

from datetime import date, timedelta

import pytest
from sqlalchemy import event

from rehabcompanion.core.errors import ForbiddenError, NotFoundError
from rehabcompanion.models import DailyTask
from rehabcompanion.services.alert_service import (
    compute_patient_alert_status,
    dismiss_alert,
    get_patient_detail,
    list_doctor_patients,
)
from rehabcompanion.services.mood_service import apply_mood_submission
from tests.conftest import engine as test_engine

D = date(2026, 4, 1)


def _submit(storage, messaging, patient, offset, level, emergency=False):
    return apply_mood_submission(
        storage, messaging, patient.id, level, requested_emergency_call=emergency, today=D + timedelta(days=offset)
    ).mood_check


def test_emergency_request_is_active_until_recovery(storage, messaging, make_user):
    patient = make_user()
    alert = _submit(storage, messaging, patient, 0, "BAD", emergency=True)

    status = compute_patient_alert_status(storage, patient.id)
    assert status.has_active_alert
    assert status.active_alert_id == alert.id

    _submit(storage, messaging, patient, 1, "GOOD")
    assert compute_patient_alert_status(storage, patient.id).has_active_alert

    _submit(storage, messaging, patient, 2, "GOOD")
    assert not compute_patient_alert_status(storage, patient.id).has_active_alert


def test_dismissed_alert_stays_dismissed(storage, messaging, make_user, assign):
    patient = make_user()
    doctor = make_user(role="DOCTOR")
    assign(doctor, patient)
    alert = _submit(storage, messaging, patient, 0, "BAD", emergency=True)

    dismissed = dismiss_alert(storage, alert.id, doctor_id=doctor.id)
    assert dismissed.is_dismissed
    assert not compute_patient_alert_status(storage, patient.id).has_active_alert

    # later bad days do not bring it back
    _submit(storage, messaging, patient, 1, "BAD")
    assert not compute_patient_alert_status(storage, patient.id).has_active_alert


def test_dismiss_unknown_mood_check(storage, setup_db):
    with pytest.raises(NotFoundError):
        dismiss_alert(storage, 404)


def test_dismiss_by_unassigned_doctor_is_forbidden(storage, messaging, make_user):
    patient = make_user()
    stranger = make_user(role="DOCTOR")
    alert = _submit(storage, messaging, patient, 0, "BAD", emergency=True)
    with pytest.raises(ForbiddenError):
        dismiss_alert(storage, alert.id, doctor_id=stranger.id)


def test_unknown_patient(storage, setup_db):
    with pytest.raises(NotFoundError):
        compute_patient_alert_status(storage, 77)


def test_doctor_patient_list(storage, messaging, make_user, assign):
    doctor = make_user(role="DOCTOR")
    calm = make_user(first_name="Lucía")
    worried = make_user(first_name="Miguel")
    unassigned = make_user(first_name="Sofía")
    assign(doctor, calm)
    assign(doctor, worried)
    _submit(storage, messaging, calm, 0, "GOOD")
    alert = _submit(storage, messaging, worried, 0, "BAD", emergency=True)
    _submit(storage, messaging, unassigned, 0, "BAD", emergency=True)

    overviews = {o.patient.id: o for o in list_doctor_patients(storage, doctor.id)}

    assert set(overviews) == {calm.id, worried.id}
    assert not overviews[calm.id].alert.has_active_alert
    assert overviews[calm.id].garden.current_xp == 5
    assert overviews[worried.id].alert.active_alert_id == alert.id


def _count_queries(fn):
    statements = []

    def before_execute(conn, cursor, statement, parameters, context, executemany):
        statements.append(statement)

    event.listen(test_engine, "before_cursor_execute", before_execute)
    try:
        result = fn()
    finally:
        event.remove(test_engine, "before_cursor_execute", before_execute)
    return result, len(statements)


def test_doctor_patient_list_query_count_does_not_grow(storage, messaging, make_user, assign):
    doctor = make_user(role="DOCTOR")
    first = make_user()
    assign(doctor, first)
    _submit(storage, messaging, first, 0, "BAD", emergency=True)
    _, single = _count_queries(lambda: list_doctor_patients(storage, doctor.id))

    for offset in range(1, 4):
        patient = make_user()
        assign(doctor, patient)
        _submit(storage, messaging, patient, offset, "GOOD")
    overviews, many = _count_queries(lambda: list_doctor_patients(storage, doctor.id))

    assert len(overviews) == 4
    assert many == single
    assert [o.alert.has_active_alert for o in overviews] == [True, False, False, False]


def test_patient_detail(storage, messaging, make_user, assign, db):
    doctor = make_user(role="DOCTOR")
    patient = make_user()
    assign(doctor, patient)
    today = D + timedelta(days=10)
    db.add_all(
        [
            DailyTask(user_id=patient.id, description="Antigua", type="ACTIVITY", date=today - timedelta(days=8)),
            DailyTask(user_id=patient.id, description="Ayer", type="MEDICATION", date=today - timedelta(days=1)),
            DailyTask(user_id=patient.id, description="Hoy", type="ACTIVITY", date=today),
        ]
    )
    db.commit()

    detail = get_patient_detail(storage, patient.id, doctor_id=doctor.id, today=today)

    assert detail.patient.id == patient.id
    assert detail.garden is None
    assert not detail.alert.has_active_alert
    assert [t.description for t in detail.recent_tasks] == ["Hoy", "Ayer"]


def test_patient_detail_requires_assignment(storage, make_user):
    doctor = make_user(role="DOCTOR")
    patient = make_user()
    with pytest.raises(ForbiddenError):
        get_patient_detail(storage, patient.id, doctor_id=doctor.id)
    with pytest.raises(NotFoundError):
        get_patient_detail(storage, 999)
