"""HTTP surface tests."""

from datetime import date

from rehabcompanion.models import DailyTask, GardenState, Message, MoodCheck
from tests.conftest import auth_headers


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}


def test_mood_requires_token(client):
    r = client.post("/mood", json={"moodLevel": "GOOD"})
    assert r.status_code == 401


def test_mood_rejects_garbage_token(client):
    r = client.post("/mood", json={"moodLevel": "GOOD"}, headers={"Authorization": "Bearer not-a-jwt"})
    assert r.status_code == 401


def test_submit_mood(client, make_user):
    patient = make_user()
    r = client.post("/mood", json={"moodLevel": "GOOD", "notes": "bien"}, headers=auth_headers(patient))
    assert r.status_code == 201
    body = r.json()
    assert body["success"] is True
    assert body["xpEarned"] == 5
    assert body["consecutiveBadDays"] == 0
    assert body["showMotivationalMessage"] is False
    assert body["showEmergencyContact"] is False
    assert body["moodCheck"]["moodLevel"] == "GOOD"
    assert body["moodCheck"]["date"] == date.today().isoformat()


def test_submit_mood_twice_is_conflict(client, make_user):
    patient = make_user()
    headers = auth_headers(patient)
    assert client.post("/mood", json={"moodLevel": "GOOD"}, headers=headers).status_code == 201
    r = client.post("/mood", json={"moodLevel": "BAD"}, headers=headers)
    assert r.status_code == 409
    assert "already" in r.json()["detail"]


def test_submit_invalid_mood(client, make_user):
    patient = make_user()
    r = client.post("/mood", json={"moodLevel": "HAPPY"}, headers=auth_headers(patient))
    assert r.status_code == 400
    r = client.post("/mood", json={}, headers=auth_headers(patient))
    assert r.status_code == 400


def test_doctor_cannot_submit_mood(client, make_user):
    doctor = make_user(role="DOCTOR")
    r = client.post("/mood", json={"moodLevel": "GOOD"}, headers=auth_headers(doctor))
    assert r.status_code == 403


def test_emergency_request_messages_doctor(client, make_user, assign, db):
    patient = make_user()
    doctor = make_user(role="DOCTOR")
    assign(doctor, patient)

    r = client.post(
        "/mood",
        json={"moodLevel": "BAD", "requestedEmergencyCall": True},
        headers=auth_headers(patient),
    )
    assert r.status_code == 201
    assert r.json()["emergencyNotified"] is True
    assert r.json()["moodCheck"]["doctorNotified"] is True

    inbox = client.get("/messages", headers=auth_headers(doctor)).json()
    assert inbox["unreadCount"] == 1
    assert inbox["messages"][0]["fromId"] == patient.id


def test_mood_history(client, make_user):
    patient = make_user()
    headers = auth_headers(patient)
    client.post("/mood", json={"moodLevel": "BAD"}, headers=headers)
    r = client.get("/mood/history?days=7", headers=headers)
    assert r.status_code == 200
    body = r.json()
    assert body["todaySubmitted"] is True
    assert body["consecutiveBadDays"] == 1
    assert body["stats"] == {"total": 1, "good": 0, "neutral": 0, "bad": 1}
    assert len(body["moodChecks"]) == 1


def test_garden_is_created_on_first_read(client, make_user):
    patient = make_user()
    r = client.get("/garden", headers=auth_headers(patient))
    assert r.status_code == 200
    body = r.json()
    assert body["plantStage"] == "SEED"
    assert body["currentXP"] == 0
    assert body["nextStageXP"] == 100
    assert body["progressPercentage"] == 0


def test_complete_task_flow(client, make_user, db):
    patient = make_user()
    task = DailyTask(user_id=patient.id, description="Tomar medicación", type="MEDICATION", date=date.today())
    db.add(task)
    db.commit()
    headers = auth_headers(patient)

    tasks = client.get("/tasks", headers=headers).json()
    assert [t["id"] for t in tasks] == [task.id]
    assert tasks[0]["isCompleted"] is False

    r = client.post(f"/tasks/{task.id}/complete", headers=headers)
    assert r.status_code == 200
    body = r.json()
    assert body["task"]["isCompleted"] is True
    assert body["reward"] == {"xpGained": 20, "leveledUp": False, "oldStage": "SEED", "newStage": "SEED"}
    assert body["garden"]["currentXP"] == 20
    assert body["garden"]["totalTasksCompleted"] == 1
    assert body["moodAlert"] is None

    again = client.post(f"/tasks/{task.id}/complete", headers=headers)
    assert again.status_code == 400
    db.expire_all()
    assert db.query(GardenState).filter_by(user_id=patient.id).one().current_xp == 20


def test_complete_emotion_check_needs_mood(client, make_user, db):
    patient = make_user()
    task = DailyTask(user_id=patient.id, description="¿Cómo te sientes?", type="EMOTION_CHECK", date=date.today())
    db.add(task)
    db.commit()
    headers = auth_headers(patient)

    assert client.post(f"/tasks/{task.id}/complete", json={}, headers=headers).status_code == 400
    r = client.post(f"/tasks/{task.id}/complete", json={"mood": "bien", "notes": "mejor"}, headers=headers)
    assert r.status_code == 200
    assert r.json()["task"]["mood"] == "bien"
    assert r.json()["reward"]["xpGained"] == 15


def test_complete_someone_elses_task(client, make_user, db):
    owner = make_user()
    intruder = make_user()
    task = DailyTask(user_id=owner.id, description="Caminar", type="ACTIVITY", date=date.today())
    db.add(task)
    db.commit()
    assert client.post(f"/tasks/{task.id}/complete", headers=auth_headers(intruder)).status_code == 403
    assert client.post("/tasks/9999/complete", headers=auth_headers(intruder)).status_code == 404


def test_doctor_patients_and_dismiss(client, make_user, assign, db):
    patient = make_user()
    doctor = make_user(role="DOCTOR")
    assign(doctor, patient)
    client.post("/mood", json={"moodLevel": "BAD", "requestedEmergencyCall": True}, headers=auth_headers(patient))
    check_id = db.query(MoodCheck).filter_by(user_id=patient.id).one().id
    headers = auth_headers(doctor)

    patients = client.get("/doctor/patients", headers=headers).json()
    assert len(patients) == 1
    assert patients[0]["hasActiveAlert"] is True
    assert patients[0]["activeAlertId"] == check_id
    assert patients[0]["gardenState"]["currentXP"] == 5

    r = client.post("/doctor/dismiss-alert", json={"moodCheckId": check_id}, headers=headers)
    assert r.status_code == 200
    assert r.json()["moodCheck"]["isDismissed"] is True

    alert = client.get(f"/doctor/patients/{patient.id}/alert", headers=headers).json()
    assert alert == {"hasActiveAlert": False, "activeAlertId": None}


def test_dismiss_requires_id(client, make_user):
    doctor = make_user(role="DOCTOR")
    r = client.post("/doctor/dismiss-alert", json={}, headers=auth_headers(doctor))
    assert r.status_code == 400


def test_doctor_endpoints_scoped_to_assigned_patients(client, make_user):
    patient = make_user()
    doctor = make_user(role="DOCTOR")
    headers = auth_headers(doctor)

    assert client.get(f"/doctor/patients/{patient.id}/alert", headers=headers).status_code == 403
    r = client.post(
        f"/doctor/patients/{patient.id}/tasks",
        json={"description": "Caminar", "type": "ACTIVITY"},
        headers=headers,
    )
    assert r.status_code == 403
    r = client.post(f"/doctor/patients/{patient.id}/messages", json={"content": "Hola"}, headers=headers)
    assert r.status_code == 403


def test_patient_cannot_use_doctor_endpoints(client, make_user):
    patient = make_user()
    assert client.get("/doctor/patients", headers=auth_headers(patient)).status_code == 403


def test_admin_sees_any_patient(client, make_user):
    patient = make_user()
    admin = make_user(role="ADMIN")
    r = client.get(f"/doctor/patients/{patient.id}/alert", headers=auth_headers(admin))
    assert r.status_code == 200
    assert r.json()["hasActiveAlert"] is False


def test_doctor_assigns_task(client, make_user, assign):
    patient = make_user()
    doctor = make_user(role="DOCTOR")
    assign(doctor, patient)
    r = client.post(
        f"/doctor/patients/{patient.id}/tasks",
        json={"description": "Caminar 20 minutos", "type": "ACTIVITY"},
        headers=auth_headers(doctor),
    )
    assert r.status_code == 201
    assert r.json()["userId"] == patient.id
    assert r.json()["date"] == date.today().isoformat()

    r = client.post(
        f"/doctor/patients/{patient.id}/tasks",
        json={"description": "Dormir", "type": "SLEEP"},
        headers=auth_headers(doctor),
    )
    assert r.status_code == 422


def test_messages_conversation_and_read(client, make_user, assign, db):
    patient = make_user()
    doctor = make_user(role="DOCTOR")
    assign(doctor, patient)

    sent = client.post(
        f"/doctor/patients/{patient.id}/messages",
        json={"content": "¿Cómo va la semana?"},
        headers=auth_headers(doctor),
    )
    assert sent.status_code == 201
    message_id = sent.json()["id"]

    conversation = client.get(f"/messages?userId={doctor.id}", headers=auth_headers(patient)).json()
    assert [m["content"] for m in conversation["messages"]] == ["¿Cómo va la semana?"]
    assert conversation["unreadCount"] == 1

    assert client.post(f"/messages/{message_id}/read", headers=auth_headers(doctor)).status_code == 403
    r = client.post(f"/messages/{message_id}/read", headers=auth_headers(patient))
    assert r.status_code == 200
    assert r.json()["isRead"] is True
    db.expire_all()
    assert db.get(Message, message_id).is_read


def test_generate_message(client, make_user):
    doctor = make_user(role="DOCTOR")
    r = client.post("/doctor/generate-message", json={"patientName": "Ana"}, headers=auth_headers(doctor))
    assert r.status_code == 200
    assert "Ana" in r.json()["message"]
    assert r.json()["source"] == "fallback"


def test_mark_read_unknown_message(client, make_user):
    patient = make_user()
    assert client.post("/messages/4242/read", headers=auth_headers(patient)).status_code == 404


def test_patient_replies_to_doctor(client, make_user, assign):
    patient = make_user()
    doctor = make_user(role="DOCTOR")
    assign(doctor, patient)

    r = client.post("/messages", json={"toId": doctor.id, "content": "Gracias, doctora"}, headers=auth_headers(patient))
    assert r.status_code == 201
    assert r.json()["fromId"] == patient.id
    assert r.json()["toId"] == doctor.id

    inbox = client.get("/messages", headers=auth_headers(doctor)).json()
    assert [m["content"] for m in inbox["messages"]] == ["Gracias, doctora"]


def test_send_message_validation(client, make_user):
    patient = make_user()
    headers = auth_headers(patient)
    assert client.post("/messages", json={"toId": 999, "content": "Hola"}, headers=headers).status_code == 404
    assert client.post("/messages", json={"toId": patient.id, "content": "  "}, headers=headers).status_code == 400
    assert client.post("/messages", json={"content": "Hola"}, headers=headers).status_code == 400
    assert client.post("/messages", json={"toId": patient.id, "content": "Hola"}).status_code == 401


def test_doctor_patient_detail(client, make_user, assign, db):
    patient = make_user(first_name="Lucía", last_name="Gómez")
    doctor = make_user(role="DOCTOR")
    assign(doctor, patient)
    db.add(DailyTask(user_id=patient.id, description="Caminar", type="ACTIVITY", date=date.today()))
    db.commit()
    client.post("/mood", json={"moodLevel": "GOOD"}, headers=auth_headers(patient))

    r = client.get(f"/doctor/patients/{patient.id}", headers=auth_headers(doctor))
    assert r.status_code == 200
    body = r.json()
    assert body["firstName"] == "Lucía"
    assert body["role"] == "PATIENT"
    assert body["emergencyContactName"] == "Contacto Emergencia"
    assert body["gardenState"]["currentXP"] == 5
    assert body["hasActiveAlert"] is False
    assert [t["description"] for t in body["dailyTasks"]] == ["Caminar"]
    assert "encryptionKey" not in body


def test_doctor_patient_detail_scoping(client, make_user):
    patient = make_user()
    doctor = make_user(role="DOCTOR")
    admin = make_user(role="ADMIN")
    assert client.get(f"/doctor/patients/{patient.id}", headers=auth_headers(doctor)).status_code == 403
    assert client.get(f"/doctor/patients/{patient.id}", headers=auth_headers(admin)).status_code == 200
    assert client.get("/doctor/patients/9999", headers=auth_headers(admin)).status_code == 404
    assert client.get(f"/doctor/patients/{patient.id}", headers=auth_headers(patient)).status_code == 403


def test_update_profile_partially(client, make_user):
    patient = make_user()
    headers = auth_headers(patient)

    r = client.put(
        "/profile",
        json={"firstName": "  ", "emergencyContactName": "María Pérez", "emergencyContactPhone": "+34 611 222 333"},
        headers=headers,
    )
    assert r.status_code == 200
    user = r.json()["user"]
    assert user["firstName"] == "Juan"
    assert user["lastName"] == "Pérez"
    assert user["emergencyContactName"] == "María Pérez"
    assert user["emergencyContactPhone"] == "+34 611 222 333"
    assert "encryptionKey" not in user

    profile = client.get("/profile", headers=headers).json()
    assert profile["emergencyContactName"] == "María Pérez"


def test_updated_contact_reaches_emergency_mood_alert(client, make_user, db):
    patient = make_user()
    headers = auth_headers(patient)
    client.put("/profile", json={"emergencyContactName": "Ana López", "emergencyContactPhone": "600123123"}, headers=headers)

    tasks = [
        DailyTask(user_id=patient.id, description=f"Emoción {i}", type="EMOTION_CHECK", date=date.today())
        for i in range(3)
    ]
    db.add_all(tasks)
    db.commit()
    alerts = [
        client.post(f"/tasks/{t.id}/complete", json={"mood": "mal"}, headers=headers).json()["moodAlert"]
        for t in tasks
    ]

    assert alerts[0] is None
    assert alerts[1]["type"] == "MOTIVATIONAL"
    assert alerts[2]["type"] == "EMERGENCY"
    assert alerts[2]["contactName"] == "Ana López"
    assert alerts[2]["contactPhone"] == "600123123"


def test_update_profile_requires_token(client):
    assert client.put("/profile", json={"firstName": "X"}).status_code == 401
