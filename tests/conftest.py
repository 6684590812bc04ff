"""Pytest fixtures."""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from rehabcompanion.core.security import create_access_token
from rehabcompanion.db.base import Base
from rehabcompanion.db.session import get_db
from rehabcompanion.main import app
from rehabcompanion.models import DoctorPatient, User
from rehabcompanion.services.messaging import SqlAlchemyMessaging
from rehabcompanion.services.storage import SqlAlchemyStorage

TEST_DATABASE_URL = "sqlite:///./test.db"

engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def setup_db():
    """Fresh tables for every test."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db(setup_db):
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def storage(db):
    return SqlAlchemyStorage(db)


@pytest.fixture
def messaging(db):
    return SqlAlchemyMessaging(db)


@pytest.fixture
def client(setup_db):
    """Test client with overridden DB."""
    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db):
    """Factory creating users; patients get an emergency contact."""
    counter = {"n": 0}

    def _make(role="PATIENT", first_name="Juan", last_name="Pérez", **extra):
        counter["n"] += 1
        user = User(
            email=f"{role.lower()}{counter['n']}@test.com",
            first_name=first_name,
            last_name=last_name,
            role=role,
            encryption_key=f"salt_{counter['n']}",
            emergency_contact_name=extra.pop("emergency_contact_name", "Contacto Emergencia"),
            emergency_contact_phone=extra.pop("emergency_contact_phone", "+34 600 000 000"),
            **extra,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make


@pytest.fixture
def assign(db):
    def _assign(doctor, patient, is_active=True):
        link = DoctorPatient(doctor_id=doctor.id, patient_id=patient.id, is_active=is_active)
        db.add(link)
        db.commit()
        return link

    return _assign


def auth_headers(user) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user.id, {'role': user.role})}"}
