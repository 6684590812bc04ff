"""SQLAlchemy models."""

from __future__ import annotations

from rehabcompanion.models.daily_task import DailyTask
from rehabcompanion.models.doctor_patient import DoctorPatient
from rehabcompanion.models.garden_state import GardenState
from rehabcompanion.models.message import Message
from rehabcompanion.models.mood_check import MoodCheck
from rehabcompanion.models.user import User

__all__ = [
    "User",
    "DailyTask",
    "DoctorPatient",
    "GardenState",
    "Message",
    "MoodCheck",
]
