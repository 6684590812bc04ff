"""Mood check schemas."""

import datetime as dt

from pydantic import Field

from rehabcompanion.schemas.common import CamelModel


class MoodCheckCreate(CamelModel):
    mood_level: str | None = Field(default=None, description="GOOD | NEUTRAL | BAD")
    notes: str | None = Field(default=None, max_length=2000)
    requested_emergency_call: bool = False


class MoodCheckResponse(CamelModel):
    id: int
    user_id: int
    date: dt.date
    mood_level: str
    notes: str | None
    requested_emergency_call: bool
    doctor_notified: bool
    is_dismissed: bool
    created_at: dt.datetime | None = None


class MoodSubmissionResponse(CamelModel):
    success: bool = True
    mood_check: MoodCheckResponse
    consecutive_bad_days: int
    show_motivational_message: bool
    show_emergency_contact: bool
    xp_earned: int
    emergency_notified: bool = False


class MoodStats(CamelModel):
    total: int
    good: int
    neutral: int
    bad: int


class MoodHistoryResponse(CamelModel):
    success: bool = True
    mood_checks: list[MoodCheckResponse]
    today_submitted: bool
    today_mood: MoodCheckResponse | None
    consecutive_bad_days: int
    stats: MoodStats
