"""Mood check model."""

from __future__ import annotations

import datetime as dt

from sqlalchemy import Boolean, Date, DateTime, ForeignKey, String, Text, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column

from rehabcompanion.db.base import Base


class MoodCheck(Base):
    """Once-a-day mood self report. Doubles as the alert record when an emergency call is requested."""

    __tablename__ = "mood_checks"
    __table_args__ = (
        UniqueConstraint("user_id", "date", name="uq_mood_check_user_date"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    mood_level: Mapped[str] = mapped_column(String(20), nullable=False)  # GOOD | NEUTRAL | BAD
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    requested_emergency_call: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    doctor_notified: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_dismissed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
