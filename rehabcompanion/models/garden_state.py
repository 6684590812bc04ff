"""Garden state model."""

from __future__ import annotations

from datetime import date, datetime

from sqlalchemy import Date, DateTime, ForeignKey, Integer, String, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column

from rehabcompanion.db.base import Base


class GardenState(Base):
    """Gamified progress of one patient."""

    __tablename__ = "garden_states"
    __table_args__ = (
        UniqueConstraint("user_id", name="uq_garden_state_user"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    plant_stage: Mapped[str] = mapped_column(String(20), nullable=False, default="SEED")  # SEED | SPROUT | PLANT | FLOWER
    current_xp: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    streak_days: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_tasks_completed: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    last_action_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
