"""Storage collaborator used by the services.

Services never reach for a global session: a ``Storage`` is built per request
around the request's SQLAlchemy session and handed in.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, Protocol, Sequence

from sqlalchemy import desc, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from rehabcompanion.core.errors import DuplicateSubmissionError
from rehabcompanion.engine.garden import GardenSnapshot, PlantStage
from rehabcompanion.models.daily_task import DailyTask
from rehabcompanion.models.doctor_patient import DoctorPatient
from rehabcompanion.models.garden_state import GardenState
from rehabcompanion.models.mood_check import MoodCheck
from rehabcompanion.models.user import User

logger = logging.getLogger(__name__)


class Storage(Protocol):
    def get_user(self, user_id: int) -> User | None: ...

    def load_garden_state(self, user_id: int) -> GardenSnapshot | None: ...

    def save_garden_state(self, state: GardenSnapshot) -> GardenState: ...

    def find_mood_check(self, user_id: int, day: date) -> MoodCheck | None: ...

    def get_mood_check(self, mood_check_id: int) -> MoodCheck | None: ...

    def create_mood_check(
        self,
        user_id: int,
        day: date,
        mood_level: str,
        notes: str | None,
        requested_emergency_call: bool,
    ) -> MoodCheck: ...

    def update_mood_check(self, check: MoodCheck, **fields: Any) -> MoodCheck: ...

    def list_recent_mood_checks(
        self,
        user_id: int,
        since: date | None = None,
        until: date | None = None,
        limit: int | None = None,
    ) -> list[MoodCheck]: ...

    def find_task(self, task_id: int) -> DailyTask | None: ...

    def update_task(self, task: DailyTask, **fields: Any) -> DailyTask: ...

    def list_completed_task_moods(self, user_id: int, exclude_task_id: int, limit: int) -> list[str | None]: ...

    def list_assigned_doctors(self, patient_id: int) -> list[int]: ...

    def is_assigned(self, doctor_id: int, patient_id: int) -> bool: ...

    def list_assigned_patients(self, doctor_id: int) -> list[User]: ...

    def update_user(self, user: User, **fields: Any) -> User: ...

    def load_garden_states(self, user_ids: Sequence[int]) -> dict[int, GardenSnapshot]: ...

    def list_mood_checks_for_users(self, user_ids: Sequence[int]) -> dict[int, list[MoodCheck]]: ...

    def create_task(self, user_id: int, description: str, task_type: str, day: date) -> DailyTask: ...

    def list_tasks(self, user_id: int, day: date) -> list[DailyTask]: ...

    def list_recent_tasks(self, user_id: int, since: date, limit: int) -> list[DailyTask]: ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...


def _to_snapshot(row: GardenState) -> GardenSnapshot:
    return GardenSnapshot(
        user_id=row.user_id,
        plant_stage=PlantStage(row.plant_stage),
        current_xp=row.current_xp,
        streak_days=row.streak_days,
        total_tasks_completed=row.total_tasks_completed,
        last_action_date=row.last_action_date,
    )


class SqlAlchemyStorage:
    """``Storage`` backed by one SQLAlchemy session.

    Mutating calls only flush; the service commits once per operation so the
    garden and the task/mood check land in the same transaction.
    """

    def __init__(self, db: Session):
        self.db = db

    # ---- users and assignments ----

    def get_user(self, user_id: int) -> User | None:
        return self.db.get(User, user_id)

    def list_assigned_doctors(self, patient_id: int) -> list[int]:
        result = self.db.execute(
            select(DoctorPatient.doctor_id)
            .where(DoctorPatient.patient_id == patient_id)
            .where(DoctorPatient.is_active.is_(True))
            .order_by(DoctorPatient.id)
        )
        return list(result.scalars().all())

    def is_assigned(self, doctor_id: int, patient_id: int) -> bool:
        link = self.db.execute(
            select(DoctorPatient).where(
                DoctorPatient.doctor_id == doctor_id,
                DoctorPatient.patient_id == patient_id,
            )
        ).scalar_one_or_none()
        return bool(link and link.is_active)

    def list_assigned_patients(self, doctor_id: int) -> list[User]:
        result = self.db.execute(
            select(User)
            .join(DoctorPatient, DoctorPatient.patient_id == User.id)
            .where(DoctorPatient.doctor_id == doctor_id)
            .where(DoctorPatient.is_active.is_(True))
            .order_by(User.id)
        )
        return list(result.scalars().all())

    def update_user(self, user: User, **fields: Any) -> User:
        for key, value in fields.items():
            setattr(user, key, value)
        self.db.flush()
        return user

    # ---- garden ----

    def _garden_row(self, user_id: int) -> GardenState | None:
        return self.db.execute(select(GardenState).where(GardenState.user_id == user_id)).scalar_one_or_none()

    def load_garden_state(self, user_id: int) -> GardenSnapshot | None:
        row = self._garden_row(user_id)
        return _to_snapshot(row) if row else None

    def load_garden_states(self, user_ids: Sequence[int]) -> dict[int, GardenSnapshot]:
        """Gardens of several users in one query, keyed by user id. Users without a garden are absent."""
        if not user_ids:
            return {}
        rows = self.db.execute(select(GardenState).where(GardenState.user_id.in_(user_ids))).scalars().all()
        return {row.user_id: _to_snapshot(row) for row in rows}

    def save_garden_state(self, state: GardenSnapshot) -> GardenState:
        row = self._garden_row(state.user_id)
        if row is None:
            row = GardenState(user_id=state.user_id)
            self.db.add(row)
        row.plant_stage = state.plant_stage.value
        row.current_xp = state.current_xp
        row.streak_days = state.streak_days
        row.total_tasks_completed = state.total_tasks_completed
        row.last_action_date = state.last_action_date
        self.db.flush()
        return row

    # ---- mood checks ----

    def find_mood_check(self, user_id: int, day: date) -> MoodCheck | None:
        return self.db.execute(
            select(MoodCheck).where(MoodCheck.user_id == user_id, MoodCheck.date == day)
        ).scalar_one_or_none()

    def get_mood_check(self, mood_check_id: int) -> MoodCheck | None:
        return self.db.get(MoodCheck, mood_check_id)

    def create_mood_check(
        self,
        user_id: int,
        day: date,
        mood_level: str,
        notes: str | None,
        requested_emergency_call: bool,
    ) -> MoodCheck:
        check = MoodCheck(
            user_id=user_id,
            date=day,
            mood_level=mood_level,
            notes=notes,
            requested_emergency_call=requested_emergency_call,
            doctor_notified=False,
            is_dismissed=False,
        )
        self.db.add(check)
        try:
            self.db.flush()
        except IntegrityError:
            # Concurrent submission for the same day won the unique constraint.
            self.db.rollback()
            raise DuplicateSubmissionError("Mood already registered for today") from None
        return check

    def update_mood_check(self, check: MoodCheck, **fields: Any) -> MoodCheck:
        for key, value in fields.items():
            setattr(check, key, value)
        self.db.flush()
        return check

    def list_recent_mood_checks(
        self,
        user_id: int,
        since: date | None = None,
        until: date | None = None,
        limit: int | None = None,
    ) -> list[MoodCheck]:
        """Mood checks newest first, optionally bounded by date (inclusive) and count."""
        stmt = select(MoodCheck).where(MoodCheck.user_id == user_id)
        if since is not None:
            stmt = stmt.where(MoodCheck.date >= since)
        if until is not None:
            stmt = stmt.where(MoodCheck.date <= until)
        stmt = stmt.order_by(desc(MoodCheck.date))
        if limit is not None:
            stmt = stmt.limit(limit)
        return list(self.db.execute(stmt).scalars().all())

    def list_mood_checks_for_users(self, user_ids: Sequence[int]) -> dict[int, list[MoodCheck]]:
        """Full mood history of several users in one query, newest first per user."""
        history: dict[int, list[MoodCheck]] = {user_id: [] for user_id in user_ids}
        if not user_ids:
            return history
        result = self.db.execute(
            select(MoodCheck).where(MoodCheck.user_id.in_(user_ids)).order_by(desc(MoodCheck.date))
        )
        for check in result.scalars():
            history[check.user_id].append(check)
        return history

    # ---- tasks ----

    def find_task(self, task_id: int) -> DailyTask | None:
        return self.db.get(DailyTask, task_id)

    def update_task(self, task: DailyTask, **fields: Any) -> DailyTask:
        for key, value in fields.items():
            setattr(task, key, value)
        self.db.flush()
        return task

    def create_task(self, user_id: int, description: str, task_type: str, day: date) -> DailyTask:
        task = DailyTask(
            user_id=user_id,
            description=description,
            type=task_type,
            date=day,
            is_completed=False,
            is_active=True,
        )
        self.db.add(task)
        self.db.flush()
        return task

    def list_tasks(self, user_id: int, day: date) -> list[DailyTask]:
        result = self.db.execute(
            select(DailyTask)
            .where(DailyTask.user_id == user_id, DailyTask.date == day)
            .order_by(DailyTask.created_at, DailyTask.id)
        )
        return list(result.scalars().all())

    def list_recent_tasks(self, user_id: int, since: date, limit: int) -> list[DailyTask]:
        """Tasks dated ``since`` or later, newest date first."""
        result = self.db.execute(
            select(DailyTask)
            .where(DailyTask.user_id == user_id, DailyTask.date >= since)
            .order_by(desc(DailyTask.date), desc(DailyTask.id))
            .limit(limit)
        )
        return list(result.scalars().all())

    def list_completed_task_moods(self, user_id: int, exclude_task_id: int, limit: int) -> list[str | None]:
        """Moods of the newest completed EMOTION_CHECK tasks, newest first."""
        result = self.db.execute(
            select(DailyTask.mood)
            .where(
                DailyTask.user_id == user_id,
                DailyTask.type == "EMOTION_CHECK",
                DailyTask.is_completed.is_(True),
                DailyTask.id != exclude_task_id,
            )
            .order_by(desc(DailyTask.completed_at), desc(DailyTask.id))
            .limit(limit)
        )
        return list(result.scalars().all())

    # ---- transaction ----

    def commit(self) -> None:
        self.db.commit()

    def rollback(self) -> None:
        self.db.rollback()
