"""Messaging collaborator and message inbox service."""

from __future__ import annotations

import logging
import random
from typing import Protocol

from sqlalchemy import and_, or_, select
from sqlalchemy.orm import Session

from rehabcompanion.core.errors import ForbiddenError, NotFoundError, ValidationError
from rehabcompanion.models.message import Message
from rehabcompanion.models.user import User

logger = logging.getLogger(__name__)

FALLBACK_MESSAGES = [
    "Hola {name}, quiero que sepas que estoy muy orgulloso de tu progreso. Cada día que avanzas es una "
    "victoria, sin importar lo pequeña que parezca. Sigue adelante.",
    "{name}, recuerda que la recuperación no es una línea recta. Los altibajos son parte del proceso. "
    "Lo importante es que sigues intentándolo. Estás haciendo un trabajo increíble.",
    "Hola {name}, tu esfuerzo diario no pasa desapercibido. La constancia que muestras es admirable. "
    "Confío en tu capacidad de seguir creciendo. Un paso a la vez.",
    "{name}, en este camino de recuperación, recuerda ser amable contigo mismo/a. Celebra tus pequeños "
    "logros y aprende de los tropiezos. Estás construyendo una nueva vida.",
    "Hola {name}, quiero recordarte que pedir ayuda es señal de fortaleza, no de debilidad. Estás "
    "rodeado/a de personas que creen en ti. Sigue confiando en el proceso.",
]


class Messaging(Protocol):
    def send_message(self, from_id: int, to_id: int, content: str) -> Message: ...


class SqlAlchemyMessaging:
    """Stores messages in the same session as the rest of the request."""

    def __init__(self, db: Session):
        self.db = db

    def send_message(self, from_id: int, to_id: int, content: str) -> Message:
        message = Message(from_id=from_id, to_id=to_id, content=content, is_read=False, is_active=True)
        self.db.add(message)
        self.db.flush()
        logger.debug("Message queued from=%s to=%s", from_id, to_id)
        return message

    def list_messages(self, user_id: int, other_user_id: int | None = None) -> list[Message]:
        """Inbox of ``user_id``, or the conversation with ``other_user_id``, oldest first."""
        stmt = select(Message).where(Message.is_active.is_(True))
        if other_user_id is not None:
            stmt = stmt.where(
                or_(
                    and_(Message.from_id == user_id, Message.to_id == other_user_id),
                    and_(Message.from_id == other_user_id, Message.to_id == user_id),
                )
            )
        else:
            stmt = stmt.where(Message.to_id == user_id)
        stmt = stmt.order_by(Message.created_at, Message.id)
        return list(self.db.execute(stmt).scalars().all())

    def mark_read(self, message_id: int, user_id: int) -> Message:
        message = self.db.get(Message, message_id)
        if message is None:
            raise NotFoundError("Message not found")
        if message.to_id != user_id:
            raise ForbiddenError("Unauthorized")
        message.is_read = True
        self.db.commit()
        self.db.refresh(message)
        return message

    def send_direct(self, from_id: int, to_id: int | None, content: str | None) -> Message:
        """Send and commit a user-written message."""
        if to_id is None or not content or not content.strip():
            raise ValidationError("Recipient ID and content are required")
        if self.db.get(User, to_id) is None:
            raise NotFoundError("Recipient not found")
        message = self.send_message(from_id, to_id, content)
        self.db.commit()
        self.db.refresh(message)
        return message


def unread_count(messages: list[Message], user_id: int) -> int:
    return sum(1 for m in messages if m.to_id == user_id and not m.is_read)


def generate_motivational_message(patient_name: str | None = None) -> dict[str, str]:
    """Encouragement text for a doctor to send. AI generation is not wired in; templates only."""
    name = patient_name or "amigo/a"
    return {"message": random.choice(FALLBACK_MESSAGES).format(name=name), "source": "fallback"}
