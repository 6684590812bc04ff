"""Message schemas."""

from datetime import datetime

from pydantic import Field

from rehabcompanion.schemas.common import CamelModel


class MessageCreate(CamelModel):
    content: str = Field(min_length=1, max_length=5000)


class MessageSend(CamelModel):
    to_id: int | None = None
    content: str | None = Field(default=None, max_length=5000)


class MessageResponse(CamelModel):
    id: int
    from_id: int
    to_id: int
    content: str
    is_read: bool
    created_at: datetime | None = None


class MessageListResponse(CamelModel):
    success: bool = True
    messages: list[MessageResponse]
    unread_count: int


class GenerateMessageRequest(CamelModel):
    patient_name: str | None = None
    context: str | None = None
    mood: str | None = None


class GeneratedMessageResponse(CamelModel):
    success: bool = True
    message: str
    source: str
