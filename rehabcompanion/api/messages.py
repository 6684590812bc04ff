"""Messages inbox API."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status

from rehabcompanion.core.deps import get_current_user, get_messaging, http_error
from rehabcompanion.core.errors import RehabError
from rehabcompanion.models.user import User
from rehabcompanion.schemas.message import MessageListResponse, MessageResponse, MessageSend
from rehabcompanion.services.messaging import SqlAlchemyMessaging, unread_count

router = APIRouter(prefix="/messages", tags=["messages"])


@router.get("", response_model=MessageListResponse)
def list_messages(
    user_id: int | None = Query(default=None, alias="userId"),
    messaging: SqlAlchemyMessaging = Depends(get_messaging),
    current_user: User = Depends(get_current_user),
):
    """Inbox, or the conversation with ``userId`` when given."""
    messages = messaging.list_messages(current_user.id, user_id)
    return MessageListResponse(
        messages=[MessageResponse.model_validate(m) for m in messages],
        unread_count=unread_count(messages, current_user.id),
    )


@router.post("/{message_id}/read", response_model=MessageResponse)
def mark_read(
    message_id: int,
    messaging: SqlAlchemyMessaging = Depends(get_messaging),
    current_user: User = Depends(get_current_user),
):
    """Mark a received message as read."""
    try:
        return messaging.mark_read(message_id, current_user.id)
    except RehabError as e:
        raise http_error(e)


@router.post("", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
def send_message(
    data: MessageSend,
    messaging: SqlAlchemyMessaging = Depends(get_messaging),
    current_user: User = Depends(get_current_user),
):
    """Send a message to another user, e.g. a patient replying to their doctor."""
    try:
        return messaging.send_direct(current_user.id, data.to_id, data.content)
    except RehabError as e:
        raise http_error(e)
