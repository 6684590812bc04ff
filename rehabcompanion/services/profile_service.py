"""Profile updates for the signed-in user."""

from __future__ import annotations

import logging

from rehabcompanion.core.errors import NotFoundError
from rehabcompanion.models.user import User
from rehabcompanion.services.storage import Storage

logger = logging.getLogger(__name__)

PROFILE_FIELDS = ("first_name", "last_name", "emergency_contact_name", "emergency_contact_phone")


def update_profile(storage: Storage, user_id: int, **changes: str | None) -> User:
    """Apply a partial profile update.

    Only the names and the emergency contact can change. Missing or blank
    values leave the stored field as it is.
    """
    user = storage.get_user(user_id)
    if user is None:
        raise NotFoundError("User not found")
    fields = {}
    for name in PROFILE_FIELDS:
        value = changes.get(name)
        if value is not None and value.strip():
            fields[name] = value.strip()
    if fields:
        storage.update_user(user, **fields)
        storage.commit()
        logger.info("Profile updated user=%s fields=%s", user_id, sorted(fields))
    return user
