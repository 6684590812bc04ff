"""Per-user encryption of free-text notes."""

from __future__ import annotations

import base64
import hashlib
import logging

from cryptography.fernet import Fernet, InvalidToken

from rehabcompanion.core.config import settings

logger = logging.getLogger(__name__)


class NotesCipher:
    """Fernet cipher keyed by the master key combined with a user key."""

    def __init__(self, master_key: str | None = None):
        self.master_key = master_key if master_key is not None else settings.encryption_master_key

    def _fernet(self, user_key: str) -> Fernet:
        digest = hashlib.sha256((self.master_key + user_key).encode()).digest()
        return Fernet(base64.urlsafe_b64encode(digest))

    def encrypt(self, text: str | None, user_key: str) -> str | None:
        if not text:
            return None
        return self._fernet(user_key).encrypt(text.encode()).decode()

    def decrypt(self, ciphertext: str | None, user_key: str) -> str | None:
        """Return the plain text, or None when the token does not match the key."""
        if not ciphertext:
            return None
        try:
            return self._fernet(user_key).decrypt(ciphertext.encode()).decode()
        except InvalidToken:
            logger.warning("Could not decrypt notes with the given user key")
            return None
