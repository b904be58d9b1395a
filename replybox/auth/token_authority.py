"""
Token authority: one secure token per installation.

ensure_token() issues the token on activation (and on any entry point that
needs one before activation ran); it is a no-op once a token exists.
authenticate() compares a request token against the stored one in constant time.
"""

from __future__ import annotations

import hashlib
import hmac
import random
import uuid
from typing import Any

from replybox.core.exceptions import AuthenticationFailure
from replybox.database.options import SECURE_TOKEN, SettingsStore
from replybox.replybox_logging import get_logger

logger = get_logger(__name__)


def generate_token() -> str:
    """Return a new opaque token: md5 hex digest over a random-plus-unique seed."""
    seed = f"{random.getrandbits(64)}{uuid.uuid4().hex}"
    return hashlib.md5(seed.encode("ascii")).hexdigest()


class TokenAuthority:
    def __init__(self, store: SettingsStore) -> None:
        self._store = store

    @property
    def token(self) -> str:
        return str(self._store.get(SECURE_TOKEN))

    def ensure_token(self) -> str:
        """Issue and persist a token if none exists. Returns the current token."""
        current = self.token
        if current:
            return current
        token = generate_token()
        # persist() drops the cached record on failure, so a token is only
        # ever served once it is stored
        self._store.set(SECURE_TOKEN, token).persist()
        logger.info("secure_token_issued", option=self._store.option_name)
        return token

    def authenticate(self, candidate: Any) -> bool:
        """True iff candidate equals the stored token. Empty or non-string values never match."""
        expected = self.token
        if not isinstance(candidate, str) or not candidate or not expected:
            return False
        return hmac.compare_digest(candidate.encode("utf-8"), expected.encode("utf-8"))

    def require(self, candidate: Any) -> None:
        """Raise AuthenticationFailure unless candidate authenticates."""
        if not self.authenticate(candidate):
            logger.warning("secure_token_rejected", provided=bool(candidate))
            raise AuthenticationFailure()
