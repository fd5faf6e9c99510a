"""
JWT-style token creation and verification.

Tokens are base64url-encoded JSON payloads signed with HMAC-SHA256.
The secret and the expiry window come from ``Settings.jwt_secret`` and
``Settings.jwt_expiry_seconds`` (env vars: ``JWT_SECRET``,
``JWT_EXPIRY_SECONDS``).
"""

from __future__ import annotations

import binascii
import hashlib
import hmac
import json
import time
from base64 import urlsafe_b64decode, urlsafe_b64encode
from typing import Callable

from auth.errors import InvalidToken, TokenExpired


class TokenIssuer:
    """Mints and verifies stateless bearer tokens carrying a ``user_id``."""

    def __init__(
        self,
        secret: str,
        expiry_seconds: int,
        clock: Callable[[], float] = time.time,
    ):
        if not secret:
            raise ValueError("token secret must not be empty")
        self._secret = secret.encode()
        self._expiry_seconds = expiry_seconds
        self._clock = clock

    def _sign(self, raw: bytes) -> str:
        return hmac.new(self._secret, raw, hashlib.sha256).hexdigest()

    def create_token(self, user_id: str) -> str:
        """Create a signed token containing ``user_id`` and expiry."""
        now = int(self._clock())
        payload = {
            "user_id": user_id,
            "iat": now,
            "exp": now + self._expiry_seconds,
        }
        raw = json.dumps(payload, separators=(",", ":")).encode()
        return urlsafe_b64encode(raw).decode() + "." + self._sign(raw)

    def verify_token(self, token: str) -> str:
        """
        Verify token and return ``user_id``.

        Raises ``InvalidToken`` for anything malformed or badly signed and
        ``TokenExpired`` once ``exp`` has passed.
        """
        encoded, sep, signature = token.partition(".")
        if not sep or not encoded or not signature:
            raise InvalidToken()
        try:
            raw = urlsafe_b64decode(encoded.encode())
        except (binascii.Error, ValueError):
            raise InvalidToken()
        if not hmac.compare_digest(signature.encode(), self._sign(raw).encode()):
            raise InvalidToken()

        try:
            payload = json.loads(raw)
        except ValueError:
            raise InvalidToken()
        if not isinstance(payload, dict):
            raise InvalidToken()
        user_id = payload.get("user_id")
        exp = payload.get("exp")
        if not isinstance(user_id, str) or not isinstance(exp, (int, float)):
            raise InvalidToken()
        if exp <= self._clock():
            raise TokenExpired()
        return user_id
