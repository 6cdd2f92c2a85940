"""Signed user tokens for authenticated chat widget sessions.

Generate the token on your backend and hand it to the frontend widget when
it starts a session. Navi verifies the signature with the widget secret and
keeps a persistent conversation history for that user.

Example usage:
    from navi_sdk import WidgetAuth

    auth = WidgetAuth("ws_a1b2c3d4e5f6...")  # secret from widget creation

    token = auth.generate_user_token(
        "user_123",
        name="John Doe",
        email="john@example.com",
        context={"plan": "premium"},
        expires_in=3600,  # one hour
    )

    # Frontend: naviWidget.startSession({ userToken: token })
"""

from __future__ import annotations

import base64
import binascii
import hashlib
import hmac
import json
import time
from typing import Any

from pydantic import BaseModel

MIN_SECRET_LENGTH = 32


class TokenVerification(BaseModel):
    """Result of verifying a widget user token."""

    valid: bool
    payload: dict[str, Any] | None = None
    error: str | None = None

    model_config = {"frozen": True}


def _encode_payload(payload: dict[str, Any]) -> str:
    # Compact JSON, unicode and slashes left unescaped
    raw = json.dumps(payload, separators=(",", ":"), ensure_ascii=False)
    return base64.b64encode(raw.encode("utf-8")).decode("ascii")


def _decode_payload(encoded: str) -> dict[str, Any] | None:
    try:
        raw = base64.b64decode(encoded, validate=True)
        payload = json.loads(raw.decode("utf-8"))
    except (binascii.Error, UnicodeDecodeError, ValueError):
        return None
    return payload if isinstance(payload, dict) else None


class WidgetAuth:
    """Sign and verify widget user tokens with HMAC-SHA256.

    Tokens have the form ``base64(payload).hex_signature`` where the
    signature is computed over the base64 text.
    """

    def __init__(self, widget_secret: str) -> None:
        """Initialize with the widget secret.

        Args:
            widget_secret: Secret returned when the widget was created

        Raises:
            ValueError: If the secret is missing or too short
        """
        if not widget_secret:
            raise ValueError("Widget secret is required")
        if len(widget_secret) < MIN_SECRET_LENGTH:
            raise ValueError("Widget secret is too short")
        self._secret = widget_secret.encode("utf-8")

    def _sign(self, encoded_payload: str) -> str:
        return hmac.new(
            self._secret, encoded_payload.encode("utf-8"), hashlib.sha256
        ).hexdigest()

    def generate_user_token(
        self,
        user_id: str,
        *,
        name: str | None = None,
        email: str | None = None,
        context: dict[str, Any] | None = None,
        expires_in: int | None = None,
    ) -> str:
        """Generate a signed token identifying a user.

        Args:
            user_id: Your identifier for the user (required)
            name: Display name
            email: Email address
            context: Extra data passed to the agent
            expires_in: Lifetime in seconds from now (None = no expiry)

        Returns:
            The signed token

        Raises:
            ValueError: If user_id is empty or not a string
        """
        if not user_id:
            raise ValueError("user_id is required")
        if not isinstance(user_id, str):
            raise ValueError("user_id must be a string")

        payload: dict[str, Any] = {"userId": user_id}
        if name is not None:
            payload["name"] = name
        if email is not None:
            payload["email"] = email
        if context is not None:
            payload["context"] = context
        if expires_in is not None and expires_in > 0:
            payload["exp"] = int(time.time()) + expires_in

        encoded = _encode_payload(payload)
        return f"{encoded}.{self._sign(encoded)}"

    def verify_user_token(self, token: str) -> TokenVerification:
        """Verify a token's signature and expiry (useful for debugging).

        Args:
            token: Token produced by generate_user_token

        Returns:
            TokenVerification; ``payload`` is also set for expired tokens
        """
        parts = token.split(".")
        if len(parts) != 2:
            return TokenVerification(valid=False, error="Invalid token format")

        encoded, signature = parts
        expected = self._sign(encoded).encode("ascii")
        if not hmac.compare_digest(expected, signature.encode("utf-8")):
            return TokenVerification(valid=False, error="Invalid signature")

        payload = _decode_payload(encoded)
        if payload is None:
            return TokenVerification(valid=False, error="Invalid payload")

        exp = payload.get("exp")
        if isinstance(exp, int) and time.time() > exp:
            return TokenVerification(
                valid=False, payload=payload, error="Token has expired"
            )

        return TokenVerification(valid=True, payload=payload)

    @staticmethod
    def decode_token(token: str) -> dict[str, Any] | None:
        """Decode a token's payload without verifying it."""
        parts = token.split(".")
        if len(parts) != 2:
            return None
        return _decode_payload(parts[0])
