"""
Input validation utilities for the Agrofix storefront.

Provides reusable validators for checkout session tokens and other path inputs.
"""
import re

from fastapi import Path

from domain.constants import CHECKOUT_SESSION_MAX_LENGTH, CHECKOUT_SESSION_PATTERN
from domain.errors import ValidationError

_SESSION_ID_RE = re.compile(CHECKOUT_SESSION_PATTERN)


def validate_checkout_session_id(session_id: str) -> str:
    """
    Validate a checkout session token.

    Args:
        session_id: Token shared by the orders of one cart checkout

    Returns:
        The validated token (surrounding whitespace removed)

    Raises:
        ValidationError(400) if the token is empty, too long or has odd characters
    """
    session_id = (session_id or "").strip()
    if not session_id:
        raise ValidationError("Session ID is required", field="sessionId")

    if len(session_id) > CHECKOUT_SESSION_MAX_LENGTH:
        raise ValidationError(
            f"expected at most {CHECKOUT_SESSION_MAX_LENGTH} characters, got {len(session_id)}",
            field="sessionId",
        )

    if not _SESSION_ID_RE.match(session_id):
        raise ValidationError(
            "only letters, digits, '_' and '-' are allowed",
            field="sessionId",
        )

    return session_id


def validated_session_id(session_id: str = Path(..., description="Checkout session ID")) -> str:
    """FastAPI dependency for validating session ID path parameters."""
    return validate_checkout_session_id(session_id)
