"""
Admin authentication helpers.

Flow:
  1) POST /api/admin/auth with the shared admin password
  2) Server returns a short-lived HS256 JWT (role=admin)
  3) Admin requests send Authorization: Bearer <jwt>

The password itself is never accepted as a bearer token.
"""
import hmac
import logging
from datetime import datetime, timezone, timedelta
from fastapi import HTTPException, Header
from typing import Optional

import jwt

from config import settings
from domain.errors import UnauthorizedError

logger = logging.getLogger(__name__)

ADMIN_SUBJECT = "admin"
ADMIN_ROLE = "admin"


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


def _parse_bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    parts = authorization.split(" ", 1)
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return None
    token = parts[1].strip()
    return token or None


def _require_jwt_secret() -> str:
    if not settings.jwt_secret:
        raise HTTPException(
            status_code=500,
            detail="Server auth misconfigured (JWT secret missing).",
        )
    return settings.jwt_secret


def check_admin_password(password: Optional[str]) -> bool:
    """Constant-time comparison against the configured admin secret."""
    if not settings.admin_secret:
        raise HTTPException(
            status_code=500,
            detail="Server auth misconfigured (admin secret missing).",
        )
    if not password:
        return False
    return hmac.compare_digest(password.encode("utf-8"), settings.admin_secret.encode("utf-8"))


def issue_admin_token() -> str:
    secret = _require_jwt_secret()
    now = _now_utc()
    exp = now.replace(microsecond=0) + timedelta(minutes=settings.admin_token_ttl_minutes)
    payload = {
        "iss": settings.jwt_issuer,
        "sub": ADMIN_SUBJECT,
        "role": ADMIN_ROLE,
        "iat": int(now.timestamp()),
        "exp": int(exp.timestamp()),
    }
    return jwt.encode(payload, secret, algorithm="HS256")


def decode_admin_token(token: str) -> dict:
    secret = _require_jwt_secret()
    try:
        payload = jwt.decode(
            token,
            secret,
            algorithms=["HS256"],
            issuer=settings.jwt_issuer,
            options={"require": ["exp", "iat", "iss", "sub"]},
        )
    except jwt.ExpiredSignatureError:
        raise UnauthorizedError("Access token expired.")
    except jwt.InvalidTokenError:
        raise UnauthorizedError("Invalid access token.")

    if payload.get("role") != ADMIN_ROLE:
        raise UnauthorizedError("Admin role required.")
    return payload


async def require_admin(
    authorization: Optional[str] = Header(None, alias="Authorization"),
) -> dict:
    """Dependency for every /api/admin/* route except the login itself."""
    token = _parse_bearer_token(authorization)
    if not token:
        raise UnauthorizedError(
            "Authentication required. Provide Authorization: Bearer <token>."
        )
    return decode_admin_token(token)
