# quotedesk/core/security.py

import secrets
from datetime import datetime, timedelta, timezone
from typing import Iterable, Optional

from passlib.context import CryptContext
from jose import jwt, JWTError

from quotedesk.core.config import (
    JWT_ACCESS_SECRET_KEY,
    JWT_ALGORITHM,
    ACCESS_TOKEN_EXPIRE_MINUTES,
    ACTION_TOKEN_EXPIRE_MINUTES,
    FORM_TOKEN_EXPIRE_MINUTES,
)
from quotedesk.core.exceptions import AppException
from quotedesk.constants.error_codes import ErrorCode

ACCESS_TOKEN_TYPE = "access"
ACTION_TOKEN_TYPE = "quote_action"
FORM_TOKEN_TYPE = "quote_form"

# =====================================================
# PASSWORD HASHING
# =====================================================
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
)

def hash_password(password: str) -> str:
    return pwd_context.hash(password)

def verify_password(plain: str, hashed: str) -> bool:
    return pwd_context.verify(plain, hashed)


def _encode(payload: dict, expires_delta: timedelta) -> str:
    now = datetime.now(timezone.utc)
    payload = {**payload, "iat": now, "exp": now + expires_delta}
    return jwt.encode(payload, JWT_ACCESS_SECRET_KEY, algorithm=JWT_ALGORITHM)


def _decode(token: str) -> Optional[dict]:
    try:
        return jwt.decode(
            token,
            JWT_ACCESS_SECRET_KEY,
            algorithms=[JWT_ALGORITHM],
        )
    except JWTError:
        return None

# =====================================================
# ACCESS TOKEN
# =====================================================
def create_access_token(
    subject: str,
    token_version: int,
    expires_delta: Optional[timedelta] = None,
) -> str:
    return _encode(
        {
            "sub": subject,
            "token_version": token_version,
            "type": ACCESS_TOKEN_TYPE,
        },
        expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES),
    )

# =====================================================
# DECODE + VALIDATE TOKEN
# =====================================================
def decode_access_token(token: str) -> dict:
    payload = _decode(token)

    if payload is None:
        raise AppException(
            401,
            "Invalid or expired token",
            ErrorCode.UNAUTHORIZED,
        )

    if payload.get("type") != ACCESS_TOKEN_TYPE:
        raise AppException(
            401,
            "Invalid token type",
            ErrorCode.UNAUTHORIZED,
        )

    return payload

# =====================================================
# ACTION TOKENS (replay protection for moderation)
# =====================================================
def normalize_ids(ids: Iterable[int]) -> list[int]:
    return sorted({int(i) for i in ids})


def create_action_token(
    subject: str,
    action: str,
    ids: Iterable[int],
    expires_delta: Optional[timedelta] = None,
) -> str:
    """
    Sign a token scoped to one user, one action and one exact set of quote ids.
    """
    return _encode(
        {
            "sub": subject,
            "type": ACTION_TOKEN_TYPE,
            "action": action,
            "ids": normalize_ids(ids),
        },
        expires_delta or timedelta(minutes=ACTION_TOKEN_EXPIRE_MINUTES),
    )


def verify_action_token(
    token: Optional[str],
    subject: str,
    action: str,
    ids: Iterable[int],
) -> bool:
    if not token:
        return False

    payload = _decode(token)
    if payload is None:
        return False

    return (
        payload.get("type") == ACTION_TOKEN_TYPE
        and payload.get("sub") == subject
        and payload.get("action") == action
        and payload.get("ids") == normalize_ids(ids)
    )

# =====================================================
# FORM TOKENS (public submission)
# =====================================================
def create_form_token(expires_delta: Optional[timedelta] = None) -> str:
    return _encode(
        {
            "type": FORM_TOKEN_TYPE,
            "jti": secrets.token_urlsafe(12),
        },
        expires_delta or timedelta(minutes=FORM_TOKEN_EXPIRE_MINUTES),
    )


def verify_form_token(token: Optional[str]) -> bool:
    if not token:
        return False

    payload = _decode(token)
    return payload is not None and payload.get("type") == FORM_TOKEN_TYPE
