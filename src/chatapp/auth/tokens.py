# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Session tokens: HS256 JWTs carrying the user id and email."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt

JWT_ALGORITHM = "HS256"


class InvalidToken(Exception):
    """Token is malformed, badly signed or otherwise unusable."""


class TokenExpired(InvalidToken):
    pass


@dataclass(frozen=True)
class SessionIdentity:
    id: str
    email: str
    expires_at: datetime


def create_token(
    user_id: str,
    email: str,
    ttl: timedelta,
    *,
    secret: str,
    now: Optional[datetime] = None,
) -> str:
    issued = now or datetime.now(timezone.utc)
    payload = {
        "id": user_id,
        "email": email,
        "iat": issued,
        "exp": issued + ttl,
    }
    return jwt.encode(payload, secret, algorithm=JWT_ALGORITHM)


def decode_token(token: str, *, secret: str) -> SessionIdentity:
    """Verify signature and expiry and return the embedded identity.

    Raises:
        TokenExpired: the ``exp`` claim is in the past
        InvalidToken: anything else wrong with the token
    """
    if not token:
        raise InvalidToken("Token not received")
    try:
        payload = jwt.decode(
            token,
            secret,
            algorithms=[JWT_ALGORITHM],
            options={"require": ["exp", "id"]},
        )
    except jwt.ExpiredSignatureError as e:
        raise TokenExpired("Token expired") from e
    except jwt.InvalidTokenError as e:
        raise InvalidToken(str(e)) from e

    user_id = str(payload.get("id") or "").strip()
    if not user_id:
        raise InvalidToken("Token has no user id")
    return SessionIdentity(
        id=user_id,
        email=str(payload.get("email") or ""),
        expires_at=datetime.fromtimestamp(int(payload["exp"]), tz=timezone.utc),
    )
