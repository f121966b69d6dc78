# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Runtime configuration read from the environment.

Settings are resolved once and passed explicitly to the pieces that need them
(cookie manager, auth service, app factory) instead of being looked up ad hoc.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Optional, Tuple


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes", "y"}


def _split_csv(raw: str) -> Tuple[str, ...]:
    return tuple(p.strip().rstrip("/") for p in (raw or "").split(",") if p.strip())


@dataclass(frozen=True)
class Settings:
    jwt_secret: str
    cookie_secret: str
    environment: str = "development"
    cookie_name: str = "auth_token"
    cookie_domain: Optional[str] = None
    session_days: int = 7
    password_cost: int = 10
    mongodb_url: str = "mongodb://localhost:27017"
    mongodb_db: str = "chatapp"
    client_origins: Tuple[str, ...] = field(default_factory=lambda: ("http://localhost:5173",))
    api_prefix: str = ""

    @property
    def is_production(self) -> bool:
        return self.environment.strip().lower() == "production"

    @property
    def session_ttl(self) -> timedelta:
        return timedelta(days=self.session_days)

    @classmethod
    def from_env(cls) -> "Settings":
        jwt_secret = os.getenv("JWT_SECRET", "")
        cookie_secret = os.getenv("COOKIE_SECRET", "")
        if not jwt_secret:
            raise RuntimeError("JWT_SECRET is not set")
        if not cookie_secret:
            raise RuntimeError("COOKIE_SECRET is not set")

        prefix = os.getenv("CHATAPP_API_PREFIX", "").strip().rstrip("/")
        if prefix and not prefix.startswith("/"):
            prefix = "/" + prefix

        return cls(
            jwt_secret=jwt_secret,
            cookie_secret=cookie_secret,
            environment=os.getenv("NODE_ENV", "development"),
            cookie_name=os.getenv("COOKIE_NAME", "auth_token"),
            cookie_domain=os.getenv("COOKIE_DOMAIN") or None,
            session_days=int(os.getenv("CHATAPP_SESSION_DAYS", "7")),
            password_cost=int(os.getenv("CHATAPP_PASSWORD_COST", "10")),
            mongodb_url=os.getenv("MONGODB_URL", "mongodb://localhost:27017"),
            mongodb_db=os.getenv("MONGODB_DB", "chatapp"),
            client_origins=_split_csv(os.getenv("CLIENT_ORIGINS", "http://localhost:5173")),
            api_prefix=prefix,
        )


def server_options() -> dict:
    """Host/port/reload for the uvicorn entrypoint."""
    return {
        "host": os.getenv("CHATAPP_HOST", "0.0.0.0"),
        "port": int(os.getenv("PORT", "5000")),
        "reload": _env_bool("CHATAPP_RELOAD"),
    }
