# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

from datetime import datetime
from typing import Optional

from fastapi import Request, Response
from itsdangerous import BadSignature, Signer

from chatapp.config import Settings

COOKIE_SALT = "chatapp.session-cookie"


class SessionCookies:
    """Sets, clears and reads the signed session cookie."""

    def __init__(self, settings: Settings):
        self.name = settings.cookie_name
        self.domain = settings.cookie_domain
        self.production = settings.is_production
        self._signer = Signer(settings.cookie_secret, salt=COOKIE_SALT)

    def attributes(self) -> dict:
        return {
            "path": "/",
            "domain": self.domain,
            "httponly": True,
            "samesite": "none" if self.production else "strict",
            "secure": self.production,
        }

    def set(self, response: Response, token: str, expires: datetime) -> None:
        value = self._signer.sign(token).decode("utf-8")
        response.set_cookie(self.name, value, expires=expires, **self.attributes())

    def clear(self, response: Response) -> None:
        response.delete_cookie(self.name, **self.attributes())

    def read(self, request: Request) -> Optional[str]:
        raw = request.cookies.get(self.name, "")
        if not raw:
            return None
        try:
            return self._signer.unsign(raw).decode("utf-8")
        except BadSignature:
            return None
