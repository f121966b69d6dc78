# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging

from fastapi import Request

from chatapp.auth.cookies import SessionCookies
from chatapp.auth.tokens import InvalidToken, SessionIdentity, TokenExpired, decode_token
from chatapp.config import Settings
from chatapp.errors import Unauthorized
from chatapp.services.auth_service import AuthService

logger = logging.getLogger(__name__)


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_cookies(request: Request) -> SessionCookies:
    return request.app.state.cookies


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth_service


def require_session(request: Request) -> SessionIdentity:
    """Reject the request with 401 unless it carries a valid session cookie."""
    token = get_cookies(request).read(request)
    if not token:
        logger.warning("No session cookie on %s %s", request.method, request.url.path)
        raise Unauthorized("Token Not Received")
    try:
        return decode_token(token, secret=get_settings(request).jwt_secret)
    except TokenExpired:
        logger.warning("Expired session token on %s", request.url.path)
        raise Unauthorized("Token Expired")
    except InvalidToken as e:
        logger.warning("Invalid session token on %s: %s", request.url.path, e)
        raise Unauthorized("Invalid Token")
