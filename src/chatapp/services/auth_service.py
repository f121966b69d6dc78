# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Account and session operations behind the /users routes.

Each public method either returns the JSON body for a successful response or
raises an ``ApiError``. Unexpected failures (store, hashing) are logged and
turned into ``InternalError`` with the operation's generic message.
"""

from __future__ import annotations

import functools
import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List

from fastapi import Response

from chatapp.auth.cookies import SessionCookies
from chatapp.auth.passwords import hash_password, verify_password
from chatapp.auth.tokens import SessionIdentity, create_token
from chatapp.config import Settings
from chatapp.errors import ApiError, Conflict, Forbidden, InternalError, Unauthorized
from chatapp.infra.user_repo import DuplicateEmail, UserRecord, UserRepo

logger = logging.getLogger(__name__)


def _fails_with(message: str) -> Callable:
    def deco(fn: Callable) -> Callable:
        @functools.wraps(fn)
        def wrapper(*args, **kwargs):
            try:
                return fn(*args, **kwargs)
            except ApiError:
                raise
            except Exception as e:
                logger.exception("%s failed", fn.__name__)
                raise InternalError(message) from e

        return wrapper

    return deco


class AuthService:
    def __init__(self, repo: UserRepo, settings: Settings, cookies: SessionCookies):
        self.repo = repo
        self.settings = settings
        self.cookies = cookies

    def _start_session(self, response: Response, user: UserRecord) -> None:
        now = datetime.now(timezone.utc)
        token = create_token(
            user.id,
            user.email,
            self.settings.session_ttl,
            secret=self.settings.jwt_secret,
            now=now,
        )
        self.cookies.set(response, token, now + self.settings.session_ttl)

    def _session_user(self, identity: SessionIdentity) -> UserRecord:
        user = self.repo.find_by_id(identity.id)
        if not user:
            raise Unauthorized("User not registered OR Token malfunctioned")
        if user.id != identity.id:
            raise Unauthorized("Permissions didn't match")
        return user

    @_fails_with("Error getting all users")
    def list_users(self) -> Dict[str, Any]:
        users: List[dict] = [u.public() for u in self.repo.list_all()]
        return {"message": "OK", "users": users}

    @_fails_with("Unable to create the user")
    def signup(self, response: Response, *, full_name: str, email: str, password: str) -> Dict[str, Any]:
        if self.repo.find_by_email(email):
            raise Conflict("User already registered")

        password_hash = hash_password(password, cost=self.settings.password_cost)
        try:
            user = self.repo.create(full_name=full_name, email=email, password_hash=password_hash)
        except DuplicateEmail:
            # Lost a race with a concurrent signup for the same email.
            raise Conflict("User already registered")

        self._start_session(response, user)
        logger.info("User signed up: %s", user.email)
        return {"message": "User has been created", "id": user.id}

    @_fails_with("Unable to login")
    def login(self, response: Response, *, email: str, password: str) -> Dict[str, Any]:
        user = self.repo.find_by_email(email)
        if not user:
            raise Unauthorized("User not registered")
        if not verify_password(user.password_hash, password):
            logger.info("Rejected login for %s: wrong password", email)
            raise Forbidden("Incorrect Password")

        self._start_session(response, user)
        logger.info("User logged in: %s", user.email)
        return {"message": "Successfully logged in", "fullName": user.full_name, "email": user.email}

    @_fails_with("Error verifying user")
    def verify(self, identity: SessionIdentity) -> Dict[str, Any]:
        user = self._session_user(identity)
        return {"message": "OK", "fullName": user.full_name, "email": user.email}

    @_fails_with("Unable to logout")
    def logout(self, response: Response, identity: SessionIdentity) -> Dict[str, Any]:
        user = self._session_user(identity)
        self.cookies.clear(response)
        logger.info("User logged out: %s", user.email)
        return {"message": "OK", "fullName": user.full_name, "email": user.email}
