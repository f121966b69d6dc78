# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""API error taxonomy.

Every error carries the HTTP status it maps to and a human-readable message;
the app renders them as ``{"message": ...}``.
"""

from __future__ import annotations


class ApiError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class Conflict(ApiError):
    status_code = 401


class Unauthorized(ApiError):
    status_code = 401


class Forbidden(ApiError):
    status_code = 403


class InternalError(ApiError):
    status_code = 500
