# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

from functools import lru_cache

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError

DEFAULT_COST = 10
MEMORY_COST_KIB = 19 * 1024


@lru_cache(maxsize=None)
def _hasher(cost: int) -> PasswordHasher:
    return PasswordHasher(time_cost=cost, memory_cost=MEMORY_COST_KIB)


def hash_password(plain: str, *, cost: int = DEFAULT_COST) -> str:
    if not plain:
        raise ValueError("Empty password")
    return _hasher(cost).hash(plain)


def verify_password(hash_value: str, plain: str) -> bool:
    if not hash_value or not plain:
        return False
    try:
        # Parameters are read back from the hash itself.
        return _hasher(DEFAULT_COST).verify(hash_value, plain)
    except (VerificationError, InvalidHashError):
        # Mismatch, or a digest argon2 cannot parse (e.g. a bcrypt hash).
        return False
