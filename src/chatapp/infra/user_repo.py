# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""User persistence.

``MongoUserRepo`` is the production store (one document per user in the
``users`` collection, unique index on ``email``). ``MemoryUserRepo`` keeps the
same contract in a dict and is used for tests and local experiments.
"""

from __future__ import annotations

import threading
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, List, Optional

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import ASCENDING, MongoClient
from pymongo.errors import DuplicateKeyError

USERS_COLLECTION = "users"


class DuplicateEmail(Exception):
    pass


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class UserRecord:
    id: str
    full_name: str
    email: str
    password_hash: str = field(repr=False)
    created_at: Optional[datetime] = None

    def public(self) -> dict:
        """Fields safe to send to clients."""
        return {"id": self.id, "fullName": self.full_name, "email": self.email}


class UserRepo:
    def ensure_indexes(self) -> None:
        pass

    def list_all(self) -> List[UserRecord]:
        raise NotImplementedError

    def find_by_id(self, user_id: str) -> Optional[UserRecord]:
        raise NotImplementedError

    def find_by_email(self, email: str) -> Optional[UserRecord]:
        raise NotImplementedError

    def create(self, *, full_name: str, email: str, password_hash: str) -> UserRecord:
        """Insert a new user. Raises DuplicateEmail if the email is taken."""
        raise NotImplementedError


class MemoryUserRepo(UserRepo):
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._by_id: Dict[str, UserRecord] = {}
        self._id_by_email: Dict[str, str] = {}

    def list_all(self) -> List[UserRecord]:
        with self._lock:
            return list(self._by_id.values())

    def find_by_id(self, user_id: str) -> Optional[UserRecord]:
        with self._lock:
            return self._by_id.get(user_id or "")

    def find_by_email(self, email: str) -> Optional[UserRecord]:
        with self._lock:
            uid = self._id_by_email.get(email or "")
            return self._by_id.get(uid) if uid else None

    def create(self, *, full_name: str, email: str, password_hash: str) -> UserRecord:
        with self._lock:
            if email in self._id_by_email:
                raise DuplicateEmail(email)
            rec = UserRecord(
                id=uuid.uuid4().hex,
                full_name=full_name,
                email=email,
                password_hash=password_hash,
                created_at=_utcnow(),
            )
            self._by_id[rec.id] = rec
            self._id_by_email[email] = rec.id
            return rec


def _from_doc(doc: dict) -> UserRecord:
    return UserRecord(
        id=str(doc["_id"]),
        full_name=str(doc.get("fullName") or ""),
        email=str(doc.get("email") or ""),
        password_hash=str(doc.get("password") or ""),
        created_at=doc.get("createdAt"),
    )


class MongoUserRepo(UserRepo):
    # Field names match documents written by earlier deployments.

    def __init__(self, url: str, db_name: str, *, client: Optional[MongoClient] = None):
        self._client = client or MongoClient(url, tz_aware=True)
        self._users = self._client[db_name][USERS_COLLECTION]

    def ensure_indexes(self) -> None:
        self._users.create_index([("email", ASCENDING)], unique=True, name="email_unique")

    def list_all(self) -> List[UserRecord]:
        return [_from_doc(d) for d in self._users.find({})]

    def find_by_id(self, user_id: str) -> Optional[UserRecord]:
        try:
            oid = ObjectId(user_id)
        except (InvalidId, TypeError):
            return None
        doc = self._users.find_one({"_id": oid})
        return _from_doc(doc) if doc else None

    def find_by_email(self, email: str) -> Optional[UserRecord]:
        doc = self._users.find_one({"email": email})
        return _from_doc(doc) if doc else None

    def create(self, *, full_name: str, email: str, password_hash: str) -> UserRecord:
        doc = {
            "fullName": full_name,
            "email": email,
            "password": password_hash,
            "createdAt": _utcnow(),
        }
        try:
            result = self._users.insert_one(doc)
        except DuplicateKeyError as e:
            raise DuplicateEmail(email) from e
        doc["_id"] = result.inserted_id
        return _from_doc(doc)

    def close(self) -> None:
        self._client.close()
