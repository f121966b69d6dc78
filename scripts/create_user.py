#!/usr/bin/env python3
from __future__ import annotations

from getpass import getpass

from chatapp.auth.passwords import hash_password
from chatapp.config import Settings
from chatapp.infra.user_repo import DuplicateEmail, MongoUserRepo
from chatapp.schemas import SignupBody


def main() -> None:
    settings = Settings.from_env()
    repo = MongoUserRepo(settings.mongodb_url, settings.mongodb_db)
    repo.ensure_indexes()

    full_name = input("Full name: ").strip()
    email = input("Email: ").strip()

    pw1 = getpass("Password: ")
    pw2 = getpass("Repeat password: ")
    if pw1 != pw2:
        raise SystemExit("Passwords do not match")

    body = SignupBody(fullName=full_name, email=email, password=pw1)
    try:
        user = repo.create(
            full_name=body.full_name,
            email=body.email,
            password_hash=hash_password(body.password, cost=settings.password_cost),
        )
    except DuplicateEmail:
        raise SystemExit(f"User already registered: {body.email}")
    finally:
        repo.close()
    print(f"OK -> {user.id} <{user.email}>")


if __name__ == "__main__":
    main()
