import sys
from pathlib import Path as _Path
sys.path.insert(0, str(_Path(__file__).resolve().parents[1] / "src"))

import pytest
from fastapi.testclient import TestClient

from chatapp.app import create_app
from chatapp.config import Settings
from chatapp.infra.user_repo import MemoryUserRepo

JWT_SECRET = "test-jwt-secret-only-for-tests"
COOKIE_SECRET = "test-cookie-secret-only-for-tests"


@pytest.fixture()
def settings() -> Settings:
    # Lowest argon2 cost keeps the suite fast.
    return Settings(jwt_secret=JWT_SECRET, cookie_secret=COOKIE_SECRET, password_cost=1)


@pytest.fixture()
def prod_settings() -> Settings:
    return Settings(
        jwt_secret=JWT_SECRET,
        cookie_secret=COOKIE_SECRET,
        password_cost=1,
        environment="production",
    )


@pytest.fixture()
def repo() -> MemoryUserRepo:
    return MemoryUserRepo()


@pytest.fixture()
def client(settings, repo):
    app = create_app(settings, repo=repo)
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def signup_body() -> dict:
    return {"fullName": "Ada Lovelace", "email": "ada@example.com", "password": "analytical"}
