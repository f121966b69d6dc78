# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import APIRouter, Depends, FastAPI, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from chatapp.auth.cookies import SessionCookies
from chatapp.auth.tokens import SessionIdentity
from chatapp.config import Settings
from chatapp.errors import ApiError
from chatapp.infra.user_repo import MongoUserRepo, UserRepo
from chatapp.permissions import get_auth_service, require_session
from chatapp.schemas import LoginBody, SignupBody
from chatapp.services.auth_service import AuthService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["users"])


# ------------------ Routes ------------------


@router.get("/")
def list_users(service: AuthService = Depends(get_auth_service)):
    return service.list_users()


@router.post("/signup", status_code=status.HTTP_201_CREATED)
def signup(body: SignupBody, response: Response, service: AuthService = Depends(get_auth_service)):
    return service.signup(response, full_name=body.full_name, email=body.email, password=body.password)


@router.post("/login")
def login(body: LoginBody, response: Response, service: AuthService = Depends(get_auth_service)):
    return service.login(response, email=body.email, password=body.password)


@router.get("/auth-status")
def auth_status(
    identity: SessionIdentity = Depends(require_session),
    service: AuthService = Depends(get_auth_service),
):
    return service.verify(identity)


@router.get("/logout")
def logout(
    response: Response,
    identity: SessionIdentity = Depends(require_session),
    service: AuthService = Depends(get_auth_service),
):
    return service.logout(response, identity)


# ------------------ Error handlers ------------------


async def _api_error_handler(request: Request, exc: ApiError):
    if exc.status_code >= 500:
        logger.error("HTTP %s: %s - %s %s", exc.status_code, exc.message, request.method, request.url.path)
    else:
        logger.info("HTTP %s: %s - %s %s", exc.status_code, exc.message, request.method, request.url.path)
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})


async def _validation_error_handler(request: Request, exc: RequestValidationError):
    errors = []
    for error in exc.errors():
        loc = [str(p) for p in error.get("loc", ()) if p != "body"]
        errors.append({"field": ".".join(loc), "message": error.get("msg", "")})

    logger.warning("Validation error: %s - %s %s", errors, request.method, request.url.path)
    message = errors[0]["message"] if errors else "Invalid request"
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"message": message, "errors": errors},
    )


async def _unhandled_error_handler(request: Request, exc: Exception):
    logger.error(
        "Unhandled exception: %s: %s - %s %s",
        type(exc).__name__,
        exc,
        request.method,
        request.url.path,
        exc_info=True,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": "Internal server error"},
    )


# ------------------ Factory ------------------


def create_app(settings: Optional[Settings] = None, repo: Optional[UserRepo] = None) -> FastAPI:
    settings = settings or Settings.from_env()
    repo = repo or MongoUserRepo(settings.mongodb_url, settings.mongodb_db)
    cookies = SessionCookies(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        repo.ensure_indexes()
        logger.info("User store ready (%s)", type(repo).__name__)
        yield
        close = getattr(repo, "close", None)
        if close:
            close()

    app = FastAPI(title="chatapp", lifespan=lifespan)
    app.state.settings = settings
    app.state.repo = repo
    app.state.cookies = cookies
    app.state.auth_service = AuthService(repo, settings, cookies)

    # Browser client lives on another origin and must send the session cookie.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.client_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(ApiError, _api_error_handler)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)

    app.include_router(router, prefix=settings.api_prefix)
    return app
