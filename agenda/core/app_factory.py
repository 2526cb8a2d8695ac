from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import Settings
from .container import ApplicationContainer
from .logging import configure_logging
from .security import PasswordHasher
from ..application.services.auth_service import AuthService
from ..application.services.avatar_service import AvatarService
from ..application.services.user_service import UserService
from ..domain.exceptions import AgendaError, ValidationFailed
from ..infrastructure.persistence.sqlite import SQLitePersistence
from ..presentation.api.routers import auth as auth_router
from ..presentation.api.routers import users as users_router

logger = logging.getLogger(__name__)


def create_application(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings()

    app = FastAPI(title="Agenda Users", lifespan=_create_lifespan(settings))

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    _register_exception_handlers(app)

    app.include_router(auth_router.router)
    app.include_router(users_router.router)

    @app.get("/health")
    async def health() -> Dict[str, Any]:
        return {"ok": True}

    return app


def _create_lifespan(settings: Settings):
    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        configure_logging()
        persistence = SQLitePersistence(settings.database_path)
        hasher = PasswordHasher(rounds=settings.password_hash_rounds)
        auth_service = AuthService(
            users=persistence,
            hasher=hasher,
            secret_key=settings.auth_token_secret,
            token_exp_minutes=settings.auth_token_exp_minutes,
        )
        auth_service.ensure_default_admin(
            settings.admin_default_name,
            settings.admin_default_email,
            settings.admin_default_password,
        )
        user_service = UserService(persistence, hasher)
        avatar_service = AvatarService(
            settings.avatar_service_url,
            timeout_seconds=settings.avatar_timeout_seconds,
        )

        container = ApplicationContainer(
            settings=settings,
            persistence=persistence,
            password_hasher=hasher,
            auth_service=auth_service,
            user_service=user_service,
            avatar_service=avatar_service,
        )

        app.state.container = container  # type: ignore[attr-defined]

        try:
            yield
        finally:
            persistence.close()

    return lifespan


def _error_response(message: str, status_code: int) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(AgendaError)
    async def agenda_error_handler(request: Request, exc: AgendaError):
        return _error_response(exc.message, int(exc.status_code))

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return _error_response(str(exc.detail), exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return _error_response(
            _first_validation_message(exc),
            int(ValidationFailed.status_code),
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled application error", exc_info=exc)
        return _error_response("Internal server error", 500)


def _first_validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return ValidationFailed.default_message
    first = errors[0]
    field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    return f"{field}: {first['msg']}" if field else first["msg"]
