from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

from asyncpg.exceptions import UniqueViolationError
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette import status
from starlette.exceptions import HTTPException

from clubhub.config import Environment, config, environment
from clubhub.database import database
from clubhub.middleware import AuthGateMiddleware
from clubhub.routes import (
    auth,
    clubs,
    matches,
    pages,
    players,
    point_systems,
    public,
    search,
    tournaments,
    transfers,
)
from clubhub.sql.admins import ensure_admin
from clubhub.utils.alembic import upgrade_database
from clubhub.utils.errors import UniqueIndex, ValidationError, unique_index_violation_error_lookup
from clubhub.utils.logging import logger


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncIterator[None]:
    await database.connect()

    if config.auto_run_migrations and environment is not Environment.CI:
        upgrade_database(Path(config.migration_lock_path))

    if config.admin_username is not None and config.admin_password is not None:
        if await ensure_admin(
            config.admin_username, config.admin_password, config.admin_email
        ):
            logger.info(f"Created admin account '{config.admin_username}'")

    logger.info(f"Started clubhub in {environment.value} mode")
    yield

    await database.disconnect()
    logger.info("Stopped clubhub")


def cors_origins() -> list[str]:
    return [origin.strip() for origin in config.cors_origins.split(",") if origin.strip()]


def validation_error_details(exc: RequestValidationError) -> dict[str, list[str]]:
    details: dict[str, list[str]] = {}
    for error in exc.errors():
        location = [str(part) for part in error["loc"] if part not in ("body", "query", "path")]
        field = ".".join(location) or "request"
        details.setdefault(field, []).append(error["msg"])
    return details


def error_response(
    status_code: int,
    message: str,
    details: dict[str, list[str]] | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    content: dict[str, Any] = {"error": message}
    if details:
        content["details"] = details
    return JSONResponse(content, status_code=status_code, headers=headers)


async def http_exception_handler(_: Request, exc: Exception) -> JSONResponse:
    assert isinstance(exc, HTTPException)
    details = exc.details if isinstance(exc, ValidationError) else None
    return error_response(exc.status_code, str(exc.detail), details, exc.headers)


async def request_validation_handler(_: Request, exc: Exception) -> JSONResponse:
    assert isinstance(exc, RequestValidationError)
    return error_response(
        status.HTTP_400_BAD_REQUEST, "Validation failed", validation_error_details(exc)
    )


async def unique_violation_handler(_: Request, exc: Exception) -> JSONResponse:
    assert isinstance(exc, UniqueViolationError)
    constraint_name = getattr(exc, "constraint_name", None)
    message = "This record already exists"
    if constraint_name in UniqueIndex.__members__:
        message = unique_index_violation_error_lookup[UniqueIndex(constraint_name)]
    return error_response(status.HTTP_400_BAD_REQUEST, message)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unexpected error on {request.method} {request.url.path}", exc_info=exc)
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "An unexpected error occurred")


def create_app() -> FastAPI:
    app = FastAPI(
        title="ClubHub API",
        description="Clubs, players, tournaments and leaderboards",
        lifespan=lifespan,
    )

    app.add_middleware(AuthGateMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins(),
        allow_origin_regex=config.cors_origin_regex or None,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(UniqueViolationError, unique_violation_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    app.mount("/static", StaticFiles(directory="static", check_dir=False), name="static")

    for router in (
        auth.router,
        clubs.router,
        players.router,
        transfers.router,
        tournaments.router,
        matches.router,
        point_systems.router,
        search.router,
        public.router,
        pages.router,
    ):
        app.include_router(router)

    return app


app = create_app()
