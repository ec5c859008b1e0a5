from collections.abc import Awaitable, Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, RedirectResponse, Response

from clubhub.config import config
from clubhub.routes.auth import decode_access_token

PUBLIC_PATH_PREFIXES = (
    f"{config.api_prefix}/public",
    f"{config.api_prefix}/token",
    f"{config.api_prefix}/logout",
    "/login",
    "/logout",
    "/static",
    "/docs",
    "/redoc",
    "/openapi.json",
    "/tournaments",
    "/players",
    "/clubs",
    "/leaderboard",
)


def is_public_path(path: str) -> bool:
    if path == "/":
        return True
    return any(path == prefix or path.startswith(f"{prefix}/") for prefix in PUBLIC_PATH_PREFIXES)


def bearer_token_of(request: Request) -> str | None:
    scheme, _, token = request.headers.get("Authorization", "").partition(" ")
    if scheme.lower() != "bearer" or not token:
        return None
    return token


def has_valid_session(request: Request, allow_bearer: bool) -> bool:
    token = request.cookies.get(config.session_cookie_name)
    if token is None and allow_bearer:
        token = bearer_token_of(request)
    return token is not None and decode_access_token(token) is not None


class AuthGateMiddleware(BaseHTTPMiddleware):
    """
    Rejects unauthenticated requests before they reach a route.

    Dashboard pages redirect to the login page, every other protected path answers with a 401.
    Routes still verify the admin themselves, this only checks that the token is well-formed
    and unexpired.
    """

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        path = request.url.path
        if request.method == "OPTIONS" or is_public_path(path):
            return await call_next(request)

        if path == "/dashboard" or path.startswith("/dashboard/"):
            if not has_valid_session(request, allow_bearer=False):
                return RedirectResponse("/login", status_code=303)
            return await call_next(request)

        if not has_valid_session(request, allow_bearer=True):
            return JSONResponse(
                {"error": "Unauthorized"},
                status_code=401,
                headers={"WWW-Authenticate": "Bearer"},
            )

        return await call_next(request)
