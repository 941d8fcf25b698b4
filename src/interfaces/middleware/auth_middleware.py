from __future__ import annotations

from typing import Iterable

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse, Response

from src.application.errors import AuthError, PermissionDenied
from src.config.settings import Settings
from src.infrastructure.auth.context import context_from_claims
from src.infrastructure.auth.jwt_service import JWTService

PUBLIC_PATHS: Iterable[str] = (
    "/api/v1/health",
    "/api/v1/sync/test",  # connectivity check, called before the client has a token
    "/docs",
    "/openapi.json",
    "/redoc",
)


def _bearer_token(request: Request) -> str:
    authorization = request.headers.get("Authorization")
    if not authorization:
        raise AuthError("Missing Authorization header")
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token:
        raise AuthError("Invalid Authorization header")
    return token


class AuthMiddleware(BaseHTTPMiddleware):
    """Attaches an AuthContext built from the bearer token to every private request."""

    def __init__(self, app, *, settings: Settings) -> None:
        super().__init__(app)
        self.settings = settings

    async def dispatch(self, request: Request, call_next) -> Response:
        # Let CORS preflight pass without auth checks
        if request.method == "OPTIONS":
            return await call_next(request)
        if any(request.url.path.startswith(path) for path in PUBLIC_PATHS):
            return await call_next(request)

        jwt_service: JWTService | None = getattr(request.app.state, "jwt_service", None)
        if jwt_service is None:
            raise RuntimeError("JWT service not configured")
        try:
            claims = jwt_service.decode(_bearer_token(request))
            request.state.auth_context = context_from_claims(
                claims, request.headers.get(self.settings.tenant_header)
            )
        except (AuthError, PermissionDenied) as exc:
            payload = {"code": exc.code, "message": exc.message}
            if exc.details is not None:
                payload["details"] = exc.details
            return JSONResponse(status_code=exc.status_code, content=payload)
        return await call_next(request)
