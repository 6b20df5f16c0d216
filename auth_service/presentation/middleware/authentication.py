import logging
from collections.abc import Awaitable, Callable

from fastapi import Request, Response
from fastapi.security.utils import get_authorization_scheme_param
from starlette.middleware.base import ASGIApp, BaseHTTPMiddleware
from starlette.status import HTTP_401_UNAUTHORIZED

from auth_service.core.exceptions import AuthenticationError
from auth_service.presentation.api.schemas.error import error_response

logger = logging.getLogger(__name__)

WWW_AUTHENTICATE = {"WWW-Authenticate": "Bearer"}


class AuthenticationMiddleware(BaseHTTPMiddleware):
    """
    Verify the bearer token of every request outside ``public_paths``.

    The verifier is looked up on ``app.state.token_verifier`` at request time,
    so it can be created during application startup.
    """

    def __init__(self, app: ASGIApp, public_paths: set[str] | None = None):
        super().__init__(app)
        self.public_paths = {self._normalize(p) for p in (public_paths or set())}
        logger.info(f"AuthenticationMiddleware initialized. Public paths: {sorted(self.public_paths)}")

    @staticmethod
    def _normalize(path: str) -> str:
        return path.rstrip("/") or "/"

    def _is_public_path(self, path: str) -> bool:
        return self._normalize(path) in self.public_paths

    def _extract_token(self, request: Request) -> str | None:
        authorization = request.headers.get("Authorization")
        if not authorization:
            return None
        scheme, param = get_authorization_scheme_param(authorization)
        if scheme.lower() != "bearer" or not param:
            return None
        return param

    async def dispatch(self, request: Request, call_next: Callable[[Request], Awaitable[Response]]) -> Response:
        if self._is_public_path(request.url.path):
            return await call_next(request)

        token = self._extract_token(request)
        if not token:
            logger.info(f"No bearer token for {request.method} {request.url.path}")
            return error_response(
                request,
                HTTP_401_UNAUTHORIZED,
                AuthenticationError.__name__,
                "Authentication token required",
                headers=WWW_AUTHENTICATE,
            )

        verifier = request.app.state.token_verifier
        try:
            principal = await verifier.verify(token)
        except AuthenticationError as e:
            logger.warning(f"Token rejected: {e}")
            return error_response(
                request,
                HTTP_401_UNAUTHORIZED,
                type(e).__name__,
                e.message,
                headers=WWW_AUTHENTICATE,
            )

        request.state.principal = principal
        return await call_next(request)
