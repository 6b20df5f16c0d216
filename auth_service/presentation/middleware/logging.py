import json
import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

ANONYMOUS = "anonymous"


class LoggingMiddleware(BaseHTTPMiddleware):
    """
    Middleware logging each request on arrival and on completion.

    The completion record carries the response status and the authenticated
    username, which the auth dependency stores in ``request.state.principal``.
    Request bodies and headers are never logged.
    """

    def __init__(self, app: ASGIApp, logger: logging.Logger | None = None) -> None:
        super().__init__(app)
        self.logger = logger or logging.getLogger(__name__)

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        start_time = time.time()
        request_id = getattr(request.state, "request_id", "N/A")
        client_ip = self._get_client_ip(request)

        self.logger.info(
            f"Incoming request: method={request.method} uri={request.url.path} ip={client_ip}"
        )

        try:
            response = await call_next(request)
        except Exception as e:
            process_time = (time.time() - start_time) * 1000
            self.logger.error(
                f"Request failed: {request.method} {request.url.path} {request_id} "
                f"| Duration: {process_time:.2f}ms | Error: {e}",
                exc_info=True,
            )
            raise

        process_time = (time.time() - start_time) * 1000
        log_details = {
            "message": "Request finished",
            "request_id": request_id,
            "method": request.method,
            "path": request.url.path,
            "client_ip": client_ip,
            "status_code": response.status_code,
            "user": self._get_username(request),
            "duration_ms": round(process_time, 2),
        }
        self.logger.info(json.dumps(log_details))
        return response

    def _get_client_ip(self, request: Request) -> str:
        if request.client:
            return request.client.host
        return "N/A"

    def _get_username(self, request: Request) -> str:
        principal = getattr(request.state, "principal", None)
        if principal is None:
            return ANONYMOUS
        return principal.username or principal.subject or ANONYMOUS
