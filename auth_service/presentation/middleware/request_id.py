import uuid

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from auth_service.core.utils.logging import request_id_context

REQUEST_ID_HEADER = "x-request-id"


def _accepted_or_new(candidate: str | None) -> str:
    try:
        return str(uuid.UUID(candidate))
    except (TypeError, ValueError):
        return str(uuid.uuid4())


class RequestIdMiddleware(BaseHTTPMiddleware):
    """
    Correlate each request with an id.

    A UUID sent in ``X-Request-ID`` is reused, anything else is replaced by a
    fresh UUIDv4. The id is kept on ``request.state.request_id``, bound to the
    logging context for the lifetime of the request, and echoed back in the
    response header.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        request_id = _accepted_or_new(request.headers.get(REQUEST_ID_HEADER))
        request.state.request_id = request_id

        token = request_id_context.set(request_id)
        try:
            response = await call_next(request)
        finally:
            request_id_context.reset(token)

        response.headers[REQUEST_ID_HEADER] = request_id
        return response
