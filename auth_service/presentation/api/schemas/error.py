"""Error envelope returned by every failing request."""

from datetime import datetime, timezone
from http import HTTPStatus

from fastapi import Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Error body: when, which status, which exception, and where."""

    timestamp: datetime
    status: int
    error: str
    exception: str
    message: str
    path: str


def error_response(
    request: Request,
    status_code: int,
    exception_name: str,
    message: str,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    """Render an ``ErrorResponse`` for ``request``."""
    body = ErrorResponse(
        timestamp=datetime.now(timezone.utc),
        status=status_code,
        error=HTTPStatus(status_code).phrase,
        exception=exception_name,
        message=message,
        path=request.url.path,
    )
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(mode="json"),
        headers=headers,
    )
