"""
Logging utilities.

Provides the credential sanitizing filter attached to every handler, the
request id filter, and a small ``get_logger`` helper.
"""

import logging
import re
from contextvars import ContextVar

MASK = "[REDACTED]"
NO_REQUEST_ID = "-"

request_id_context: ContextVar[str] = ContextVar("request_id", default=NO_REQUEST_ID)

# key=value, key: value and "key": "value" forms; quoted values run to the
# closing quote, bare values to the next separator or end of line
_SECRET_FIELD_PATTERN = re.compile(
    r"(?P<key>[\"']?(?:password|client_secret|access_token|refresh_token)[\"']?\s*[:=]\s*)"
    r"(?:(?P<quote>[\"'])(?:\\.|(?!(?P=quote)).)*(?:(?P=quote)|$)|[^\"'&,}\r\n]+)",
    re.IGNORECASE | re.MULTILINE,
)
_BEARER_PATTERN = re.compile(r"(?P<key>bearer\s+)(?P<value>[A-Za-z0-9\-_.~+/=]+)", re.IGNORECASE)


def _mask_field(match: re.Match[str]) -> str:
    quote = match.group("quote") or ""
    return f"{match.group('key')}{quote}{MASK}{quote}"


def sanitize_text(text: str) -> str:
    """Mask passwords, client secrets and bearer tokens in ``text``."""
    text = _SECRET_FIELD_PATTERN.sub(_mask_field, text)
    return _BEARER_PATTERN.sub(lambda m: f"{m.group('key')}{MASK}", text)


class CredentialSanitizingFilter(logging.Filter):
    """Custom logging filter to strip credentials from log records."""

    def __init__(self, name: str = "CredentialSanitizer"):
        super().__init__(name)

    def filter(self, record: logging.LogRecord) -> bool:
        original_message = record.getMessage()
        sanitized_message = sanitize_text(original_message)

        # Bake args into msg so formatters see the sanitized text
        record.msg = sanitized_message
        record.message = record.msg
        record.args = ()

        return True


class RequestIdFilter(logging.Filter):
    """Stamp records with the id of the request being served."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_context.get()
        return True


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger for ``name`` that always carries the sanitizing filter.

    Args:
        name: Logger name, typically __name__ of the calling module

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)
    if not any(isinstance(f, CredentialSanitizingFilter) for f in logger.filters):
        logger.addFilter(CredentialSanitizingFilter())
    return logger
