"""
Logging Configuration Module.

This module builds the central logging configuration dictionary for the
service. Every handler stamps records with the current request id and
carries the credential sanitizing filter, so passwords, client secrets and
bearer tokens never reach a log sink.
"""

import copy
import logging
import logging.config
from pathlib import Path
from typing import Any

from auth_service.core.config.settings import Settings

LOGGING_CONFIG_BASE: dict[str, Any] = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "standard": {
            "format": "[%(asctime)s] [%(levelname)s] [%(request_id)s] [%(name)s] - %(message)s",
            "datefmt": "%Y-%m-%d %H:%M:%S",
        },
        "detailed": {
            "format": "[%(asctime)s] [%(levelname)s] [%(request_id)s] [%(name)s:%(lineno)d] - %(message)s",
            "datefmt": "%Y-%m-%d %H:%M:%S",
        },
    },
    "filters": {
        "credential_sanitizer": {
            "()": "auth_service.core.utils.logging.CredentialSanitizingFilter",
        },
        "request_id": {
            "()": "auth_service.core.utils.logging.RequestIdFilter",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "level": "INFO",
            "formatter": "standard",
            "filters": ["request_id", "credential_sanitizer"],
            "stream": "ext://sys.stdout",
        },
    },
    "loggers": {
        "auth_service": {
            "level": "INFO",
            "handlers": ["console"],
            "propagate": False,
        },
        "uvicorn": {
            "level": "INFO",
            "handlers": ["console"],
            "propagate": False,
        },
        "httpx": {
            "level": "WARNING",
            "handlers": ["console"],
            "propagate": False,
        },
        "botocore": {
            "level": "WARNING",
            "handlers": ["console"],
            "propagate": False,
        },
    },
    "root": {
        "level": "INFO",
        "handlers": ["console"],
    },
}


def build_logging_config(settings: Settings) -> dict[str, Any]:
    """
    Derive a concrete logging configuration from settings.

    The console handler is always present; a rotating file handler is added
    when ``LOG_FILE`` is set.
    """
    config = copy.deepcopy(LOGGING_CONFIG_BASE)
    level = settings.LOG_LEVEL

    config["handlers"]["console"]["level"] = level
    config["root"]["level"] = level
    for name in ("auth_service", "uvicorn"):
        config["loggers"][name]["level"] = level

    if settings.LOG_FILE:
        config["handlers"]["file_handler"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "level": level,
            "formatter": "detailed",
            "filters": ["request_id", "credential_sanitizer"],
            "filename": settings.LOG_FILE,
            "maxBytes": settings.LOG_MAX_BYTES,
            "backupCount": settings.LOG_BACKUP_COUNT,
            "encoding": "utf8",
        }
        config["root"]["handlers"].append("file_handler")
        for logger_config in config["loggers"].values():
            logger_config["handlers"].append("file_handler")

    return config


def setup_logging(settings: Settings) -> None:
    """
    Configure the logging system from settings.

    Args:
        settings: Application settings supplying level and file location
    """
    config = build_logging_config(settings)

    if settings.LOG_FILE:
        Path(settings.LOG_FILE).parent.mkdir(parents=True, exist_ok=True)

    logging.config.dictConfig(config)
    logging.getLogger(__name__).debug("Logging configured successfully")
