"""
Auth Service FastAPI Application

Application entry point: builds the app from settings and serves it with
uvicorn when executed directly.
"""

import uvicorn

from auth_service.app_factory import create_application
from auth_service.core.config.settings import get_settings

settings = get_settings()
app = create_application()


if __name__ == "__main__":
    uvicorn.run(
        "auth_service.main:app",
        host=settings.SERVER_HOST,
        port=settings.SERVER_PORT,
        log_config=None,
    )
