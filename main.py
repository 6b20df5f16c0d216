"""
Auth Service
============
Entry point for running the user management service.

The FastAPI application is defined in auth_service/main.py and imported here.
"""

from auth_service.main import app, settings

# This enables uvicorn to run the application when specified as 'main:app'
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.SERVER_HOST, port=settings.SERVER_PORT, log_config=None)
