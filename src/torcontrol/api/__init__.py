"""
HTTP API for torcontrol.

Run with any ASGI server, e.g. ``uvicorn torcontrol.api:app``.
"""

from fastapi import FastAPI

from torcontrol import __version__
from torcontrol.api.routes.control import router as control_router


def create_app() -> FastAPI:
    """Create the FastAPI application."""
    application = FastAPI(
        title="torcontrol",
        version=__version__,
        description="HTTP access to a Tor daemon's control port",
    )
    application.include_router(control_router)
    return application


app = create_app()
