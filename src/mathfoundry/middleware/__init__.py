"""Middleware registration."""

from fastapi import FastAPI

from mathfoundry.config import Settings
from mathfoundry.middleware.cors import setup_cors
from mathfoundry.middleware.error_handler import setup_error_handlers
from mathfoundry.middleware.logging import setup_logging
from mathfoundry.middleware.request_id import RequestIdMiddleware


def setup_middleware(app: FastAPI, settings: Settings) -> None:
    """Register all middleware in the correct order.

    Starlette runs middleware in reverse-add order, so CORS goes last to wrap
    every response, error responses included.
    """
    setup_logging(settings)
    setup_error_handlers(app)
    app.add_middleware(RequestIdMiddleware)
    setup_cors(app, settings)
