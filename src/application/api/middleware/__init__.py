"""
Middleware Package

- error_handler: centralized handling of unhandled exceptions

Middleware executes in reverse order of registration; register the error
handler first so it wraps everything added later.
"""

from fastapi import FastAPI

from src.core.config.settings import get_settings

from .error_handler import ErrorHandlingMiddleware, add_error_handling_middleware


def setup_middleware(app: FastAPI) -> None:
    settings = get_settings()
    add_error_handling_middleware(app, include_traceback=(settings.app.ENVIRONMENT == "development"))


__all__ = [
    "setup_middleware",
    "ErrorHandlingMiddleware",
    "add_error_handling_middleware",
]
