"""
Middlewares.

Bot middlewares for request processing.
"""

from bot.middlewares.database import DatabaseMiddleware
from bot.middlewares.error_handler import ErrorHandlerMiddleware


__all__ = [
    "DatabaseMiddleware",
    "ErrorHandlerMiddleware",
]
