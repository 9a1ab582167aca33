"""
Handlers.

Bot command and message handlers.
"""

from bot.handlers import start

__all__ = [
    "start",
]
