"""
Bot Initialization Module.

This module contains all initialization logic split into focused modules:
- logging: Logger configuration
- middlewares: Middleware registration
- handlers: Handler registration
- shutdown: Graceful shutdown handler
"""

__all__ = []
