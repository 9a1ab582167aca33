"""
Database models.

Exports all SQLAlchemy models for easy imports.
"""

from app.models.base import Base
from app.models.player import Player

__all__ = [
    "Base",
    "Player",
]
