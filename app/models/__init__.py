"""
Models package for the venue discovery backend.

SQLAlchemy ORM models persisted in the venue store.
"""

from .establishment import Establishment

__all__ = ["Establishment"]
