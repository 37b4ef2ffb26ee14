# fotospots/db/models/__init__.py
"""
Import all model modules so SQLModel registers their tables
when init_db() calls SQLModel.metadata.create_all(engine).
"""

from .spot import BestTime, Category, Region, Spot  # noqa: F401
from .stored_object import StoredObject  # noqa: F401

__all__ = [
    "BestTime",
    "Category",
    "Region",
    "Spot",
    "StoredObject",
]
