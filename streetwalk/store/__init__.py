"""
Persistence for imported streets

- Tables: Street, StreetSegment (SQLAlchemy ORM)
- Repository: StreetStore with idempotent upserts by natural key
"""

from .tables import Base, Street, StreetSegment
from .repository import StreetStore, UpsertKind, UpsertResult, make_engine

__all__ = [
    "Base",
    "Street",
    "StreetSegment",
    "StreetStore",
    "UpsertKind",
    "UpsertResult",
    "make_engine",
]
