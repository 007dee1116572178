"""
SQLAlchemy tables for imported streets
"""

import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List

from sqlalchemy import JSON, DateTime, ForeignKey, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return str(uuid.uuid4())


class Base(DeclarativeBase):
    pass


class Street(Base):
    __tablename__ = "streets"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    osm_id: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    name: Mapped[str] = mapped_column(String(255))
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    segments: Mapped[List["StreetSegment"]] = relationship(back_populates="street")

    def __repr__(self) -> str:
        return f"Street(osm_id={self.osm_id!r}, name={self.name!r})"


class StreetSegment(Base):
    __tablename__ = "street_segments"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    osm_id: Mapped[str] = mapped_column(String(64), unique=True, index=True)
    street_id: Mapped[str] = mapped_column(ForeignKey("streets.id", ondelete="CASCADE"), index=True)
    geometry: Mapped[Dict[str, Any]] = mapped_column(JSON)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    street: Mapped[Street] = relationship(back_populates="segments")

    def __repr__(self) -> str:
        return f"StreetSegment(osm_id={self.osm_id!r}, street_id={self.street_id!r})"
