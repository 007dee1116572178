"""
Street persistence

Idempotent upserts keyed on OSM-derived natural keys. Every call runs in its
own session and commits on its own.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Type, Union

from loguru import logger
from sqlalchemy import create_engine, delete, func, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from .tables import Base, Street, StreetSegment, utcnow
from ..config import get_config, PipelineConfig


class UpsertKind(str, Enum):
    CREATED = "created"
    UPDATED = "updated"


@dataclass
class UpsertResult:
    """Outcome of an upsert: the row's id and whether it was created or updated"""
    id: str
    kind: UpsertKind

    @property
    def created(self) -> bool:
        return self.kind == UpsertKind.CREATED


def make_engine(database_url: str, echo: bool = False) -> Engine:
    """Engine for `database_url`; SQLite connections may be shared across worker threads"""
    connect_args = {}
    if database_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False
    return create_engine(database_url, echo=echo, connect_args=connect_args)


class StreetStore:
    """Reads and writes Street and StreetSegment rows"""

    def __init__(self, engine: Optional[Engine] = None, config: Optional[PipelineConfig] = None):
        self.config = config or get_config()
        self.engine = engine or make_engine(self.config.store.database_url, self.config.store.echo)

    def create_schema(self):
        """Create tables that do not exist yet"""
        Base.metadata.create_all(self.engine)

    def _upsert(self, model: Type[Union[Street, StreetSegment]], osm_id: str, values: Dict[str, Any]) -> UpsertResult:
        with Session(self.engine, expire_on_commit=False) as session:
            row = session.scalars(select(model).where(model.osm_id == osm_id)).one_or_none()
            if row is None:
                row = model(osm_id=osm_id, **values)
                session.add(row)
                try:
                    session.commit()
                    return UpsertResult(row.id, UpsertKind.CREATED)
                except IntegrityError:
                    session.rollback()
                    row = session.scalars(select(model).where(model.osm_id == osm_id)).one_or_none()
                    if row is None:
                        # Not a lost race on the key; constraint violated by the values
                        raise
                    logger.debug(f"Concurrent insert for {osm_id}, updating existing row")

            for attr, value in values.items():
                setattr(row, attr, value)
            row.updated_at = utcnow()
            session.commit()
            return UpsertResult(row.id, UpsertKind.UPDATED)

    def upsert_street(self, osm_id: str, name: str) -> UpsertResult:
        """Create the street or refresh its name"""
        return self._upsert(Street, osm_id, {"name": name})

    def upsert_street_segment(self, osm_id: str, street_id: str, geometry: Dict[str, Any]) -> UpsertResult:
        """Create the segment or re-point it and replace its geometry"""
        return self._upsert(StreetSegment, osm_id, {"street_id": street_id, "geometry": geometry})

    def delete_streets_by_prefix(self, prefix: str) -> int:
        """
        Delete streets whose osm_id starts with `prefix`, with their segments

        Returns:
            Number of streets deleted
        """
        with Session(self.engine) as session:
            street_ids = select(Street.id).where(Street.osm_id.startswith(prefix, autoescape=True))
            session.execute(delete(StreetSegment).where(StreetSegment.street_id.in_(street_ids)))
            result = session.execute(delete(Street).where(Street.osm_id.startswith(prefix, autoescape=True)))
            session.commit()
            return result.rowcount

    def get_street(self, osm_id: str) -> Optional[Street]:
        with Session(self.engine, expire_on_commit=False) as session:
            return session.scalars(select(Street).where(Street.osm_id == osm_id)).one_or_none()

    def get_segment(self, osm_id: str) -> Optional[StreetSegment]:
        with Session(self.engine, expire_on_commit=False) as session:
            return session.scalars(select(StreetSegment).where(StreetSegment.osm_id == osm_id)).one_or_none()

    def count_streets(self) -> int:
        with Session(self.engine) as session:
            return session.scalar(select(func.count()).select_from(Street))

    def count_segments(self) -> int:
        with Session(self.engine) as session:
            return session.scalar(select(func.count()).select_from(StreetSegment))
