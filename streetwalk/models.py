"""
Pydantic models for importer output
"""

from typing import List, Literal
from pydantic import BaseModel, ConfigDict, Field


class GeoJSONLineString(BaseModel):
    type: Literal["LineString"] = "LineString"
    coordinates: List[List[float]] = Field(min_length=2)  # [[lon, lat], ...]


class ImportResult(BaseModel):
    """Aggregate counts for one import run"""
    model_config = ConfigDict(populate_by_name=True)

    created_streets: int = Field(default=0, alias="createdStreets")
    updated_streets: int = Field(default=0, alias="updatedStreets")
    upserted_segments: int = Field(default=0, alias="upsertedSegments")
    pruned_unnamed: int = Field(default=0, alias="prunedUnnamed")

    def merge(self, other: "ImportResult") -> None:
        """Add another result's counts into this one"""
        self.created_streets += other.created_streets
        self.updated_streets += other.updated_streets
        self.upserted_segments += other.upserted_segments
        self.pruned_unnamed += other.pruned_unnamed
