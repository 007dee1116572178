"""
OSM data models

Data classes for representing OSM nodes, ways and relations
"""

from typing import List, Dict
from dataclasses import dataclass, field


@dataclass
class OSMNode:
    """Represents an OSM node (point)"""
    id: int
    lat: float
    lon: float
    tags: Dict[str, str] = field(default_factory=dict)


@dataclass
class OSMWay:
    """Represents an OSM way (ordered chain of node ids)"""
    id: int
    node_ids: List[int]
    tags: Dict[str, str] = field(default_factory=dict)


@dataclass
class OSMRelation:
    """Represents an OSM relation (only used to resolve administrative areas)"""
    id: int
    tags: Dict[str, str] = field(default_factory=dict)


# Node id -> node, built once per import run
NodeCoordinateMap = Dict[int, OSMNode]
