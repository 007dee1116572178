"""
OpenStreetMap street collection module

Modular OSM components:
- Queries: Overpass QL builders
- API client: Overpass API communication
- Cache: Caching of raw responses
- Models: Data structures (OSMNode, OSMWay, OSMRelation)
- Parser: Response parsing
- Area: Boundary name -> Overpass area id
- Streets: Naming, grouping and geometry for street ways
"""

from .models import OSMNode, OSMWay, OSMRelation
from .api_client import OverpassAPIClient
from .cache import OSMCache
from .parser import OSMResponseParser
from .area import AreaResolver, AREA_ID_OFFSET
from .streets import (
    StreetProcessor, UnnamedWayPolicy, WayGroup,
    street_key, way_street_key, STREET_NAME_PREFIX, STREET_WAY_PREFIX,
)

__all__ = [
    "OSMNode",
    "OSMWay",
    "OSMRelation",
    "OverpassAPIClient",
    "OSMCache",
    "OSMResponseParser",
    "AreaResolver",
    "AREA_ID_OFFSET",
    "StreetProcessor",
    "UnnamedWayPolicy",
    "WayGroup",
    "street_key",
    "way_street_key",
    "STREET_NAME_PREFIX",
    "STREET_WAY_PREFIX",
]
