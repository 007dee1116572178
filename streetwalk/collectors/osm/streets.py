"""
Street-specific logic

Handles street naming, grouping ways into streets and building segment geometry
"""

from enum import Enum
from typing import Dict, List, Mapping, Optional
from loguru import logger

from .models import OSMWay, NodeCoordinateMap
from ...config import get_config, PipelineConfig
from ...models import GeoJSONLineString

STREET_NAME_PREFIX = "street-name:"
STREET_WAY_PREFIX = "street-way:"


class UnnamedWayPolicy(str, Enum):
    """What to do with ways that have no usable name"""
    PRUNE = "prune"      # drop them and delete legacy per-way streets
    SKIP = "skip"        # drop them, leave stored records alone
    PER_WAY = "per_way"  # one synthetic single-segment street per way


def street_key(name: str) -> str:
    """Canonical grouping key: case and surrounding whitespace are ignored"""
    return f"{STREET_NAME_PREFIX}{name.strip().lower()}"


def way_street_key(way_id: int) -> str:
    """Synthetic key for an unnamed way that becomes its own street"""
    return f"{STREET_WAY_PREFIX}{way_id}"


class WayGroup:
    """Ways sharing one street key, in input order"""

    def __init__(self, key: str, name: str):
        self.key = key
        self.name = name
        self.ways: List[OSMWay] = []

    def __len__(self) -> int:
        return len(self.ways)

    def __repr__(self) -> str:
        return f"WayGroup({self.key!r}, {len(self.ways)} ways)"


class StreetProcessor:
    """Names, groups and converts street ways from OSM data"""

    def __init__(self, config: Optional[PipelineConfig] = None):
        self.config = config or get_config()
        self.name_tags = list(self.config.naming.name_tags)

    def pick_street_name(self, tags: Optional[Mapping[str, str]]) -> Optional[str]:
        """
        Display name from a way's tags

        Returns the first non-empty trimmed value among the configured name tags
        (name, name:ca, name:val, name:es, official_name), or None.
        """
        if not tags:
            return None
        for tag in self.name_tags:
            value = tags.get(tag)
            if value and value.strip():
                return value.strip()
        return None

    def group_ways(
        self,
        ways: List[OSMWay],
        unnamed_policy: UnnamedWayPolicy = UnnamedWayPolicy.PRUNE
    ) -> Dict[str, WayGroup]:
        """
        Bucket ways by canonical street key

        The first way in a bucket supplies the street name. Unnamed ways are
        dropped unless the policy is PER_WAY.

        Args:
            ways: Ways in response order
            unnamed_policy: Handling for ways without a name

        Returns:
            Dict of street key -> WayGroup, in order of first appearance
        """
        groups: Dict[str, WayGroup] = {}
        unnamed = 0

        for way in ways:
            name = self.pick_street_name(way.tags)
            if name:
                key = street_key(name)
            elif unnamed_policy == UnnamedWayPolicy.PER_WAY:
                key = way_street_key(way.id)
                name = f"Unnamed {way.tags.get('highway', 'way')} {way.id}"
            else:
                unnamed += 1
                continue

            group = groups.get(key)
            if group is None:
                group = groups[key] = WayGroup(key, name)
            group.ways.append(way)

        if unnamed:
            logger.debug(f"Dropped {unnamed} unnamed ways")
        return groups

    @staticmethod
    def build_line_string(node_ids: List[int], nodes: NodeCoordinateMap) -> Optional[GeoJSONLineString]:
        """
        LineString of [lon, lat] pairs for the node ids that resolve

        Ids missing from `nodes` are skipped. Returns None when fewer than
        two coordinates resolve.
        """
        coords = []
        for node_id in node_ids:
            node = nodes.get(node_id)
            if node is None:
                continue
            coords.append([node.lon, node.lat])

        if len(coords) < 2:
            return None
        return GeoJSONLineString(coordinates=coords)
