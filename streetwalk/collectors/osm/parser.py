"""
OSM response parser

Parses Overpass API responses into OSMNode, OSMWay and OSMRelation objects
"""

from typing import Dict, Any, Tuple, List
from .models import OSMNode, OSMWay, OSMRelation, NodeCoordinateMap


class OSMResponseParser:
    """Parses Overpass API responses"""

    @staticmethod
    def parse_elements(data: Dict[str, Any]) -> Tuple[NodeCoordinateMap, List[OSMWay], List[OSMRelation]]:
        """
        Split an Overpass response into nodes, ways and relations

        Ways keep their response order. Elements of other types are ignored.

        Args:
            data: JSON response from Overpass API ('out body' or 'out ids')

        Returns:
            Tuple of (node id -> OSMNode dict, ways list, relations list)
        """
        nodes: NodeCoordinateMap = {}
        ways = []
        relations = []

        for element in data.get("elements", []):
            element_type = element.get("type")
            if element_type == "node":
                nodes[element["id"]] = OSMNode(
                    id=element["id"],
                    lat=element["lat"],
                    lon=element["lon"],
                    tags=element.get("tags") or {}
                )
            elif element_type == "way":
                ways.append(OSMWay(
                    id=element["id"],
                    node_ids=list(element.get("nodes", [])),
                    tags=element.get("tags") or {}
                ))
            elif element_type == "relation":
                relations.append(OSMRelation(
                    id=element["id"],
                    tags=element.get("tags") or {}
                ))

        return nodes, ways, relations
