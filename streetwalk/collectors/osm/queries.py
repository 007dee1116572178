"""
Overpass QL query builders
"""

from typing import Optional, Sequence


def _escape(value: str) -> str:
    """Escape a value for use inside a double-quoted Overpass string"""
    return value.replace("\\", "\\\\").replace('"', '\\"')


def build_area_query(boundary: str, timeout: int = 180) -> str:
    """Administrative boundary relation whose name tag equals `boundary` exactly"""
    return f"""
    [out:json][timeout:{timeout}];
    rel["boundary"="administrative"]["name"="{_escape(boundary)}"];
    out ids;
    """


def build_highways_query(
    area_id: int,
    highway_types: Optional[Sequence[str]] = None,
    timeout: int = 180
) -> str:
    """
    Highway ways inside an Overpass area, plus every node they reference

    Args:
        area_id: Overpass area id (3600000000 + relation id)
        highway_types: Allowlist of highway tag values; empty/None selects all highways
        timeout: Server-side [timeout:...] directive in seconds

    Returns:
        Overpass QL query string
    """
    if highway_types:
        highway_filter = f'["highway"~"^({"|".join(_escape(t) for t in highway_types)})$"]'
    else:
        highway_filter = '["highway"]'

    return f"""
    [out:json][timeout:{timeout}];
    area({area_id})->.searchArea;
    (
      way{highway_filter}(area.searchArea);
    );
    (._;>;);
    out body;
    """
