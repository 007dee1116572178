"""
Administrative area resolution

Turns a boundary name ("Torrent, Valencia") into an Overpass area id
"""

from typing import Optional
from loguru import logger

from .api_client import OverpassAPIClient
from .parser import OSMResponseParser
from .queries import build_area_query
from ...config import get_config, PipelineConfig
from ...exceptions import NotFoundError

# Overpass derives area ids from relation ids by this fixed offset
AREA_ID_OFFSET = 3_600_000_000


def shorten_boundary(boundary: str) -> str:
    """Text before the first comma, trimmed ("Torrent, Valencia" -> "Torrent")"""
    return boundary.split(",")[0].strip()


class AreaResolver:
    """Resolves administrative boundary names to Overpass area ids"""

    def __init__(self, api_client: OverpassAPIClient, config: Optional[PipelineConfig] = None):
        self.config = config or get_config()
        self.api_client = api_client
        self.parser = OSMResponseParser()

    def resolve(self, boundary: str) -> int:
        """
        Area id for the administrative relation named exactly `boundary`

        Raises:
            NotFoundError: No administrative relation has that name
        """
        query = build_area_query(boundary, timeout=self.config.api.overpass_timeout)
        data = self.api_client.query(query)
        _, _, relations = self.parser.parse_elements(data)

        if not relations:
            raise NotFoundError(boundary)

        if len(relations) > 1:
            # Response order decides; Overpass does not promise it is stable
            logger.warning(f"Boundary '{boundary}' matches {len(relations)} relations "
                           f"({', '.join(str(r.id) for r in relations)}); using {relations[0].id}")

        relation_id = relations[0].id
        area_id = AREA_ID_OFFSET + relation_id
        logger.info(f"Resolved '{boundary}' to relation {relation_id} (area {area_id})")
        return area_id

    def resolve_with_fallback(self, boundary: str) -> int:
        """
        Resolve `boundary`, retrying once with the part before the first comma

        A second NotFoundError propagates to the caller.
        """
        try:
            return self.resolve(boundary)
        except NotFoundError:
            short = shorten_boundary(boundary)
            if not short or short == boundary:
                raise
            logger.info(f"No relation named '{boundary}', retrying with '{short}'")
            return self.resolve(short)
