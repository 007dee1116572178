"""
Street Import Pipeline

Single-pass import of a municipality's street network from OpenStreetMap:

  1. Resolve the boundary name to an Overpass area (with short-name fallback)
  2. Fetch highway ways in the area, with their nodes
  3. Split the response into a node map and a way list
  4. Name ways and group them into streets
  5. Build LineString geometry per way
  6. Upsert one Street per group and one StreetSegment per way
  7. Prune legacy per-way streets (default policy)

Each run is a fresh, idempotent convergence pass: natural keys
("street-name:<name>", "way:<id>") make repeated imports refresh rather
than duplicate.
"""

import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Any, Dict, Optional
from loguru import logger

from .config import get_config, validate_config, PipelineConfig
from .exceptions import ImportCancelledError
from .models import ImportResult
from .collectors.osm import (
    AreaResolver, OSMResponseParser, OverpassAPIClient,
    StreetProcessor, UnnamedWayPolicy, WayGroup, STREET_WAY_PREFIX,
)
from .collectors.osm.models import NodeCoordinateMap
from .collectors.osm.queries import build_highways_query
from .store import StreetStore, UpsertKind


def segment_key(way_id: int) -> str:
    """Natural key of the segment built from a way"""
    return f"way:{way_id}"


class StreetImportPipeline:
    """
    Imports streets for one administrative boundary into the street store

    Usage:
        pipeline = StreetImportPipeline()
        result = pipeline.run("Torrent, Valencia")
        print(result.model_dump(by_alias=True))
    """

    def __init__(
        self,
        config: Optional[PipelineConfig] = None,
        store: Optional[StreetStore] = None,
        api_client: Optional[OverpassAPIClient] = None,
    ):
        self.config = config or get_config()
        validate_config(self.config)

        self.api_client = api_client or OverpassAPIClient(self.config)
        self.area_resolver = AreaResolver(self.api_client, self.config)
        self.parser = OSMResponseParser()
        self.street_processor = StreetProcessor(self.config)
        self.store = store or StreetStore(config=self.config)

    def fetch_highways(self, area_id: int) -> Dict[str, Any]:
        """Raw Overpass response with highway ways in the area and their nodes"""
        query = build_highways_query(
            area_id,
            highway_types=self.config.naming.highway_types,
            timeout=self.config.api.overpass_timeout
        )
        return self.api_client.query(query)

    def run(
        self,
        boundary: Optional[str] = None,
        unnamed_policy: UnnamedWayPolicy = UnnamedWayPolicy.PRUNE,
        cancel_event: Optional[threading.Event] = None,
    ) -> ImportResult:
        """
        Run one import

        Args:
            boundary: Administrative boundary name (defaults to config.default_boundary)
            unnamed_policy: Handling for ways without a name
            cancel_event: Checked between street groups; when set the run stops

        Returns:
            ImportResult with created/updated street, segment and prune counts

        Raises:
            NotFoundError, UpstreamServiceError, TransportError from the Overpass side,
            ImportCancelledError when cancelled, store errors unmodified
        """
        boundary = boundary or self.config.default_boundary
        logger.info(f"Importing streets for boundary: {boundary}")

        area_id = self.area_resolver.resolve_with_fallback(boundary)
        data = self.fetch_highways(area_id)

        nodes, ways, _ = self.parser.parse_elements(data)
        logger.info(f"Overpass returned {len(ways)} ways and {len(nodes)} nodes")

        groups = self.street_processor.group_ways(ways, unnamed_policy)
        logger.info(f"Grouped ways into {len(groups)} streets")

        if self.config.max_workers > 1:
            result = self._reconcile_parallel(groups, nodes, cancel_event)
        else:
            result = self._reconcile_sequential(groups, nodes, cancel_event)

        if unnamed_policy == UnnamedWayPolicy.PRUNE:
            result.pruned_unnamed = self.store.delete_streets_by_prefix(STREET_WAY_PREFIX)
            if result.pruned_unnamed:
                logger.info(f"Pruned {result.pruned_unnamed} legacy unnamed streets")

        logger.info(f"Import result: {result.created_streets} created, {result.updated_streets} updated, "
                    f"{result.upserted_segments} segments, {result.pruned_unnamed} pruned")
        return result

    def reconcile_group(self, group: WayGroup, nodes: NodeCoordinateMap) -> ImportResult:
        """Upsert the group's street and one segment per buildable way"""
        result = ImportResult()

        street = self.store.upsert_street(group.key, group.name)
        if street.kind == UpsertKind.CREATED:
            result.created_streets += 1
        else:
            result.updated_streets += 1

        for way in group.ways:
            geometry = self.street_processor.build_line_string(way.node_ids, nodes)
            if geometry is None:
                logger.debug(f"Way {way.id} ({group.name}): fewer than 2 known nodes, skipped")
                continue
            self.store.upsert_street_segment(segment_key(way.id), street.id, geometry.model_dump())
            result.upserted_segments += 1

        return result

    def _reconcile_sequential(
        self,
        groups: Dict[str, WayGroup],
        nodes: NodeCoordinateMap,
        cancel_event: Optional[threading.Event],
    ) -> ImportResult:
        result = ImportResult()
        for group in groups.values():
            if cancel_event is not None and cancel_event.is_set():
                logger.warning("Import cancelled between street groups")
                raise ImportCancelledError(result)
            result.merge(self.reconcile_group(group, nodes))
        return result

    def _reconcile_parallel(
        self,
        groups: Dict[str, WayGroup],
        nodes: NodeCoordinateMap,
        cancel_event: Optional[threading.Event],
    ) -> ImportResult:
        """Reconcile groups on a bounded thread pool; groups never share natural keys"""
        result = ImportResult()
        cancelled = False

        def reconcile_unless_cancelled(group: WayGroup) -> Optional[ImportResult]:
            if cancel_event is not None and cancel_event.is_set():
                return None
            return self.reconcile_group(group, nodes)

        with ThreadPoolExecutor(max_workers=self.config.max_workers) as executor:
            futures = [executor.submit(reconcile_unless_cancelled, group) for group in groups.values()]
            try:
                for future in as_completed(futures):
                    group_result = future.result()
                    if group_result is None:
                        cancelled = True
                    else:
                        result.merge(group_result)
            except BaseException:
                for future in futures:
                    future.cancel()
                raise

        if cancelled:
            logger.warning("Import cancelled between street groups")
            raise ImportCancelledError(result)
        return result


def import_streets(
    boundary: Optional[str] = None,
    prune_unnamed: bool = True,
    unnamed_policy: Optional[UnnamedWayPolicy] = None,
    cancel_event: Optional[threading.Event] = None,
    config: Optional[PipelineConfig] = None,
) -> ImportResult:
    """
    Import streets for `boundary`, creating store tables if needed

    `prune_unnamed` selects PRUNE (True) or SKIP (False); an explicit
    `unnamed_policy` takes precedence.
    """
    if unnamed_policy is None:
        unnamed_policy = UnnamedWayPolicy.PRUNE if prune_unnamed else UnnamedWayPolicy.SKIP

    pipeline = StreetImportPipeline(config=config)
    pipeline.store.create_schema()
    return pipeline.run(boundary, unnamed_policy=unnamed_policy, cancel_event=cancel_event)
