"""
Shared pytest fixtures for streetwalk tests.
"""

import copy
import os
import re
import sys
import pytest

# Add project root to path for imports
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, PROJECT_ROOT)

from streetwalk.config import PipelineConfig
from streetwalk.store import StreetStore


TORRENT_RELATION_ID = 340958

# Nodes 1-6 plus ways covering: a name with different case/whitespace,
# a locale-only name, an unnamed way, and a way with a missing node.
HIGHWAYS_RESPONSE = {
    "elements": [
        {"type": "node", "id": 1, "lat": 39.43, "lon": -0.46},
        {"type": "node", "id": 2, "lat": 39.44, "lon": -0.47},
        {"type": "node", "id": 3, "lat": 39.45, "lon": -0.48},
        {"type": "node", "id": 4, "lat": 39.46, "lon": -0.49},
        {"type": "node", "id": 5, "lat": 39.47, "lon": -0.50},
        {"type": "node", "id": 6, "lat": 39.48, "lon": -0.51},
        {"type": "way", "id": 10, "nodes": [1, 2],
         "tags": {"highway": "residential", "name": "Carrer Major"}},
        {"type": "way", "id": 11, "nodes": [2, 3],
         "tags": {"highway": "residential", "name": "  carrer major"}},
        {"type": "way", "id": 12, "nodes": [3, 4],
         "tags": {"highway": "tertiary", "name:ca": "Carrer de València", "name:es": "Calle de Valencia"}},
        {"type": "way", "id": 13, "nodes": [4, 5],
         "tags": {"highway": "residential"}},
        {"type": "way", "id": 14, "nodes": [5, 999],
         "tags": {"highway": "primary", "name": "Avinguda del Sol"}},
        {"type": "way", "id": 15, "nodes": [5, 6],
         "tags": {"highway": "primary", "name": "Avinguda del Sol"}},
    ]
}


class FakeOverpassClient:
    """Stands in for OverpassAPIClient; answers area lookups from a name table"""

    def __init__(self, relations_by_name=None, highways=None):
        self.relations_by_name = relations_by_name if relations_by_name is not None else {
            "Torrent": [TORRENT_RELATION_ID],
        }
        self.highways = highways if highways is not None else HIGHWAYS_RESPONSE
        self.queries = []

    def query(self, query):
        self.queries.append(query)
        match = re.search(r'\["name"="([^"]*)"\]', query)
        if match:
            ids = self.relations_by_name.get(match.group(1), [])
            return {"elements": [{"type": "relation", "id": rel_id} for rel_id in ids]}
        return copy.deepcopy(self.highways)


@pytest.fixture
def config(tmp_path):
    """Config with a temporary SQLite database and no waiting between requests."""
    cfg = PipelineConfig()
    cfg.store.database_url = f"sqlite:///{tmp_path / 'streets.db'}"
    cfg.cache_dir = None
    cfg.api.min_request_interval = 0.0
    cfg.api.retry_delay = 0.0
    cfg.api.retry_jitter = 0.0
    return cfg


@pytest.fixture
def store(config):
    """Empty street store with tables created."""
    street_store = StreetStore(config=config)
    street_store.create_schema()
    return street_store


@pytest.fixture
def fake_client():
    return FakeOverpassClient()


@pytest.fixture
def highways_response():
    return copy.deepcopy(HIGHWAYS_RESPONSE)
