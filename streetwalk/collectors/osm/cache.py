"""
OSM data caching

Raw Overpass responses are stored as JSON files named after a hash of the
query text. A cache directory of None disables caching.
"""

import os
import json
import hashlib
from typing import Dict, Any, Optional
from loguru import logger


class OSMCache:
    """Caches raw Overpass responses on disk, keyed by query text"""

    def __init__(self, cache_dir: Optional[str] = None):
        self.cache_dir = cache_dir

    def get_cache_path(self, query: str) -> Optional[str]:
        """Cache file for an Overpass query, or None when caching is off"""
        if not self.cache_dir:
            return None
        # Whitespace-insensitive so reformatted queries share an entry
        cache_key = " ".join(query.split())
        cache_hash = hashlib.md5(cache_key.encode("utf-8")).hexdigest()[:12]
        return os.path.join(self.cache_dir, f"overpass_{cache_hash}.json")

    def load(self, cache_path: str) -> Optional[Dict[str, Any]]:
        """
        Cached response for `cache_path`

        Unreadable or malformed entries are discarded so the next
        successful query replaces them.
        """
        if not os.path.isfile(cache_path):
            return None
        try:
            with open(cache_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning(f"Discarding unreadable cache entry {cache_path}: {e}")
            self._discard(cache_path)
            return None
        if not isinstance(data, dict):
            logger.warning(f"Discarding cache entry {cache_path}: not a JSON object")
            self._discard(cache_path)
            return None
        logger.debug(f"Overpass response served from cache: {cache_path}")
        return data

    def save(self, cache_path: str, data: Dict[str, Any]):
        """Write `data` to a temporary file and move it into place"""
        if not self.cache_dir:
            return
        tmp_path = f"{cache_path}.tmp"
        try:
            os.makedirs(self.cache_dir, exist_ok=True)
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False)
            os.replace(tmp_path, cache_path)
        except OSError as e:
            logger.warning(f"Could not cache Overpass response at {cache_path}: {e}")
            self._discard(tmp_path)
            return
        logger.debug(f"Cached Overpass response: {cache_path}")

    @staticmethod
    def _discard(path: str):
        try:
            os.remove(path)
        except FileNotFoundError:
            return
        except OSError as e:
            logger.debug(f"Could not remove {path}: {e}")
