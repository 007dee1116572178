"""
streetwalk: OpenStreetMap street importer for the street-tracking app
"""

from .pipeline import StreetImportPipeline, import_streets
from .models import ImportResult
from .collectors.osm import UnnamedWayPolicy

__version__ = "0.1.0"

__all__ = [
    "StreetImportPipeline",
    "import_streets",
    "ImportResult",
    "UnnamedWayPolicy",
]
