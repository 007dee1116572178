"""
Errors raised by the street importer
"""

from typing import Optional

from .models import ImportResult


class StreetImportError(Exception):
    """Base class for importer errors"""


class NotFoundError(StreetImportError):
    """No administrative relation matches the boundary name"""

    def __init__(self, boundary: str):
        self.boundary = boundary
        super().__init__(f"No administrative relation found for {boundary}")


class UpstreamServiceError(StreetImportError):
    """Overpass answered with a non-success status or an unusable body"""

    def __init__(self, status_code: int, body: str):
        self.status_code = status_code
        self.body = body
        super().__init__(f"Overpass error: {status_code} {body[:500]}")


class TransportError(StreetImportError):
    """Overpass could not be reached (timeout, DNS, connection reset)"""


class ImportCancelledError(StreetImportError):
    """Import stopped between street groups because cancellation was requested"""

    def __init__(self, result: Optional[ImportResult] = None):
        self.result = result
        super().__init__("Street import cancelled")
