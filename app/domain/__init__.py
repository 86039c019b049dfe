"""
app/domain package marker.
"""

from app.domain.route_snapshot import (
    ClientRouteRecord,
    MalformedUploadError,
    RowValidationSkip,
    SnapshotPersistenceError,
    SnapshotUploadSummary,
)

__all__ = [
    "ClientRouteRecord",
    "MalformedUploadError",
    "RowValidationSkip",
    "SnapshotPersistenceError",
    "SnapshotUploadSummary",
]
