"""
app/services package marker.
"""

from app.services.query_service import RouteQueryService, get_route_query_service
from app.services.snapshot_ingestion_service import (
    SnapshotIngestionService,
    get_snapshot_ingestion_service,
)

__all__ = [
    "RouteQueryService",
    "get_route_query_service",
    "SnapshotIngestionService",
    "get_snapshot_ingestion_service",
]
