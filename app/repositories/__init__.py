"""
app/repositories package marker.
"""

from app.repositories.base import (
    ReportSink,
    RouteAssignment,
    SnapshotStore,
    UserAccount,
    UserAdministration,
    UserDirectory,
)
from app.repositories.report_repository import ReportRepository
from app.repositories.route_data_repository import RouteDataRepository
from app.repositories.user_repository import UserRouteRepository

__all__ = [
    "ReportRepository",
    "ReportSink",
    "RouteAssignment",
    "RouteDataRepository",
    "SnapshotStore",
    "UserAccount",
    "UserAdministration",
    "UserDirectory",
    "UserRouteRepository",
]
