"""
Model package exports.

Import all SQLAlchemy models here so metadata registration and Alembic
autogeneration work without extra imports.
"""

from db.models.report import Report, ReportStatus
from db.models.route_data import RouteData
from db.models.user import User

__all__ = [
    "Report",
    "ReportStatus",
    "RouteData",
    "User",
]
