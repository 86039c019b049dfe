"""
app/schemas package marker.
"""

from app.schemas.query import QueryRequest, QueryResponse
from app.schemas.snapshot_upload import ErrorResponse, SnapshotUploadResponse
from app.schemas.users import RouteAssignmentRequest, RouteAssignmentResponse, UserAccountResponse

__all__ = [
    "ErrorResponse",
    "QueryRequest",
    "QueryResponse",
    "RouteAssignmentRequest",
    "RouteAssignmentResponse",
    "SnapshotUploadResponse",
    "UserAccountResponse",
]
