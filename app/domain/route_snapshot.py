"""
app/domain/route_snapshot.py

Domain models used by the snapshot upload flow.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

ROUTE_PLACEHOLDERS: frozenset[str] = frozenset({"0", "0.0"})


class MalformedUploadError(ValueError):
    """
    Raised when an upload cannot be reconciled at all (too few rows,
    undecodable bytes). Nothing is written when this is raised.
    """


class SnapshotPersistenceError(RuntimeError):
    """
    Raised when a reconciled snapshot cannot replace the stored one.
    """


@dataclass(frozen=True)
class ClientRouteRecord:
    """
    One canonical client row of a snapshot.

    ``attributes`` holds every dynamic column that was not mapped to a core
    field, keyed by its canonical key.
    """

    route_code: str
    client_code: str
    client_name: str
    visit_day: str
    attributes: dict[str, str]
    batch_id: str
    uploaded_at: datetime


@dataclass(frozen=True)
class RowValidationSkip:
    """
    A data row dropped because required identity fields were missing.
    Not an error: skipped rows are only counted and logged.
    """

    row_number: int
    reason: str
    client_code: str = ""
    route_code: str = ""


@dataclass(frozen=True)
class SnapshotUploadSummary:
    """
    End-of-run upload summary.
    """

    success: bool
    count: int
    batch_id: str
    skipped_rows: list[RowValidationSkip] = field(default_factory=list)
