"""
app/repositories/base.py

Contracts for the storage collaborators used by uploads and queries.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass

from app.domain.route_snapshot import ClientRouteRecord


@dataclass(frozen=True)
class RouteAssignment:
    """
    The route a user works and the quota shown to the assistant.
    """

    route_code: str
    quota_percentage: float | None = None
    user_name: str | None = None


class SnapshotStore(ABC):
    """
    Storage abstraction for route snapshots.
    """

    @abstractmethod
    def replace_all(self, records: Sequence[ClientRouteRecord]) -> int:
        """
        Atomically replace the stored snapshot with ``records`` and return
        the number of rows written. Readers never observe a half-written
        snapshot. An empty ``records`` keeps the stored snapshot.
        """

    @abstractmethod
    def find_by_route(self, route_code: str, *, limit: int) -> list[ClientRouteRecord]:
        """
        Return records of one route, newest upload first, at most ``limit``.
        """

    @abstractmethod
    def list_route_codes(self) -> list[str]:
        """
        Return distinct route codes of the current snapshot, sorted.
        """


class UserDirectory(ABC):
    @abstractmethod
    def find_user_route(self, user_id: str) -> RouteAssignment | None:
        """
        Return the user's route assignment, or None for unknown users.
        """


class ReportSink(ABC):
    @abstractmethod
    def create_report(self, user_id: str, content: str) -> None:
        """
        Persist one free-text report on behalf of a user.
        """


@dataclass(frozen=True)
class UserAccount:
    id: str
    email: str
    name: str | None = None
    role: str = "user"
    route: str | None = None
    quota_percentage: float | None = None


class UserAdministration(ABC):
    """
    Admin-side user management: listing accounts and assigning routes.
    """

    @abstractmethod
    def list_users(self) -> list[UserAccount]:
        """
        Return every account, newest first.
        """

    @abstractmethod
    def assign_route(
        self,
        user_id: str,
        route_code: str,
        *,
        quota_percentage: float | None = None,
    ) -> UserAccount | None:
        """
        Set the user's route (and quota when given). Returns None for
        unknown users.
        """
