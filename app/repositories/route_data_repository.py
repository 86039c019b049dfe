"""
app/repositories/route_data_repository.py

Persistence layer for route snapshots.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from sqlalchemy import delete, insert, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.domain.route_snapshot import ClientRouteRecord, SnapshotPersistenceError
from app.repositories.base import SnapshotStore
from db.models.route_data import RouteData

_DEFAULT_BATCH_SIZE = 1000


class RouteDataRepository(SnapshotStore):
    """
    SQLAlchemy-backed snapshot store.

    ``replace_all`` runs the delete and every insert chunk inside one
    transaction (or savepoint when the session already has one open).
    """

    def __init__(self, session: Session, *, batch_size: int = _DEFAULT_BATCH_SIZE) -> None:
        self._session = session
        self._batch_size = max(1, batch_size)

    def replace_all(self, records: Sequence[ClientRouteRecord]) -> int:
        payloads = [self._to_payload(record) for record in records]
        if not payloads:
            return 0
        try:
            with self._transaction_context():
                self._session.execute(delete(RouteData))
                for start in range(0, len(payloads), self._batch_size):
                    chunk = payloads[start : start + self._batch_size]
                    self._session.execute(insert(RouteData), chunk)
            if self._session.in_transaction():
                self._session.commit()
        except SQLAlchemyError as exc:
            self._session.rollback()
            raise SnapshotPersistenceError("Failed to replace the route snapshot.") from exc
        return len(payloads)

    def find_by_route(self, route_code: str, *, limit: int) -> list[ClientRouteRecord]:
        stmt = (
            select(RouteData)
            .where(RouteData.route_code == route_code.strip())
            .order_by(RouteData.uploaded_at.desc())
            .limit(max(1, limit))
        )
        rows = self._session.execute(stmt).scalars().all()
        return [self._to_record(row) for row in rows]

    def list_route_codes(self) -> list[str]:
        stmt = (
            select(RouteData.route_code)
            .where(RouteData.route_code != "")
            .distinct()
            .order_by(RouteData.route_code.asc())
        )
        return list(self._session.execute(stmt).scalars().all())

    @staticmethod
    def _to_payload(record: ClientRouteRecord) -> dict[str, Any]:
        return {
            "route_code": record.route_code,
            "client_code": record.client_code,
            "client_name": record.client_name or None,
            "visit_day": record.visit_day or None,
            "data": dict(record.attributes),
            "batch_id": record.batch_id,
            "uploaded_at": record.uploaded_at,
        }

    @staticmethod
    def _to_record(row: RouteData) -> ClientRouteRecord:
        data = row.data if isinstance(row.data, dict) else {}
        return ClientRouteRecord(
            route_code=row.route_code,
            client_code=row.client_code,
            client_name=row.client_name or "",
            visit_day=row.visit_day or "",
            attributes={str(key): str(value) for key, value in data.items()},
            batch_id=row.batch_id,
            uploaded_at=row.uploaded_at,
        )

    def _transaction_context(self) -> Any:
        if self._session.in_transaction():
            return self._session.begin_nested()
        return self._session.begin()
