"""
tests/test_snapshot_ingestion_service.py

Pytest unit tests for SnapshotIngestionService against an in-memory store.
"""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from app.domain.route_snapshot import MalformedUploadError, SnapshotPersistenceError
from app.mappers.schema_reconciler import SchemaReconciler
from app.services.snapshot_ingestion_service import SnapshotIngestionService
from tests.fakes import FakeSnapshotStore, make_record

FIXED_NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)
HEADER = "RUTA,COD_CLIENTE,NOMBRE_CLIENTE,DIA_VISITA"


@pytest.fixture()
def service() -> SnapshotIngestionService:
    return SnapshotIngestionService(reconciler=SchemaReconciler(clock=lambda: FIXED_NOW))


class TestIngest:
    def test_minimal_upload(self, service: SnapshotIngestionService) -> None:
        store = FakeSnapshotStore()

        summary = service.ingest(content=f"{HEADER}\nR1,C1,Juan,Lunes\n".encode(), store=store)

        assert summary.success is True
        assert summary.count == 1
        assert summary.batch_id == FIXED_NOW.isoformat()
        assert store.records[0].route_code == "R1"
        assert store.records[0].client_code == "C1"

    def test_skipped_rows_are_excluded_from_count(self, service: SnapshotIngestionService) -> None:
        store = FakeSnapshotStore()
        content = f"{HEADER}\nR1,C1,Juan,Lunes\nR1,,Pedro,Martes\n".encode()

        summary = service.ingest(content=content, store=store)

        assert summary.count == 1
        assert len(summary.skipped_rows) == 1

    def test_upload_replaces_previous_snapshot(self, service: SnapshotIngestionService) -> None:
        store = FakeSnapshotStore([make_record("OLD", route_code="R9")])

        service.ingest(content=f"{HEADER}\nR1,C1,Juan,Lunes\n".encode(), store=store)

        assert [record.client_code for record in store.records] == ["C1"]

    def test_malformed_upload_writes_nothing(self, service: SnapshotIngestionService) -> None:
        store = FakeSnapshotStore([make_record("OLD")])

        with pytest.raises(MalformedUploadError):
            service.ingest(content=f"{HEADER}\n".encode(), store=store)

        assert store.replace_calls == 0
        assert [record.client_code for record in store.records] == ["OLD"]

    def test_unknown_layout_is_a_malformed_upload(self, service: SnapshotIngestionService) -> None:
        store = FakeSnapshotStore()

        with pytest.raises(MalformedUploadError):
            service.ingest(content=f"{HEADER}\nR1,C1,Juan,Lunes\n".encode(), store=store, layout="wide")

        assert store.replace_calls == 0

    def test_explicit_layout_is_used(self, service: SnapshotIngestionService) -> None:
        store = FakeSnapshotStore()
        content = f",,,\n{HEADER}\n0,C1,Juan,Lunes\nR1,C2,Ana,Martes\n".encode()

        summary = service.ingest(content=content, store=store, layout="category_header")

        assert summary.count == 1
        assert store.records[0].client_code == "C2"

    def test_persistence_errors_propagate(self, service: SnapshotIngestionService) -> None:
        store = FakeSnapshotStore(fail_on_replace=True)

        with pytest.raises(SnapshotPersistenceError):
            service.ingest(content=f"{HEADER}\nR1,C1,Juan,Lunes\n".encode(), store=store)


class TestUploadWithoutValidRows:
    def test_all_rows_skipped_keeps_snapshot(self, service: SnapshotIngestionService) -> None:
        store = FakeSnapshotStore([make_record("OLD1"), make_record("OLD2", route_code="R2")])

        summary = service.ingest(content=f"{HEADER}\n0,C9,X,Lunes\n".encode(), store=store)

        assert summary.count == 0
        assert summary.skipped_rows[0].reason == "placeholder_route_code"
        assert store.replace_calls == 0
        assert [record.client_code for record in store.records] == ["OLD1", "OLD2"]

    def test_category_file_sent_as_single_row_keeps_snapshot(
        self, service: SnapshotIngestionService
    ) -> None:
        store = FakeSnapshotStore([make_record("OLD")])

        summary = service.ingest(content=b",,KIWES\nRUTA,COD_CLIENTE,EXHIBIDOR\n", store=store)

        assert summary.count == 0
        assert store.replace_calls == 0
        assert [record.client_code for record in store.records] == ["OLD"]

    def test_header_only_fallback_upload_keeps_snapshot(
        self, service: SnapshotIngestionService
    ) -> None:
        store = FakeSnapshotStore([make_record("OLD")])
        content = f",,,\n{HEADER}\n,CODIGO,,\n".encode()

        summary = service.ingest(content=content, store=store, layout="category_header_fallback")

        assert summary.count == 0
        assert store.replace_calls == 0
        assert len(store.records) == 1
