"""
tests/test_api_routers.py

HTTP contract tests for the upload, query and route listing endpoints,
with storage swapped for in-memory fakes.
"""

from __future__ import annotations

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from agent.resolver import QueryIntentResolver
from app.api.dependencies import (
    get_report_sink,
    get_snapshot_store,
    get_user_admin,
    get_user_directory,
)
from app.api.routers import query_router, routes_router, snapshot_upload_router, users_router
from app.config import QuerySettings
from app.mappers.schema_reconciler import SchemaReconciler
from app.repositories.base import RouteAssignment, UserAccount
from app.services.query_service import RouteQueryService, get_route_query_service
from app.services.snapshot_ingestion_service import (
    SnapshotIngestionService,
    get_snapshot_ingestion_service,
)
from llm_fallback.adapter import MockLLMAdapter
from tests.fakes import (
    FIXED_NOW,
    FakeReportSink,
    FakeSnapshotStore,
    FakeUserAccounts,
    FakeTranscriber,
    FakeUserDirectory,
    kiwi_record,
)

VALID_CSV = (
    "RUTA;COD_CLIENTE;NOMBRE_CLIENTE;DIA_VISITA;EXHIBIDOR_KIWES;PACKS_VENDIDOS_KIWES\n"
    "R1;C01;Bodega Luz;Lunes;Exhibidor Kiwi 2;3\n"
    "R2;C02;Market Sol;Martes;Exhibidor Kiwi 2;14\n"
).encode("utf-8")


class BrokenRouteStore(FakeSnapshotStore):
    def list_route_codes(self) -> list[str]:
        raise OperationalError("SELECT DISTINCT route_code", {}, Exception("connection lost"))


def _build_app(store, directory=None, sink=None, admin=None) -> FastAPI:
    application = FastAPI()
    application.include_router(snapshot_upload_router)
    application.include_router(query_router)
    application.include_router(routes_router)
    application.include_router(users_router)

    settings = QuerySettings()
    query_service = RouteQueryService(
        resolver=QueryIntentResolver(
            llm_adapter=MockLLMAdapter(response="respuesta libre"),
            settings=settings,
            clock=lambda: FIXED_NOW,
        ),
        transcriber=FakeTranscriber(""),
        settings=settings,
    )
    ingestion_service = SnapshotIngestionService(
        reconciler=SchemaReconciler(clock=lambda: FIXED_NOW),
    )

    application.dependency_overrides[get_snapshot_store] = lambda: store
    application.dependency_overrides[get_user_directory] = lambda: directory or FakeUserDirectory()
    application.dependency_overrides[get_report_sink] = lambda: sink or FakeReportSink()
    application.dependency_overrides[get_user_admin] = lambda: admin or FakeUserAccounts()
    application.dependency_overrides[get_route_query_service] = lambda: query_service
    application.dependency_overrides[get_snapshot_ingestion_service] = lambda: ingestion_service
    return application


@pytest.fixture()
def store() -> FakeSnapshotStore:
    return FakeSnapshotStore()


class TestUploadEndpoint:
    def test_upload_replaces_snapshot(self, store) -> None:
        client = TestClient(_build_app(store))

        response = client.post(
            "/admin/upload-csv",
            files={"file": ("rutas.csv", VALID_CSV, "text/csv")},
        )

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "count": 2,
            "batchId": "2026-10-19T15:00:00+00:00",
        }
        assert [record.client_code for record in store.records] == ["C01", "C02"]

    def test_layout_query_parameter(self, store) -> None:
        client = TestClient(_build_app(store))

        two_rows = b"RUTA;COD_CLIENTE\nR1;C01\n"

        response = client.post(
            "/admin/upload-csv",
            params={"layout": "category_header"},
            files={"file": ("rutas.csv", two_rows, "text/csv")},
        )

        assert response.status_code == 400
        assert "'category_header'" in response.json()["error"]
        assert store.replace_calls == 0

    def test_unknown_layout_is_a_bad_request(self, store) -> None:
        client = TestClient(_build_app(store))

        response = client.post(
            "/admin/upload-csv",
            params={"layout": "wide"},
            files={"file": ("rutas.csv", VALID_CSV, "text/csv")},
        )

        assert response.status_code == 400
        assert "wide" in response.json()["error"]
        assert store.replace_calls == 0

    def test_header_only_upload_is_rejected(self, store) -> None:
        client = TestClient(_build_app(store))

        response = client.post(
            "/admin/upload-csv",
            files={"file": ("rutas.csv", b"RUTA;COD_CLIENTE\n", "text/csv")},
        )

        assert response.status_code == 400
        assert set(response.json()) == {"error"}
        assert store.replace_calls == 0

    def test_persistence_failure(self) -> None:
        client = TestClient(_build_app(FakeSnapshotStore(fail_on_replace=True)))

        response = client.post(
            "/admin/upload-csv",
            files={"file": ("rutas.csv", VALID_CSV, "text/csv")},
        )

        assert response.status_code == 500
        assert response.json() == {"error": "No se pudo guardar la información de rutas."}

    def test_non_csv_file_is_rejected(self, store) -> None:
        client = TestClient(_build_app(store))

        response = client.post(
            "/admin/upload-csv",
            files={"file": ("rutas.pdf", b"%PDF-1.7", "application/pdf")},
        )

        assert response.status_code == 400
        assert response.json() == {"detail": "Solo se permiten archivos CSV."}


class TestQueryEndpoint:
    def test_listing_answer(self) -> None:
        store = FakeSnapshotStore([kiwi_record("C01", "3"), kiwi_record("C02", "14")])
        directory = FakeUserDirectory({"u1": RouteAssignment(route_code="R1")})
        client = TestClient(_build_app(store, directory))

        response = client.post("/query", json={"user_id": "u1", "text": "dame los rojos"})

        assert response.status_code == 200
        body = response.json()["response"]
        assert "(C01)" in body and "(C02)" not in body

    def test_free_question(self) -> None:
        store = FakeSnapshotStore([kiwi_record("C01", "3")])
        directory = FakeUserDirectory({"u1": RouteAssignment(route_code="R1")})
        client = TestClient(_build_app(store, directory))

        response = client.post("/query", json={"user_id": "u1", "text": "¿cómo voy?"})

        assert response.json() == {"response": "respuesta libre"}

    def test_missing_user_id(self, store) -> None:
        client = TestClient(_build_app(store))

        response = client.post("/query", json={"text": "hola"})

        assert response.status_code == 422


class TestRoutesEndpoint:
    def test_lists_distinct_routes(self) -> None:
        store = FakeSnapshotStore(
            [
                kiwi_record("C01", "3", route_code="R2"),
                kiwi_record("C02", "3", route_code="R1"),
                kiwi_record("C03", "3", route_code="R2"),
            ]
        )
        client = TestClient(_build_app(store))

        response = client.get("/routes")

        assert response.status_code == 200
        assert response.json() == ["R1", "R2"]

    def test_database_error(self) -> None:
        client = TestClient(_build_app(BrokenRouteStore()))

        response = client.get("/routes")

        assert response.status_code == 500
        assert response.json() == {"error": "Error obteniendo las rutas."}


class BrokenUserAccounts(FakeUserAccounts):
    def list_users(self):
        raise OperationalError("SELECT app_users", {}, Exception("connection lost"))


@pytest.fixture()
def accounts() -> FakeUserAccounts:
    return FakeUserAccounts(
        [
            UserAccount(id="u1", email="ana@example.com", name="Ana"),
            UserAccount(id="u2", email="luis@example.com", name="Luis", route="R2", quota_percentage=40.0),
        ]
    )


class TestUsersEndpoint:
    def test_lists_users(self, store, accounts) -> None:
        client = TestClient(_build_app(store, admin=accounts))

        response = client.get("/admin/users")

        assert response.status_code == 200
        body = response.json()
        assert [user["id"] for user in body] == ["u2", "u1"]
        assert body[0]["route"] == "R2"
        assert body[0]["quota_percentage"] == 40.0
        assert body[1]["route"] is None

    def test_list_database_error(self, store) -> None:
        client = TestClient(_build_app(store, admin=BrokenUserAccounts()))

        response = client.get("/admin/users")

        assert response.status_code == 500
        assert response.json() == {"error": "Error obteniendo usuarios."}

    def test_assign_route_with_quota(self, store, accounts) -> None:
        client = TestClient(_build_app(store, admin=accounts))

        response = client.patch("/admin/users/u1/route", json={"route": " R1 ", "quota_percentage": 65})

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["user"]["route"] == "R1"
        assert body["user"]["quota_percentage"] == 65.0

    def test_assign_route_keeps_quota_when_omitted(self, store, accounts) -> None:
        client = TestClient(_build_app(store, admin=accounts))

        response = client.patch("/admin/users/u2/route", json={"route": "R3"})

        assert response.json()["user"]["quota_percentage"] == 40.0

    def test_blank_route_is_rejected(self, store, accounts) -> None:
        client = TestClient(_build_app(store, admin=accounts))

        response = client.patch("/admin/users/u1/route", json={"route": "  "})

        assert response.status_code == 400
        assert response.json() == {"error": "Ruta requerida."}
        assert accounts.accounts["u1"].route is None

    def test_unknown_user(self, store, accounts) -> None:
        client = TestClient(_build_app(store, admin=accounts))

        response = client.patch("/admin/users/ghost/route", json={"route": "R1"})

        assert response.status_code == 404
        assert response.json() == {"error": "Usuario no encontrado."}

    def test_quota_out_of_range(self, store, accounts) -> None:
        client = TestClient(_build_app(store, admin=accounts))

        response = client.patch("/admin/users/u1/route", json={"route": "R1", "quota_percentage": 150})

        assert response.status_code == 422

    def test_assigned_seller_can_query(self, accounts) -> None:
        store = FakeSnapshotStore([kiwi_record("C01", "3")])
        client = TestClient(_build_app(store, directory=accounts, admin=accounts))

        before = client.post("/query", json={"user_id": "u1", "text": "dame los rojos"})
        client.patch("/admin/users/u1/route", json={"route": "R1"})
        after = client.post("/query", json={"user_id": "u1", "text": "dame los rojos"})

        assert before.json()["response"].startswith("⚠️ No tienes una ruta asignada")
        assert "(C01)" in after.json()["response"]
