"""
app/api/routers/snapshot_upload.py

Snapshot upload HTTP endpoint.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Query, UploadFile, status
from fastapi.responses import JSONResponse

from app.api.dependencies import get_csv_upload, get_snapshot_store
from app.domain.route_snapshot import MalformedUploadError, SnapshotPersistenceError
from app.repositories.base import SnapshotStore
from app.schemas.snapshot_upload import ErrorResponse, SnapshotUploadResponse
from app.services.snapshot_ingestion_service import (
    SnapshotIngestionService,
    get_snapshot_ingestion_service,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["snapshots"])


@router.post(
    "/upload-csv",
    response_model=SnapshotUploadResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def upload_snapshot(
    file: UploadFile = Depends(get_csv_upload),
    layout: str | None = Query(default=None, description="Header layout of the upload"),
    store: SnapshotStore = Depends(get_snapshot_store),
    ingestion_service: SnapshotIngestionService = Depends(get_snapshot_ingestion_service),
):
    """
    Replace the route snapshot with the uploaded table.
    """

    try:
        content = file.file.read()
        summary = ingestion_service.ingest(content=content, store=store, layout=layout)
    except MalformedUploadError as exc:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": str(exc)},
        )
    except SnapshotPersistenceError as exc:
        logger.error("Snapshot upload failed: %s", exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "No se pudo guardar la información de rutas."},
        )
    finally:
        file.file.close()

    return SnapshotUploadResponse(
        success=summary.success,
        count=summary.count,
        batch_id=summary.batch_id,
    )
