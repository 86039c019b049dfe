"""
app/api/dependencies.py

Shared FastAPI dependencies for request validation and storage adapters.
"""

from __future__ import annotations

from fastapi import Depends, File, HTTPException, UploadFile, status
from sqlalchemy.orm import Session

from app.config import get_snapshot_ingestion_settings
from app.repositories.base import ReportSink, SnapshotStore, UserAdministration, UserDirectory
from app.repositories.report_repository import ReportRepository
from app.repositories.route_data_repository import RouteDataRepository
from app.repositories.user_repository import UserRouteRepository
from db.session import get_db

CSV_CONTENT_TYPES = {
    "text/csv",
    "application/csv",
    "application/vnd.ms-excel",
    "text/plain",
}


def get_csv_upload(file: UploadFile = File(...)) -> UploadFile:
    """
    Validate that the uploaded file is a CSV by extension or MIME type.
    """

    filename = (file.filename or "").strip().lower()
    content_type = (file.content_type or "").strip().lower()

    is_csv_filename = filename.endswith(".csv")
    is_csv_content_type = content_type in CSV_CONTENT_TYPES

    if not is_csv_filename and not is_csv_content_type:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Solo se permiten archivos CSV.",
        )

    return file


def get_snapshot_store(db: Session = Depends(get_db)) -> SnapshotStore:
    settings = get_snapshot_ingestion_settings()
    return RouteDataRepository(db, batch_size=settings.insert_batch_size)


def get_user_directory(db: Session = Depends(get_db)) -> UserDirectory:
    return UserRouteRepository(db)


def get_report_sink(db: Session = Depends(get_db)) -> ReportSink:
    return ReportRepository(db)


def get_user_admin(db: Session = Depends(get_db)) -> UserAdministration:
    return UserRouteRepository(db)
