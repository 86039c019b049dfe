"""
app/services/snapshot_ingestion_service.py

Service layer for snapshot uploads: reconcile the upload, then replace the
stored snapshot in one transaction.
"""

from __future__ import annotations

import logging
from functools import lru_cache

from app.config import get_snapshot_ingestion_settings
from app.domain.route_snapshot import MalformedUploadError, SnapshotUploadSummary
from app.logging_utils import log_event
from app.mappers.layouts import HeaderLayout, get_layout_profile
from app.mappers.schema_reconciler import SchemaReconciler
from app.repositories.base import SnapshotStore

logger = logging.getLogger(__name__)


class SnapshotIngestionService:
    """
    Coordinates schema reconciliation and snapshot replacement.
    """

    def __init__(
        self,
        *,
        default_layout: HeaderLayout | str = HeaderLayout.SINGLE_ROW,
        log_skipped_rows: bool = True,
        reconciler: SchemaReconciler | None = None,
    ) -> None:
        self._default_layout = get_layout_profile(default_layout).layout
        self._log_skipped_rows = log_skipped_rows
        self._reconciler = reconciler or SchemaReconciler()

    def ingest(
        self,
        *,
        content: bytes,
        store: SnapshotStore,
        layout: HeaderLayout | str | None = None,
    ) -> SnapshotUploadSummary:
        """
        Reconcile ``content`` and replace the stored snapshot with it. An
        upload with no valid rows leaves the stored snapshot untouched.

        Raises:
            MalformedUploadError: Unknown layout, undecodable bytes or too
                few rows. Nothing is written.
            SnapshotPersistenceError: The store rejected the replace.
        """

        try:
            profile = get_layout_profile(layout or self._default_layout)
        except ValueError as exc:
            raise MalformedUploadError(str(exc)) from exc

        result = self._reconciler.reconcile(content, layout=profile.layout)
        if self._log_skipped_rows:
            for skip in result.skipped_rows:
                logger.info(
                    "Skipped upload row row_number=%d reason=%s client_code=%r route_code=%r",
                    skip.row_number,
                    skip.reason,
                    skip.client_code,
                    skip.route_code,
                )

        if not result.records:
            log_event(
                logger,
                logging.WARNING,
                "snapshot_kept",
                layout=profile.layout.value,
                batch_id=result.batch_id,
                skipped=len(result.skipped_rows),
            )
            return SnapshotUploadSummary(
                success=True,
                count=0,
                batch_id=result.batch_id,
                skipped_rows=list(result.skipped_rows),
            )

        count = store.replace_all(result.records)
        log_event(
            logger,
            logging.INFO,
            "snapshot_replaced",
            layout=profile.layout.value,
            vocabulary_version=profile.vocabulary_version,
            batch_id=result.batch_id,
            count=count,
            skipped=len(result.skipped_rows),
        )
        return SnapshotUploadSummary(
            success=True,
            count=count,
            batch_id=result.batch_id,
            skipped_rows=list(result.skipped_rows),
        )


@lru_cache(maxsize=1)
def get_snapshot_ingestion_service() -> SnapshotIngestionService:
    """
    Build and cache the ingestion service with env-driven settings.
    """
    settings = get_snapshot_ingestion_settings()
    return SnapshotIngestionService(
        default_layout=settings.default_layout,
        log_skipped_rows=settings.log_skipped_rows,
    )
