"""
app/api/routers/routes_router.py

Route code listing endpoint.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from app.api.dependencies import get_snapshot_store
from app.repositories.base import SnapshotStore

logger = logging.getLogger(__name__)

router = APIRouter(tags=["routes"])


@router.get("/routes", response_model=list[str])
def list_routes(store: SnapshotStore = Depends(get_snapshot_store)):
    """
    Distinct route codes present in the current snapshot, sorted.
    """

    try:
        return store.list_route_codes()
    except SQLAlchemyError:
        logger.exception("Failed to list route codes")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Error obteniendo las rutas."},
        )
