"""
app/api/routers/query_router.py

Seller query endpoint.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from app.api.dependencies import get_report_sink, get_snapshot_store, get_user_directory
from app.repositories.base import ReportSink, SnapshotStore, UserDirectory
from app.schemas.query import QueryRequest, QueryResponse
from app.services.query_service import RouteQueryService, get_route_query_service

router = APIRouter(tags=["query"])


@router.post("/query", response_model=QueryResponse)
def answer_query(
    request: QueryRequest,
    store: SnapshotStore = Depends(get_snapshot_store),
    directory: UserDirectory = Depends(get_user_directory),
    report_sink: ReportSink = Depends(get_report_sink),
    query_service: RouteQueryService = Depends(get_route_query_service),
) -> QueryResponse:
    """
    Answer one seller message about their route.
    """

    response = query_service.answer(
        user_id=request.user_id,
        text=request.text,
        is_audio=request.is_audio,
        audio_ref=request.audio_ref,
        directory=directory,
        store=store,
        report_sink=report_sink,
    )
    return QueryResponse(response=response)
