"""
app/services/query_service.py

Entry point for seller queries: resolves the user's route, loads the
route's records, runs the resolver and stores detected reports.
"""

from __future__ import annotations

import logging
from functools import lru_cache

from agent.messages import APOLOGY_MESSAGE, NO_DATA_MESSAGE, NO_ROUTE_MESSAGE
from agent.resolver import QueryIntentResolver
from agent.session_store import InMemorySessionStore
from app.config import QuerySettings, get_query_settings
from app.logging_utils import log_event
from app.repositories.base import ReportSink, SnapshotStore, UserDirectory
from llm_fallback.adapter import build_llm_adapter
from llm_fallback.transcription import BaseTranscriptionAdapter, build_transcription_adapter

logger = logging.getLogger(__name__)


class RouteQueryService:
    """
    Answers one query end to end. Never raises: any failure past this
    point is logged and turned into a fixed apology.
    """

    def __init__(
        self,
        *,
        resolver: QueryIntentResolver,
        transcriber: BaseTranscriptionAdapter,
        settings: QuerySettings | None = None,
    ) -> None:
        self._resolver = resolver
        self._transcriber = transcriber
        self._settings = settings or get_query_settings()

    def answer(
        self,
        *,
        user_id: str,
        text: str,
        directory: UserDirectory,
        store: SnapshotStore,
        report_sink: ReportSink,
        is_audio: bool = False,
        audio_ref: str | None = None,
    ) -> str:
        try:
            if audio_ref:
                text = self._transcriber.transcribe(audio_ref)
                is_audio = True
                if not text.strip():
                    logger.info("Empty transcription; skipping turn user_id=%s", user_id)
                    return ""

            assignment = directory.find_user_route(user_id)
            if assignment is None:
                return NO_ROUTE_MESSAGE

            records = store.find_by_route(
                assignment.route_code,
                limit=self._settings.route_fetch_limit,
            )
            if not records:
                return NO_DATA_MESSAGE.format(route_code=assignment.route_code)

            outcome = self._resolver.resolve(
                user_id=user_id,
                query=text,
                route_code=assignment.route_code,
                records=records,
                is_audio=is_audio,
                user_name=assignment.user_name,
                quota_percentage=assignment.quota_percentage,
            )
            if outcome.report is not None:
                report_sink.create_report(user_id, outcome.report)

            log_event(
                logger,
                logging.INFO,
                "query_resolved",
                user_id=user_id,
                route_code=assignment.route_code,
                records=len(records),
                intent=outcome.intent_kind.value if outcome.intent_kind else None,
                audio=is_audio,
                report=outcome.report is not None,
            )
            return outcome.response
        except Exception:  # noqa: BLE001
            logger.exception("Query resolution failed user_id=%s", user_id)
            return APOLOGY_MESSAGE


@lru_cache(maxsize=1)
def get_route_query_service() -> RouteQueryService:
    """
    Build and cache the query service. Session state lives as long as the
    process.
    """
    settings = get_query_settings()
    resolver = QueryIntentResolver(
        llm_adapter=build_llm_adapter(),
        session_store=InMemorySessionStore(),
        settings=settings,
    )
    return RouteQueryService(
        resolver=resolver,
        transcriber=build_transcription_adapter(),
        settings=settings,
    )
