"""
agent/resolver.py

Query Intent Resolver: runs one seller query through the query graph.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import datetime, timezone

from agent.graph import build_query_graph
from agent.nodes.intent import IntentKind
from agent.session_store import InMemorySessionStore, SessionStore
from app.config import QuerySettings, get_query_settings
from app.domain.route_snapshot import ClientRouteRecord
from classification.classifier import ClientStateClassifier
from llm_fallback.adapter import BaseLLMAdapter

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolutionOutcome:
    """
    Response text plus an optional field report to persist.
    """

    response: str
    intent_kind: IntentKind | None = None
    report: str | None = None


class QueryIntentResolver:
    """
    Resolves queries deterministically where an intent matches and falls
    back to the generative adapter otherwise.

    Raises GenerativeAdapterFailure from ``resolve`` when the fallback
    call fails; the caller owns the user-facing apology.
    """

    def __init__(
        self,
        *,
        llm_adapter: BaseLLMAdapter,
        session_store: SessionStore | None = None,
        classifier: ClientStateClassifier | None = None,
        settings: QuerySettings | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.session_store = session_store or InMemorySessionStore()
        self._settings = settings or get_query_settings()
        self._graph = build_query_graph(
            session_store=self.session_store,
            llm_adapter=llm_adapter,
            classifier=classifier or ClientStateClassifier(),
            settings=self._settings,
            clock=clock or (lambda: datetime.now(timezone.utc)),
        )

    def resolve(
        self,
        *,
        user_id: str,
        query: str,
        route_code: str,
        records: Sequence[ClientRouteRecord],
        is_audio: bool = False,
        user_name: str | None = None,
        quota_percentage: float | None = None,
    ) -> ResolutionOutcome:
        final_state = self._graph.invoke(
            {
                "user_id": user_id,
                "query": query,
                "is_audio": is_audio,
                "route_code": route_code,
                "user_name": user_name,
                "quota_percentage": quota_percentage,
                "records": list(records),
                "intent": None,
                "summaries": None,
                "response": None,
                "report": None,
            }
        )
        intent = final_state.get("intent")
        intent_kind = intent.kind if intent is not None else None
        logger.info(
            "Resolved query user_id=%s route=%s intent=%s audio=%s",
            user_id,
            route_code,
            intent_kind.value if intent_kind is not None else None,
            is_audio,
        )
        return ResolutionOutcome(
            response=final_state.get("response") or "",
            intent_kind=intent_kind,
            report=final_state.get("report"),
        )
