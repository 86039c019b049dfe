"""LLM node for the generative fallback.

Builds the route prompt, calls the generative adapter with the bounded
conversation history, records the exchange and extracts field reports.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from agent.messages import EMPTY_REPORT_CONTENT, REPORT_ACK_MESSAGE
from agent.session_store import ConversationTurn, SessionStore, append_history
from agent.state import QueryState
from llm_fallback.adapter import BaseLLMAdapter
from llm_fallback.prompt_builder import REPORT_MARKER, RoutePromptBuilder

logger = logging.getLogger(__name__)


def extract_report(completion: str) -> str | None:
    """Return the report text after the marker, or None when absent."""
    if REPORT_MARKER not in completion:
        return None
    content = completion.split(REPORT_MARKER, 1)[1].strip()
    return content or EMPTY_REPORT_CONTENT


def make_llm_node(
    *,
    session_store: SessionStore,
    llm_adapter: BaseLLMAdapter,
    prompt_builder: RoutePromptBuilder,
    history_cap: int,
    clock: Callable[[], datetime],
) -> Callable[[QueryState], dict]:
    def llm_node(state: QueryState) -> dict:
        user_id = state["user_id"]
        query = state.get("query", "")
        history = session_store.load(user_id).history

        system_prompt = prompt_builder.build_system_prompt(
            route_code=state.get("route_code", ""),
            summaries=state.get("summaries") or [],
            now=clock(),
            user_name=state.get("user_name"),
            quota_percentage=state.get("quota_percentage"),
        )
        completion = llm_adapter.complete(
            system_prompt,
            [turn.as_message() for turn in history],
            query,
        )

        # reload: pagination may have changed while the completion ran
        session = session_store.load(user_id)
        session.history = append_history(
            session.history,
            [
                ConversationTurn(role="user", content=query),
                ConversationTurn(role="assistant", content=completion),
            ],
            history_cap,
        )
        session_store.set(user_id, session)

        report = extract_report(completion)
        if report is not None:
            logger.info("Report detected in completion user_id=%s", user_id)
            return {"response": REPORT_ACK_MESSAGE.format(content=report), "report": report}
        return {"response": completion, "report": None}

    return llm_node
