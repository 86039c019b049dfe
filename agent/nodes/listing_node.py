"""
agent/nodes/listing_node.py

Deterministic listing: filter the classified clients by day and colour,
format them as blocks and start a new pagination.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence

from agent.formatting import format_blocks, format_listing_header, render_page
from agent.messages import NO_MATCHES_MESSAGE
from agent.nodes.intent import QueryIntent
from agent.session_store import PaginationState, SessionStore, next_page
from agent.state import QueryState
from app.normalization.text import normalize_text
from classification.base import ClientSummary


def filter_summaries(
    summaries: Sequence[ClientSummary],
    intent: QueryIntent,
) -> list[ClientSummary]:
    """
    Day filter is a substring match on the normalized visit day; colour
    matches when any product family has the requested state.
    """

    matches = list(summaries)
    if intent.day:
        matches = [
            summary for summary in matches if intent.day in normalize_text(summary.visit_day)
        ]
    if intent.color is not None:
        matches = [summary for summary in matches if summary.has_color(intent.color)]
    if intent.priority:
        matches.sort(key=lambda summary: summary.worst_color.sort_key)
    return matches


def make_listing_node(
    session_store: SessionStore,
    *,
    default_page_size: int,
) -> Callable[[QueryState], dict]:
    def listing_node(state: QueryState) -> dict:
        intent: QueryIntent = state["intent"]
        user_id = state["user_id"]
        matches = filter_summaries(state.get("summaries") or [], intent)

        session = session_store.load(user_id)
        if not matches:
            session.pagination = None
            session_store.set(user_id, session)
            return {"response": NO_MATCHES_MESSAGE}

        items = format_blocks(matches)
        page_size = intent.quantity or default_page_size
        page = next_page(items, 0, page_size)
        session.pagination = (
            PaginationState(items=items, cursor=page.next_cursor, page_size=page_size)
            if page.has_more
            else None
        )
        session_store.set(user_id, session)

        header = format_listing_header(len(matches), day=intent.day, color=intent.color)
        return {"response": render_page(page, header=header)}

    return listing_node
