"""
agent/nodes/continuation_node.py

Emits the next page of the user's last listing.
"""

from __future__ import annotations

from collections.abc import Callable

from agent.formatting import render_page
from agent.messages import NO_MORE_ITEMS_MESSAGE
from agent.session_store import SessionStore, next_page
from agent.state import QueryState


def advance_pagination(session_store: SessionStore, user_id: str) -> str:
    """
    Render the next page and advance the cursor; exhaustion clears the
    pagination state.
    """

    session = session_store.load(user_id)
    pagination = session.pagination
    if pagination is None or pagination.cursor >= len(pagination.items):
        if pagination is not None:
            session.pagination = None
            session_store.set(user_id, session)
        return NO_MORE_ITEMS_MESSAGE

    page = next_page(pagination.items, pagination.cursor, pagination.page_size)
    if page.has_more:
        pagination.cursor = page.next_cursor
    else:
        session.pagination = None
    session_store.set(user_id, session)
    return render_page(page)


def make_continuation_node(session_store: SessionStore) -> Callable[[QueryState], dict]:
    def continuation_node(state: QueryState) -> dict:
        return {"response": advance_pagination(session_store, state["user_id"])}

    return continuation_node
