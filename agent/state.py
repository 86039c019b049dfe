"""
agent/state.py

LangGraph state schema for one route query.
"""

from typing import Any, Optional
from typing_extensions import TypedDict


class QueryState(TypedDict, total=False):
    """Shared state passed between all nodes in the query graph."""

    user_id: str
    query: str
    is_audio: bool

    route_code: str
    user_name: Optional[str]
    quota_percentage: Optional[float]

    records: list[Any]
    intent: Any
    summaries: Optional[list[Any]]

    response: Optional[str]
    report: Optional[str]
