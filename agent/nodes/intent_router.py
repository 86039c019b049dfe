"""
agent/nodes/intent_router.py

Conditional edge functions of the query graph.
"""

from agent.nodes.intent import IntentKind
from agent.state import QueryState


def route_after_intent(state: QueryState) -> str:
    intent = state.get("intent")
    if intent is not None and intent.kind is IntentKind.CONTINUATION:
        return "continuation"
    return "classify"


def route_after_classify(state: QueryState) -> str:
    intent = state.get("intent")
    if intent is not None and intent.kind is IntentKind.LISTING:
        return "listing"
    return "generative"
