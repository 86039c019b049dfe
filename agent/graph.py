"""
agent/graph.py

LangGraph workflow assembly for route queries.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime

from langgraph.graph import END, START, StateGraph

from agent.messages import MORE_ITEMS_HINT
from agent.nodes.classify_node import make_classify_node
from agent.nodes.continuation_node import make_continuation_node
from agent.nodes.intent import make_intent_node
from agent.nodes.intent_router import route_after_classify, route_after_intent
from agent.nodes.listing_node import make_listing_node
from agent.nodes.llm_node import make_llm_node
from agent.session_store import SessionStore
from agent.state import QueryState
from app.config import QuerySettings
from classification.classifier import ClientStateClassifier
from llm_fallback.adapter import BaseLLMAdapter
from llm_fallback.prompt_builder import RoutePromptBuilder


def build_query_graph(
    *,
    session_store: SessionStore,
    llm_adapter: BaseLLMAdapter,
    classifier: ClientStateClassifier,
    settings: QuerySettings,
    clock: Callable[[], datetime],
):
    """
    Build and compile the query graph:
    intent -> continuation | classify; classify -> listing | generative.
    """
    prompt_builder = RoutePromptBuilder(
        assistant_name=settings.assistant_name,
        timezone=settings.timezone,
        default_quota=settings.default_quota,
        page_size=settings.page_size,
        more_hint=MORE_ITEMS_HINT,
    )

    graph = StateGraph(QueryState)

    graph.add_node("intent", make_intent_node(tz_name=settings.timezone, clock=clock))
    graph.add_node("continuation", make_continuation_node(session_store))
    graph.add_node("classify", make_classify_node(classifier))
    graph.add_node(
        "listing",
        make_listing_node(session_store, default_page_size=settings.page_size),
    )
    graph.add_node(
        "generative",
        make_llm_node(
            session_store=session_store,
            llm_adapter=llm_adapter,
            prompt_builder=prompt_builder,
            history_cap=settings.history_cap,
            clock=clock,
        ),
    )

    graph.add_edge(START, "intent")
    graph.add_conditional_edges(
        "intent",
        route_after_intent,
        {
            "continuation": "continuation",
            "classify": "classify",
        },
    )
    graph.add_conditional_edges(
        "classify",
        route_after_classify,
        {
            "listing": "listing",
            "generative": "generative",
        },
    )
    graph.add_edge("continuation", END)
    graph.add_edge("listing", END)
    graph.add_edge("generative", END)

    return graph.compile()
