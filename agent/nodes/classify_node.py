"""
agent/nodes/classify_node.py

Classifies the route's records. Only reached on non-continuation turns.
"""

from collections.abc import Callable

from agent.state import QueryState
from classification.classifier import ClientStateClassifier


def make_classify_node(classifier: ClientStateClassifier) -> Callable[[QueryState], dict]:
    def classify_node(state: QueryState) -> dict:
        return {"summaries": classifier.classify_all(state.get("records") or [])}

    return classify_node
