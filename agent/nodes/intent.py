"""
agent/nodes/intent.py

Intent node: detects continuation, listing filters and quantities in a
seller query using deterministic trigger tables. No LLM, no DB.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from zoneinfo import ZoneInfo

from agent.state import QueryState
from app.normalization.text import normalize_text
from classification.base import ColorState


# ---------------------------------------------------------------------------
# Trigger tables
# ---------------------------------------------------------------------------

CONTINUATION_PATTERNS: tuple[str, ...] = (
    "ver mas",
    "mostrar mas",
    "muestrame mas",
    "dame mas",
    "mas clientes",
    "siguientes",
    "siguiente pagina",
    "continuar",
    "continua",
)

LIST_TRIGGERS: frozenset[str] = frozenset(
    {
        "lista",
        "listar",
        "listame",
        "listado",
        "muestra",
        "muestrame",
        "mostrar",
        "ensename",
        "dame",
        "ver",
        "cuales",
        "quienes",
    }
)

PRIORITY_TRIGGERS: frozenset[str] = frozenset(
    {
        "prioridad",
        "prioridades",
        "prioriza",
        "priorizar",
        "prioritarios",
        "urgente",
        "urgentes",
        "criticos",
        "peores",
    }
)

COLOR_TRIGGERS: dict[str, ColorState] = {
    "negro": ColorState.BLACK,
    "negros": ColorState.BLACK,
    "negra": ColorState.BLACK,
    "negras": ColorState.BLACK,
    "rojo": ColorState.RED,
    "rojos": ColorState.RED,
    "roja": ColorState.RED,
    "rojas": ColorState.RED,
    "ambar": ColorState.AMBER,
    "ambares": ColorState.AMBER,
    "amarillo": ColorState.AMBER,
    "amarillos": ColorState.AMBER,
    "amarilla": ColorState.AMBER,
    "amarillas": ColorState.AMBER,
    "verde": ColorState.GREEN,
    "verdes": ColorState.GREEN,
}

WEEKDAY_NAMES: tuple[str, ...] = (
    "lunes",
    "martes",
    "miercoles",
    "jueves",
    "viernes",
    "sabado",
    "domingo",
)

TODAY_TRIGGERS: frozenset[str] = frozenset({"hoy"})

NUMBER_WORDS: dict[str, int] = {
    "uno": 1,
    "dos": 2,
    "tres": 3,
    "cuatro": 4,
    "cinco": 5,
    "seis": 6,
    "siete": 7,
    "ocho": 8,
    "nueve": 9,
    "diez": 10,
}

_QUANTITY_NOUNS = r"(?:clientes?|registros?|primeros|ultimos)"
_DIGIT_QUANTITY = re.compile(rf"\b(\d+)\s+{_QUANTITY_NOUNS}\b")
_WORD_QUANTITY = re.compile(
    rf"\b({'|'.join(NUMBER_WORDS)})\s+{_QUANTITY_NOUNS}\b"
)
_CONTINUATION = re.compile(
    r"\b(?:" + "|".join(re.escape(pattern) for pattern in CONTINUATION_PATTERNS) + r")\b"
)


# ---------------------------------------------------------------------------
# Intent value
# ---------------------------------------------------------------------------

class IntentKind(str, Enum):
    CONTINUATION = "continuation"
    LISTING = "listing"
    GENERATIVE = "generative"


@dataclass(frozen=True)
class QueryIntent:
    kind: IntentKind
    normalized_query: str
    list_intent: bool = False
    day: str | None = None
    color: ColorState | None = None
    quantity: int | None = None
    priority: bool = False


# ---------------------------------------------------------------------------
# Detectors (normalized text in, tag out)
# ---------------------------------------------------------------------------

def _tokens(normalized: str) -> list[str]:
    return re.findall(r"[a-z0-9]+", normalized)


def is_continuation(normalized: str) -> bool:
    return bool(_CONTINUATION.search(normalized))


def detect_color(normalized: str) -> ColorState | None:
    for token in _tokens(normalized):
        if token in COLOR_TRIGGERS:
            return COLOR_TRIGGERS[token]
    return None


def detect_priority(normalized: str) -> bool:
    return any(token in PRIORITY_TRIGGERS for token in _tokens(normalized))


def detect_list_intent(normalized: str) -> bool:
    """
    True for list, show, give-me and priority words, and for any colour
    name.
    """

    for token in _tokens(normalized):
        if token in LIST_TRIGGERS or token in PRIORITY_TRIGGERS or token in COLOR_TRIGGERS:
            return True
    return False


def today_weekday(tz_name: str, now: datetime | None = None) -> str:
    """
    Normalized Spanish weekday name of ``now`` in the given timezone.
    """

    moment = now or datetime.now(timezone.utc)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return WEEKDAY_NAMES[moment.astimezone(ZoneInfo(tz_name)).weekday()]


def detect_day(
    normalized: str,
    *,
    tz_name: str = "America/Lima",
    now: datetime | None = None,
) -> str | None:
    tokens = _tokens(normalized)
    for token in tokens:
        if token in WEEKDAY_NAMES:
            return token
    if any(token in TODAY_TRIGGERS for token in tokens):
        return normalize_text(today_weekday(tz_name, now))
    return None


def detect_quantity(normalized: str) -> int | None:
    match = _DIGIT_QUANTITY.search(normalized)
    if match:
        value = int(match.group(1))
        return value if value > 0 else None
    match = _WORD_QUANTITY.search(normalized)
    if match:
        return NUMBER_WORDS[match.group(1)]
    return None


def parse_intent(
    query: str,
    *,
    is_audio: bool = False,
    tz_name: str = "America/Lima",
    now: datetime | None = None,
) -> QueryIntent:
    """Classify one query into continuation, listing or generative.

    Audio queries skip the list, day and colour detectors; continuation
    still applies to them.
    """
    normalized = normalize_text(query)
    if is_continuation(normalized):
        return QueryIntent(kind=IntentKind.CONTINUATION, normalized_query=normalized)
    if is_audio:
        return QueryIntent(kind=IntentKind.GENERATIVE, normalized_query=normalized)

    list_intent = detect_list_intent(normalized)
    day = detect_day(normalized, tz_name=tz_name, now=now)
    color = detect_color(normalized)
    kind = IntentKind.LISTING if (list_intent or day or color) else IntentKind.GENERATIVE
    return QueryIntent(
        kind=kind,
        normalized_query=normalized,
        list_intent=list_intent,
        day=day,
        color=color,
        quantity=detect_quantity(normalized),
        priority=detect_priority(normalized),
    )


# ---------------------------------------------------------------------------
# Node
# ---------------------------------------------------------------------------

def make_intent_node(
    *,
    tz_name: str,
    clock: Callable[[], datetime],
) -> Callable[[QueryState], dict]:
    def intent_node(state: QueryState) -> dict:
        intent = parse_intent(
            state.get("query", ""),
            is_audio=bool(state.get("is_audio")),
            tz_name=tz_name,
            now=clock(),
        )
        return {"intent": intent}

    return intent_node
