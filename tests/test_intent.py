"""
tests/test_intent.py

Pytest unit tests for the deterministic intent detectors.
"""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from agent.nodes.intent import (
    COLOR_TRIGGERS,
    NUMBER_WORDS,
    WEEKDAY_NAMES,
    IntentKind,
    detect_color,
    detect_day,
    detect_list_intent,
    detect_priority,
    detect_quantity,
    is_continuation,
    parse_intent,
    today_weekday,
)
from app.normalization.text import normalize_text
from classification.base import ColorState

MONDAY_AFTERNOON_UTC = datetime(2026, 10, 19, 15, 0, tzinfo=timezone.utc)
MONDAY_EARLY_UTC = datetime(2026, 10, 19, 3, 0, tzinfo=timezone.utc)


class TestContinuation:
    @pytest.mark.parametrize(
        "query",
        ["ver más", "Ver mas", "mostrar más por favor", "dame más clientes", "siguientes", "continuar"],
    )
    def test_matches(self, query: str) -> None:
        assert is_continuation(normalize_text(query))

    @pytest.mark.parametrize("query", ["dame los rojos", "verdes del lunes", "como voy", "mas o menos"])
    def test_does_not_match(self, query: str) -> None:
        assert not is_continuation(normalize_text(query))


class TestDetectors:
    @pytest.mark.parametrize(("word", "color"), sorted(COLOR_TRIGGERS.items()))
    def test_every_color_word_is_a_list_trigger(self, word: str, color: ColorState) -> None:
        assert detect_color(word) is color
        assert detect_list_intent(word)

    def test_color_with_diacritics(self) -> None:
        assert detect_color(normalize_text("clientes en Ámbar")) is ColorState.AMBER

    @pytest.mark.parametrize("query", ["lista de clientes", "muéstrame mi ruta", "dame todo", "prioridad"])
    def test_list_triggers(self, query: str) -> None:
        assert detect_list_intent(normalize_text(query))

    def test_no_list_trigger(self) -> None:
        assert not detect_list_intent(normalize_text("¿cómo voy con mi cuota?"))

    @pytest.mark.parametrize("day", WEEKDAY_NAMES)
    def test_weekdays(self, day: str) -> None:
        assert detect_day(f"clientes del {day}") == day

    def test_weekday_with_diacritics(self) -> None:
        assert detect_day(normalize_text("clientes del Miércoles")) == "miercoles"

    def test_today_uses_configured_timezone(self) -> None:
        assert detect_day("quien toca hoy", now=MONDAY_AFTERNOON_UTC) == "lunes"
        assert detect_day("quien toca hoy", now=MONDAY_EARLY_UTC) == "domingo"
        assert today_weekday("UTC", MONDAY_EARLY_UTC) == "lunes"

    @pytest.mark.parametrize(
        ("query", "expected"),
        [
            ("dame 5 clientes rojos", 5),
            ("los 12 primeros", 12),
            ("los tres primeros", 3),
            ("diez registros", 10),
            ("dame clientes", None),
            ("0 clientes", None),
            ("ruta 5", None),
        ],
    )
    def test_quantity(self, query: str, expected: int | None) -> None:
        assert detect_quantity(query) == expected

    def test_number_word_lexicon_covers_one_to_ten(self) -> None:
        assert sorted(NUMBER_WORDS.values()) == list(range(1, 11))

    def test_priority(self) -> None:
        assert detect_priority("dame mis prioridades")
        assert not detect_priority("dame mis clientes")


class TestParseIntent:
    def test_color_query_is_listing(self) -> None:
        intent = parse_intent("dame los rojos de mi ruta", now=MONDAY_AFTERNOON_UTC)

        assert intent.kind is IntentKind.LISTING
        assert intent.color is ColorState.RED
        assert intent.day is None
        assert intent.quantity is None

    def test_day_only_query_is_listing(self) -> None:
        intent = parse_intent("clientes del martes", now=MONDAY_AFTERNOON_UTC)

        assert intent.kind is IntentKind.LISTING
        assert intent.day == "martes"

    def test_free_question_is_generative(self) -> None:
        intent = parse_intent("¿Cómo voy con mi cuota?", now=MONDAY_AFTERNOON_UTC)

        assert intent.kind is IntentKind.GENERATIVE

    def test_audio_suppresses_listing_heuristics(self) -> None:
        intent = parse_intent("dame los rojos del lunes", is_audio=True, now=MONDAY_AFTERNOON_UTC)

        assert intent.kind is IntentKind.GENERATIVE
        assert intent.color is None
        assert intent.day is None

    def test_audio_continuation_still_paginates(self) -> None:
        assert parse_intent("ver más", is_audio=True).kind is IntentKind.CONTINUATION

    def test_continuation_wins_over_listing(self) -> None:
        assert parse_intent("ver más rojos").kind is IntentKind.CONTINUATION
