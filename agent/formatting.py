"""
agent/formatting.py

Text rendering for deterministic listings.
"""

from __future__ import annotations

from collections.abc import Sequence

from agent.messages import MORE_ITEMS_HINT
from agent.session_store import PageResult
from classification.base import ClientSummary, ColorState

BLOCK_SEPARATOR = "\n\n"


def format_client_block(summary: ClientSummary) -> str:
    return (
        f"* {summary.display_name} ({summary.client_code})\n"
        f"  └ 📦 {summary.descriptor_display}\n"
        f"  └ 📅 {summary.visit_day or 'Sin día'} | 🎨 {summary.color_display}\n"
        f"  └ 🚀 Falta: {summary.distance_display} para subir"
    )


def format_listing_header(
    total: int,
    *,
    day: str | None = None,
    color: ColorState | None = None,
) -> str:
    noun = "cliente" if total == 1 else "clientes"
    filters = []
    if day:
        filters.append(f"día {day}")
    if color is not None:
        filters.append(f"{color.emoji} {color.label}")
    suffix = f" ({', '.join(filters)})" if filters else ""
    return f"📋 Encontré {total} {noun}{suffix}:"


def render_page(page: PageResult, *, header: str | None = None) -> str:
    """
    Join a page of blocks, prefixed by ``header`` and followed by the
    "ver más" hint while items remain.
    """

    parts: list[str] = []
    if header:
        parts.append(header)
    parts.extend(page.items)
    if page.has_more:
        parts.append(MORE_ITEMS_HINT)
    return BLOCK_SEPARATOR.join(parts)


def format_blocks(summaries: Sequence[ClientSummary]) -> list[str]:
    return [format_client_block(summary) for summary in summaries]
