"""System prompt builder for the generative fallback."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from zoneinfo import ZoneInfo

from app.normalization.text import format_number
from classification.base import ClientSummary, ColorState, ProductType
from classification.thresholds import DEFAULT_THRESHOLDS

REPORT_MARKER = "REPORT_DETECTED:"

SPANISH_WEEKDAYS: tuple[str, ...] = (
    "lunes",
    "martes",
    "miércoles",
    "jueves",
    "viernes",
    "sábado",
    "domingo",
)

SPANISH_MONTHS: tuple[str, ...] = (
    "enero",
    "febrero",
    "marzo",
    "abril",
    "mayo",
    "junio",
    "julio",
    "agosto",
    "septiembre",
    "octubre",
    "noviembre",
    "diciembre",
)

_PRODUCT_LEGEND = "K2=Kiwi 2, K3=Kiwi 3, L6=Lego 6, L9=Lego 9, MK=meGAKIWE."

_SYSTEM_TEMPLATE = """\
Eres {assistant_name}, el asistente virtual para vendedores de ruta.
Tu objetivo es ayudar al vendedor ({user_name}) a gestionar su ruta ({route_code}) y maximizar ventas.
FECHA ACTUAL: {today}
CUOTA R+N: {quota}%

### INSTRUCCIONES
- Responde ÚNICAMENTE con la "INFORMACIÓN DE LA RUTA" de abajo y la pregunta actual.
- Sé conciso. Ve al grano.
- Si preguntan por un cliente específico, búscalo por nombre o código.
- Si ves 0 packs con otro color, corrige al color NEGRO.

### PRODUCTOS
{product_legend}

### TABLA DE COLORES (packs actuales)
{color_table}

### FORMATO DE RESPUESTA
- MÁXIMO {page_size} CLIENTES por mensaje. Si hay más, añade al final: "{more_hint}"
- No uses listas numeradas. Deja una línea en blanco entre clientes.
- Usa este formato por cliente:
  * [Nombre Cliente]
    └ 📅 [Día] | 🎨 [Emoji] [Color] ([N] Packs)
    └ 🚀 Falta: [N] para subir

### REPORTES
Si el vendedor reporta un problema, incidencia o novedad de un cliente, responde
solo con "{report_marker} <resumen del reporte>".

INFORMACIÓN DE LA RUTA (datos en tiempo real):
{context_block}"""


def format_spanish_date(moment: datetime) -> str:
    """Render a date as e.g. "lunes, 19 de octubre de 2026"."""
    weekday = SPANISH_WEEKDAYS[moment.weekday()]
    month = SPANISH_MONTHS[moment.month - 1]
    return f"{weekday}, {moment.day} de {month} de {moment.year}"


def build_color_table() -> str:
    """Markdown colour table generated from the default thresholds."""
    header = (
        f"| TIPO | {ColorState.BLACK.emoji} | {ColorState.RED.emoji} "
        f"| {ColorState.AMBER.emoji} | {ColorState.GREEN.emoji} |"
    )
    lines = [header, "|---|---|---|---|---|"]
    for product_type in (ProductType.K2, ProductType.K3, ProductType.L6, ProductType.L9, ProductType.MK):
        profile = DEFAULT_THRESHOLDS[product_type]
        red = f"{format_number(profile.red_min)}-{format_number(profile.amber_min - 1)}"
        amber = f"{format_number(profile.amber_min)}-{format_number(profile.green_min - 1)}"
        lines.append(
            f"| {product_type.value} | {format_number(profile.black_max)} | {red} "
            f"| {amber} | {format_number(profile.green_min)}+ |"
        )
    return "\n".join(lines)


def build_context_line(summary: ClientSummary) -> str:
    day = summary.visit_day[:3] if summary.visit_day else "???"
    figures = "; ".join(
        f"{reading.code} packs={format_number(reading.count)} "
        f"color={reading.color.label} falta={format_number(reading.distance)} "
        f"meta={format_number(reading.next_target)}"
        for reading in summary.readings
    )
    return f"[{day}] {summary.display_name} ({summary.client_code}): {figures}"


def build_context_block(summaries: Sequence[ClientSummary]) -> str:
    return "\n".join(build_context_line(summary) for summary in summaries)


class RoutePromptBuilder:
    """Builds the system instruction for one generative turn.

    The instruction carries the seller's route, quota and the current
    date in the configured timezone, the colour table, the formatting
    rules and one context line per classified client.
    """

    def __init__(
        self,
        *,
        assistant_name: str = "MondiAI",
        timezone: str = "America/Lima",
        default_quota: float = 50.0,
        page_size: int = 10,
        more_hint: str = "",
    ) -> None:
        self._assistant_name = assistant_name
        self._timezone = ZoneInfo(timezone)
        self._default_quota = default_quota
        self._page_size = page_size
        self._more_hint = more_hint

    def build_system_prompt(
        self,
        *,
        route_code: str,
        summaries: Sequence[ClientSummary],
        now: datetime,
        user_name: str | None = None,
        quota_percentage: float | None = None,
    ) -> str:
        quota = self._default_quota if quota_percentage is None else quota_percentage
        return _SYSTEM_TEMPLATE.format(
            assistant_name=self._assistant_name,
            user_name=user_name or "vendedor",
            route_code=route_code,
            today=format_spanish_date(now.astimezone(self._timezone)),
            quota=format_number(quota),
            product_legend=_PRODUCT_LEGEND,
            color_table=build_color_table(),
            page_size=self._page_size,
            more_hint=self._more_hint,
            report_marker=REPORT_MARKER,
            context_block=build_context_block(summaries),
        )
