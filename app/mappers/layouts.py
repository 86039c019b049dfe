"""
app/mappers/layouts.py

Header layouts accepted for snapshot uploads and their per-layout vocabulary.

Each spreadsheet family exported by the field teams arrives in one of three
shapes. Core-field synonyms and row validation differ between them.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Mapping

ROUTE_CODE = "ROUTE_CODE"
CLIENT_CODE = "CLIENT_CODE"
CLIENT_NAME = "CLIENT_NAME"
VISIT_DAY = "VISIT_DAY"

CORE_FIELDS: tuple[str, ...] = (ROUTE_CODE, CLIENT_CODE, CLIENT_NAME, VISIT_DAY)

# Columns at or beyond this index carry category-prefixed keys.
CATEGORY_PREFIX_MIN_INDEX = 10

# Category cells holding one of these never replace the running category.
CATEGORY_MARKER_TOKENS: frozenset[str] = frozenset({"ACTUAL", "NECESIDAD"})

# Normalized header -> canonical key. An empty target marks the column as
# structurally redundant: it is ignored and its marker values are dropped.
HEADER_OVERRIDES: dict[str, str] = {
    "PACKS_FALTANTES_SIGUIENTE_NIVEL_KIWES": "PACKS_FALTANTES_KIWES",
    "PACKS_FALTANTES_SIGUIENTE_NIVEL_LEGOS": "PACKS_FALTANTES_LEGOS",
    "PACKS_FALTANTES_SIG_NIVEL_KIWES": "PACKS_FALTANTES_KIWES",
    "PACKS_FALTANTES_SIG_NIVEL_LEGOS": "PACKS_FALTANTES_LEGOS",
    "CODIGO_CLIENTE": "COD_CLIENTE",
    "CODIGO_DE_CLIENTE": "COD_CLIENTE",
    "DIA_DE_VISITA": "DIA_VISITA",
    "NOMBRE_DEL_CLIENTE": "NOMBRE_CLIENTE",
    "ITEM": "",
    "NRO": "",
    "N°": "",
    "#": "",
}

REDUNDANT_MARKERS: frozenset[str] = frozenset(
    key for key, target in HEADER_OVERRIDES.items() if target == ""
)


class HeaderLayout(str, Enum):
    SINGLE_ROW = "single_row"
    CATEGORY_HEADER = "category_header"
    CATEGORY_HEADER_FALLBACK = "category_header_fallback"


@dataclass(frozen=True)
class LayoutProfile:
    """
    Reconciliation rules for one header layout.

    Attributes:
        header_rows:    Rows consumed before data starts.
        min_rows:       Fewer parsed rows than this rejects the upload.
        core_synonyms:  Core field -> resolved keys routed into it.
        require_route:  Whether rows without a usable route are dropped.
        vocabulary_version: Version tag of the recognised key vocabulary.
    """

    layout: HeaderLayout
    header_rows: int
    min_rows: int
    core_synonyms: Mapping[str, frozenset[str]]
    require_route: bool
    vocabulary_version: str

    @property
    def has_category_row(self) -> bool:
        return self.header_rows >= 2

    @property
    def has_fallback_row(self) -> bool:
        return self.header_rows >= 3

    def core_field_for(self, key: str) -> str | None:
        """Return the core field a resolved key feeds, if any."""
        for field_name in CORE_FIELDS:
            if key in self.core_synonyms.get(field_name, frozenset()):
                return field_name
        return None


LAYOUT_PROFILES: dict[HeaderLayout, LayoutProfile] = {
    HeaderLayout.SINGLE_ROW: LayoutProfile(
        layout=HeaderLayout.SINGLE_ROW,
        header_rows=1,
        min_rows=2,
        core_synonyms={
            ROUTE_CODE: frozenset({"RUTA", "RUTA_LOGICA"}),
            CLIENT_CODE: frozenset({"COD_CLIENTE"}),
            CLIENT_NAME: frozenset({"NOMBRE_CLIENTE"}),
            VISIT_DAY: frozenset({"DIA_VISITA", "DIA_V"}),
        },
        require_route=True,
        vocabulary_version="single_row/2026.1",
    ),
    HeaderLayout.CATEGORY_HEADER: LayoutProfile(
        layout=HeaderLayout.CATEGORY_HEADER,
        header_rows=2,
        min_rows=3,
        core_synonyms={
            ROUTE_CODE: frozenset({"RUTA", "COD_RUTA", "RUTA_LOGICA"}),
            CLIENT_CODE: frozenset({"COD_CLIENTE", "CLIENTE"}),
            CLIENT_NAME: frozenset({"NOMBRE_CLIENTE", "RAZON_SOCIAL"}),
            VISIT_DAY: frozenset({"DIA_VISITA", "DIA"}),
        },
        require_route=True,
        vocabulary_version="category_header/2026.1",
    ),
    HeaderLayout.CATEGORY_HEADER_FALLBACK: LayoutProfile(
        layout=HeaderLayout.CATEGORY_HEADER_FALLBACK,
        header_rows=3,
        min_rows=3,
        core_synonyms={
            ROUTE_CODE: frozenset({"RUTA", "RUTA_LOGICA", "COD_RUTA"}),
            CLIENT_CODE: frozenset({"COD_CLIENTE", "CODIGO", "CLIENTE"}),
            CLIENT_NAME: frozenset({"NOMBRE_CLIENTE", "NOMBRE", "RAZON_SOCIAL"}),
            VISIT_DAY: frozenset({"DIA_VISITA", "DIA_V", "DIA"}),
        },
        require_route=False,
        vocabulary_version="category_header_fallback/2026.1",
    ),
}


def get_layout_profile(layout: HeaderLayout | str) -> LayoutProfile:
    """
    Resolve a layout profile from an enum member or its string value.

    Raises:
        ValueError: If the layout name is not recognised.
    """

    try:
        resolved = HeaderLayout(layout)
    except ValueError as exc:
        supported = ", ".join(item.value for item in HeaderLayout)
        raise ValueError(
            f"Unsupported header layout '{layout}'. Supported values: {supported}."
        ) from exc
    return LAYOUT_PROFILES[resolved]
