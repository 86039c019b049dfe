"""
classification/base.py

Value types shared by the client state classifier: colour states,
product types, threshold profiles and per-client summaries.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from app.normalization.text import format_number


class ColorState(str, Enum):
    """Inventory-health state of one product family at one client.

    Ordered BLACK < RED < AMBER < GREEN through ``rank``. UNKNOWN sits
    outside the order and has no rank.
    """

    BLACK = "black"
    RED = "red"
    AMBER = "amber"
    GREEN = "green"
    UNKNOWN = "unknown"

    @property
    def rank(self) -> int | None:
        return _COLOR_RANKS.get(self)

    @property
    def label(self) -> str:
        return _COLOR_LABELS[self]

    @property
    def emoji(self) -> str:
        return _COLOR_EMOJIS[self]

    @property
    def sort_key(self) -> int:
        """Rank for ordering worst first; UNKNOWN sorts after GREEN."""
        rank = self.rank
        return len(_COLOR_RANKS) if rank is None else rank


_COLOR_RANKS: dict[ColorState, int] = {
    ColorState.BLACK: 0,
    ColorState.RED: 1,
    ColorState.AMBER: 2,
    ColorState.GREEN: 3,
}

_COLOR_LABELS: dict[ColorState, str] = {
    ColorState.BLACK: "NEGRO",
    ColorState.RED: "ROJO",
    ColorState.AMBER: "ÁMBAR",
    ColorState.GREEN: "VERDE",
    ColorState.UNKNOWN: "SIN DATO",
}

_COLOR_EMOJIS: dict[ColorState, str] = {
    ColorState.BLACK: "⚫",
    ColorState.RED: "🔴",
    ColorState.AMBER: "🟡",
    ColorState.GREEN: "🟢",
    ColorState.UNKNOWN: "⚪",
}


class ProductFamily(str, Enum):
    """Display families. The value is the key suffix used in uploads."""

    KIWI = "KIWES"
    LEGO = "LEGOS"


class ProductType(str, Enum):
    K2 = "K2"
    K3 = "K3"
    L6 = "L6"
    L9 = "L9"
    MK = "MK"
    UNKNOWN = "UNKNOWN"

    @property
    def family(self) -> ProductFamily | None:
        if self in (ProductType.K2, ProductType.K3, ProductType.MK):
            return ProductFamily.KIWI
        if self in (ProductType.L6, ProductType.L9):
            return ProductFamily.LEGO
        return None


@dataclass(frozen=True)
class ThresholdProfile:
    """Minimum unit counts for each colour tier.

    Any count at or below ``black_max`` is BLACK regardless of the other
    fields.
    """

    red_min: float
    amber_min: float
    green_min: float
    black_max: float = 0

    def is_well_formed(self) -> bool:
        return self.amber_min <= self.green_min


@dataclass(frozen=True)
class FamilyReading:
    """Classified figures for one product family on one record."""

    family: ProductFamily | None
    product_type: ProductType
    descriptor: str
    count: float | None
    profile: ThresholdProfile
    color: ColorState
    distance: float | None
    next_target: float | None

    @property
    def code(self) -> str:
        if self.product_type is not ProductType.UNKNOWN:
            return self.product_type.value
        if self.family is not None:
            return self.family.value
        return "?"


@dataclass(frozen=True)
class ClientSummary:
    """
    Derived view of one client: identity fields plus one reading per
    product family present on the record.
    """

    route_code: str
    client_code: str
    client_name: str
    visit_day: str
    readings: tuple[FamilyReading, ...]

    @property
    def is_mixed(self) -> bool:
        return len(self.readings) > 1

    @property
    def colors(self) -> frozenset[ColorState]:
        return frozenset(reading.color for reading in self.readings)

    def has_color(self, color: ColorState) -> bool:
        return color in self.colors

    @property
    def primary(self) -> FamilyReading:
        """The reading in the worst colour state."""
        return min(self.readings, key=lambda reading: reading.color.sort_key)

    @property
    def worst_color(self) -> ColorState:
        return self.primary.color

    @property
    def display_name(self) -> str:
        return self.client_name or self.client_code

    @property
    def descriptor_display(self) -> str:
        parts = [reading.descriptor or reading.code for reading in self.readings]
        return " + ".join(part for part in parts if part and part != "?") or "Sin exhibidor"

    @property
    def color_display(self) -> str:
        if not self.is_mixed:
            reading = self.readings[0]
            return (
                f"{reading.color.emoji} {reading.color.label} "
                f"({format_number(reading.count)} Packs)"
            )
        return " / ".join(
            f"{reading.color.emoji} {reading.color.label} "
            f"({format_number(reading.count)} Packs {reading.code})"
            for reading in self.readings
        )

    @property
    def distance_display(self) -> str:
        if not self.is_mixed:
            return format_number(self.readings[0].distance)
        return " / ".join(
            f"{reading.code}: {format_number(reading.distance)}"
            for reading in self.readings
        )
