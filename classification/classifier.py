"""
classification/classifier.py

Client State Classifier: turns a canonical client record into a colour
state per product family.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence

from app.domain.route_snapshot import ClientRouteRecord
from app.normalization.text import parse_number
from classification import vocabulary
from classification.base import (
    ClientSummary,
    ColorState,
    FamilyReading,
    ProductFamily,
    ProductType,
    ThresholdProfile,
)
from classification.product_types import classify_product_type
from classification.thresholds import resolve_profile


# ---------------------------------------------------------------------------
# Pure classification
# ---------------------------------------------------------------------------

def classify_count(
    count: float | None,
    profile: ThresholdProfile,
) -> tuple[ColorState, float | None]:
    """Classify a unit count against a threshold profile.

    Args:
        count: Current units, or None when the value is unknown.
        profile: Threshold profile to classify against.

    Returns:
        ``(state, distance_to_next_tier)``. Distance is None for UNKNOWN
        and 0 for GREEN.
    """
    if count is None:
        return ColorState.UNKNOWN, None
    if count <= profile.black_max:
        return ColorState.BLACK, max(profile.red_min - count, 0)
    if count >= profile.green_min:
        return ColorState.GREEN, 0
    if count >= profile.amber_min:
        return ColorState.AMBER, profile.green_min - count
    return ColorState.RED, profile.amber_min - count


def next_target(color: ColorState, profile: ThresholdProfile) -> float | None:
    """Count needed to reach the next tier; None at the top or when unknown."""
    return {
        ColorState.BLACK: profile.red_min,
        ColorState.RED: profile.amber_min,
        ColorState.AMBER: profile.green_min,
    }.get(color)


def _first_value(attributes: Mapping[str, str], keys: Sequence[str]) -> str | None:
    for key in keys:
        value = attributes.get(key)
        if value is not None and value.strip():
            return value.strip()
    return None


# ---------------------------------------------------------------------------
# Classifier
# ---------------------------------------------------------------------------

class ClientStateClassifier:
    """Classifies client records family by family.

    A record carrying both kiwi and lego figures yields two readings. A
    record with no family-specific keys falls back to the generic keys and
    yields one reading; a record with nothing readable yields a single
    UNKNOWN reading.
    """

    def classify(self, record: ClientRouteRecord) -> ClientSummary:
        attributes = record.attributes
        readings = [
            reading
            for reading in (self._read_family(attributes, family) for family in ProductFamily)
            if reading is not None
        ]
        if not readings:
            readings = [self._read_generic(attributes)]

        return ClientSummary(
            route_code=record.route_code,
            client_code=record.client_code,
            client_name=record.client_name,
            visit_day=record.visit_day,
            readings=tuple(readings),
        )

    def classify_all(self, records: Iterable[ClientRouteRecord]) -> list[ClientSummary]:
        return [self.classify(record) for record in records]

    def _read_family(
        self,
        attributes: Mapping[str, str],
        family: ProductFamily,
    ) -> FamilyReading | None:
        descriptor = _first_value(attributes, vocabulary.descriptor_keys(family))
        product_type = classify_product_type(descriptor)
        if product_type.family not in (None, family):
            product_type = ProductType.UNKNOWN

        family_count_keys = [
            key
            for key in vocabulary.count_keys(product_type, family)
            if key not in vocabulary.GENERIC_COUNT_KEYS
        ]
        raw_count = _first_value(attributes, family_count_keys)
        if descriptor is None and raw_count is None:
            return None
        return self._build_reading(attributes, family, product_type, descriptor, raw_count)

    def _read_generic(self, attributes: Mapping[str, str]) -> FamilyReading:
        descriptor = _first_value(attributes, vocabulary.GENERIC_DESCRIPTOR_KEYS)
        product_type = classify_product_type(descriptor)
        raw_count = _first_value(attributes, vocabulary.count_keys(product_type, None))
        return self._build_reading(
            attributes, product_type.family, product_type, descriptor, raw_count
        )

    def _build_reading(
        self,
        attributes: Mapping[str, str],
        family: ProductFamily | None,
        product_type: ProductType,
        descriptor: str | None,
        raw_count: str | None,
    ) -> FamilyReading:
        count = parse_number(raw_count)
        profile = resolve_profile(
            product_type,
            red_min=self._override(attributes, vocabulary.RED_OVERRIDE, family),
            amber_min=self._override(attributes, vocabulary.AMBER_OVERRIDE, family),
            green_min=self._override(attributes, vocabulary.GREEN_OVERRIDE, family),
        )
        color, distance = classify_count(count, profile)
        return FamilyReading(
            family=family,
            product_type=product_type,
            descriptor=descriptor or "",
            count=count,
            profile=profile,
            color=color,
            distance=distance,
            next_target=next_target(color, profile),
        )

    @staticmethod
    def _override(
        attributes: Mapping[str, str],
        field: str,
        family: ProductFamily | None,
    ) -> float | None:
        return parse_number(_first_value(attributes, vocabulary.override_keys(field, family)))
