"""
classification/thresholds.py

Default threshold table and per-row override resolution.
"""

from __future__ import annotations

import logging
from dataclasses import replace

from classification.base import ProductType, ThresholdProfile

logger = logging.getLogger(__name__)

DEFAULT_THRESHOLDS: dict[ProductType, ThresholdProfile] = {
    ProductType.K2: ThresholdProfile(red_min=1, amber_min=8, green_min=12),
    ProductType.K3: ThresholdProfile(red_min=1, amber_min=10, green_min=14),
    ProductType.L6: ThresholdProfile(red_min=1, amber_min=6, green_min=9),
    ProductType.L9: ThresholdProfile(red_min=1, amber_min=7, green_min=11),
    ProductType.MK: ThresholdProfile(red_min=1, amber_min=20, green_min=30),
}

FALLBACK_PROFILE = ThresholdProfile(red_min=1, amber_min=8, green_min=12)


def default_profile(product_type: ProductType) -> ThresholdProfile:
    return DEFAULT_THRESHOLDS.get(product_type, FALLBACK_PROFILE)


def resolve_profile(
    product_type: ProductType,
    *,
    red_min: float | None = None,
    amber_min: float | None = None,
    green_min: float | None = None,
) -> ThresholdProfile:
    """Apply explicit overrides field by field over the type default.

    Args:
        product_type: Type whose default row is the base profile.
        red_min: Override for the RED minimum, or None to keep the default.
        amber_min: Override for the AMBER minimum.
        green_min: Override for the GREEN minimum.

    Returns:
        The merged profile, or the type default when the merge would leave
        ``amber_min`` above ``green_min``.
    """
    base = default_profile(product_type)
    changes = {
        name: value
        for name, value in (
            ("red_min", red_min),
            ("amber_min", amber_min),
            ("green_min", green_min),
        )
        if value is not None
    }
    if not changes:
        return base

    merged = replace(base, **changes)
    if not merged.is_well_formed():
        logger.warning(
            "Ignoring malformed threshold overrides type=%s overrides=%s",
            product_type.value,
            changes,
        )
        return base
    return merged
