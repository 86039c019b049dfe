"""
classification/vocabulary.py

Versioned vocabulary of the dynamic attribute keys the classifier reads.

Single-row uploads spell keys ``<FIELD>_<FAMILY>`` (``EXHIBIDOR_KIWES``);
category-header uploads prefix the running category, which yields
``<FAMILY>_<FIELD>`` (``KIWES_EXHIBIDOR``). Both spellings are listed, the
single-row one first.
"""

from __future__ import annotations

from classification.base import ProductFamily, ProductType

VOCABULARY_VERSION = "2026.1"

_DESCRIPTOR_FIELDS: tuple[str, ...] = ("EXHIBIDOR", "TIPO_EXHIBIDOR")
_COUNT_FIELDS: tuple[str, ...] = ("PACKS_VENDIDOS", "PACKS_ACTUALES", "PACKS")

GENERIC_DESCRIPTOR_KEYS: tuple[str, ...] = ("EXHIBIDOR", "TIPO_EXHIBIDOR", "PRODUCTO")
GENERIC_COUNT_KEYS: tuple[str, ...] = _COUNT_FIELDS

RED_OVERRIDE = "UMBRAL_ROJO"
AMBER_OVERRIDE = "UMBRAL_AMBAR"
GREEN_OVERRIDE = "UMBRAL_VERDE"


def _both_spellings(field: str, suffix: str) -> tuple[str, str]:
    return f"{field}_{suffix}", f"{suffix}_{field}"


def descriptor_keys(family: ProductFamily) -> tuple[str, ...]:
    keys: list[str] = []
    for field in _DESCRIPTOR_FIELDS:
        keys.extend(_both_spellings(field, family.value))
    return tuple(keys)


def count_keys(product_type: ProductType, family: ProductFamily | None) -> tuple[str, ...]:
    """
    Candidate count keys in lookup order: type-specific, then family, then
    generic.
    """

    keys: list[str] = []
    if product_type is not ProductType.UNKNOWN:
        for field in _COUNT_FIELDS:
            keys.extend(_both_spellings(field, product_type.value))
    if family is not None:
        for field in _COUNT_FIELDS:
            keys.extend(_both_spellings(field, family.value))
    keys.extend(GENERIC_COUNT_KEYS)
    return tuple(dict.fromkeys(keys))


def override_keys(field: str, family: ProductFamily | None) -> tuple[str, ...]:
    """
    Keys holding one per-row threshold override, family-specific first.
    """

    if family is None:
        return (field,)
    return (*_both_spellings(field, family.value), field)
