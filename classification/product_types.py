"""
classification/product_types.py

Maps a free-text display descriptor to a product type code.
"""

from __future__ import annotations

from classification.base import ProductType
from app.normalization.text import normalize_text

# Ordered triggers. Each entry is a conjunction of substrings; the first
# type with a fully matching entry wins. MK is checked first because its
# descriptors also contain "kiwe".
PRODUCT_TYPE_TRIGGERS: tuple[tuple[ProductType, tuple[tuple[str, ...], ...]], ...] = (
    (ProductType.MK, (("megakiwe",), ("mega kiwe",), ("megakiwi",), ("mega kiwi",))),
    (ProductType.K2, (("kiwi 2",), ("kiwe 2",), ("kiwi2",), ("kiwe2",), ("kiwis 2",), ("kiwes 2",))),
    (ProductType.K3, (("kiwi 3",), ("kiwe 3",), ("kiwi3",), ("kiwe3",), ("kiwis 3",), ("kiwes 3",))),
    (ProductType.L6, (("lego", "x 6"), ("lego", "x6"), ("lego 6",), ("lego6",), ("legos 6",))),
    (ProductType.L9, (("lego", "x 9"), ("lego", "x9"), ("lego 9",), ("lego9",), ("legos 9",))),
)

_CODE_TOKENS: dict[str, ProductType] = {
    product_type.value.lower(): product_type
    for product_type, _ in PRODUCT_TYPE_TRIGGERS
}


def classify_product_type(descriptor: str | None) -> ProductType:
    """Resolve a descriptor such as "Exhibidor Kiwi 2" to its type code.

    A descriptor that is exactly a type code token ("K2", "l6") also
    resolves. Anything else is UNKNOWN.
    """
    text = normalize_text(descriptor or "")
    if not text:
        return ProductType.UNKNOWN

    for product_type, triggers in PRODUCT_TYPE_TRIGGERS:
        for required in triggers:
            if all(fragment in text for fragment in required):
                return product_type

    for token in text.split(" "):
        if token in _CODE_TOKENS:
            return _CODE_TOKENS[token]
    return ProductType.UNKNOWN
