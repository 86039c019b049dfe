"""
app/mappers package marker.
"""

from app.mappers.layouts import (
    CORE_FIELDS,
    HEADER_OVERRIDES,
    LAYOUT_PROFILES,
    HeaderLayout,
    LayoutProfile,
    get_layout_profile,
)
from app.mappers.schema_reconciler import (
    HeaderResolution,
    ReconciliationResult,
    SchemaReconciler,
    sniff_delimiter,
)

__all__ = [
    "CORE_FIELDS",
    "HEADER_OVERRIDES",
    "LAYOUT_PROFILES",
    "HeaderLayout",
    "HeaderResolution",
    "LayoutProfile",
    "ReconciliationResult",
    "SchemaReconciler",
    "get_layout_profile",
    "sniff_delimiter",
]
