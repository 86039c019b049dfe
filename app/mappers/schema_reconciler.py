"""
app/mappers/schema_reconciler.py

Recovers a stable field-naming scheme from snapshot uploads whose header
layout varies, and turns each data row into a canonical client record.
"""

from __future__ import annotations

import csv
import io
import logging
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from datetime import datetime, timezone

from app.domain.route_snapshot import (
    ROUTE_PLACEHOLDERS,
    ClientRouteRecord,
    MalformedUploadError,
    RowValidationSkip,
)
from app.mappers.layouts import (
    CATEGORY_MARKER_TOKENS,
    CATEGORY_PREFIX_MIN_INDEX,
    CLIENT_CODE,
    CLIENT_NAME,
    HEADER_OVERRIDES,
    ROUTE_CODE,
    VISIT_DAY,
    HeaderLayout,
    LayoutProfile,
    get_layout_profile,
)
from app.normalization.text import normalize_key

logger = logging.getLogger(__name__)


def sniff_delimiter(text: str) -> str:
    """
    Semicolon when the first line contains one, comma otherwise.
    """

    lines = text.splitlines()
    first_line = lines[0] if lines else ""
    return ";" if ";" in first_line else ","


def _cell(row: Sequence[str], index: int) -> str:
    return row[index] if index < len(row) else ""


@dataclass(frozen=True)
class HeaderResolution:
    """
    Resolved canonical key per input column.

    ``keys[i] == ""`` marks column ``i`` as ignored. ``categories`` keeps the
    running category seen at each column (empty for single-row layouts).
    """

    layout: HeaderLayout
    keys: tuple[str, ...]
    categories: tuple[str, ...] = ()


@dataclass(frozen=True)
class ReconciliationResult:
    """
    Outcome of reconciling one upload.
    """

    batch_id: str
    uploaded_at: datetime
    records: list[ClientRouteRecord]
    header_map: HeaderResolution
    skipped_rows: list[RowValidationSkip] = field(default_factory=list)


class SchemaReconciler:
    """
    Resolves uploaded delimited tables into canonical client route records.
    """

    def __init__(
        self,
        *,
        overrides: Mapping[str, str] | None = None,
        prefix_min_index: int = CATEGORY_PREFIX_MIN_INDEX,
        marker_tokens: frozenset[str] = CATEGORY_MARKER_TOKENS,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._overrides: dict[str, str] = dict(
            HEADER_OVERRIDES if overrides is None else overrides
        )
        self._redundant_markers = frozenset(
            key for key, target in self._overrides.items() if target == ""
        )
        self._prefix_min_index = max(0, prefix_min_index)
        self._marker_tokens = frozenset(normalize_key(token) for token in marker_tokens)
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def reconcile(
        self,
        content: bytes,
        *,
        layout: HeaderLayout | str = HeaderLayout.SINGLE_ROW,
    ) -> ReconciliationResult:
        """
        Parse, map, and validate one upload.

        Raises:
            MalformedUploadError: When the upload has fewer rows than the
                layout requires or cannot be decoded.
        """

        profile = get_layout_profile(layout)
        table = self.parse_table(content)
        if len(table) < profile.min_rows:
            raise MalformedUploadError(
                f"El archivo CSV debe tener al menos {profile.min_rows} filas "
                f"(cabeceras y datos) para el formato '{profile.layout.value}'."
            )

        header_rows = table[: profile.header_rows]
        header_map = self.resolve_header_map(header_rows, profile=profile)

        uploaded_at = self._clock()
        batch_id = uploaded_at.isoformat()

        records: list[ClientRouteRecord] = []
        skipped: list[RowValidationSkip] = []
        for index in range(profile.header_rows, len(table)):
            outcome = self.map_row(
                table[index],
                header_map=header_map,
                profile=profile,
                row_number=index + 1,
                batch_id=batch_id,
                uploaded_at=uploaded_at,
            )
            if isinstance(outcome, RowValidationSkip):
                skipped.append(outcome)
            else:
                records.append(outcome)

        logger.info(
            "Reconciled upload layout=%s columns=%d records=%d skipped=%d batch_id=%s",
            profile.layout.value,
            len(header_map.keys),
            len(records),
            len(skipped),
            batch_id,
        )
        return ReconciliationResult(
            batch_id=batch_id,
            uploaded_at=uploaded_at,
            records=records,
            header_map=header_map,
            skipped_rows=skipped,
        )

    def parse_table(self, content: bytes) -> list[list[str]]:
        """
        Decode and split an upload into trimmed rows, skipping blank lines.
        Ragged rows are kept as-is.
        """

        try:
            text = content.decode("utf-8-sig")
        except UnicodeDecodeError as exc:
            raise MalformedUploadError("El archivo CSV debe estar codificado en UTF-8.") from exc

        delimiter = sniff_delimiter(text)
        rows: list[list[str]] = []
        try:
            for raw_row in csv.reader(io.StringIO(text, newline=""), delimiter=delimiter):
                row = [cell.strip() for cell in raw_row]
                if not row or (len(row) == 1 and not row[0]):
                    continue
                rows.append(row)
        except csv.Error as exc:
            raise MalformedUploadError(f"Formato CSV inválido: {exc}") from exc
        return rows

    def resolve_header_map(
        self,
        header_rows: Sequence[Sequence[str]],
        *,
        profile: LayoutProfile,
    ) -> HeaderResolution:
        """
        Build the canonical key for every column of the header block.
        """

        if profile.has_category_row:
            category_row, header_row = header_rows[0], header_rows[1]
        else:
            category_row, header_row = (), header_rows[0]
        fallback_row = header_rows[2] if profile.has_fallback_row else ()

        width = max((len(row) for row in header_rows), default=0)
        keys: list[str] = []
        categories: list[str] = []
        running_category = ""

        for index in range(width):
            if profile.has_category_row:
                category = normalize_key(_cell(category_row, index))
                if category and category not in self._marker_tokens:
                    running_category = category
                categories.append(running_category)

            sub_header = _cell(header_row, index)
            if not sub_header and profile.has_fallback_row:
                sub_header = _cell(fallback_row, index)
            keys.append(self._resolve_key(normalize_key(sub_header), index, running_category, profile))

        return HeaderResolution(
            layout=profile.layout,
            keys=tuple(keys),
            categories=tuple(categories),
        )

    def map_row(
        self,
        row: Sequence[str],
        *,
        header_map: HeaderResolution,
        profile: LayoutProfile,
        row_number: int,
        batch_id: str,
        uploaded_at: datetime,
    ) -> ClientRouteRecord | RowValidationSkip:
        """
        Route one data row into core fields and the attribute bag, then
        apply the layout's identity validation.
        """

        core_values: dict[str, str] = {}
        attributes: dict[str, str] = {}

        for index, key in enumerate(header_map.keys):
            if not key:
                continue
            value = _cell(row, index)
            core_field = profile.core_field_for(key)
            if core_field is not None:
                core_values[core_field] = value
                continue
            if not value or normalize_key(value) in self._redundant_markers:
                continue
            attributes[key] = value

        client_code = core_values.get(CLIENT_CODE, "")
        route_code = core_values.get(ROUTE_CODE, "")

        if not client_code:
            return RowValidationSkip(
                row_number=row_number,
                reason="missing_client_code",
                route_code=route_code,
            )
        if not route_code or route_code in ROUTE_PLACEHOLDERS:
            if profile.require_route:
                return RowValidationSkip(
                    row_number=row_number,
                    reason="missing_route_code" if not route_code else "placeholder_route_code",
                    client_code=client_code,
                    route_code=route_code,
                )
            route_code = ""

        return ClientRouteRecord(
            route_code=route_code,
            client_code=client_code,
            client_name=core_values.get(CLIENT_NAME, ""),
            visit_day=core_values.get(VISIT_DAY, ""),
            attributes=attributes,
            batch_id=batch_id,
            uploaded_at=uploaded_at,
        )

    def _resolve_key(
        self,
        normalized: str,
        index: int,
        running_category: str,
        profile: LayoutProfile,
    ) -> str:
        if normalized in self._overrides:
            return self._overrides[normalized]
        if (
            normalized
            and profile.has_category_row
            and running_category
            and index >= self._prefix_min_index
        ):
            return f"{running_category}_{normalized}"
        return normalized
