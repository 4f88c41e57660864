# services/ingest.py
"""
Spreadsheet ingestion: workbook bytes -> normalized CreatorRecords.

The first sheet of the workbook is read with every cell as text, the localized
header row is mapped onto the canonical record fields, and each cell is coerced
on its own. Bad cells are defaulted (0 or ""), never rejected; only a workbook
that cannot be decoded at all fails the upload.
"""

import io
import logging
import math
import re
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, NamedTuple, Tuple

import polars as pl

from constants import HEADER_FIELD_MAP, INT_FIELDS, TEXT_FIELDS
from services.errors import MalformedInputError
from services.models import CreatorRecord

logger = logging.getLogger(__name__)

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


class Coerced(NamedTuple):
    """A coerced cell value and whether it fell back to the default."""

    value: Any
    defaulted: bool


@dataclass
class IngestReport:
    """Parsed records plus how often each field had to be defaulted."""

    records: List[CreatorRecord] = field(default_factory=list)
    defaulted: Dict[str, int] = field(default_factory=dict)

    @property
    def row_count(self) -> int:
        return len(self.records)


def _is_blank(raw: Any) -> bool:
    if raw is None:
        return True
    if isinstance(raw, float) and math.isnan(raw):
        return True
    return isinstance(raw, str) and raw.strip() == ""


def _stringify(raw: Any) -> str:
    # Whole-number float cells (ids typed as numbers) should not gain a ".0"
    if isinstance(raw, float) and raw.is_integer():
        return str(int(raw))
    return str(raw)


def coerce_int(raw: Any) -> Coerced:
    """
    Coerce a spreadsheet cell to a non-negative integer.

    Takes the leading run of digits of the cell text, ignoring surrounding
    whitespace and thousands separators ("1,500" -> 1500, "12.7" -> 12,
    "42명" -> 42). Blank, non-numeric and negative cells default to 0.

    Args:
        raw: Cell value as read from the sheet (usually str, may be int/float/None)

    Returns:
        Coerced(value, defaulted)
    """
    if _is_blank(raw) or isinstance(raw, bool):
        return Coerced(0, True)

    if isinstance(raw, int):
        value = raw
    elif isinstance(raw, float):
        if math.isinf(raw):
            return Coerced(0, True)
        value = int(raw)
    else:
        # Thousands separators are dropped before the leading-integer parse on
        # purpose: "1,500" reads as 1500, not as 1.
        match = _LEADING_INT.match(str(raw).replace(",", ""))
        if not match:
            return Coerced(0, True)
        value = int(match.group(1))

    if value < 0:
        return Coerced(0, True)
    return Coerced(value, False)


def coerce_text(raw: Any) -> Coerced:
    """Coerce a spreadsheet cell to text; blank cells default to ''."""
    if _is_blank(raw):
        return Coerced("", True)
    return Coerced(_stringify(raw), False)


def map_row(
    row: Mapping[str, Any], period: str, agency_id: str
) -> Tuple[CreatorRecord, List[str]]:
    """
    Map one header-keyed sheet row onto a CreatorRecord.

    Args:
        row: Mapping of header text -> cell value
        period: Operator-supplied period label
        agency_id: Operator-selected agency id

    Returns:
        Tuple of (record, names of fields that were defaulted)
    """
    cells = {str(k).strip(): v for k, v in row.items()}
    values: Dict[str, Any] = {}
    defaulted: List[str] = []

    for header, field_name in HEADER_FIELD_MAP.items():
        raw = cells.get(header)
        if field_name in INT_FIELDS:
            coerced = coerce_int(raw)
        else:
            coerced = coerce_text(raw)
        values[field_name] = coerced.value
        if coerced.defaulted:
            defaulted.append(field_name)

    record = CreatorRecord(period=period, agency_id=agency_id, **values)
    return record, defaulted


def read_first_sheet(file_bytes: bytes) -> List[Dict[str, Any]]:
    """
    Decode a workbook and return its first sheet as header-keyed rows.

    Raises:
        MalformedInputError: If the bytes are not a readable workbook
    """
    if not file_bytes:
        raise MalformedInputError("Uploaded file is empty")

    try:
        df = pl.read_excel(
            io.BytesIO(file_bytes),
            sheet_id=1,
            engine="calamine",
            infer_schema_length=0,
            raise_if_empty=False,
        )
    except Exception as e:
        logger.warning(f"[Ingest] Failed to decode workbook: {e}")
        raise MalformedInputError(f"Could not read workbook: {e}") from e

    return df.to_dicts()


def parse_workbook_report(
    file_bytes: bytes, period: str, agency_id: str
) -> IngestReport:
    """Parse a workbook and keep per-field defaulted counts."""
    rows = read_first_sheet(file_bytes)

    report = IngestReport()
    counts: Counter = Counter()
    for row in rows:
        record, defaulted = map_row(row, period, agency_id)
        report.records.append(record)
        counts.update(defaulted)

    report.defaulted = {name: counts[name] for name in INT_FIELDS + TEXT_FIELDS if counts[name]}
    logger.info(
        f"[Ingest] Parsed {report.row_count} rows (period={period}, agency={agency_id}), "
        f"defaulted={report.defaulted}"
    )
    return report


def parse_workbook(file_bytes: bytes, period: str, agency_id: str) -> List[CreatorRecord]:
    """
    Parse an uploaded workbook into CreatorRecords, in sheet row order.

    Args:
        file_bytes: Raw .xlsx/.xls content
        period: Operator-supplied period label
        agency_id: Operator-selected agency id

    Returns:
        List of CreatorRecord, one per data row

    Raises:
        MalformedInputError: If the workbook cannot be decoded
    """
    return parse_workbook_report(file_bytes, period, agency_id).records
