"""Hospital code to name lookup over raw sheet rows."""
import logging
from typing import Any, Optional, Sequence

from services.models import HeaderLayout, HospitalRecord, LookupResult
from services.sheets import read_hospital_range

logger = logging.getLogger(__name__)

NAME_LABELS = ("病院名", "hospital name")
CODE_LABELS = ("病院コード", "hospital code")

Rows = Sequence[Sequence[Any]]


def _cell(row: Sequence[Any], index: int) -> str:
    """Trimmed cell text, empty when the row is short."""
    if index < 0 or index >= len(row) or row[index] is None:
        return ""
    return str(row[index]).strip()


def _has_label(text: str, labels: Sequence[str]) -> bool:
    lowered = text.lower()
    return any(label in lowered for label in labels)


def find_header(rows: Rows) -> Optional[HeaderLayout]:
    """
    Find the first row that carries both a name label and a code label.

    A cell matching a code label is never taken as the name column, so
    "hospital code" can't be mistaken for "hospital name".
    """
    for row_index, row in enumerate(rows):
        name_column = code_column = None
        for col in range(len(row)):
            text = _cell(row, col)
            if not text:
                continue
            if code_column is None and _has_label(text, CODE_LABELS):
                code_column = col
            elif name_column is None and _has_label(text, NAME_LABELS):
                name_column = col
        if name_column is not None and code_column is not None:
            return HeaderLayout(row_index=row_index, name_column=name_column, code_column=code_column)
    return None


def match_by_header(rows: Rows, header: HeaderLayout, code: str) -> Optional[LookupResult]:
    """Look for the code in the code column of rows below the header."""
    for row_index in range(header.row_index + 1, len(rows)):
        row = rows[row_index]
        if _cell(row, header.code_column) == code:
            return LookupResult(
                record=HospitalRecord(code=code, name=_cell(row, header.name_column)),
                method="header",
                row_index=row_index,
                header=header,
            )
    return None


def nearest_neighbor(row: Sequence[Any], index: int) -> Optional[str]:
    """Closest non-empty cell to row[index], left before right at each distance."""
    for distance in range(1, len(row)):
        for col in (index - distance, index + distance):
            text = _cell(row, col)
            if text:
                return text
    return None


def match_by_neighbor(rows: Rows, code: str) -> Optional[LookupResult]:
    """
    Scan every cell for the code and pair it with its nearest neighbor.

    First matching row wins. A match with no non-empty neighbor is skipped.
    """
    for row_index, row in enumerate(rows):
        for col in range(len(row)):
            if _cell(row, col) != code:
                continue
            name = nearest_neighbor(row, col)
            if name:
                return LookupResult(
                    record=HospitalRecord(code=code, name=name),
                    method="neighbor",
                    row_index=row_index,
                )
    return None


def find_hospital(rows: Rows, code: str) -> Optional[LookupResult]:
    """
    Resolve a hospital code against sheet rows.

    Uses the header layout when one is present, otherwise falls back to
    the neighbor heuristic.
    """
    code = code.strip()
    if not code:
        return None

    header = find_header(rows)
    if header is not None:
        return match_by_header(rows, header, code)
    return match_by_neighbor(rows, code)


async def lookup_hospital(code: str) -> Optional[LookupResult]:
    """Fetch the configured range and look up a hospital code."""
    data = await read_hospital_range()
    rows = data.get("values", [])
    result = find_hospital(rows, code)

    if result is None:
        logger.info(f"Hospital {code!r} not found in {data.get('range')} ({len(rows)} rows)")
    else:
        logger.info(f"Hospital {code!r} matched by {result.method} at row {result.row_index}")
    return result
