"""
Infer a SQL column type from the raw values of one column.

Cleans the values, counts how many of them parse as each candidate type
and picks the first type (INT, BIT, FLOAT, DATETIME) that every non-blank
value satisfies and that reaches the confidence threshold. Anything else
becomes NVARCHAR sized to the longest value.

Module Input:
    - Final column name
    - Raw cell values in row order (text, numbers, dates, booleans, None)
    - Threshold (minimum number of matching values)

Module Output:
    - TypeDecision (SQL type + NVARCHAR length)
    - CandidateCounts for diagnostics
"""

from __future__ import annotations

from dataclasses import dataclass, asdict
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from SheetDDL.core.settings import DEFAULT_DATE_FORMATS

MAX_NVARCHAR_LENGTH = 255
EMPTY_COLUMN_LENGTH = 100

_BOOL_TOKENS = frozenset({"true", "false", "0", "1"})
_DATE_NAME_HINTS = ("data", "date")


class SqlType(str, Enum):
    INT = "INT"
    BIT = "BIT"
    FLOAT = "FLOAT"
    DATETIME = "DATETIME"
    NVARCHAR = "NVARCHAR"


@dataclass(frozen=True)
class TypeDecision:
    sql_type: SqlType
    length: Optional[int] = None

    def __post_init__(self):
        if self.sql_type is SqlType.NVARCHAR:
            if self.length is None or not 1 <= self.length <= MAX_NVARCHAR_LENGTH:
                raise ValueError(f"NVARCHAR length must be in [1, {MAX_NVARCHAR_LENGTH}], got {self.length}")
        elif self.length is not None:
            raise ValueError(f"{self.sql_type.value} does not take a length")

    @classmethod
    def nvarchar(cls, length: int) -> "TypeDecision":
        return cls(SqlType.NVARCHAR, length)


@dataclass(frozen=True)
class CandidateCounts:
    total: int = 0
    int_count: int = 0
    float_count: int = 0
    date_count: int = 0
    bool_count: int = 0

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)


def _is_nan_like(value: Any) -> bool:
    # NaN and NaT are the only values not equal to themselves
    if isinstance(value, str):
        return False
    try:
        return bool(value != value)
    except (TypeError, ValueError):
        return False


def to_text(value: Any) -> Optional[str]:
    """
    Convert a raw cell value to trimmed text, or None when the cell is empty.

    pandas NaN/NaT count as missing. Dates and datetimes render in ISO form
    with a space separator, without a UTC offset, so they match the accepted date formats.
    """
    if value is None or _is_nan_like(value):
        return None
    if isinstance(value, datetime):
        # offsets such as "+00:00" are not part of any accepted date format
        return value.replace(tzinfo=None).isoformat(sep=" ").strip()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, bytes):
        value = value.decode("utf-8", errors="replace")
    return str(value).strip()


def clean_values(values: Iterable[Any]) -> Tuple[List[str], List[str]]:
    """Return (cleaned, non_blank): trimmed text without missing cells, then without blanks."""
    cleaned = [text for text in (to_text(v) for v in values) if text is not None]
    non_blank = [text for text in cleaned if text]
    return cleaned, non_blank


def _digits(text: str) -> bool:
    return bool(text) and text.isascii() and text.isdigit()


def _maybe_int(v: str) -> bool:
    # optional leading "-" then ASCII digits only; int() would also accept "+1", "1_0", " 1"
    body = v[1:] if v.startswith("-") else v
    return _digits(body)


def _maybe_float(v: str) -> bool:
    body = v[1:] if v.startswith("-") else v
    whole, dot, fraction = body.partition(".")
    return bool(dot) and _digits(whole) and _digits(fraction)


def _maybe_bool(v: str) -> bool:
    return v.lower() in _BOOL_TOKENS


def _maybe_date(v: str, formats: Sequence[str] = DEFAULT_DATE_FORMATS) -> bool:
    for fmt in formats:
        try:
            datetime.strptime(v, fmt)
            return True
        except ValueError:
            continue
    return False


def count_candidates(
    non_blank: Sequence[str],
    date_formats: Sequence[str] = DEFAULT_DATE_FORMATS,
) -> CandidateCounts:
    """Count, independently, how many non-blank values parse as each candidate type."""
    int_count = float_count = date_count = bool_count = 0
    for v in non_blank:
        if _maybe_int(v):
            int_count += 1
        if _maybe_float(v):
            float_count += 1
        if _maybe_date(v, date_formats):
            date_count += 1
        if _maybe_bool(v):
            bool_count += 1
    return CandidateCounts(
        total=len(non_blank),
        int_count=int_count,
        float_count=float_count,
        date_count=date_count,
        bool_count=bool_count,
    )


def decide_type(counts: CandidateCounts, non_blank: Sequence[str], threshold: int) -> TypeDecision:
    """
    Choose the SQL type from candidate counts.

    Priority is INT, BIT, FLOAT, DATETIME. A candidate only qualifies when
    its count reaches the threshold and every non-blank value matched it,
    so a single stray value sends the column to NVARCHAR.
    """
    def qualifies(count: int) -> bool:
        return count >= threshold and count == counts.total

    if qualifies(counts.int_count):
        return TypeDecision(SqlType.INT)
    if qualifies(counts.bool_count):
        return TypeDecision(SqlType.BIT)
    if qualifies(counts.float_count):
        return TypeDecision(SqlType.FLOAT)
    if qualifies(counts.date_count):
        return TypeDecision(SqlType.DATETIME)

    width = max((len(v) for v in non_blank), default=1)
    return TypeDecision.nvarchar(max(1, min(MAX_NVARCHAR_LENGTH, width)))


def decide_empty_column(column_name: str) -> TypeDecision:
    """Type for a column without any non-blank value, guessed from its name."""
    lowered = column_name.lower()
    if any(hint in lowered for hint in _DATE_NAME_HINTS):
        return TypeDecision(SqlType.DATETIME)
    return TypeDecision.nvarchar(EMPTY_COLUMN_LENGTH)


def profile_column(
    column_name: str,
    values: Iterable[Any],
    threshold: int,
    date_formats: Sequence[str] = DEFAULT_DATE_FORMATS,
) -> Tuple[TypeDecision, CandidateCounts]:
    """Infer the type of one column and return the counts that led to it."""
    _, non_blank = clean_values(values)
    if not non_blank:
        return decide_empty_column(column_name), CandidateCounts()
    counts = count_candidates(non_blank, date_formats)
    return decide_type(counts, non_blank, threshold), counts


def infer_column_type(
    column_name: str,
    values: Iterable[Any],
    threshold: int,
    date_formats: Sequence[str] = DEFAULT_DATE_FORMATS,
) -> TypeDecision:
    """
    Infer the SQL type of a column.

    Never raises for any input values: everything that does not fit a
    stricter type ends up as NVARCHAR.

    Args:
        column_name (str): Final (de-duplicated) column name
        values (Iterable[Any]): Raw cell values in row order
        threshold (int): Minimum number of matching values for a non-text type
        date_formats (Sequence[str]): strptime formats accepted as dates

    Returns:
        TypeDecision: SQL type, with a length for NVARCHAR

    Examples:
        ["0", "1", "0", "1"], threshold 4 -> INT
        ["1", "2", "x"], threshold 2      -> NVARCHAR(1)
        [] with name "OrderDate"          -> DATETIME
    """
    decision, _ = profile_column(column_name, values, threshold, date_formats)
    return decision
