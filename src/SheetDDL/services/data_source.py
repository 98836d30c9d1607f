"""
Read tabular data files into an in-memory Dataset.

Supports delimited text (CSV/TSV/TXT with delimiter sniffing), Excel
workbooks (one sheet at a time) and JSON arrays of objects. Header cells
are kept exactly as they appear in the source so blank and duplicate
names reach the header normalizer untouched.

Module Input:
    - Path to a data file
    - Optional worksheet name for Excel files

Module Output:
    - Dataset with raw headers and rows of raw cell values
"""

from __future__ import annotations

import csv
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, Optional

import pandas as pd

from ..core.exceptions import EmptyDatasetError, SheetNotFoundError, SourceNotFoundError
from ..core.logging_config import get_logger
from .file_utils import detect_file_type

logger = get_logger(__name__)

_SNIFF_BYTES = 8192
_SNIFF_DELIMITERS = ",;\t|"


@dataclass
class Dataset:
    headers: List[Optional[Any]]
    rows: List[List[Any]] = field(default_factory=list)
    source: Optional[Path] = None
    sheet: Optional[str] = None

    @property
    def row_count(self) -> int:
        return len(self.rows)

    @property
    def column_count(self) -> int:
        return len(self.headers)

    def column_values(self, index: int) -> List[Any]:
        """Values of one column in row order; short rows yield None."""
        return [row[index] if index < len(row) else None for row in self.rows]


def _missing(value: Any) -> bool:
    if value is None:
        return True
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def _blank_row(row: List[Any]) -> bool:
    return all(_missing(v) or (isinstance(v, str) and not v.strip()) for v in row)


def _detect_delimiter(path: Path, sample: str) -> str:
    if path.suffix.lower() == ".tsv":
        return "\t"
    try:
        return csv.Sniffer().sniff(sample, delimiters=_SNIFF_DELIMITERS).delimiter
    except csv.Error:
        return ","


def read_delimited(path: Path, encoding: str = "utf-8-sig") -> Dataset:
    """Read a delimited text file; the first non-empty row is the header."""
    with path.open("r", encoding=encoding, errors="replace", newline="") as handle:
        delimiter = _detect_delimiter(path, handle.read(_SNIFF_BYTES))
        handle.seek(0)
        reader = csv.reader(handle, delimiter=delimiter)
        header: Optional[List[str]] = None
        rows: List[List[Any]] = []
        for row in reader:
            if not row:
                continue
            if header is None:
                header = row
                continue
            if _blank_row(row):
                continue
            # pad short rows, drop cells beyond the header
            cells: List[Any] = row[:len(header)]
            cells.extend([None] * (len(header) - len(cells)))
            rows.append(cells)

    if header is None:
        raise EmptyDatasetError(f"No header row found in {path}", {"path": str(path)})

    logger.debug("Read %d rows from %s (delimiter=%r)", len(rows), path.name, delimiter)
    return Dataset(headers=list(header), rows=rows, source=path)


def list_sheets(path: Path) -> List[str]:
    with pd.ExcelFile(path) as workbook:
        return [str(name) for name in workbook.sheet_names]


def read_excel(path: Path, sheet: Optional[str] = None) -> Dataset:
    """Read one worksheet (the first one by default) with raw header cells."""
    sheets = list_sheets(path)
    if not sheets:
        raise SheetNotFoundError(f"Workbook has no sheets: {path}", {"path": str(path)})
    if sheet is None:
        sheet_name = sheets[0]
    else:
        matches = [s for s in sheets if s == sheet] or [s for s in sheets if s.lower() == sheet.lower()]
        if not matches:
            raise SheetNotFoundError(
                f"Sheet '{sheet}' not found in {path.name}",
                {"path": str(path), "available": sheets},
            )
        sheet_name = matches[0]

    frame = pd.read_excel(path, sheet_name=sheet_name, header=None, dtype=object)
    records = [[None if _missing(v) else v for v in row] for row in frame.itertuples(index=False, name=None)]
    # the header is the first row with any content, as for delimited files
    while records and _blank_row(records[0]):
        records.pop(0)
    if not records:
        raise EmptyDatasetError(f"Sheet '{sheet_name}' in {path.name} is empty", {"path": str(path)})

    header, body = records[0], records[1:]
    rows = [row for row in body if not _blank_row(row)]
    logger.debug("Read %d rows from %s[%s]", len(rows), path.name, sheet_name)
    return Dataset(headers=header, rows=rows, source=path, sheet=sheet_name)


def read_json(path: Path) -> Dataset:
    """Read a JSON array of objects; keys of the records become the header."""
    try:
        with path.open("r", encoding="utf-8-sig") as handle:
            records = json.load(handle)
    except (OSError, ValueError) as exc:
        raise SourceNotFoundError(f"Cannot read JSON records from {path}: {exc}", {"path": str(path)}) from exc

    if isinstance(records, dict):
        records = [records]
    if not isinstance(records, list) or not all(isinstance(r, dict) for r in records):
        raise SourceNotFoundError(f"Expected a JSON array of objects in {path}", {"path": str(path)})

    # union of keys in first-seen order
    headers: List[str] = []
    for record in records:
        headers.extend(k for k in record if k not in headers)
    rows = [[record.get(h) for h in headers] for record in records]
    return Dataset(headers=list(headers), rows=rows, source=path)


def load_dataset(path: Path, sheet: Optional[str] = None) -> Dataset:
    """
    Load a data file into memory.

    Args:
        path (Path): File to read
        sheet (Optional[str]): Worksheet name (Excel only; ignored otherwise)

    Returns:
        Dataset: Raw headers and rows

    Raises:
        SourceNotFoundError: Missing, unreadable or unsupported file
        SheetNotFoundError: Requested worksheet does not exist
        EmptyDatasetError: File has no header row
    """
    if not path.is_file():
        raise SourceNotFoundError(f"Data file not found: {path}", {"path": str(path)})

    file_type = detect_file_type(path)
    logger.info("Loading %s (%s)", path, file_type)

    if file_type == "csv":
        dataset = read_delimited(path)
    elif file_type == "excel":
        dataset = read_excel(path, sheet)
    elif file_type == "json":
        dataset = read_json(path)
    else:
        raise SourceNotFoundError(f"Unsupported file type: {path.suffix}", {"path": str(path)})

    if sheet and file_type != "excel":
        logger.warning("Ignoring sheet '%s' for non-Excel file %s", sheet, path.name)

    logger.info("Loaded %d rows x %d columns from %s", dataset.row_count, dataset.column_count, path.name)
    return dataset
