"""
Schema generation pipeline: headers -> per-column types -> CREATE TABLE.

Orchestrates the header normalizer and the column type inferencer over an
in-memory Dataset and assembles the DDL.

Module Input:
    - Dataset (raw headers + rows)
    - Table name, threshold, optional worker count

Module Output:
    - SchemaResult with per-column details and the SQL text
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, List, Optional, Sequence

from SheetDDL.core.exceptions import EmptyDatasetError
from SheetDDL.core.logging_config import get_logger
from SheetDDL.core.settings import settings
from SheetDDL.etl.ddl import build_create_table_sql, format_sql_type, unique_sql_identifiers
from SheetDDL.etl.headers import normalize_headers
from SheetDDL.etl.type_inference import CandidateCounts, TypeDecision, profile_column
from SheetDDL.services.data_source import Dataset

logger = get_logger(__name__)


@dataclass(frozen=True)
class ColumnSchema:
    raw_name: Any
    name: str
    identifier: str
    decision: TypeDecision
    counts: CandidateCounts

    @property
    def sql_type(self) -> str:
        return format_sql_type(self.decision)

    def to_dict(self) -> dict:
        return {
            "raw_name": None if self.raw_name is None else str(self.raw_name),
            "name": self.name,
            "identifier": self.identifier,
            "sql_type": self.sql_type,
            "counts": self.counts.to_dict(),
        }


@dataclass
class SchemaResult:
    table_name: str
    threshold: int
    columns: List[ColumnSchema] = field(default_factory=list)
    collisions: List[str] = field(default_factory=list)
    sql: str = ""


def generate_schema(
    dataset: Dataset,
    table_name: str,
    threshold: Optional[int] = None,
    workers: Optional[int] = None,
    date_formats: Optional[Sequence[str]] = None,
) -> SchemaResult:
    """
    Infer a CREATE TABLE statement for a dataset.

    Args:
        dataset (Dataset): Loaded source data
        table_name (str): Target table name
        threshold (Optional[int]): Confidence threshold (default: settings.inference_threshold)
        workers (Optional[int]): Thread pool size for column inference (default: settings.inference_workers)
        date_formats (Optional[Sequence[str]]): Accepted date formats (default: settings.date_formats)

    Returns:
        SchemaResult: Columns in source order plus the DDL text

    Raises:
        EmptyDatasetError: If the dataset has no rows
    """
    if dataset.row_count == 0:
        source = dataset.source.name if dataset.source else "dataset"
        raise EmptyDatasetError(f"No data rows in {source}", {"source": str(dataset.source)})

    threshold = threshold or settings.inference_threshold
    workers = workers or settings.inference_workers
    formats = tuple(date_formats or settings.date_formats)

    headers = normalize_headers(dataset.headers)
    if headers.has_collisions:
        logger.warning("Duplicate column names renamed: %s", ", ".join(headers.collisions))

    def infer(index: int):
        return profile_column(headers.names[index], dataset.column_values(index), threshold, formats)

    indexes = range(dataset.column_count)
    if workers > 1 and dataset.column_count > 1:
        with ThreadPoolExecutor(max_workers=workers) as executor:
            profiles = list(executor.map(infer, indexes))
    else:
        profiles = [infer(i) for i in indexes]

    identifiers = unique_sql_identifiers(headers.names)
    columns: List[ColumnSchema] = []
    for i, (decision, counts) in enumerate(profiles):
        column = ColumnSchema(
            raw_name=dataset.headers[i],
            name=headers.names[i],
            identifier=identifiers[i],
            decision=decision,
            counts=counts,
        )
        logger.debug("Column %s -> %s (%s)", column.name, column.sql_type, counts.to_dict())
        columns.append(column)

    sql = build_create_table_sql(table_name, [(c.identifier, c.decision) for c in columns])
    logger.info(
        "Inferred %d columns for [%s] from %d rows (threshold=%d)",
        len(columns), table_name, dataset.row_count, threshold,
    )
    return SchemaResult(
        table_name=table_name,
        threshold=threshold,
        columns=columns,
        collisions=list(headers.collisions),
        sql=sql,
    )
