"""
Destinations for a finished CREATE TABLE statement.

Module Input:
    - Table name and SQL text

Module Output:
    - A .sql file, text on a stream, or a table created in a database
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional, TextIO

from sqlalchemy.exc import SQLAlchemyError

from ..core.exceptions import SinkError
from ..core.logging_config import get_logger
from ..etl.db import exec_sql
from ..etl.ddl import to_sql_identifier

logger = get_logger(__name__)


class FileSink:
    """Writes `<table>.sql` into an output directory."""

    def __init__(self, output_dir: Path):
        self.output_dir = Path(output_dir)

    def target_path(self, table: str) -> Path:
        return self.output_dir / f"{to_sql_identifier(table)}.sql"

    def write(self, table: str, sql: str) -> Path:
        path = self.target_path(table)
        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
            if path.exists():
                logger.warning("%s already exists. It will be overwritten.", path)
            path.write_text(sql + "\n", encoding="utf-8")
        except OSError as exc:
            raise SinkError(f"Cannot write {path}: {exc}", {"path": str(path)}) from exc
        logger.info("Wrote CREATE TABLE for [%s] to %s", table, path)
        return path


class ConsoleSink:
    """Prints the statement to a text stream (stdout by default)."""

    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream

    def write(self, table: str, sql: str) -> None:
        stream = self.stream or sys.stdout
        stream.write(sql + "\n")
        stream.flush()


class DatabaseSink:
    """Runs the statement against a database through SQLAlchemy."""

    def __init__(self, url: str):
        self.url = url

    def write(self, table: str, sql: str) -> None:
        try:
            exec_sql(sql, url=self.url)
        except SQLAlchemyError as exc:
            raise SinkError(f"Failed to create table [{table}]: {exc}", {"table": table}) from exc
        logger.info("Created table [%s] in database", table)
