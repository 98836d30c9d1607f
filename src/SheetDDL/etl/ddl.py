"""
Render inferred column types as a bracket-quoted CREATE TABLE statement.

Module Input:
    - Table name
    - Final column names with their TypeDecision

Module Output:
    - SQL-safe identifiers
    - CREATE TABLE DDL text
"""

from __future__ import annotations

import re
from typing import Iterable, List, Sequence, Tuple

from SheetDDL.core.logging_config import get_logger
from SheetDDL.etl.type_inference import SqlType, TypeDecision

logger = get_logger(__name__)

_UNSAFE = re.compile(r"[^A-Za-z0-9_]")
INDENT = "    "


def to_sql_identifier(name: str) -> str:
    """
    Replace every character outside [A-Za-z0-9_] with an underscore.

    Examples:
        "First Name" -> "First_Name"
        "A/B"        -> "A_B"
    """
    return _UNSAFE.sub("_", name)


def unique_sql_identifiers(names: Sequence[str]) -> List[str]:
    """
    Sanitize names and re-suffix identifiers that collide after sanitizing.

    Distinct display names such as "A/B" and "A B" both become "A_B". The
    second one is renamed to "A_B_2" (then "_3", ...). Comparison ignores
    case because SQL Server's default collations do.
    """
    result: List[str] = []
    taken: set[str] = set()
    for name in names:
        base = to_sql_identifier(name)
        identifier = base
        suffix = 2
        while identifier.lower() in taken:
            identifier = f"{base}_{suffix}"
            suffix += 1
        if identifier != base:
            logger.warning(
                "Column %r sanitizes to %r which is already used; renamed to %r",
                name, base, identifier,
            )
        taken.add(identifier.lower())
        result.append(identifier)
    return result


def format_sql_type(decision: TypeDecision) -> str:
    if decision.sql_type is SqlType.NVARCHAR:
        return f"NVARCHAR({decision.length})"
    return decision.sql_type.value


def build_create_table_sql(table: str, columns: Iterable[Tuple[str, TypeDecision]]) -> str:
    """
    Generate the CREATE TABLE statement.

    Args:
        table (str): Table name, sanitized with to_sql_identifier
        columns: (identifier, decision) pairs in source column order

    Returns:
        str: Complete statement without a trailing newline

    Example Output:
        CREATE TABLE [People] (
            [Name] NVARCHAR(5),
            [Age] INT
        );
    """
    lines = [f"{INDENT}[{identifier}] {format_sql_type(decision)}" for identifier, decision in columns]
    cols_sql = ",\n".join(lines)
    return f"CREATE TABLE [{to_sql_identifier(table)}] (\n{cols_sql}\n);"
