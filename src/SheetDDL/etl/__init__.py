"""
Schema inference package.
"""

from .headers import HeaderNormalization, normalize_headers, UNNAMED_COLUMN
from .type_inference import (
    SqlType, TypeDecision, CandidateCounts,
    infer_column_type, profile_column, clean_values, count_candidates,
)
from .ddl import to_sql_identifier, unique_sql_identifiers, format_sql_type, build_create_table_sql
from .pipeline import ColumnSchema, SchemaResult, generate_schema

__all__ = [
    "HeaderNormalization", "normalize_headers", "UNNAMED_COLUMN",
    "SqlType", "TypeDecision", "CandidateCounts",
    "infer_column_type", "profile_column", "clean_values", "count_candidates",
    "to_sql_identifier", "unique_sql_identifiers", "format_sql_type", "build_create_table_sql",
    "ColumnSchema", "SchemaResult", "generate_schema",
]
