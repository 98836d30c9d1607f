"""Tests for identifier sanitizing and CREATE TABLE rendering."""
import logging

from SheetDDL.etl.ddl import (
    build_create_table_sql,
    format_sql_type,
    to_sql_identifier,
    unique_sql_identifiers,
)
from SheetDDL.etl.type_inference import SqlType, TypeDecision


def test_to_sql_identifier():
    assert to_sql_identifier("First Name") == "First_Name"
    assert to_sql_identifier("A/B") == "A_B"
    assert to_sql_identifier("Ünit-Price (€)") == "_nit_Price____"
    assert to_sql_identifier("already_ok_123") == "already_ok_123"


def test_sanitized_collisions_are_resuffixed(caplog):
    with caplog.at_level(logging.WARNING):
        identifiers = unique_sql_identifiers(["A/B", "A B", "a_b"])
    assert identifiers == ["A_B", "A_B_2", "a_b_3"]
    assert "A_B_2" in caplog.text


def test_distinct_identifiers_are_untouched():
    assert unique_sql_identifiers(["Name", "Age", "UnnamedColumn"]) == ["Name", "Age", "UnnamedColumn"]


def test_format_sql_type():
    assert format_sql_type(TypeDecision(SqlType.INT)) == "INT"
    assert format_sql_type(TypeDecision(SqlType.BIT)) == "BIT"
    assert format_sql_type(TypeDecision(SqlType.FLOAT)) == "FLOAT"
    assert format_sql_type(TypeDecision(SqlType.DATETIME)) == "DATETIME"
    assert format_sql_type(TypeDecision(SqlType.NVARCHAR, 42)) == "NVARCHAR(42)"


def test_build_create_table_sql():
    sql = build_create_table_sql(
        "People",
        [("Name", TypeDecision(SqlType.NVARCHAR, 5)), ("Age", TypeDecision(SqlType.INT))],
    )
    assert sql == (
        "CREATE TABLE [People] (\n"
        "    [Name] NVARCHAR(5),\n"
        "    [Age] INT\n"
        ");"
    )


def test_table_name_is_sanitized():
    sql = build_create_table_sql("sales 2024", [("Id", TypeDecision(SqlType.INT))])
    assert sql.startswith("CREATE TABLE [sales_2024] (")
