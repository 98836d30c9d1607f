"""Tests for the schema generation pipeline."""
import logging

import pytest

from SheetDDL.core.exceptions import EmptyDatasetError
from SheetDDL.core.settings import settings
from SheetDDL.etl.pipeline import generate_schema
from SheetDDL.etl.type_inference import SqlType
from SheetDDL.services.data_source import Dataset


def test_end_to_end_people(people_dataset):
    result = generate_schema(people_dataset, "People", threshold=2)
    assert result.sql == (
        "CREATE TABLE [People] (\n"
        "    [Name] NVARCHAR(5),\n"
        "    [Age] INT\n"
        ");"
    )
    assert [c.identifier for c in result.columns] == ["Name", "Age"]
    assert result.columns[1].counts.int_count == 2


def test_default_threshold_comes_from_settings(people_dataset, monkeypatch):
    assert generate_schema(people_dataset, "People").columns[1].sql_type == "NVARCHAR(2)"
    monkeypatch.setattr(settings, "inference_threshold", 2)
    assert generate_schema(people_dataset, "People").columns[1].sql_type == "INT"


def test_empty_dataset_is_rejected():
    with pytest.raises(EmptyDatasetError):
        generate_schema(Dataset(headers=["A"], rows=[]), "T", threshold=1)


def test_duplicate_and_blank_headers(caplog):
    dataset = Dataset(
        headers=["Order Date", None, "Order Date", "Order/Date"],
        rows=[["2024-01-01", "x", "1", "a"], ["2024-01-02", "yy", "0", "b"]],
    )
    with caplog.at_level(logging.WARNING):
        result = generate_schema(dataset, "Orders", threshold=2)

    assert result.collisions == ["Order Date"]
    assert [c.name for c in result.columns] == ["Order Date", "UnnamedColumn", "Order Date_2", "Order/Date"]
    assert [c.identifier for c in result.columns] == ["Order_Date", "UnnamedColumn", "Order_Date_2", "Order_Date_3"]
    assert [c.decision.sql_type for c in result.columns] == [
        SqlType.DATETIME, SqlType.NVARCHAR, SqlType.INT, SqlType.NVARCHAR,
    ]
    assert "Duplicate column names renamed: Order Date" in caplog.text


def test_column_without_values_uses_name_fallback():
    dataset = Dataset(headers=["Id", "ShipDate", "Memo"], rows=[["1", None, ""], ["2", "", None]])
    result = generate_schema(dataset, "T", threshold=1)
    assert [c.sql_type for c in result.columns] == ["INT", "DATETIME", "NVARCHAR(100)"]


def test_short_rows_read_as_missing():
    dataset = Dataset(headers=["A", "B"], rows=[["1"], ["2", "x"]])
    result = generate_schema(dataset, "T", threshold=1)
    assert [c.sql_type for c in result.columns] == ["INT", "NVARCHAR(1)"]


def test_parallel_inference_keeps_column_order():
    headers = [f"c{i}" for i in range(12)]
    rows = [[str(r * i) if i % 2 else f"v{r}" for i in range(12)] for r in range(5)]
    dataset = Dataset(headers=headers, rows=rows)
    sequential = generate_schema(dataset, "Wide", threshold=5, workers=1)
    parallel = generate_schema(dataset, "Wide", threshold=5, workers=4)
    assert parallel.sql == sequential.sql
    assert [c.name for c in parallel.columns] == headers


def test_to_dict_is_json_friendly(people_dataset):
    column = generate_schema(people_dataset, "People", threshold=2).columns[0]
    assert column.to_dict() == {
        "raw_name": "Name",
        "name": "Name",
        "identifier": "Name",
        "sql_type": "NVARCHAR(5)",
        "counts": {"total": 2, "int_count": 0, "float_count": 0, "date_count": 0, "bool_count": 0},
    }
