"""Tests for SQL sinks."""
import io

import pytest
from sqlalchemy import create_engine, inspect

from SheetDDL.core.exceptions import SinkError
from SheetDDL.etl.pipeline import generate_schema
from SheetDDL.services.sinks import ConsoleSink, DatabaseSink, FileSink


@pytest.fixture
def people_sql(people_dataset):
    return generate_schema(people_dataset, "People", threshold=2).sql


def test_file_sink_writes_sql(tmp_path, people_sql):
    path = FileSink(tmp_path / "out").write("People", people_sql)

    assert path == tmp_path / "out" / "People.sql"
    assert path.read_text(encoding="utf-8") == people_sql + "\n"


def test_file_sink_sanitizes_file_name(tmp_path, people_sql):
    path = FileSink(tmp_path).write("my table/2024", people_sql)
    assert path.name == "my_table_2024.sql"


def test_console_sink(people_sql):
    stream = io.StringIO()
    ConsoleSink(stream).write("People", people_sql)
    assert stream.getvalue() == people_sql + "\n"


def test_database_sink_creates_table(tmp_path, people_sql):
    url = f"sqlite:///{tmp_path / 'schema.db'}"

    DatabaseSink(url).write("People", people_sql)

    engine = create_engine(url)
    try:
        columns = inspect(engine).get_columns("People")
    finally:
        engine.dispose()
    assert [c["name"] for c in columns] == ["Name", "Age"]


def test_database_sink_failure_is_wrapped(tmp_path, people_sql):
    sink = DatabaseSink(f"sqlite:///{tmp_path / 'schema.db'}")
    sink.write("People", people_sql)

    with pytest.raises(SinkError):
        sink.write("People", people_sql)
