"""Tests for the sheetddl command line."""
import json
import logging
import os

import click
import pytest
from click.testing import CliRunner

from SheetDDL.cli import cli
from SheetDDL.cli.cli import build_parser, run_generate, tools

PEOPLE_SQL = (
    "CREATE TABLE [People] (\n"
    "    [Name] NVARCHAR(5),\n"
    "    [Age] INT\n"
    ");"
)


@pytest.fixture
def people_csv(tmp_path):
    path = tmp_path / "data" / "People.csv"
    path.parent.mkdir()
    path.write_text("Name,Age\nAlice,30\nBob,41\n", encoding="utf-8")
    return path


def _run(*argv):
    return run_generate(build_parser().parse_args(list(argv)))


def test_generate_writes_sql_file(people_csv, tmp_path):
    out = tmp_path / "out"

    code = _run("--input", str(people_csv), "--threshold", "2", "--output-dir", str(out))

    assert code == 0
    assert (out / "People.sql").read_text(encoding="utf-8") == PEOPLE_SQL + "\n"


def test_generate_to_stdout(people_csv, capsys):
    code = _run("--input", str(people_csv), "--threshold", "2", "--stdout", "--no-file")

    assert code == 0
    assert capsys.readouterr().out == PEOPLE_SQL + "\n"


def test_invalid_threshold_falls_back_to_default(people_csv, capsys, caplog):
    with caplog.at_level(logging.WARNING):
        code = _run("--input", str(people_csv), "--threshold", "lots", "--stdout", "--no-file")

    assert code == 0
    assert "[Age] NVARCHAR(2)" in capsys.readouterr().out
    assert "not a number" in caplog.text


def test_table_name_and_directory_input(people_csv, tmp_path, capsys):
    code = _run(
        "--input", str(people_csv.parent), "--file", "people",
        "--table-name", "Staff Members", "--threshold", "2", "--stdout", "--no-file",
    )

    assert code == 0
    assert capsys.readouterr().out.startswith("CREATE TABLE [Staff_Members] (")



def test_exclude_option_skips_extensions(people_csv, capsys):
    notes = people_csv.parent / "notes.txt"
    notes.write_text("Note\nhello\n", encoding="utf-8")
    os.utime(notes, (people_csv.stat().st_mtime + 60,) * 2)

    code = _run(
        "--input", str(people_csv.parent), "--exclude", "txt",
        "--threshold", "2", "--stdout", "--no-file",
    )

    assert code == 0
    assert capsys.readouterr().out == PEOPLE_SQL + "\n"


def test_database_sink(people_csv, tmp_path):
    url = f"sqlite:///{tmp_path / 'schema.db'}"

    code = _run("--input", str(people_csv), "--threshold", "2", "--no-file", "--database-url", url)

    assert code == 0
    assert (tmp_path / "schema.db").exists()


def test_missing_input_fails(tmp_path):
    assert _run("--input", str(tmp_path / "missing"), "--no-file", "--stdout") == 1


def test_empty_dataset_fails(tmp_path):
    path = tmp_path / "empty.csv"
    path.write_text("A,B\n", encoding="utf-8")
    assert _run("--input", str(path), "--no-file", "--stdout") == 1


def test_interactive_prompts(people_csv, tmp_path, monkeypatch, capsys):
    other = people_csv.parent / "Other.csv"
    other.write_text("X\n1\n", encoding="utf-8")
    os.utime(other, (5_000, 5_000))
    os.utime(people_csv, (1_000, 1_000))

    answers = {"Select a file": 2, "Table name": "Crew", "Threshold": "2"}

    def fake_prompt(text, **kwargs):
        return answers[text]

    monkeypatch.setattr(click, "prompt", fake_prompt)

    code = _run("--input", str(people_csv.parent), "--interactive", "--stdout", "--no-file")

    assert code == 0
    assert capsys.readouterr().out == PEOPLE_SQL.replace("[People]", "[Crew]") + "\n"


def test_main_rejects_no_output(people_csv):
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["--input", str(people_csv), "--no-file"])
    assert excinfo.value.code == 2


def test_main_exit_code(people_csv, tmp_path):
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["--input", str(people_csv), "--threshold", "2", "--output-dir", str(tmp_path / "o")])
    assert excinfo.value.code == 0
    assert (tmp_path / "o" / "People.sql").exists()


def test_headers_command(tmp_path):
    path = tmp_path / "dups.csv"
    path.write_text("id,,id\n1,2,3\n", encoding="utf-8")

    result = CliRunner().invoke(tools, ["headers", "--input", str(path)])

    assert result.exit_code == 0
    lines = result.output.splitlines()
    assert lines[:3] == ["id", "UnnamedColumn  (from '')", "id_2  (from 'id')"]


def test_profile_command(people_csv):
    result = CliRunner().invoke(tools, ["profile", "--input", str(people_csv), "--threshold", "2"])

    assert result.exit_code == 0
    payload = json.loads(result.output)
    assert payload["table"] == "People"
    assert payload["rows"] == 2
    assert payload["sql"] == PEOPLE_SQL
    assert [c["sql_type"] for c in payload["columns"]] == ["NVARCHAR(5)", "INT"]


def test_profile_command_missing_input(tmp_path):
    result = CliRunner().invoke(tools, ["profile", "--input", str(tmp_path / "missing.csv")])
    assert result.exit_code == 1
    assert "Error" in result.output
