"""
Command-line interface for SheetDDL.

Reads a spreadsheet-like data file, infers a SQL type for every column and
writes the resulting CREATE TABLE statement to a .sql file, stdout and/or a
database.

The main entry point (`sheetddl`) is argparse based; a small click group
(`sheetddl-tools`) offers inspection commands:
- headers: show normalized column names and duplicates
- profile: show per-column decisions and candidate counts as JSON

Usage:
    sheetddl --input ./data/people.xlsx --table-name People --threshold 2
    sheetddl --input ./data --interactive
    sheetddl-tools profile --input ./data/people.csv --threshold 10
"""
import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

import click

from SheetDDL.core.settings import settings, parse_threshold
from SheetDDL.core.logging_config import get_logger, setup_root_logger, set_log_level
from SheetDDL.core.exceptions import SheetDDLError, SourceNotFoundError
from SheetDDL.etl.headers import normalize_headers
from SheetDDL.etl.pipeline import SchemaResult, generate_schema
from SheetDDL.etl.db import dispose_engines
from SheetDDL.services.data_source import Dataset, load_dataset
from SheetDDL.services.file_utils import list_candidate_sources, parse_extensions, resolve_source
from SheetDDL.services.sinks import ConsoleSink, DatabaseSink, FileSink

logger = get_logger(__name__)


def choose_source_interactively(
    input_dir: Path, include: Optional[set] = None, exclude: Optional[set] = None
) -> Path:
    """Let the user pick one of the data files found under input_dir."""
    candidates = list_candidate_sources(input_dir, include, exclude)
    if not candidates:
        raise SourceNotFoundError(f"No supported data files found in {input_dir}", {"path": str(input_dir)})
    if len(candidates) == 1:
        return candidates[0]

    click.echo("Data files (newest first):", err=True)
    for number, candidate in enumerate(candidates, 1):
        click.echo(f"  {number}. {candidate.relative_to(input_dir)}", err=True)
    choice = click.prompt(
        "Select a file", type=click.IntRange(1, len(candidates)), default=1, err=True
    )
    return candidates[choice - 1]


def default_table_name(source: Path) -> str:
    return source.stem.strip() or settings.default_table_name


def build_sinks(args: argparse.Namespace) -> list:
    sinks = []
    if not args.no_file:
        sinks.append(FileSink(args.output_dir or settings.output_dir))
    if args.stdout:
        sinks.append(ConsoleSink())
    database_url = args.database_url or settings.database_url
    if database_url:
        sinks.append(DatabaseSink(database_url))
    return sinks


def print_summary(result: SchemaResult, source: Path, written: List[Path]) -> None:
    print(f"\n{'='*50}")
    print("Schema Summary:")
    print(f"  Source: {source}")
    print(f"  Table: {result.table_name}")
    print(f"  Threshold: {result.threshold}")
    print(f"  Columns: {len(result.columns)}")
    for column in result.columns:
        print(f"    {column.identifier:<30} {column.sql_type}")
    if result.collisions:
        print(f"  Renamed duplicates: {', '.join(result.collisions)}")
    for path in written:
        print(f"  Written: {path}")
    print(f"{'='*50}\n")


def run_generate(args: argparse.Namespace) -> int:
    """
    Run one schema generation.

    Args:
        args (argparse.Namespace): Parsed command line arguments

    Returns:
        int: Exit code (0 for success, 1 for any fatal error)

    Side Effects:
        - May prompt on the terminal (--interactive)
        - Writes SQL to the configured sinks
    """
    try:
        include = parse_extensions(args.include) if args.include else None
        exclude = parse_extensions(args.exclude) if args.exclude else None
        threshold = parse_threshold(args.threshold)

        if args.interactive and args.input.is_dir() and not args.file:
            source = choose_source_interactively(args.input, include, exclude)
        else:
            source = resolve_source(args.input, args.file, include, exclude)

        dataset = load_dataset(source, args.sheet)

        table_name = args.table_name
        if args.interactive:
            table_name = click.prompt(
                "Table name", default=table_name or default_table_name(source), err=True
            ).strip()
            threshold = parse_threshold(
                click.prompt("Threshold", default=str(threshold), err=True), threshold
            )
        table_name = table_name or default_table_name(source)

        result = generate_schema(dataset, table_name, threshold=threshold, workers=args.workers)

        written: List[Path] = []
        for sink in build_sinks(args):
            outcome = sink.write(result.table_name, result.sql)
            if isinstance(outcome, Path):
                written.append(outcome)

        if not args.stdout:
            print_summary(result, source, written)
        return 0

    except SheetDDLError as e:
        logger.error(f"{type(e).__name__}: {e.message}")
        return 1
    except Exception as e:
        logger.error(f"Unexpected error: {e}", exc_info=True)
        return 1
    finally:
        dispose_engines()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sheetddl",
        description="Infer SQL column types from a data file and generate CREATE TABLE",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Newest data file under ./data, default threshold
  sheetddl

  # A specific workbook and sheet
  sheetddl --input ./data/orders.xlsx --sheet Orders --table-name Orders

  # Low threshold for a small sample, print SQL only
  sheetddl --input ./data/people.csv --threshold 2 --stdout --no-file

  # Prompt for file, table name and threshold
  sheetddl --input ./data --interactive
        """
    )

    parser.add_argument(
        "--input",
        type=Path,
        default=settings.input_dir,
        help=f"Data file or directory to scan (default: {settings.input_dir})"
    )
    parser.add_argument(
        "--file",
        help="File name or stem to pick inside the --input directory"
    )
    parser.add_argument(
        "--include",
        help="Comma-separated list of extensions to consider (e.g., csv,xlsx)"
    )
    parser.add_argument(
        "--exclude",
        help="Comma-separated list of extensions to skip (e.g., txt,json)"
    )
    parser.add_argument(
        "--sheet",
        help="Worksheet name for Excel files (default: first sheet)"
    )
    parser.add_argument(
        "--table-name",
        help="Table name (default: source file name)"
    )
    parser.add_argument(
        "--threshold",
        help=f"Minimum number of matching values for a non-text type (default: {settings.inference_threshold})"
    )
    parser.add_argument(
        "--workers",
        type=int,
        help=f"Threads used for column inference (default: {settings.inference_workers})"
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        help=f"Directory for the generated .sql file (default: {settings.output_dir})"
    )
    parser.add_argument(
        "--no-file",
        action="store_true",
        help="Do not write a .sql file"
    )
    parser.add_argument(
        "--stdout",
        action="store_true",
        help="Print the CREATE TABLE statement to stdout"
    )
    parser.add_argument(
        "--database-url",
        help="SQLAlchemy URL of a database to create the table in"
    )
    parser.add_argument(
        "--interactive",
        action="store_true",
        help="Prompt for the data file, table name and threshold"
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Override the configured log level"
    )
    return parser


def main(argv: Optional[List[str]] = None):
    """
    Main entry point.

    Parses command line arguments, runs the generation and exits the
    process with its exit code.
    """
    setup_root_logger()
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.workers is not None and args.workers < 1:
        parser.error("--workers must be a positive integer")
    if args.no_file and not args.stdout and not (args.database_url or settings.database_url):
        parser.error("--no-file needs --stdout or a database URL, otherwise nothing is written")

    if args.log_level:
        set_log_level(args.log_level)

    logger.info(f"SheetDDL starting: input={args.input}")
    sys.exit(run_generate(args))


def _load_for_tools(input_path: Path, file_name: Optional[str], sheet: Optional[str]) -> Dataset:
    try:
        return load_dataset(resolve_source(input_path, file_name), sheet)
    except SheetDDLError as e:
        raise click.ClickException(e.message)


# Click CLI group for inspection commands
@click.group()
def tools():
    """SheetDDL inspection commands."""
    pass


@tools.command("headers")
@click.option("--input", "input_path", type=click.Path(path_type=Path), default=settings.input_dir, help="Data file or directory")
@click.option("--file", "file_name", help="File name or stem inside the directory")
@click.option("--sheet", help="Worksheet name (Excel only)")
def headers_cmd(input_path: Path, file_name: Optional[str], sheet: Optional[str]):
    """
    Show normalized column names.
    Example:
      sheetddl-tools headers --input ./data/orders.xlsx
    """
    dataset = _load_for_tools(input_path, file_name, sheet)
    normalized = normalize_headers(dataset.headers)
    for raw, name in zip(dataset.headers, normalized.names):
        marker = "" if raw is not None and str(raw).strip() == name else f"  (from {raw!r})"
        click.echo(f"{name}{marker}")
    if normalized.collisions:
        click.echo(f"Duplicates renamed: {', '.join(normalized.collisions)}", err=True)


@tools.command("profile")
@click.option("--input", "input_path", type=click.Path(path_type=Path), default=settings.input_dir, help="Data file or directory")
@click.option("--file", "file_name", help="File name or stem inside the directory")
@click.option("--sheet", help="Worksheet name (Excel only)")
@click.option("--threshold", help="Minimum matching values for a non-text type")
@click.option("--table-name", help="Table name used in the generated SQL")
def profile_cmd(input_path: Path, file_name: Optional[str], sheet: Optional[str],
                threshold: Optional[str], table_name: Optional[str]):
    """
    Show per-column type decisions and candidate counts as JSON.
    Example:
      sheetddl-tools profile --input ./data/people.csv --threshold 2
    """
    dataset = _load_for_tools(input_path, file_name, sheet)
    name = table_name or (default_table_name(dataset.source) if dataset.source else settings.default_table_name)
    try:
        result = generate_schema(dataset, name, threshold=parse_threshold(threshold))
    except SheetDDLError as e:
        raise click.ClickException(e.message)
    payload = {
        "table": result.table_name,
        "threshold": result.threshold,
        "rows": dataset.row_count,
        "collisions": result.collisions,
        "columns": [column.to_dict() for column in result.columns],
        "sql": result.sql,
    }
    click.echo(json.dumps(payload, indent=2))


if __name__ == "__main__":
    # Check if we're being called with click commands
    if len(sys.argv) > 1 and sys.argv[1] in ["headers", "profile"]:
        tools()
    else:
        main()
