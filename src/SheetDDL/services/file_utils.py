"""
File discovery utilities.

Provides filesystem scanning, type detection, and source selection for the
schema generator.

Module Input:
    - Directory paths to scan
    - File paths for analysis
    - Extension filters

Module Output:
    - Lists of discovered files
    - File type categories
    - The source file chosen for a run
"""

from pathlib import Path
from typing import List, Set, Optional

from ..core.logging_config import get_logger
from ..core.exceptions import FileDiscoveryError, SourceNotFoundError

logger = get_logger(__name__)

# File type mapping: extension -> reader category
FILE_TYPE_MAPPING = {
    ".csv": "csv",
    ".tsv": "csv",
    ".txt": "csv",
    ".xlsx": "excel",
    ".xlsm": "excel",
    ".json": "json",
}

SUPPORTED_EXTENSIONS: Set[str] = set(FILE_TYPE_MAPPING)


def discover_files(
    input_dir: Path,
    include_extensions: Optional[Set[str]] = None,
    exclude_extensions: Optional[Set[str]] = None,
) -> List[Path]:
    """
    Recursively discover files in a directory with optional filtering.

    Args:
        input_dir (Path): Root directory to scan
        include_extensions (Optional[Set[str]]): Extensions to include (e.g., {'.xlsx', '.csv'})
        exclude_extensions (Optional[Set[str]]): Extensions to exclude

    Returns:
        List[Path]: Discovered file paths, sorted for stable output

    Raises:
        FileDiscoveryError: If directory doesn't exist or is inaccessible
    """
    if not input_dir.exists():
        raise FileDiscoveryError(f"Input directory does not exist: {input_dir}")
    if not input_dir.is_dir():
        raise FileDiscoveryError(f"Input path is not a directory: {input_dir}")

    normalized_includes = {f".{ext.lstrip('.').lower()}" for ext in include_extensions or ()}
    normalized_excludes = {f".{ext.lstrip('.').lower()}" for ext in exclude_extensions or ()}

    discovered_files: List[Path] = []

    try:
        for file_path in input_dir.rglob("*"):
            if not file_path.is_file():
                continue

            extension = file_path.suffix.lower()
            if not extension:
                logger.debug(f"Skipping {file_path.name} - no extension")
                continue

            # Excel lock files (~$Book1.xlsx) are never readable workbooks
            if file_path.name.startswith("~$"):
                logger.debug(f"Skipping {file_path.name} - lock file")
                continue

            if normalized_includes and extension not in normalized_includes:
                logger.debug(f"Skipping {file_path.name} - not in include list")
                continue

            if extension in normalized_excludes:
                logger.debug(f"Skipping {file_path.name} - in exclude list")
                continue

            discovered_files.append(file_path)
            logger.debug(f"Discovered: {file_path.relative_to(input_dir)}")

    except OSError as exc:
        raise FileDiscoveryError(f"Error scanning directory: {exc}", {"directory": str(input_dir)})

    discovered_files.sort()
    logger.info(f"Discovered {len(discovered_files)} files in {input_dir}")
    return discovered_files


def detect_file_type(file_path: Path) -> str:
    """
    Detect reader category based on extension.

    Returns:
        str: 'csv', 'excel', 'json', or 'other'
    """
    extension = file_path.suffix.lower()
    file_type = FILE_TYPE_MAPPING.get(extension, "other")
    logger.debug(f"File {file_path.name} detected as type: {file_type}")
    return file_type


def list_candidate_sources(
    input_dir: Path,
    include_extensions: Optional[Set[str]] = None,
    exclude_extensions: Optional[Set[str]] = None,
) -> List[Path]:
    """Supported data files under input_dir, newest first."""
    allowed = SUPPORTED_EXTENSIONS & include_extensions if include_extensions else SUPPORTED_EXTENSIONS
    files = (
        discover_files(input_dir, include_extensions=allowed, exclude_extensions=exclude_extensions)
        if allowed
        else []
    )
    return sorted(files, key=lambda p: p.stat().st_mtime, reverse=True)


def resolve_source(
    path: Path,
    name: Optional[str] = None,
    include_extensions: Optional[Set[str]] = None,
    exclude_extensions: Optional[Set[str]] = None,
) -> Path:
    """
    Pick the data file to process.

    A file path is returned unchanged. For a directory, `name` selects a
    file by name or stem (case-insensitive); without it the most recently
    modified supported file wins.

    Raises:
        SourceNotFoundError: If nothing usable is found
    """
    if path.is_file():
        return path
    if not path.exists():
        raise SourceNotFoundError(f"Input path does not exist: {path}", {"path": str(path)})

    try:
        candidates = list_candidate_sources(path, include_extensions, exclude_extensions)
    except FileDiscoveryError as exc:
        raise SourceNotFoundError(exc.message, exc.details) from exc

    if not candidates:
        raise SourceNotFoundError(f"No supported data files found in {path}", {"path": str(path)})

    if name:
        wanted = name.strip().lower()
        for candidate in candidates:
            if wanted in (candidate.name.lower(), candidate.stem.lower()):
                return candidate
        raise SourceNotFoundError(f"File '{name}' not found in {path}", {"path": str(path)})

    chosen = candidates[0]
    if len(candidates) > 1:
        logger.info(f"Found {len(candidates)} data files; using most recent: {chosen.name}")
    return chosen


def parse_extensions(extensions_str: str) -> Set[str]:
    """
    Parse comma-separated extensions into normalized set.

    Args:
        extensions_str (str): Comma-separated extensions (e.g., 'csv,xlsx')

    Returns:
        Set[str]: Normalized extensions with dots (e.g., {'.csv', '.xlsx'})
    """
    if not extensions_str:
        return set()

    extensions: Set[str] = set()
    for ext in extensions_str.split(","):
        ext = ext.strip().lower()
        if ext:
            if not ext.startswith("."):
                ext = f".{ext}"
            extensions.add(ext)

    return extensions
