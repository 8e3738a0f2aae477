"""MetaProp - Input document loading.

Splits a meta property file into raw records for the batch runner:
- .csv: header-less rows, blank lines skipped
- .json: a top-level array of objects

Only the document shape is checked here. Each record is validated by the
decoder inside the batch so that a bad record is reported, not fatal.
"""

from __future__ import annotations

import csv
import io
import json
import logging
from pathlib import Path
from typing import Any

from metaprop.config import CSV_EXTENSION, DEFAULT_FOLDER, JSON_EXTENSION, SUPPORTED_EXTENSIONS
from metaprop.errors import MalformedDocumentError, UnhandledFormatError

logger = logging.getLogger(__name__)


def resolve_input_path(path: str | Path, default_folder: str | Path | None = None) -> Path:
    """Resolve a possibly relative input path.

    Args:
        path: Path to the meta property file.
        default_folder: Base folder for relative paths. Defaults to
            config.DEFAULT_FOLDER; if that is unset too, the working
            directory is used.

    Returns:
        The resolved path.
    """
    path = Path(path).expanduser()
    if path.is_absolute():
        return path
    folder = default_folder if default_folder is not None else DEFAULT_FOLDER
    if folder is not None:
        return Path(folder) / path
    return path


def detect_format(path: str | Path) -> str:
    """Return the normalized extension of a meta property file.

    Raises:
        UnhandledFormatError: If the extension is not .csv or .json.
    """
    extension = Path(path).suffix.lower()
    if extension not in SUPPORTED_EXTENSIONS:
        raise UnhandledFormatError(extension or str(path))
    return extension


def parse_csv_text(text: str) -> list[list[str]]:
    """Split CSV text into rows, skipping blank lines."""
    reader = csv.reader(io.StringIO(text))
    return [row for row in reader if row]


def parse_json_text(text: str) -> list[Any]:
    """Parse a JSON meta property document.

    Raises:
        MalformedDocumentError: If text is not JSON or not a top-level array.
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise MalformedDocumentError(f"Invalid JSON: {e}") from e

    if not isinstance(data, list):
        raise MalformedDocumentError(
            f"Expected a JSON array of records, got {type(data).__name__}"
        )
    return data


def load_records(
    path: str | Path, default_folder: str | Path | None = None
) -> list[list[str]] | list[Any]:
    """Read a meta property file and split it into raw records.

    Args:
        path: Path to a .csv or .json file.
        default_folder: Base folder for relative paths.

    Returns:
        Raw records: CSV rows or JSON values.

    Raises:
        UnhandledFormatError: Unknown extension.
        MalformedDocumentError: Content cannot be decoded or split.
        FileNotFoundError: File does not exist.
    """
    path = resolve_input_path(path, default_folder)
    extension = detect_format(path)

    try:
        # utf-8-sig strips a leading BOM
        text = path.read_text(encoding="utf-8-sig")
    except UnicodeDecodeError as e:
        raise MalformedDocumentError(f"{path.name} is not UTF-8 text: {e}") from e

    if extension == CSV_EXTENSION:
        records = parse_csv_text(text)
    elif extension == JSON_EXTENSION:
        records = parse_json_text(text)
    else:
        raise UnhandledFormatError(extension)

    logger.info("%d props deserialised from %s", len(records), path.name)
    return records
