"""MetaProp - Import Worker.

Applies a meta property file to the SQLite reference target store.

Input: a .csv or .json meta property file
Output: parameter values written to element_parameters, plus a report

Transaction: the whole batch runs in one session. It is committed when
the batch completes (per-record failures do not block the commit) and
rolled back if the batch was cancelled or crashed.

Error codes (document level; per-record codes are in metaprop.errors):
- INPUT_NOT_FOUND: input file does not exist
- UNHANDLED_FORMAT: extension is not .csv or .json
- MALFORMED_DOCUMENT: content cannot be split into records
- WORKER_ERROR: unexpected failure, batch rolled back
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from metaprop.batch import BatchOptions, BatchReport, run_batch
from metaprop.db import init_db
from metaprop.errors import MalformedDocumentError, UnhandledFormatError
from metaprop.loader import load_records, resolve_input_path
from metaprop.store import ParameterStore

logger = logging.getLogger(__name__)


# --- Error Codes ---


class ImportErrorCode:
    """Document-level error codes for the import worker."""

    INPUT_NOT_FOUND = "INPUT_NOT_FOUND"
    UNHANDLED_FORMAT = "UNHANDLED_FORMAT"
    MALFORMED_DOCUMENT = "MALFORMED_DOCUMENT"
    WORKER_ERROR = "WORKER_ERROR"


# --- Result Types ---


@dataclass
class ImportResult:
    """Result of import worker execution.

    ok means the batch ran to completion and was committed; the report
    may still contain per-record failures.
    """

    ok: bool
    error_code: str | None = None
    message: str | None = None
    report: BatchReport | None = None


def import_file(
    path: str | Path,
    db_path: str | Path | None = None,
    options: BatchOptions | None = None,
    default_folder: str | Path | None = None,
    should_cancel: Callable[[], bool] | None = None,
) -> ImportResult:
    """Load a meta property file and apply it to the target store.

    Args:
        path: Meta property file (.csv or .json).
        db_path: Target store database. Defaults to config.DB_PATH.
        options: Batch settings (default: from environment).
        default_folder: Base folder for a relative path.
        should_cancel: Polled between records.

    Returns:
        ImportResult with the batch report on success.
    """
    input_path = resolve_input_path(path, default_folder)

    try:
        records = load_records(input_path)
    except FileNotFoundError:
        logger.error("Input file not found: %s", input_path)
        return ImportResult(
            ok=False,
            error_code=ImportErrorCode.INPUT_NOT_FOUND,
            message=f"Input file not found: {input_path}",
        )
    except UnhandledFormatError as e:
        logger.error("%s", e)
        return ImportResult(ok=False, error_code=ImportErrorCode.UNHANDLED_FORMAT, message=str(e))
    except MalformedDocumentError as e:
        logger.error("Malformed document %s: %s", input_path, e)
        return ImportResult(
            ok=False, error_code=ImportErrorCode.MALFORMED_DOCUMENT, message=str(e)
        )

    engine, SessionFactory = init_db(str(db_path) if db_path is not None else None)
    session = SessionFactory()

    try:
        store = ParameterStore(session)
        report = run_batch(
            records,
            resolver=store,
            writer=store,
            slot_factory=store,
            options=options,
            should_cancel=should_cancel,
        )
        if report.cancelled:
            session.rollback()
            logger.info("Import of %s cancelled, changes rolled back", input_path.name)
            return ImportResult(
                ok=False,
                message="Import cancelled, changes rolled back",
                report=report,
            )
        session.commit()
    except Exception as e:
        session.rollback()
        logger.exception("Import of %s failed", input_path)
        return ImportResult(ok=False, error_code=ImportErrorCode.WORKER_ERROR, message=str(e))
    finally:
        session.close()
        engine.dispose()

    logger.info(
        "Import of %s complete: %d applied, %d failed",
        input_path.name,
        len(report.applied),
        len(report.failures),
    )
    return ImportResult(ok=True, message="Import completed", report=report)


# --- Standalone Execution ---


if __name__ == "__main__":
    import sys

    logging.basicConfig(level=logging.INFO)

    if len(sys.argv) not in (2, 3):
        print(f"Usage: {sys.argv[0]} <metaprop_file> [db_path]")
        sys.exit(1)

    result = import_file(sys.argv[1], sys.argv[2] if len(sys.argv) == 3 else None)
    if result.ok:
        print(json.dumps(result.report.to_dict(), indent=2))
        sys.exit(0 if result.report.ok else 2)
    else:
        print(f"Error: {result.error_code} - {result.message}")
        sys.exit(1)
