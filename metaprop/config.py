"""MetaProp - Configuration constants.

Minimal configuration. No external config libraries.
All paths are relative to the repository root by default.
"""

import os
from pathlib import Path

# Repository root (parent of metaprop/)
REPO_ROOT = Path(__file__).parent.parent.resolve()

# Data directory and reference target store database
DATA_DIR = REPO_ROOT / "data"
DB_PATH = DATA_DIR / "metaprop.db"

# JSON schema contracts shipped with the package
SPECS_DIR = Path(__file__).parent / "specs"
RECORD_SCHEMA_NAME = "metaprop_record"

# CSV record width: eight mandatory fields, filename and link optional
CSV_MIN_FIELDS = 8
CSV_MAX_FIELDS = 10

# externalId prefix marking a document-scope (model-level) property
MODEL_PROPERTY_PREFIX = "doc_"

# Canonical display value of a DeleteOverride property
DELETE_SENTINEL = "<delete>"

# Null identifier-reference written when clearing a reference slot
INVALID_ELEMENT_ID = -1

# Integer slots hold 32-bit signed values
INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1

# Input file extensions understood by the loader
CSV_EXTENSION = ".csv"
JSON_EXTENSION = ".json"
SUPPORTED_EXTENSIONS = (CSV_EXTENSION, JSON_EXTENSION)


def _get_flag(name: str, default: bool = False) -> bool:
    """Read a boolean flag from the environment.

    Only "1" enables a flag and only "0" disables it; anything else
    falls back to the default.

    Args:
        name: Environment variable name.
        default: Value used when the variable is unset or unrecognized.

    Returns:
        The flag value.
    """
    env_val = os.environ.get(name)
    if env_val == "1":
        return True
    if env_val == "0":
        return False
    return default


def _get_default_folder() -> Path | None:
    """Get the base folder for relative input paths.

    Environment variable METAPROP_DEFAULT_FOLDER overrides; unset means
    relative paths resolve against the working directory.

    Returns:
        The folder, or None if not configured.
    """
    env_val = os.environ.get("METAPROP_DEFAULT_FOLDER")
    if env_val:
        return Path(env_val).expanduser()
    return None


def get_allow_file_or_link() -> bool:
    """Whether File/Link properties may be written as text (default: rejected)."""
    return _get_flag("METAPROP_ALLOW_FILE_OR_LINK", default=False)


def get_create_missing() -> bool:
    """Whether the target store may create parameter slots that do not exist yet."""
    return _get_flag("METAPROP_CREATE_MISSING", default=False)


DEFAULT_FOLDER = _get_default_folder()

assert CSV_MIN_FIELDS <= CSV_MAX_FIELDS, "CSV width bounds are inverted"
