"""MetaProp - Record decoder.

Turns a raw CSV row (ordered sequence of strings) or a raw JSON object
into a validated MetaProp.

CSV rows are positional and header-less:
    externalId, component, displayCategory, categoryId, displayName,
    displayValue, metaType, filelink[, filename[, link]]

JSON objects use the same names as keys; missing or unknown keys are
tolerated, missing values default to empty strings and CanSet=False.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping, Sequence
from functools import lru_cache
from typing import Any

from jsonschema import Draft202012Validator
from pydantic import ValidationError

from metaprop.config import CSV_MAX_FIELDS, CSV_MIN_FIELDS, RECORD_SCHEMA_NAME, SPECS_DIR
from metaprop.errors import MalformedRecordError
from metaprop.kinds import MetaType
from metaprop.schemas import MetaProp

logger = logging.getLogger(__name__)

# Positional CSV column order (model field names)
CSV_FIELD_ORDER = (
    "external_id",
    "component",
    "display_category",
    "category_id",
    "display_name",
    "display_value",
    "meta_type",
    "filelink",
    "filename",
    "link",
)


@lru_cache(maxsize=1)
def record_validator() -> Draft202012Validator:
    """Load the JSON record schema validator (cached)."""
    schema_path = SPECS_DIR / f"{RECORD_SCHEMA_NAME}.schema.json"
    schema = json.loads(schema_path.read_text(encoding="utf-8"))
    return Draft202012Validator(schema)


def _describe_validation_error(exc: ValidationError) -> str:
    """Condense a pydantic ValidationError into one line."""
    parts = []
    for err in exc.errors():
        loc = ".".join(str(x) for x in err.get("loc", ()))
        parts.append(f"{loc}: {err.get('msg')}")
    return "; ".join(parts)


def decode_csv_row(row: Sequence[str]) -> MetaProp:
    """Decode one header-less CSV row.

    Args:
        row: Ordered sequence of 8 to 10 strings.

    Returns:
        The decoded MetaProp; record_width remembers the row length.

    Raises:
        MalformedRecordError: If the row length is outside [8, 10] or a
            field is not a string.
        UnsupportedMetaTypeError: If the metaType column is not recognized.
    """
    if isinstance(row, (str, bytes)) or not isinstance(row, Sequence):
        raise MalformedRecordError(f"Expected a sequence of fields, got {type(row).__name__}", row)

    n = len(row)
    if n < CSV_MIN_FIELDS or n > CSV_MAX_FIELDS:
        raise MalformedRecordError(
            f"Expected {CSV_MIN_FIELDS} to {CSV_MAX_FIELDS} fields in CSV record, got {n}",
            list(row),
        )

    for i, value in enumerate(row):
        if not isinstance(value, str):
            raise MalformedRecordError(
                f"Field {CSV_FIELD_ORDER[i]} is {type(value).__name__}, expected str",
                list(row),
            )

    fields: dict[str, Any] = dict(zip(CSV_FIELD_ORDER, row, strict=False))
    fields["meta_type"] = MetaType.parse(fields["meta_type"])
    fields["record_width"] = n

    try:
        prop = MetaProp.model_validate(fields)
    except ValidationError as e:
        raise MalformedRecordError(_describe_validation_error(e), list(row)) from e

    logger.debug("Decoded CSV record %s/%s (%s)", prop.external_id, prop.display_name, n)
    return prop


def decode_json_object(obj: Mapping[str, Any]) -> MetaProp:
    """Decode one JSON object.

    Args:
        obj: Mapping keyed by the wire field names.

    Returns:
        The decoded MetaProp.

    Raises:
        MalformedRecordError: If obj is not a mapping or a field has the
            wrong type.
        UnsupportedMetaTypeError: If metaType is missing or not recognized.
    """
    if not isinstance(obj, Mapping):
        raise MalformedRecordError(f"Expected a JSON object, got {type(obj).__name__}", obj)

    schema_errors = sorted(record_validator().iter_errors(dict(obj)), key=lambda e: list(e.path))
    if schema_errors:
        reason = "; ".join(
            f"{'.'.join(str(p) for p in err.path) or '<record>'}: {err.message}"
            for err in schema_errors
        )
        raise MalformedRecordError(reason, dict(obj))

    data = dict(obj)
    data["metaType"] = MetaType.parse(data.get("metaType") or "")
    # record_width only describes CSV input
    data.pop("record_width", None)

    try:
        prop = MetaProp.model_validate(data)
    except ValidationError as e:
        raise MalformedRecordError(_describe_validation_error(e), dict(obj)) from e

    logger.debug("Decoded JSON record %s/%s", prop.external_id, prop.display_name)
    return prop


def decode_record(raw: Sequence[str] | Mapping[str, Any]) -> MetaProp:
    """Decode a raw record of either shape.

    Mappings are treated as JSON objects, other sequences as CSV rows.
    """
    if isinstance(raw, Mapping):
        return decode_json_object(raw)
    return decode_csv_row(raw)


def encode_csv_row(prop: MetaProp) -> list[str]:
    """Re-encode a MetaProp as a CSV row of its original width."""
    values = prop.model_dump(include=set(CSV_FIELD_ORDER))
    return [str(values[name]) for name in CSV_FIELD_ORDER[: prop.record_width]]
