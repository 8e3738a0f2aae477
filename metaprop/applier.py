"""MetaProp - Value application.

Coerces a property into the representation a target slot's storage kind
requires and writes it through the TargetWriter collaborator.

Rules:
- DeleteOverride writes the storage kind's zero value
  (0.0, INVALID_ELEMENT_ID, 0, "")
- Text, Link and File write the display string to text slots only
- Int parses a 32-bit integer and writes it to integer slots only
- Double parses a float and writes it to floating-point slots only

Exactly one write per successful record; failures never write a default.
"""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, assert_never

from metaprop.config import INT32_MAX, INT32_MIN, INVALID_ELEMENT_ID
from metaprop.errors import (
    InvalidDoubleValueError,
    InvalidIntegerValueError,
    MetaPropError,
    StorageKindMismatchError,
    UnsupportedStorageKindError,
    WriteFailedError,
)
from metaprop.formatter import display_string
from metaprop.kinds import MetaType, StorageKind

if TYPE_CHECKING:
    from metaprop.schemas import MetaProp
    from metaprop.targets import TargetSlot, TargetWriter

logger = logging.getLogger(__name__)

# Optional sign and ASCII digits, surrounding whitespace allowed
_INT_PATTERN = re.compile(r"\s*[+-]?[0-9]+\s*", re.ASCII)

# Decimal or exponent notation, ASCII digits only
_DOUBLE_PATTERN = re.compile(
    r"\s*[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?\s*", re.ASCII
)


# --- Result Types ---


@dataclass
class ApplyResult:
    """Result of applying one property to one slot."""

    ok: bool
    error_code: str | None = None
    message: str | None = None
    value: str | int | float | None = None


# --- Parsing ---


def parse_int(text: str) -> int:
    """Parse an Int property value.

    Raises:
        InvalidIntegerValueError: If text is not a 32-bit signed integer.
    """
    if not _INT_PATTERN.fullmatch(text):
        raise InvalidIntegerValueError(text)
    value = int(text)
    if value < INT32_MIN or value > INT32_MAX:
        raise InvalidIntegerValueError(text)
    return value


def parse_double(text: str) -> float:
    """Parse a Double property value.

    Raises:
        InvalidDoubleValueError: If text is not a floating-point number.
    """
    # float() alone would accept "1_0", non-ASCII digits, "nan" and "inf"
    if not _DOUBLE_PATTERN.fullmatch(text):
        raise InvalidDoubleValueError(text)
    value = float(text)
    if not math.isfinite(value):
        raise InvalidDoubleValueError(text)
    return value


def parse_storage_kind(storage_kind: StorageKind | str) -> StorageKind:
    """Parse a reported storage kind; unknown kinds are unsupported."""
    if isinstance(storage_kind, StorageKind):
        return storage_kind
    try:
        return StorageKind(storage_kind)
    except ValueError:
        raise UnsupportedStorageKindError(str(storage_kind)) from None


# --- Coercion ---


def zero_value(storage_kind: StorageKind | str) -> str | int | float:
    """Return the reset value for a storage kind.

    Raises:
        UnsupportedStorageKindError: If the kind has no zero value.
    """
    storage_kind = parse_storage_kind(storage_kind)

    match storage_kind:
        case StorageKind.FLOATING_POINT:
            return 0.0
        case StorageKind.IDENTIFIER_REFERENCE:
            return INVALID_ELEMENT_ID
        case StorageKind.INTEGER:
            return 0
        case StorageKind.TEXT:
            return ""
        case StorageKind.UNSUPPORTED:
            raise UnsupportedStorageKindError(storage_kind)
        case _:
            assert_never(storage_kind)


def _require(storage_kind: StorageKind, expected: StorageKind, meta_type: MetaType) -> None:
    if storage_kind is not expected:
        raise StorageKindMismatchError(meta_type, storage_kind)


def coerce_value(prop: MetaProp, storage_kind: StorageKind | str) -> str | int | float:
    """Compute the value to write for prop into a slot of storage_kind.

    Args:
        prop: The property to apply.
        storage_kind: The target slot's reported storage kind.

    Returns:
        The coerced value (str, int or float).

    Raises:
        UnsupportedStorageKindError: DeleteOverride against an unsupported slot.
        StorageKindMismatchError: Slot cannot hold this metaType's value.
        InvalidIntegerValueError: Int value does not parse.
        InvalidDoubleValueError: Double value does not parse.
        UnsupportedMetaTypeError: metaType is not recognized.
    """
    meta_type = MetaType.parse(prop.meta_type)

    match meta_type:
        case MetaType.DELETE_OVERRIDE:
            return zero_value(storage_kind)
        case MetaType.TEXT | MetaType.LINK | MetaType.FILE:
            _require(parse_storage_kind(storage_kind), StorageKind.TEXT, meta_type)
            return display_string(prop)
        case MetaType.INT:
            _require(parse_storage_kind(storage_kind), StorageKind.INTEGER, meta_type)
            return parse_int(prop.display_value)
        case MetaType.DOUBLE:
            _require(parse_storage_kind(storage_kind), StorageKind.FLOATING_POINT, meta_type)
            return parse_double(prop.display_value)
        case _:
            assert_never(meta_type)


def write_value(prop: MetaProp, slot: TargetSlot, writer: TargetWriter) -> str | int | float:
    """Coerce prop for slot and write it.

    Returns:
        The value written.

    Raises:
        MetaPropError: Any coercion failure, or WriteFailedError if the
            writer rejected the value or raised.
    """
    value = coerce_value(prop, slot.storage_kind)
    try:
        written = writer.write(slot, value)
    except MetaPropError:
        raise
    except Exception as e:
        raise WriteFailedError(slot.name, str(e) or type(e).__name__) from e
    if not written:
        raise WriteFailedError(slot.name)
    logger.debug("Wrote %r to %s (%s)", value, slot.name, slot.storage_kind)
    return value


def apply_value(prop: MetaProp, slot: TargetSlot, writer: TargetWriter) -> ApplyResult:
    """Apply prop to slot, reporting failure instead of raising.

    Args:
        prop: The property to apply.
        slot: Resolved target slot.
        writer: Target write collaborator.

    Returns:
        ApplyResult with ok=True and the written value, or ok=False with
        the error code and message.
    """
    try:
        value = write_value(prop, slot, writer)
    except MetaPropError as e:
        return ApplyResult(ok=False, error_code=e.error_code, message=e.message)
    return ApplyResult(ok=True, value=value)
