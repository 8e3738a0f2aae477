"""MetaProp - Closed value domains.

MetaType is the declared kind of an incoming property; ValueKind is what a
new storage slot for it should hold; StorageKind is what an existing target
slot reports. ParameterGroup is the default display-grouping domain that
categoryId values are resolved against.
"""

from __future__ import annotations

from enum import IntEnum, StrEnum

from metaprop.errors import UnsupportedMetaTypeError


class MetaType(StrEnum):
    """Declared kind of a meta property."""

    TEXT = "Text"
    INT = "Int"
    DOUBLE = "Double"
    LINK = "Link"
    FILE = "File"
    DELETE_OVERRIDE = "DeleteOverride"

    @classmethod
    def parse(cls, value: object) -> MetaType:
        """Parse a metaType literal (case-sensitive, no trimming).

        Raises:
            UnsupportedMetaTypeError: If value is not one of the six literals.
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise UnsupportedMetaTypeError(value) from None


class ValueKind(StrEnum):
    """Value kind used to create or resolve a storage slot."""

    TEXT = "text"
    INTEGER = "integer"
    FLOATING_POINT = "floating-point"
    INVALID = "invalid"


class StorageKind(StrEnum):
    """Storage representation reported by a target slot."""

    FLOATING_POINT = "floating-point"
    IDENTIFIER_REFERENCE = "identifier-reference"
    INTEGER = "integer"
    TEXT = "text"
    UNSUPPORTED = "unsupported"


class ParameterGroup(IntEnum):
    """Display grouping of a parameter in the target system.

    Serialized categoryId values are either the member name or the
    integer value, e.g. "PG_DATA" or "2".
    """

    INVALID = -1
    PG_GENERAL = 1
    PG_DATA = 2
    PG_TEXT = 3
    PG_IDENTITY_DATA = 4
    PG_CONSTRAINTS = 5
    PG_CONSTRUCTION = 6
    PG_GEOMETRY = 7
    PG_MATERIALS = 8
    PG_GRAPHICS = 9
    PG_VISIBILITY = 10
    PG_PHASING = 11
    PG_STRUCTURAL = 12
    PG_MECHANICAL = 13
    PG_ELECTRICAL = 14
    PG_PLUMBING = 15
    PG_FIRE_PROTECTION = 16
    PG_ENERGY_ANALYSIS = 17
    PG_ANALYSIS_RESULTS = 18
    PG_IFC = 19


# Storage kind a freshly created slot gets for each value kind
STORAGE_KIND_FOR_VALUE_KIND = {
    ValueKind.TEXT: StorageKind.TEXT,
    ValueKind.INTEGER: StorageKind.INTEGER,
    ValueKind.FLOATING_POINT: StorageKind.FLOATING_POINT,
}


__all__ = [
    "MetaType",
    "ValueKind",
    "StorageKind",
    "ParameterGroup",
    "STORAGE_KIND_FOR_VALUE_KIND",
]
