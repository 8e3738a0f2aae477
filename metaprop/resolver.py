"""MetaProp - Type and grouping resolution.

Maps a property's declared metaType to the value kind used for storage
slot creation, and a serialized categoryId to a display-grouping key.
"""

from __future__ import annotations

import re
from enum import IntEnum
from typing import TYPE_CHECKING, assert_never

from metaprop.errors import UnknownCategoryIdError
from metaprop.kinds import MetaType, ParameterGroup, ValueKind

if TYPE_CHECKING:
    from metaprop.targets import GroupLookup

# Signed ASCII integer; int() alone would also take "1_0" and non-ASCII digits
_INTEGER_KEY = re.compile(r"[+-]?[0-9]+", re.ASCII)


def resolve_value_kind(meta_type: MetaType | str) -> ValueKind:
    """Return the value kind for a metaType.

    Link and File properties are stored as text; DeleteOverride has no
    value kind of its own.

    Args:
        meta_type: A MetaType or its literal.

    Returns:
        The resolved ValueKind.

    Raises:
        UnsupportedMetaTypeError: If meta_type is not a recognized literal.
    """
    meta_type = MetaType.parse(meta_type)

    match meta_type:
        case MetaType.TEXT | MetaType.LINK | MetaType.FILE:
            return ValueKind.TEXT
        case MetaType.INT:
            return ValueKind.INTEGER
        case MetaType.DOUBLE:
            return ValueKind.FLOATING_POINT
        case MetaType.DELETE_OVERRIDE:
            return ValueKind.INVALID
        case _:
            assert_never(meta_type)


class EnumGroupLookup:
    """Grouping lookup backed by an IntEnum domain.

    Accepts the member name or its integer value, ignoring surrounding
    whitespace. Integers that are not members of the domain are rejected.
    """

    def __init__(self, domain: type[IntEnum] = ParameterGroup):
        self.domain = domain

    def lookup(self, category_id: str) -> IntEnum:
        """Resolve a categoryId.

        Raises:
            UnknownCategoryIdError: If category_id is not in the domain.
        """
        key = (category_id or "").strip()
        if not key:
            raise UnknownCategoryIdError(category_id)

        try:
            return self.domain[key]
        except KeyError:
            pass

        if not _INTEGER_KEY.fullmatch(key):
            raise UnknownCategoryIdError(category_id)
        try:
            return self.domain(int(key))
        except ValueError:
            raise UnknownCategoryIdError(category_id) from None


DEFAULT_GROUP_LOOKUP = EnumGroupLookup()


def resolve_group(category_id: str, lookup: GroupLookup | None = None) -> IntEnum:
    """Resolve categoryId to a grouping key using lookup (default: ParameterGroup)."""
    lookup = lookup if lookup is not None else DEFAULT_GROUP_LOOKUP
    return lookup.lookup(category_id)
