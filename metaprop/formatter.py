"""MetaProp - Display formatting.

Canonical textual representation of a property value. Pure functions of
metaType and the raw fields; no I/O.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, assert_never

from metaprop.config import DELETE_SENTINEL
from metaprop.kinds import MetaType

if TYPE_CHECKING:
    from metaprop.schemas import MetaProp


def format_value(
    meta_type: MetaType | str,
    display_value: str,
    filelink: str = "",
    filename: str = "",
    link: str = "",
) -> str:
    """Format a raw property value for display or text storage.

    Text, Int and Double values pass through unchanged. Link and File
    values are prefixed and joined with ':'; DeleteOverride yields the
    delete sentinel.

    Args:
        meta_type: A MetaType or its literal.
        display_value: Raw value text.
        filelink: File link id (File only).
        filename: File name (File only).
        link: Link target (Link only).

    Returns:
        The canonical display string.

    Raises:
        UnsupportedMetaTypeError: If meta_type is not a recognized literal.
    """
    meta_type = MetaType.parse(meta_type)

    match meta_type:
        case MetaType.TEXT | MetaType.INT | MetaType.DOUBLE:
            return display_value
        case MetaType.LINK:
            return f"link:{display_value}:{link}"
        case MetaType.FILE:
            return f"file:{display_value}:{filelink}:{filename}"
        case MetaType.DELETE_OVERRIDE:
            return DELETE_SENTINEL
        case _:
            assert_never(meta_type)


def display_string(prop: MetaProp) -> str:
    """Return the canonical display string of a MetaProp."""
    return format_value(
        prop.meta_type,
        prop.display_value,
        filelink=prop.filelink,
        filename=prop.filename,
        link=prop.link,
    )
