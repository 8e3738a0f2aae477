"""MetaProp - Pydantic model of one meta property observation.

Wire names (externalId, displayCategory, CanSet, ...) are accepted as
aliases and emitted on JSON re-encode. Corresponds to
metaprop/specs/metaprop_record.schema.json.
"""

from __future__ import annotations

from enum import IntEnum
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from metaprop import formatter
from metaprop.config import CSV_MAX_FIELDS, CSV_MIN_FIELDS, MODEL_PROPERTY_PREFIX
from metaprop.kinds import MetaType, ValueKind
from metaprop.resolver import resolve_group, resolve_value_kind

if TYPE_CHECKING:
    from metaprop.targets import GroupLookup


_STRING_FIELDS = (
    "external_id",
    "component",
    "display_category",
    "category_id",
    "display_name",
    "display_value",
    "filelink",
    "filename",
    "link",
)


class MetaProp(BaseModel):
    """One property observation to apply to one target element.

    Only can_set changes after construction; callers set it once the
    target slot has been resolved.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    can_set: bool = Field(
        default=False,
        alias="CanSet",
        description="True once a write-eligible target slot was found",
    )
    external_id: str = Field(
        default="",
        alias="externalId",
        description="Owning element id, or doc_-prefixed model-level scope",
    )
    component: str = Field(default="", description="Sub-part qualifier")
    display_category: str = Field(
        default="", alias="displayCategory", description="Human label of the grouping"
    )
    category_id: str = Field(
        default="", alias="categoryId", description="Serialized grouping enum key"
    )
    display_name: str = Field(default="", alias="displayName", description="Property name")
    display_value: str = Field(
        default="", alias="displayValue", description="Raw value as text"
    )
    meta_type: MetaType = Field(..., alias="metaType", description="Declared property kind")
    filelink: str = Field(default="", description="File link id (File only)")
    filename: str = Field(default="", description="File name (File only)")
    link: str = Field(default="", description="Link target (Link only)")

    # Width of the CSV row this came from; JSON input re-encodes at full width
    record_width: int = Field(
        default=CSV_MAX_FIELDS, ge=CSV_MIN_FIELDS, le=CSV_MAX_FIELDS, exclude=True
    )

    @field_validator(*_STRING_FIELDS, mode="before")
    @classmethod
    def null_as_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("meta_type", mode="before")
    @classmethod
    def parse_meta_type(cls, value: Any) -> MetaType:
        # UnsupportedMetaTypeError is not a ValueError, so pydantic lets it through
        return MetaType.parse("" if value is None else value)

    # --- Predicates ---

    @property
    def is_model_property(self) -> bool:
        """True for a model-level property with no corresponding target element."""
        return self.external_id.startswith(MODEL_PROPERTY_PREFIX)

    @property
    def is_file_or_link_property(self) -> bool:
        """True for File and Link properties."""
        return self.meta_type in (MetaType.FILE, MetaType.LINK)

    @property
    def is_delete_override(self) -> bool:
        """True when the target slot should be reset instead of assigned."""
        return self.meta_type is MetaType.DELETE_OVERRIDE

    # --- Derived values ---

    @property
    def value_kind(self) -> ValueKind:
        """Value kind to use when creating a storage slot for this property."""
        return resolve_value_kind(self.meta_type)

    @property
    def display_string(self) -> str:
        """Canonical value text (see metaprop.formatter)."""
        return formatter.display_string(self)

    def parameter_group(self, lookup: GroupLookup | None = None) -> IntEnum:
        """Resolve category_id to a grouping key.

        Raises:
            UnknownCategoryIdError: If category_id is outside the grouping domain.
        """
        return resolve_group(self.category_id, lookup)

    def identity(self) -> dict[str, str]:
        """Identity fields used when reporting on this record."""
        return {
            "external_id": self.external_id,
            "component": self.component,
            "display_name": self.display_name,
        }

    def to_json(self) -> dict[str, Any]:
        """Re-encode using the wire field names."""
        return self.model_dump(mode="json", by_alias=True)


__all__ = ["MetaProp"]
