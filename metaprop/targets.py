"""MetaProp - Target collaborator interfaces.

The core never touches a concrete target system. Callers supply:
- a TargetResolver that finds the slot for (externalId, component, name)
- a TargetWriter that stores a coerced value into a slot
- optionally a SlotFactory that creates missing slots
- a GroupLookup that resolves serialized categoryId keys

metaprop.store.ParameterStore implements the first three on SQLite.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Protocol

from metaprop.kinds import StorageKind, ValueKind


@dataclass(frozen=True)
class TargetSlot:
    """Handle to one writable value slot in the target system."""

    handle: Any
    name: str
    storage_kind: StorageKind
    read_only: bool = False


class TargetResolver(Protocol):
    def resolve_slot(self, external_id: str, component: str, name: str) -> TargetSlot | None:
        """Return the slot for a property, or None if not found."""
        ...


class TargetWriter(Protocol):
    def write(self, slot: TargetSlot, value: str | int | float) -> bool:
        """Store value into slot; return False if the target rejected it."""
        ...


class SlotFactory(Protocol):
    def create_slot(
        self,
        external_id: str,
        component: str,
        name: str,
        value_kind: ValueKind,
        group: IntEnum,
    ) -> TargetSlot | None:
        """Create a missing slot; return None if the owning element does not exist."""
        ...


class GroupLookup(Protocol):
    def lookup(self, category_id: str) -> IntEnum:
        """Resolve a categoryId or raise UnknownCategoryIdError."""
        ...
