"""MetaProp - SQLite-backed reference target store.

Implements the TargetResolver, TargetWriter and SlotFactory collaborators
on top of the element_parameters table. A slot is addressed by
(externalId, component, displayName); its handle is the parameter row id.

The store never commits; the caller owns the transaction and may roll
back a cancelled or unacceptable batch.
"""

from __future__ import annotations

import logging
import math
from enum import IntEnum
from typing import TYPE_CHECKING

from sqlalchemy import select

from metaprop.db import add_parameter
from metaprop.kinds import STORAGE_KIND_FOR_VALUE_KIND, StorageKind, ValueKind
from metaprop.models import ElementParameter, TargetElement, utc_now
from metaprop.targets import TargetSlot

if TYPE_CHECKING:
    from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)


def _storage_kind(value: str) -> StorageKind:
    try:
        return StorageKind(value)
    except ValueError:
        return StorageKind.UNSUPPORTED


def _slot(parameter: ElementParameter) -> TargetSlot:
    return TargetSlot(
        handle=parameter.id,
        name=parameter.name,
        storage_kind=_storage_kind(parameter.storage_kind),
        read_only=parameter.read_only,
    )


class ParameterStore:
    """Target store over one SQLAlchemy session."""

    def __init__(self, session: Session):
        self.session = session

    def _find_element(self, external_id: str, component: str) -> TargetElement | None:
        stmt = select(TargetElement).where(
            TargetElement.external_id == external_id,
            TargetElement.component == component,
        )
        return self.session.execute(stmt).scalar_one_or_none()

    def _find_parameter(
        self, external_id: str, component: str, name: str
    ) -> ElementParameter | None:
        stmt = (
            select(ElementParameter)
            .join(TargetElement, ElementParameter.element_id == TargetElement.id)
            .where(
                TargetElement.external_id == external_id,
                TargetElement.component == component,
                ElementParameter.name == name,
            )
        )
        return self.session.execute(stmt).scalar_one_or_none()

    # --- TargetResolver ---

    def resolve_slot(self, external_id: str, component: str, name: str) -> TargetSlot | None:
        parameter = self._find_parameter(external_id, component, name)
        if parameter is None:
            return None
        return _slot(parameter)

    # --- SlotFactory ---

    def create_slot(
        self,
        external_id: str,
        component: str,
        name: str,
        value_kind: ValueKind,
        group: IntEnum,
    ) -> TargetSlot | None:
        """Create a parameter slot on an existing element.

        Returns None if the element does not exist or value_kind has no
        storage kind (DeleteOverride).
        """
        storage_kind = STORAGE_KIND_FOR_VALUE_KIND.get(value_kind)
        if storage_kind is None:
            return None
        if self._find_element(external_id, component) is None:
            return None

        parameter = add_parameter(
            self.session,
            external_id,
            name,
            storage_kind,
            component=component,
            group_id=int(group),
        )
        return _slot(parameter)

    # --- TargetWriter ---

    def write(self, slot: TargetSlot, value: str | int | float) -> bool:
        """Store value in the column matching the slot's storage kind.

        Returns False if the slot no longer exists, is read-only, or value
        has the wrong Python type for the storage kind. Non-finite floats
        are refused; SQLite would store NaN as NULL.
        """
        parameter = self.session.get(ElementParameter, slot.handle)
        if parameter is None or parameter.read_only:
            return False

        storage_kind = _storage_kind(parameter.storage_kind)
        # bool is an int subclass but never a valid slot value
        if isinstance(value, bool):
            return False

        match storage_kind:
            case StorageKind.TEXT if isinstance(value, str):
                parameter.value_text = value
            case StorageKind.INTEGER if isinstance(value, int):
                parameter.value_int = value
            case StorageKind.IDENTIFIER_REFERENCE if isinstance(value, int):
                parameter.value_ref = value
            case StorageKind.FLOATING_POINT if isinstance(value, float) and math.isfinite(value):
                parameter.value_double = value
            case _:
                logger.debug(
                    "Rejected %s value for %s slot %s",
                    type(value).__name__,
                    storage_kind,
                    parameter.name,
                )
                return False

        parameter.updated_at = utc_now()
        self.session.flush()
        return True

    # --- Reading ---

    def read_value(
        self, external_id: str, name: str, component: str = ""
    ) -> str | int | float | None:
        """Return the stored value of a parameter, or None if unset or missing."""
        parameter = self._find_parameter(external_id, component, name)
        if parameter is None:
            return None

        match _storage_kind(parameter.storage_kind):
            case StorageKind.TEXT:
                return parameter.value_text
            case StorageKind.INTEGER:
                return parameter.value_int
            case StorageKind.IDENTIFIER_REFERENCE:
                return parameter.value_ref
            case StorageKind.FLOATING_POINT:
                return parameter.value_double
            case _:
                return None
