"""MetaProp - Batch runner.

Single-pass transform over a sequence of raw records:

    decode -> validate -> resolve -> format -> apply

Each record is processed independently. Every MetaPropError is caught at
the record boundary and filed into the BatchReport with the record's
identity (externalId, component, displayName) and raw content; the batch
itself always completes. Exceptions raised by the resolver, writer or
slot factory are turned into TARGET_UNAVAILABLE or WRITE_FAILED for that
record; any other exception is a programming error and propagates.

Cancellation is coarse: should_cancel is polled between records. Records
already applied are not rolled back here; that belongs to whatever
transaction the caller wraps around the target store.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from metaprop.applier import write_value
from metaprop.config import get_allow_file_or_link, get_create_missing
from metaprop.decoder import decode_record
from metaprop.errors import (
    FileOrLinkUnsupportedError,
    MetaPropError,
    TargetNotFoundError,
    TargetReadOnlyError,
    TargetUnavailableError,
)
from metaprop.kinds import ValueKind

if TYPE_CHECKING:
    from metaprop.schemas import MetaProp
    from metaprop.targets import GroupLookup, SlotFactory, TargetResolver, TargetWriter

logger = logging.getLogger(__name__)

RawRecord = Sequence[str] | Mapping[str, Any]


# --- Options ---


@dataclass
class BatchOptions:
    """Explicit settings for one batch run.

    Defaults come from the environment (see metaprop.config).
    """

    allow_file_or_link: bool = field(default_factory=get_allow_file_or_link)
    create_missing: bool = field(default_factory=get_create_missing)


# --- Result Types ---


@dataclass
class RecordOutcome:
    """Outcome of one input record."""

    index: int
    ok: bool
    external_id: str = ""
    component: str = ""
    display_name: str = ""
    error_code: str | None = None
    message: str | None = None
    value: str | int | float | None = None
    record: Any = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "index": self.index,
            "ok": self.ok,
            "external_id": self.external_id,
            "component": self.component,
            "display_name": self.display_name,
            "error_code": self.error_code,
            "message": self.message,
            "value": self.value,
            "record": self.record,
        }


@dataclass
class BatchReport:
    """Per-record outcomes of a batch run, in input order."""

    outcomes: list[RecordOutcome] = field(default_factory=list)
    cancelled: bool = False

    @property
    def applied(self) -> list[RecordOutcome]:
        return [o for o in self.outcomes if o.ok]

    @property
    def failures(self) -> list[RecordOutcome]:
        return [o for o in self.outcomes if not o.ok]

    @property
    def total(self) -> int:
        return len(self.outcomes)

    @property
    def ok(self) -> bool:
        """True if every processed record was applied."""
        return not self.failures

    def failure_counts(self) -> dict[str, int]:
        """Number of failures per error code."""
        counts: dict[str, int] = {}
        for outcome in self.failures:
            counts[outcome.error_code] = counts.get(outcome.error_code, 0) + 1
        return counts

    def to_dict(self) -> dict[str, Any]:
        return {
            "total": self.total,
            "applied": len(self.applied),
            "failed": len(self.failures),
            "cancelled": self.cancelled,
            "failure_counts": self.failure_counts(),
            "failures": [o.to_dict() for o in self.failures],
        }


# --- Helpers ---


def _snapshot(raw: Any) -> Any:
    """Plain copy of a raw record for the report."""
    if isinstance(raw, Mapping):
        return dict(raw)
    if isinstance(raw, Sequence) and not isinstance(raw, (str, bytes)):
        return list(raw)
    return raw


def _raw_identity(raw: Any) -> tuple[str, str, str]:
    """Best-effort identity of a record that did not decode."""
    if isinstance(raw, Mapping):
        return (
            str(raw.get("externalId") or ""),
            str(raw.get("component") or ""),
            str(raw.get("displayName") or ""),
        )
    if isinstance(raw, Sequence) and not isinstance(raw, (str, bytes)):

        def at(i: int) -> str:
            return str(raw[i]) if len(raw) > i else ""

        return at(0), at(1), at(4)
    return "", "", ""


def apply_record(
    prop: MetaProp,
    resolver: TargetResolver,
    writer: TargetWriter,
    groups: GroupLookup | None = None,
    slot_factory: SlotFactory | None = None,
    options: BatchOptions | None = None,
) -> str | int | float:
    """Resolve, format and apply one decoded property.

    Sets prop.can_set according to whether a write-eligible slot was found.

    Returns:
        The value written.

    Raises:
        MetaPropError: On any per-record failure.
    """
    options = options if options is not None else BatchOptions()

    value_kind = prop.value_kind
    group = prop.parameter_group(groups)

    if prop.is_file_or_link_property and not options.allow_file_or_link:
        raise FileOrLinkUnsupportedError(prop.meta_type)

    try:
        slot = resolver.resolve_slot(prop.external_id, prop.component, prop.display_name)
    except MetaPropError:
        raise
    except Exception as e:
        raise TargetUnavailableError(prop.display_name, str(e) or type(e).__name__) from e

    if (
        slot is None
        and options.create_missing
        and slot_factory is not None
        and value_kind is not ValueKind.INVALID
    ):
        try:
            slot = slot_factory.create_slot(
                prop.external_id, prop.component, prop.display_name, value_kind, group
            )
        except MetaPropError:
            raise
        except Exception as e:
            raise TargetUnavailableError(prop.display_name, str(e) or type(e).__name__) from e
        if slot is not None:
            logger.info(
                "Created %s slot %r on %s (group=%s)",
                value_kind,
                prop.display_name,
                prop.external_id,
                group.name,
            )

    prop.can_set = slot is not None and not slot.read_only

    if slot is None:
        raise TargetNotFoundError(prop.external_id, prop.component, prop.display_name)
    if slot.read_only:
        raise TargetReadOnlyError(slot.name)

    return write_value(prop, slot, writer)


# --- Batch ---


def run_batch(
    records: Iterable[RawRecord],
    resolver: TargetResolver,
    writer: TargetWriter,
    groups: GroupLookup | None = None,
    slot_factory: SlotFactory | None = None,
    options: BatchOptions | None = None,
    should_cancel: Callable[[], bool] | None = None,
) -> BatchReport:
    """Decode and apply a sequence of raw records.

    Args:
        records: CSV rows and/or JSON objects.
        resolver: Finds the target slot for each property.
        writer: Writes coerced values.
        groups: categoryId lookup (default: ParameterGroup).
        slot_factory: Creates missing slots when options.create_missing is set.
        options: Batch settings (default: from environment).
        should_cancel: Polled before each record; True stops the batch.

    Returns:
        BatchReport with one outcome per processed record.
    """
    options = options if options is not None else BatchOptions()
    report = BatchReport()

    logger.info(
        "Batch start (allow_file_or_link=%s, create_missing=%s)",
        options.allow_file_or_link,
        options.create_missing,
    )

    for index, raw in enumerate(records):
        if should_cancel is not None and should_cancel():
            logger.info("Batch cancelled before record %d", index)
            report.cancelled = True
            break

        prop = None
        try:
            prop = decode_record(raw)
            value = apply_record(prop, resolver, writer, groups, slot_factory, options)
        except MetaPropError as e:
            if prop is not None:
                external_id, component, display_name = (
                    prop.external_id,
                    prop.component,
                    prop.display_name,
                )
            else:
                external_id, component, display_name = _raw_identity(raw)

            logger.warning(
                "Record %d rejected (%s) externalId=%s component=%s name=%s: %s",
                index,
                e.error_code,
                external_id,
                component,
                display_name,
                e.message,
            )
            report.outcomes.append(
                RecordOutcome(
                    index=index,
                    ok=False,
                    external_id=external_id,
                    component=component,
                    display_name=display_name,
                    error_code=str(e.error_code),
                    message=e.message,
                    record=_snapshot(raw),
                )
            )
            continue

        report.outcomes.append(
            RecordOutcome(
                index=index,
                ok=True,
                external_id=prop.external_id,
                component=prop.component,
                display_name=prop.display_name,
                value=value,
            )
        )

    logger.info(
        "Batch complete: %d records, %d applied, %d failed%s",
        report.total,
        len(report.applied),
        len(report.failures),
        " (cancelled)" if report.cancelled else "",
    )
    return report
