"""Shared pytest fixtures for MetaProp tests.

This module contains common fixtures used across multiple test files,
reducing duplication and improving test maintainability.
"""

import tempfile
from pathlib import Path

import pytest

from metaprop.db import init_db
from metaprop.kinds import StorageKind
from metaprop.store import ParameterStore
from metaprop.targets import TargetSlot


class FakeTarget:
    """In-memory target resolver and writer.

    Slots are keyed by (external_id, component, name). Every accepted write
    is recorded in order.
    """

    def __init__(self):
        self.slots: dict[tuple[str, str, str], TargetSlot] = {}
        self.values: dict[tuple[str, str, str], object] = {}
        self.writes: list[tuple[tuple[str, str, str], object]] = []
        self.accept_writes = True

    def add_slot(self, external_id, name, storage_kind, component="", read_only=False):
        handle = (external_id, component, name)
        slot = TargetSlot(
            handle=handle,
            name=name,
            storage_kind=StorageKind(storage_kind),
            read_only=read_only,
        )
        self.slots[handle] = slot
        return slot

    def resolve_slot(self, external_id, component, name):
        return self.slots.get((external_id, component, name))

    def write(self, slot, value):
        if not self.accept_writes:
            return False
        self.writes.append((slot.handle, value))
        self.values[slot.handle] = value
        return True


@pytest.fixture
def target():
    """Empty in-memory target."""
    return FakeTarget()


@pytest.fixture
def make_row():
    """Factory for CSV rows with sensible defaults.

    Returns a 10-field row unless width is given.
    """

    def _make_row(
        external_id="e1",
        component="c1",
        display_category="Group A",
        category_id="-1",
        display_name="Name",
        display_value="42",
        meta_type="Int",
        filelink="",
        filename="",
        link="",
        width=10,
    ):
        row = [
            external_id,
            component,
            display_category,
            category_id,
            display_name,
            display_value,
            meta_type,
            filelink,
            filename,
            link,
        ]
        return row[:width]

    return _make_row


@pytest.fixture
def temp_db():
    """Create a temporary database for testing.

    Creates an isolated SQLite database in a temporary directory.
    The database is cleaned up after the test completes.

    Yields:
        tuple: (db_path, engine, SessionFactory)
    """
    with tempfile.TemporaryDirectory() as tmpdir:
        db_path = Path(tmpdir) / "test.db"
        engine, SessionFactory = init_db(db_path)
        yield db_path, engine, SessionFactory
        engine.dispose()


@pytest.fixture
def session(temp_db):
    """Session on the temporary database, closed after the test."""
    _, _, SessionFactory = temp_db
    session = SessionFactory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def store(session):
    """ParameterStore over the temporary database session."""
    return ParameterStore(session)
