"""MetaProp - Parameter store database.

Engine and session setup for the SQLite file that backs ParameterStore,
plus seeding helpers used by tests and by callers preparing a target.
"""

from __future__ import annotations

from pathlib import Path

from sqlalchemy import Engine, create_engine, select
from sqlalchemy.orm import Session, sessionmaker

from metaprop.config import DB_PATH, MODEL_PROPERTY_PREFIX
from metaprop.kinds import StorageKind
from metaprop.models import Base, ElementParameter, TargetElement


def get_database_url(db_path: str | Path | None = None) -> str:
    """SQLite URL for db_path, or for config.DB_PATH when omitted."""
    return f"sqlite:///{db_path if db_path is not None else DB_PATH}"


def create_db_engine(db_path: str | Path | None = None, echo: bool = False) -> Engine:
    """Engine for the parameter store file; echo logs every statement."""
    return create_engine(get_database_url(db_path), echo=echo)


def create_session_factory(engine: Engine) -> sessionmaker:
    """Session factory for import runs.

    ParameterStore flushes after each accepted write, so autoflush is off.
    Slots resolved during a run stay readable after the import commits.
    """
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


def init_db(
    db_path: str | Path | None = None, echo: bool = False
) -> tuple[Engine, sessionmaker]:
    """Open the parameter store and create any missing tables.

    Existing tables and rows are left as they are, so an import can run
    against a database that was seeded beforehand.

    Returns:
        Tuple of (engine, SessionFactory).
    """
    engine = create_db_engine(db_path, echo=echo)
    Base.metadata.create_all(engine)
    return engine, create_session_factory(engine)


# --- Seeding Primitives ---


def get_or_create_element(session: Session, external_id: str, component: str = "") -> TargetElement:
    """Return the element for (external_id, component), creating it if needed.

    Note:
        This function does NOT commit the transaction. It calls session.flush()
        to assign the row but leaves commit responsibility to the caller.
    """
    stmt = select(TargetElement).where(
        TargetElement.external_id == external_id,
        TargetElement.component == component,
    )
    element = session.execute(stmt).scalar_one_or_none()
    if element is None:
        element = TargetElement(
            external_id=external_id,
            component=component,
            is_model_level=external_id.startswith(MODEL_PROPERTY_PREFIX),
        )
        session.add(element)
        session.flush()
    return element


def add_parameter(
    session: Session,
    external_id: str,
    name: str,
    storage_kind: StorageKind | str,
    component: str = "",
    group_id: int | None = None,
    read_only: bool = False,
) -> ElementParameter:
    """Add an empty parameter slot to an element (created on demand).

    Note:
        This function does NOT commit the transaction.

    Args:
        session: Active database session.
        external_id: Owning element external id.
        name: Parameter name (matched against displayName).
        storage_kind: Storage kind the slot reports.
        component: Sub-part qualifier of the owning element.
        group_id: Optional display grouping value.
        read_only: If True the slot is not write-eligible.

    Returns:
        The created ElementParameter (flushed but not committed).
    """
    element = get_or_create_element(session, external_id, component)
    parameter = ElementParameter(
        element_id=element.id,
        name=name,
        storage_kind=str(StorageKind(storage_kind)),
        group_id=group_id,
        read_only=read_only,
    )
    session.add(parameter)
    session.flush()
    return parameter
