"""MetaProp - SQLAlchemy ORM models for the reference target store.

Tables:
1. target_elements
2. element_parameters
"""

from datetime import UTC, datetime

from sqlalchemy import (
    Boolean,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


def utc_now() -> datetime:
    """Return current UTC datetime."""
    return datetime.now(UTC)


class TargetElement(Base):
    """An element (or document scope) that owns parameter slots."""

    __tablename__ = "target_elements"

    # Primary key
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    # External identity as used by meta property records
    external_id: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    component: Mapped[str] = mapped_column(String(128), nullable=False, default="")

    # True for doc_-scoped (model-level) pseudo elements
    is_model_level: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utc_now
    )

    parameters: Mapped[list["ElementParameter"]] = relationship(
        back_populates="element", cascade="all, delete-orphan"
    )

    __table_args__ = (
        UniqueConstraint("external_id", "component", name="uq_element_external_component"),
    )


class ElementParameter(Base):
    """One named value slot on an element.

    Exactly one value column is meaningful, chosen by storage_kind.
    """

    __tablename__ = "element_parameters"

    # Primary key (used as the slot handle)
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    element_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("target_elements.id"), nullable=False, index=True
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    # metaprop.kinds.StorageKind value
    storage_kind: Mapped[str] = mapped_column(String(32), nullable=False)

    # Display grouping (metaprop.kinds.ParameterGroup value)
    group_id: Mapped[int | None] = mapped_column(Integer, nullable=True)

    read_only: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    # Value columns
    value_text: Mapped[str | None] = mapped_column(Text, nullable=True)
    value_int: Mapped[int | None] = mapped_column(Integer, nullable=True)
    value_double: Mapped[float | None] = mapped_column(Float, nullable=True)
    value_ref: Mapped[int | None] = mapped_column(Integer, nullable=True)

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utc_now, onupdate=utc_now
    )

    element: Mapped[TargetElement] = relationship(back_populates="parameters")

    __table_args__ = (UniqueConstraint("element_id", "name", name="uq_element_parameter_name"),)
