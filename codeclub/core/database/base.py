"""
SQLAlchemy declarative base and shared column helpers.

Every model in ``codeclub.features`` inherits from ``Base``; most also mix in
``TimestampMixin``.
"""
from datetime import datetime
from sqlalchemy import DateTime, MetaData, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
import ulid


def generate_ulid() -> str:
    """Generate a new ULID string (26 chars, lexicographically sortable)."""
    return str(ulid.new())


class Base(DeclarativeBase):
    """
    Base class for all models.

    Constraint names are deterministic so unique violations can be told apart
    in logs (e.g. ``uq_custom_roles_name``).
    """
    metadata = MetaData(naming_convention={
        "ix": "ix_%(column_0_label)s",
        "uq": "uq_%(table_name)s_%(column_0_name)s",
        "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
        "pk": "pk_%(table_name)s",
    })


class TimestampMixin:
    """Adds ``created_at``/``updated_at`` maintained by the database."""
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
