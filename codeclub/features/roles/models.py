"""
Custom role model: an admin-defined, named bundle of permissions.
"""
from sqlalchemy import String, ForeignKey, JSON, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from codeclub.core.database.base import Base, TimestampMixin, generate_ulid


DEFAULT_ROLE_COLOR = "#6B7280"


class CustomRole(Base, TimestampMixin):
    """
    Custom role assignable to users on top of their built-in role.

    ``permissions`` holds ``Permission`` values as a JSON list. Always assign a
    new list; in-place mutation is not tracked.
    """
    __tablename__ = "custom_roles"

    id: Mapped[str] = mapped_column(String(26), primary_key=True, default=generate_ulid)

    name: Mapped[str] = mapped_column(String(50), unique=True, nullable=False, index=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Display hint only
    color: Mapped[str] = mapped_column(String(7), nullable=False, default=DEFAULT_ROLE_COLOR)

    permissions: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)

    created_by_id: Mapped[str | None] = mapped_column(
        String(26),
        ForeignKey("users.id", ondelete="SET NULL", use_alter=True),
        nullable=True,
    )

    creator: Mapped["User | None"] = relationship(  # type: ignore
        "User",
        foreign_keys=[created_by_id],
        lazy="selectin",
    )

    def __repr__(self) -> str:
        return f"<CustomRole(id={self.id}, name={self.name!r}, permissions={self.permissions})>"
