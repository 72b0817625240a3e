"""
User model: GitHub identity plus authorization state.
"""
from datetime import datetime
from sqlalchemy import String, Boolean, ForeignKey, Enum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from codeclub.core.database.base import Base, TimestampMixin, generate_ulid
from codeclub.features.permissions.models import UserRole


class User(Base, TimestampMixin):
    """
    A person who signed in with GitHub.

    New users start as PENDING and inactive until an admin approves them.
    """
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(26), primary_key=True, default=generate_ulid)

    # GitHub numeric id, stored as text
    github_id: Mapped[str] = mapped_column(String(64), unique=True, nullable=False, index=True)

    username: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    avatar_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    github_url: Mapped[str | None] = mapped_column(String(500), nullable=True)

    # Authorization state
    role: Mapped[UserRole] = mapped_column(
        Enum(UserRole, name="user_role"),
        default=UserRole.PENDING,
        nullable=False,
        index=True,
    )
    is_active: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_lead: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    custom_role_id: Mapped[str | None] = mapped_column(
        String(26),
        ForeignKey("custom_roles.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    last_login_at: Mapped[datetime | None] = mapped_column(nullable=True)

    # Relationships
    custom_role: Mapped["CustomRole | None"] = relationship(  # type: ignore
        "CustomRole",
        foreign_keys=[custom_role_id],
        lazy="selectin",
    )

    member: Mapped["Member | None"] = relationship(  # type: ignore
        "Member",
        back_populates="user",
        uselist=False,
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username={self.username!r}, role={self.role})>"
