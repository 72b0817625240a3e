"""
Project showcase model.
"""
import enum
from sqlalchemy import String, ForeignKey, Table, Column, Text, Boolean, Enum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from codeclub.core.database.base import Base, TimestampMixin, generate_ulid


class ProjectCategory(str, enum.Enum):
    WEB = "WEB"
    AI = "AI"
    UIUX = "UIUX"


project_tags = Table(
    "project_tags",
    Base.metadata,
    Column("project_id", String(26), ForeignKey("projects.id", ondelete="CASCADE"), primary_key=True),
    Column("tag_id", String(26), ForeignKey("tags.id", ondelete="CASCADE"), primary_key=True),
)


class Project(Base, TimestampMixin):
    """
    A project submitted by a member.

    Projects start unapproved and only appear publicly once approved.
    Deleting a project removes its rows in ``project_tags``.
    """
    __tablename__ = "projects"

    id: Mapped[str] = mapped_column(String(26), primary_key=True, default=generate_ulid)

    member_id: Mapped[str] = mapped_column(
        String(26),
        ForeignKey("members.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    github_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    live_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    image_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    category: Mapped[ProjectCategory | None] = mapped_column(
        Enum(ProjectCategory, name="project_category"),
        nullable=True,
        index=True,
    )

    is_approved: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False, index=True)

    # Relationships
    member: Mapped["Member"] = relationship(  # type: ignore
        "Member",
        back_populates="projects",
        lazy="selectin",
    )

    tags: Mapped[list["Tag"]] = relationship(  # type: ignore
        "Tag",
        secondary=project_tags,
        order_by="Tag.name",
        lazy="selectin",
    )

    def __repr__(self) -> str:
        return f"<Project(id={self.id}, title={self.title!r}, approved={self.is_approved})>"
