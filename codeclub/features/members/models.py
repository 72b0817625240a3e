"""
Member profile: the public-facing 1:1 extension of a user.
"""
from sqlalchemy import String, ForeignKey, Table, Column, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from codeclub.core.database.base import Base, TimestampMixin, generate_ulid


member_skills = Table(
    "member_skills",
    Base.metadata,
    Column("member_id", String(26), ForeignKey("members.id", ondelete="CASCADE"), primary_key=True),
    Column("skill_id", String(26), ForeignKey("skills.id", ondelete="CASCADE"), primary_key=True),
)


class Member(Base, TimestampMixin):
    """
    Public profile content. Only listed while the owning user is active.
    """
    __tablename__ = "members"

    id: Mapped[str] = mapped_column(String(26), primary_key=True, default=generate_ulid)

    user_id: Mapped[str] = mapped_column(
        String(26),
        ForeignKey("users.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
        index=True,
    )

    full_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    bio: Mapped[str | None] = mapped_column(Text, nullable=True)
    role_title: Mapped[str | None] = mapped_column(String(255), nullable=True)
    dev_stack: Mapped[str | None] = mapped_column(String(255), nullable=True)
    linkedin_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    portfolio_url: Mapped[str | None] = mapped_column(String(500), nullable=True)

    # Relationships
    user: Mapped["User"] = relationship(  # type: ignore
        "User",
        back_populates="member",
        lazy="selectin",
    )

    skills: Mapped[list["Skill"]] = relationship(  # type: ignore
        "Skill",
        secondary=member_skills,
        order_by="Skill.name",
        lazy="selectin",
    )

    projects: Mapped[list["Project"]] = relationship(  # type: ignore
        "Project",
        back_populates="member",
        cascade="all, delete-orphan",
        order_by="Project.created_at.desc()",
        lazy="selectin",
    )

    def __repr__(self) -> str:
        return f"<Member(id={self.id}, user_id={self.user_id}, full_name={self.full_name!r})>"
