"""
Skill model for member profiles.
"""
from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from codeclub.core.database.base import Base, TimestampMixin, generate_ulid


class Skill(Base, TimestampMixin):
    """A technology or competency a member can list, e.g. "Python" in "Language"."""
    __tablename__ = "skills"

    id: Mapped[str] = mapped_column(String(26), primary_key=True, default=generate_ulid)
    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False, index=True)
    category: Mapped[str | None] = mapped_column(String(100), nullable=True)

    def __repr__(self) -> str:
        return f"<Skill(id={self.id}, name={self.name!r})>"
