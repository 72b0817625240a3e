"""
Tag model for projects.
"""
from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from codeclub.core.database.base import Base, TimestampMixin, generate_ulid


def clean_tag_name(name: str) -> str:
    """Tags are stored without the leading '#' users tend to type."""
    name = name.strip()
    return name[1:] if name.startswith("#") else name


class Tag(Base, TimestampMixin):
    __tablename__ = "tags"

    id: Mapped[str] = mapped_column(String(26), primary_key=True, default=generate_ulid)
    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False, index=True)

    def __repr__(self) -> str:
        return f"<Tag(id={self.id}, name={self.name!r})>"
