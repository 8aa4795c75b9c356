"""SQLAlchemy models for notebook entities."""

from typing import Optional

from sqlalchemy import Boolean, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from ...infrastructure.database.models import TimestampMixin, UUIDMixin
from ...infrastructure.database.session import Base


class Notebook(Base, UUIDMixin, TimestampMixin):
    """Notebook model: a named collection of documents owned by one user.

    ``source_count`` is a denormalized count of the notebook's documents,
    refreshed whenever a document is added or removed.
    """

    __tablename__ = "notebooks"

    user_id: Mapped[str] = mapped_column(String(255), index=True)
    title: Mapped[str] = mapped_column(String(255))
    description: Mapped[Optional[str]] = mapped_column(Text, default=None)
    source_count: Mapped[int] = mapped_column(Integer, default=0)
    is_featured: Mapped[bool] = mapped_column(Boolean, default=False)
