"""SQLAlchemy models for document entities."""

import uuid as uuid_pkg
from enum import Enum
from typing import Optional

from sqlalchemy import ForeignKey, Integer, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from ...infrastructure.database.models import TimestampMixin, UUIDMixin
from ...infrastructure.database.session import Base


class DocumentStatus(str, Enum):
    """Processing state of an uploaded document."""

    PROCESSING = "processing"
    READY = "ready"
    ERROR = "error"


class Document(Base, UUIDMixin, TimestampMixin):
    """Document model for an uploaded PDF inside a notebook.

    The raw bytes live in object storage under ``storage_path``; the row
    tracks ownership and processing state. A document is ``processing`` from
    upload until its chunks are embedded, then ``ready``; a PDF without any
    usable text ends up in ``error``.
    """

    __tablename__ = "documents"

    notebook_id: Mapped[uuid_pkg.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("notebooks.id", ondelete="CASCADE"), index=True
    )
    user_id: Mapped[str] = mapped_column(String(255), index=True)
    filename: Mapped[str] = mapped_column(String(512))
    storage_path: Mapped[Optional[str]] = mapped_column(String(1024), default=None)
    file_size: Mapped[Optional[int]] = mapped_column(Integer, default=None)
    page_count: Mapped[int] = mapped_column(Integer, default=0)
    status: Mapped[str] = mapped_column(String(20), default=DocumentStatus.PROCESSING.value)
