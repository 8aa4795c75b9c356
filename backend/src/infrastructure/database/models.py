import uuid as uuid_pkg
from datetime import UTC, datetime

from sqlalchemy import DateTime, text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, MappedAsDataclass, mapped_column


class UUIDMixin(MappedAsDataclass):
    """Mixin adding a server-issued UUID primary key named ``id``.

    The UUID is generated on construction with ``uuid4`` and falls back to
    PostgreSQL's ``gen_random_uuid()``. It is excluded from the dataclass
    constructor so callers never choose their own identifiers.

    Example:
        ```python
        class ChatSession(Base, UUIDMixin, TimestampMixin):
            __tablename__ = "chat_sessions"
            title: Mapped[str] = mapped_column(String(255))

        session = ChatSession(title="New chat")
        # session.id is assigned on flush
        ```
    """

    id: Mapped[uuid_pkg.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default_factory=uuid_pkg.uuid4,
        server_default=text("gen_random_uuid()"),
        init=False,
    )


class TimestampMixin(MappedAsDataclass):
    """Mixin for ``created_at`` / ``updated_at`` columns in UTC.

    ``created_at`` also defines conversation order for chat messages and
    recency order for quiz attempts.
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default_factory=lambda: datetime.now(UTC),
        nullable=False,
        init=False,
    )

    updated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        default_factory=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
        nullable=True,
        init=False,
    )
