from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase, MappedAsDataclass

from ..config.settings import settings

engine = create_async_engine(
    settings.DATABASE_URL,
    echo=False,
    future=True,
    pool_size=settings.POSTGRES_POOL_SIZE,
    max_overflow=settings.POSTGRES_MAX_OVERFLOW,
)

local_session = async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


class Base(DeclarativeBase, MappedAsDataclass):
    """Declarative base for every table in the application.

    Models are mapped as dataclasses, so columns that the database or a mixin
    fills in (ids, timestamps) are declared with ``init=False`` and every other
    column becomes a constructor argument.

    Example:
        ```python
        class Notebook(Base, UUIDMixin, TimestampMixin):
            __tablename__ = "notebooks"

            user_id: Mapped[str] = mapped_column(String(255), index=True)
            title: Mapped[str] = mapped_column(String(255))

        notebook = Notebook(user_id="user-1", title="Biology")
        ```
    """

    pass


async def async_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency yielding one database session per request.

    The session is closed when the request finishes; callers commit
    explicitly.

    Example:
        ```python
        @router.get("/notebooks")
        async def list_notebooks(db: AsyncSession = Depends(async_session)):
            ...
        ```
    """
    async_get_db = local_session
    async with async_get_db() as db:
        yield db


async def create_tables() -> None:
    """Create the pgvector extension and all tables if they don't exist.

    Idempotent. Chunk embeddings are stored in a ``vector`` column, so the
    extension must exist before ``create_all`` runs.
    """
    async with engine.begin() as conn:
        await conn.execute(text("CREATE EXTENSION IF NOT EXISTS vector"))
        await conn.run_sync(Base.metadata.create_all)
