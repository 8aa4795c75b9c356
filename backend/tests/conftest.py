"""Test configuration and fixtures for the study notebook backend."""

import os

os.environ.setdefault("AUTH_JWT_SECRET", "test-signing-secret-for-the-study-notebook-suite")

import time
import uuid
from typing import Any, AsyncGenerator, Callable, Dict, Sequence, Tuple
from unittest.mock import MagicMock

import jwt
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

# mypy: disable-error-code="import-untyped"
from testcontainers.core.docker_client import DockerClient
from testcontainers.postgres import PostgresContainer

from src.infrastructure.config.settings import get_settings
from src.infrastructure.database.session import Base, async_session
from src.infrastructure.logging.config import configure_testing_logging
from src.infrastructure.storage import ObjectStorage
from src.interfaces.main import app
from src.modules.chunk.models import DocumentChunk
from src.modules.document.models import Document, DocumentStatus
from src.modules.notebook.models import Notebook

EMBEDDING_DIMENSION = get_settings().EMBEDDING_DIMENSION

configure_testing_logging()


def is_docker_running() -> bool:
    """Check if Docker daemon is running."""
    try:
        DockerClient()
        return True
    except Exception:
        return False


def make_token(user_id: str = "user-1", expires_in: int = 3600, **claims: Any) -> str:
    """Sign a bearer token the way the auth provider does."""
    settings = get_settings()
    payload: Dict[str, Any] = {"sub": user_id, "exp": int(time.time()) + expires_in, **claims}
    if settings.AUTH_JWT_AUDIENCE:
        payload.setdefault("aud", settings.AUTH_JWT_AUDIENCE)
    return jwt.encode(payload, settings.AUTH_JWT_SECRET, algorithm=settings.AUTH_JWT_ALGORITHM)


@pytest.fixture
def user_id() -> str:
    return "user-1"


@pytest.fixture
def auth_headers(user_id: str) -> Dict[str, str]:
    return {"Authorization": f"Bearer {make_token(user_id)}"}


@pytest.fixture
def storage(tmp_path) -> ObjectStorage:
    return ObjectStorage(str(tmp_path / "storage"))


@pytest.fixture(scope="session")
def pg_container():
    """Create a PostgreSQL container with the pgvector extension available."""
    if not is_docker_running():
        pytest.skip("Docker is required, but not running")

    with PostgresContainer("pgvector/pgvector:pg16") as pg:
        yield pg


@pytest_asyncio.fixture(scope="function")
async def test_db_url(pg_container):
    """Create a proper asyncpg URL for PostgreSQL."""
    host = pg_container.get_container_host_ip()
    port = pg_container.get_exposed_port(5432)
    return f"postgresql+asyncpg://{pg_container.username}:{pg_container.password}@{host}:{port}/{pg_container.dbname}"


@pytest_asyncio.fixture(scope="function")
async def test_db_engine(test_db_url):
    """Create a SQLAlchemy engine with fresh tables for one test."""
    engine = create_async_engine(test_db_url, echo=False)
    async with engine.begin() as conn:
        await conn.execute(text("CREATE EXTENSION IF NOT EXISTS vector"))
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(test_db_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    session_factory = async_sessionmaker(test_db_engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture(scope="function")
async def client(test_db_engine):
    """Test client whose requests each get their own session on the test database."""
    app.dependency_overrides = {}

    session_factory = async_sessionmaker(test_db_engine, class_=AsyncSession, expire_on_commit=False)

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[async_session] = override_get_db

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides = {}


@pytest_asyncio.fixture(scope="function")
async def api_client():
    """Test client without a database; tests override the services they call."""
    app.dependency_overrides = {}

    async def override_get_db():
        yield MagicMock(spec=AsyncSession)

    app.dependency_overrides[async_session] = override_get_db

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides = {}


@pytest_asyncio.fixture
async def test_notebook(db_session: AsyncSession, user_id: str) -> Dict[str, Any]:
    """Create a notebook owned by ``user_id``."""
    notebook = Notebook(user_id=user_id, title="Biology", description="Cell biology notes")
    db_session.add(notebook)
    await db_session.commit()
    return {"id": notebook.id, "user_id": notebook.user_id, "title": notebook.title}


@pytest_asyncio.fixture
async def other_notebook(db_session: AsyncSession) -> Dict[str, Any]:
    """Create a notebook owned by another user."""
    notebook = Notebook(user_id="user-2", title="Someone else's notebook")
    db_session.add(notebook)
    await db_session.commit()
    return {"id": notebook.id, "user_id": notebook.user_id, "title": notebook.title}


async def add_document(
    db_session: AsyncSession,
    notebook_id: uuid.UUID,
    user_id: str,
    filename: str,
    chunks: Sequence[Tuple[int, int, str, list[float]]] = (),
) -> Document:
    """Insert a ready document with ``(page_number, chunk_index, content, embedding)`` chunks."""
    document = Document(
        notebook_id=notebook_id,
        user_id=user_id,
        filename=filename,
        page_count=max((page for page, _, _, _ in chunks), default=0),
        status=DocumentStatus.READY.value,
    )
    db_session.add(document)
    await db_session.flush()

    for page_number, chunk_index, content, embedding in chunks:
        db_session.add(
            DocumentChunk(
                document_id=document.id,
                page_number=page_number,
                chunk_index=chunk_index,
                content=content,
                embedding=embedding,
            )
        )
    await db_session.commit()
    return document


@pytest.fixture
def token_factory() -> Callable[..., str]:
    return make_token


@pytest.fixture
def document_factory(db_session: AsyncSession):
    """Insert documents with pre-embedded chunks into the test database."""

    async def factory(notebook_id, user_id, filename, chunks=()):
        return await add_document(db_session, notebook_id, user_id, filename, chunks)

    return factory
