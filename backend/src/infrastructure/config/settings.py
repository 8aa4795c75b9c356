import logging
import os
from enum import Enum
from typing import List, Optional

from pydantic_settings import BaseSettings
from starlette.config import Config

logger = logging.getLogger(__name__)

current_file_dir = os.path.dirname(os.path.realpath(__file__))
project_root = os.path.abspath(os.path.join(current_file_dir, "..", "..", "..", ".."))

env_paths = [
    "/code/.env",
    os.path.join(project_root, ".env"),
    "/.env",
]

env_path = next((path for path in env_paths if os.path.isfile(path)), env_paths[0])
logger.info(f"Using environment file at: {env_path}")

config = Config(env_path)


class EnvironmentOption(str, Enum):
    """Environment options for the application."""

    PRODUCTION = "production"
    STAGING = "staging"
    DEVELOPMENT = "development"
    LOCAL = "local"


class EnvironmentSettings(BaseSettings):
    """Environment-related settings."""

    ENVIRONMENT: EnvironmentOption = config("ENVIRONMENT", default=EnvironmentOption.DEVELOPMENT, cast=EnvironmentOption)


class DatabaseSettings(BaseSettings):
    """Database-related settings."""

    POSTGRES_USER: str = config("POSTGRES_USER", default="postgres")
    POSTGRES_PASSWORD: str = config("POSTGRES_PASSWORD", default="postgres")
    POSTGRES_SERVER: str = config("POSTGRES_SERVER", default="localhost")
    POSTGRES_PORT: int = config("POSTGRES_PORT", default=5432, cast=int)
    POSTGRES_DB: str = config("POSTGRES_DB", default="postgres")
    POSTGRES_ASYNC_PREFIX: str = config("POSTGRES_ASYNC_PREFIX", default="postgresql+asyncpg://")
    CREATE_TABLES_ON_STARTUP: bool = config("CREATE_TABLES_ON_STARTUP", default=True, cast=bool)

    POSTGRES_POOL_SIZE: int = config("POSTGRES_POOL_SIZE", default=20, cast=int)
    POSTGRES_MAX_OVERFLOW: int = config("POSTGRES_MAX_OVERFLOW", default=0, cast=int)

    @property
    def DATABASE_URL(self) -> str:
        """Get the full database URL."""
        return (
            f"{self.POSTGRES_ASYNC_PREFIX}{self.POSTGRES_USER}:"
            f"{self.POSTGRES_PASSWORD}@{self.POSTGRES_SERVER}:"
            f"{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
        )


class CORSSettings(BaseSettings):
    """CORS-related settings."""

    CORS_ENABLED: bool = config("CORS_ENABLED", default=True, cast=bool)
    CORS_ORIGINS: str = config("CORS_ORIGINS", default="*")
    CORS_ALLOW_CREDENTIALS: bool = config("CORS_ALLOW_CREDENTIALS", default=True, cast=bool)

    @property
    def CORS_ORIGINS_LIST(self) -> List[str]:
        """Get CORS origins as a list."""
        if not self.CORS_ORIGINS:
            return ["*"]
        return [x.strip() for x in self.CORS_ORIGINS.split(",") if x.strip()]

    CORS_ALLOW_METHODS: str = config("CORS_ALLOW_METHODS", default="*")
    CORS_ALLOW_HEADERS: str = config("CORS_ALLOW_HEADERS", default="*")


class CompressionSettings(BaseSettings):
    """Compression-related settings."""

    GZIP_ENABLED: bool = config("GZIP_ENABLED", default=True, cast=bool)
    GZIP_MINIMUM_SIZE: int = config("GZIP_MINIMUM_SIZE", default=1000, cast=int)


class APIDocSettings(BaseSettings):
    """API documentation settings."""

    ENABLE_DOCS_IN_PRODUCTION: bool = config("ENABLE_DOCS_IN_PRODUCTION", default=False, cast=bool)
    DOCS_URL: str = config("DOCS_URL", default="/docs")
    REDOC_URL: str = config("REDOC_URL", default="/redoc")
    OPENAPI_URL: str = config("OPENAPI_URL", default="/openapi.json")


class AppSettings(BaseSettings):
    """Application-related settings."""

    APP_NAME: str = "Study Notebook API"
    APP_DESCRIPTION: str = "Document-centric study assistant with retrieval-augmented chat and quizzes"
    DEBUG: bool = config("DEBUG", default=False, cast=bool)
    VERSION: str = "0.1.0"


class LoggingSettings(BaseSettings):
    """Centralized logging configuration settings."""

    LOG_LEVEL: str = config("LOG_LEVEL", default="INFO")
    LOG_FORMAT: str = config("LOG_FORMAT", default="structured")  # "simple", "detailed", "structured", "json"

    LOG_CONSOLE_ENABLED: bool = config("LOG_CONSOLE_ENABLED", default=True, cast=bool)
    LOG_FILE_ENABLED: bool = config("LOG_FILE_ENABLED", default=False, cast=bool)
    LOG_FILE_PATH: str = config("LOG_FILE_PATH", default="logs/study-notebook.log")
    LOG_FILE_MAX_SIZE: int = config("LOG_FILE_MAX_SIZE", default=10485760, cast=int)
    LOG_FILE_BACKUP_COUNT: int = config("LOG_FILE_BACKUP_COUNT", default=5, cast=int)

    LOG_CORRELATION_ID: bool = config("LOG_CORRELATION_ID", default=True, cast=bool)
    LOG_DEVELOPMENT_VERBOSE: bool = config("LOG_DEVELOPMENT_VERBOSE", default=True, cast=bool)
    LOG_PRODUCTION_OPTIMIZE: bool = config("LOG_PRODUCTION_OPTIMIZE", default=True, cast=bool)

    @property
    def LOG_LEVEL_INT(self) -> int:
        """Convert string log level to integer."""
        level_map = {
            "DEBUG": logging.DEBUG,
            "INFO": logging.INFO,
            "WARNING": logging.WARNING,
            "ERROR": logging.ERROR,
            "CRITICAL": logging.CRITICAL,
        }
        return level_map.get(self.LOG_LEVEL.upper(), logging.INFO)


class AuthSettings(BaseSettings):
    """Bearer token verification settings.

    Tokens are issued by the hosted auth provider and signed with a shared
    secret; only the ``sub`` claim is used. There is no default secret: while
    it is unset every token is rejected.
    """

    AUTH_JWT_SECRET: str = config("AUTH_JWT_SECRET", default="")
    AUTH_JWT_ALGORITHM: str = config("AUTH_JWT_ALGORITHM", default="HS256")
    AUTH_JWT_AUDIENCE: Optional[str] = config("AUTH_JWT_AUDIENCE", default=None)


class GeminiSettings(BaseSettings):
    """Generative model settings."""

    GOOGLE_API_KEY: str = config("GOOGLE_API_KEY", default="")
    GEMINI_CHAT_MODEL: str = config("GEMINI_CHAT_MODEL", default="gemini-2.0-flash")
    GEMINI_GRADING_MODEL: str = config("GEMINI_GRADING_MODEL", default="gemini-1.5-flash")


class EmbeddingSettings(BaseSettings):
    """Embedding provider settings."""

    EMBEDDING_PROVIDER: str = config("EMBEDDING_PROVIDER", default="gemini")  # "gemini" or "local"
    EMBEDDING_MODEL: str = config("EMBEDDING_MODEL", default="text-embedding-004")
    LOCAL_EMBEDDING_MODEL: str = config("LOCAL_EMBEDDING_MODEL", default="all-mpnet-base-v2")
    EMBEDDING_DIMENSION: int = config("EMBEDDING_DIMENSION", default=768, cast=int)


class IngestionSettings(BaseSettings):
    """Document parsing and chunking settings."""

    CHUNK_SIZE: int = config("CHUNK_SIZE", default=1500, cast=int)
    CHUNK_OVERLAP: int = config("CHUNK_OVERLAP", default=200, cast=int)
    MIN_CHUNK_LENGTH: int = config("MIN_CHUNK_LENGTH", default=50, cast=int)
    MAX_UPLOAD_SIZE: int = config("MAX_UPLOAD_SIZE", default=26214400, cast=int)


class RetrievalSettings(BaseSettings):
    """Similarity search settings."""

    RETRIEVAL_MATCH_COUNT: int = config("RETRIEVAL_MATCH_COUNT", default=5, cast=int)
    RETRIEVAL_TOP_K: int = config("RETRIEVAL_TOP_K", default=5, cast=int)


class StorageSettings(BaseSettings):
    """Object storage settings for raw PDF bytes."""

    STORAGE_ROOT: str = config("STORAGE_ROOT", default=os.path.join(project_root, "storage"))


class SeedSettings(BaseSettings):
    """First-login sample content settings."""

    SEED_FOLDER: str = config("SEED_FOLDER", default=os.path.join(project_root, "seed"))
    SEED_NOTEBOOK_TITLE: str = config("SEED_NOTEBOOK_TITLE", default="KEPH 107 - Welcome Collection")
    SEED_NOTEBOOK_DESCRIPTION: str = config(
        "SEED_NOTEBOOK_DESCRIPTION", default="Sample educational documents to get you started."
    )


class VideoSettings(BaseSettings):
    """Video recommendation settings."""

    VIDEO_RECOMMENDATION_COUNT: int = config("VIDEO_RECOMMENDATION_COUNT", default=5, cast=int)
    VIDEO_CONTEXT_CHARS: int = config("VIDEO_CONTEXT_CHARS", default=4000, cast=int)


class Settings(
    EnvironmentSettings,
    DatabaseSettings,
    CORSSettings,
    CompressionSettings,
    APIDocSettings,
    AppSettings,
    LoggingSettings,
    AuthSettings,
    GeminiSettings,
    EmbeddingSettings,
    IngestionSettings,
    RetrievalSettings,
    StorageSettings,
    SeedSettings,
    VideoSettings,
):
    """Main settings class that combines all setting categories."""

    pass


settings = Settings()


def get_settings() -> Settings:
    """Get application settings.

    Returns:
        The application settings.
    """
    return settings
