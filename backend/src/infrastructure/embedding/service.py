"""Embedding service backed by the Gemini embedding API or a local sentence-transformers model."""

import asyncio
from enum import Enum
from functools import lru_cache
from typing import List, Optional, cast

from google import genai
from sentence_transformers import SentenceTransformer

from ..config.settings import get_settings
from ..generation.service import get_genai_client


class EmbeddingProvider(str, Enum):
    """Where embeddings are computed."""

    GEMINI = "gemini"
    LOCAL = "local"


class EmbeddingService:
    """Service for generating vector embeddings from text.

    The default provider calls the hosted ``text-embedding-004`` model, one
    request per text. The ``local`` provider loads a sentence-transformers
    model lazily and encodes in a worker thread. The default models produce
    768-dimensional vectors, matching the ``document_chunks`` column.
    """

    def __init__(
        self,
        provider: EmbeddingProvider = EmbeddingProvider.GEMINI,
        model_name: str = "text-embedding-004",
        client: Optional[genai.Client] = None,
    ):
        """Initialize embedding service.

        Args:
            provider: Embedding backend
            model_name: Gemini model name or HuggingFace sentence-transformers model name
            client: Optional Gemini client, defaults to the shared one
        """
        self.provider = EmbeddingProvider(provider)
        self.model_name = model_name
        self._client = client
        self._model: Optional[SentenceTransformer] = None
        self._model_lock = asyncio.Lock()

    @property
    def client(self) -> genai.Client:
        if self._client is None:
            self._client = get_genai_client()
        return self._client

    async def _get_model(self) -> SentenceTransformer:
        """Get the local model, loading it once."""
        if self._model is None:
            async with self._model_lock:
                if self._model is None:
                    self._model = cast(SentenceTransformer, await asyncio.to_thread(SentenceTransformer, self.model_name))
        if self._model is None:
            raise RuntimeError("Model failed to load")
        return self._model

    async def embed_text(self, text: str) -> List[float]:
        """Generate embedding for single text.

        Raises:
            ValueError: If the text is blank or the provider returned no vector.
        """
        if not text.strip():
            raise ValueError("Text cannot be empty")

        if self.provider == EmbeddingProvider.LOCAL:
            model = await self._get_model()
            embedding = await asyncio.to_thread(
                model.encode,
                text,
                convert_to_tensor=False,
                normalize_embeddings=True,
            )
            return cast(List[float], embedding.tolist())

        response = await self.client.aio.models.embed_content(model=self.model_name, contents=text)
        if not response.embeddings or response.embeddings[0].values is None:
            raise ValueError("Embedding response contained no vector")
        return list(response.embeddings[0].values)


@lru_cache()
def get_embedding_service() -> EmbeddingService:
    """Get singleton embedding service instance configured from settings."""
    settings = get_settings()
    provider = EmbeddingProvider(settings.EMBEDDING_PROVIDER)
    model_name = settings.EMBEDDING_MODEL if provider == EmbeddingProvider.GEMINI else settings.LOCAL_EMBEDDING_MODEL
    return EmbeddingService(provider=provider, model_name=model_name)
