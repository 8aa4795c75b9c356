"""Text generation through the Gemini API (google-genai SDK)."""

from functools import lru_cache
from typing import Optional

from google import genai

from ..config.settings import get_settings
from ..logging import get_logger

logger = get_logger(__name__)


@lru_cache()
def get_genai_client() -> genai.Client:
    """Get the process-wide Gemini client.

    Created on first use so the application can start without an API key;
    calls fail at request time instead.
    """
    settings = get_settings()
    return genai.Client(api_key=settings.GOOGLE_API_KEY)


class GenerationService:
    """Single-shot prompt completion.

    Each call sends one prompt and returns the response text. There is no
    retry and no streaming; errors raised by the SDK propagate to the caller.
    """

    def __init__(
        self,
        client: Optional[genai.Client] = None,
        chat_model: Optional[str] = None,
        grading_model: Optional[str] = None,
    ):
        settings = get_settings()
        self._client = client
        self.chat_model = chat_model or settings.GEMINI_CHAT_MODEL
        self.grading_model = grading_model or settings.GEMINI_GRADING_MODEL

    @property
    def client(self) -> genai.Client:
        if self._client is None:
            self._client = get_genai_client()
        return self._client

    async def generate(self, prompt: str, model: Optional[str] = None) -> str:
        """Generate a completion for ``prompt``.

        Args:
            prompt: Full prompt text.
            model: Model override, defaults to the chat model.

        Returns:
            The response text, or an empty string when the model returned none.
        """
        model_name = model or self.chat_model
        response = await self.client.aio.models.generate_content(model=model_name, contents=prompt)
        text = response.text or ""
        logger.debug("Generated completion", extra={"model": model_name, "response_chars": len(text)})
        return text


@lru_cache()
def get_generation_service() -> GenerationService:
    """Get singleton generation service instance."""
    return GenerationService()
