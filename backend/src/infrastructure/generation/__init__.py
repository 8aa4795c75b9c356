"""Hosted generative model access."""

from .service import GenerationService, get_genai_client, get_generation_service

__all__ = ["GenerationService", "get_genai_client", "get_generation_service"]
