"""Build the configured LLM client from settings."""

from typing import Optional

import httpx

from conversation_classifier.config import Settings
from conversation_classifier.llm.base_client import BaseLLMClient
from conversation_classifier.llm.ollama_client import OllamaClient
from conversation_classifier.llm.openai_client import OpenAIChatClient
from conversation_classifier.models.enums import LLMProvider


def resolve_model_name(settings: Settings) -> str:
    """Model name for the configured provider."""
    if LLMProvider(settings.LLM_PROVIDER.lower()) is LLMProvider.OLLAMA:
        return settings.OLLAMA_MODEL
    return settings.OPENAI_MODEL


def build_llm_client(
    settings: Settings,
    transport: Optional[httpx.BaseTransport] = None,
) -> BaseLLMClient:
    """
    Instantiate the client for settings.LLM_PROVIDER.
    
    Raises:
        ValueError: Unknown provider
        LLMAuthenticationError: OpenAI provider without an API key
    """
    provider = LLMProvider(settings.LLM_PROVIDER.lower())
    if provider is LLMProvider.OLLAMA:
        return OllamaClient(
            base_url=settings.OLLAMA_BASE_URL,
            timeout=settings.LLM_TIMEOUT,
            max_retries=settings.LLM_CONNECTION_RETRIES,
            transport=transport,
        )
    return OpenAIChatClient(
        api_key=settings.OPENAI_API_KEY,
        base_url=settings.OPENAI_BASE_URL,
        timeout=settings.LLM_TIMEOUT,
        max_retries=settings.LLM_CONNECTION_RETRIES,
        transport=transport,
    )
