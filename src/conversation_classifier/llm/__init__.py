"""
LLM client abstraction and implementations.

Components:
- BaseLLMClient: Abstract base class for chat API clients
- OpenAIChatClient: OpenAI-compatible chat completions
- OllamaClient: Ollama chat API
- build_llm_client: Provider selection from settings
- PromptBuilder: Builds the classification messages
- StructuredCompletionClient: Generate + validate (the retry loop's collaborator)
- text_utils: Conversation normalization and truncation
- exceptions: LLM-specific exceptions
"""

from conversation_classifier.llm.base_client import BaseLLMClient
from conversation_classifier.llm.exceptions import (
    LLMAuthenticationError,
    LLMClientError,
    LLMConnectionError,
    LLMGenerationError,
    LLMModelNotAvailableError,
    LLMRateLimitError,
    LLMSchemaViolationError,
    LLMTimeoutError,
)
from conversation_classifier.llm.factory import build_llm_client, resolve_model_name
from conversation_classifier.llm.ollama_client import OllamaClient
from conversation_classifier.llm.openai_client import OpenAIChatClient
from conversation_classifier.llm.prompt_builder import PromptBuilder
from conversation_classifier.llm.structured import (
    CompletionCollaborator,
    StructuredCompletionClient,
)

__all__ = [
    "BaseLLMClient",
    "OpenAIChatClient",
    "OllamaClient",
    "build_llm_client",
    "resolve_model_name",
    "PromptBuilder",
    "CompletionCollaborator",
    "StructuredCompletionClient",
    "LLMClientError",
    "LLMConnectionError",
    "LLMGenerationError",
    "LLMSchemaViolationError",
    "LLMRateLimitError",
    "LLMAuthenticationError",
    "LLMTimeoutError",
    "LLMModelNotAvailableError",
]
