"""Shared test fixtures and configuration for all tests.

This conftest.py provides common fixtures used across unit and integration tests.
"""

import json
from pathlib import Path
from typing import Any, Dict

import pytest

from conversation_classifier.config import Settings
from conversation_classifier.defaults import DEFAULT_TAXONOMY
from conversation_classifier.logging_config import configure_logging
from conversation_classifier.models.llm_models import LLMGenerationResponse
from conversation_classifier.models.result import ClassificationResult, build_classification_model
from conversation_classifier.models.taxonomy import CategoryTaxonomy

ARTICLE_CONVERSATION = (
    "I have this article that needs to be categorized. Could you help me figure out "
    "which of the predefined categories it belongs to?"
)


@pytest.fixture(scope="session", autouse=True)
def _structured_logging():
    """Route structlog through stdlib logging so nothing is printed to stdout."""
    configure_logging("DEBUG", "development")


@pytest.fixture
def test_settings() -> Settings:
    """Test settings with safe defaults for local testing."""
    return Settings(
        _env_file=None,
        LOG_LEVEL="DEBUG",
        ENVIRONMENT="development",
        LLM_PROVIDER="openai",
        OPENAI_API_KEY="sk-test",
        OPENAI_BASE_URL="https://api.openai.test/v1",
        OPENAI_MODEL="gpt-4o-mini",
        OLLAMA_BASE_URL="http://localhost:11434",
        OLLAMA_MODEL="qwen2.5:7b",
        LLM_TIMEOUT=5,
        LLM_CONNECTION_RETRIES=1,
        MAX_ATTEMPTS=3,
        RETRY_BACKOFF_BASE=0.0,
        TAXONOMY_PATH=None,
        PROMPT_TEMPLATES_DIR=None,
    )


@pytest.fixture
def fixtures_dir() -> Path:
    """Path to test fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def taxonomy() -> CategoryTaxonomy:
    """The built-in five-category taxonomy."""
    return DEFAULT_TAXONOMY


@pytest.fixture
def result_model(taxonomy: CategoryTaxonomy) -> type[ClassificationResult]:
    """Concrete classification model for the built-in taxonomy."""
    return build_classification_model(taxonomy)


@pytest.fixture
def article_conversation() -> str:
    return ARTICLE_CONVERSATION


@pytest.fixture
def make_match_payload():
    """Factory fixture for a payload matching an existing category.

    Usage:
        def test_something(make_match_payload):
            payload = make_match_payload(topic="reasoning")
    """
    def _create(
        topic: str = "language_understanding",
        tags: list[str] | None = None,
        title: str = "Categorizing an article into predefined categories",
        chain_of_thought: str = "The user asks to categorize an article, which is text classification.",
    ) -> Dict[str, Any]:
        return {
            "chain_of_thought": chain_of_thought,
            "error": False,
            "classification": {
                "topic": topic,
                "tags": ["text_classification"] if tags is None else tags,
                "title": title,
            },
        }

    return _create


@pytest.fixture
def make_new_category_payload():
    """Factory fixture for a new-category (error=true) payload."""
    def _create(
        topic: str = "cooking_advice",
        tags: list[str] | None = None,
        title: str = "Help planning a weeknight dinner",
    ) -> Dict[str, Any]:
        return {
            "chain_of_thought": "The user wants recipe help, which no category covers.",
            "error": True,
            "classification": {
                "message": "Cooking assistance is not one of the existing capabilities.",
                "topic": topic,
                "tags": ["recipes", "meal_planning"] if tags is None else tags,
                "title": title,
            },
        }

    return _create


@pytest.fixture
def make_llm_response():
    """Factory fixture for LLMGenerationResponse with a JSON body."""
    def _create(content: Any, model_version: str = "gpt-4o-mini") -> LLMGenerationResponse:
        if not isinstance(content, str):
            content = json.dumps(content)
        return LLMGenerationResponse(
            content=content,
            model_version=model_version,
            finish_reason="stop",
            usage_tokens=750,
            prompt_tokens=500,
            completion_tokens=250,
            latency_ms=1500,
        )

    return _create


@pytest.fixture
def chat_completion_body():
    """Factory fixture for an OpenAI chat completions response body."""
    def _create(content: Any, model: str = "gpt-4o-mini") -> Dict[str, Any]:
        if not isinstance(content, str):
            content = json.dumps(content)
        return {
            "id": "chatcmpl-test",
            "object": "chat.completion",
            "created": 1700000000,
            "model": model,
            "choices": [
                {
                    "index": 0,
                    "message": {"role": "assistant", "content": content},
                    "finish_reason": "stop",
                }
            ],
            "usage": {"prompt_tokens": 500, "completion_tokens": 250, "total_tokens": 750},
        }

    return _create


class ScriptedCollaborator:
    """Collaborator that replays a fixed list of outcomes, one per call.

    Exceptions are raised, dicts are validated into the requested model,
    anything else is returned as-is. The last outcome repeats once the
    script runs out.
    """

    def __init__(self, outcomes: list[Any]):
        self.outcomes = list(outcomes)
        self.calls: list[tuple[list, type]] = []

    def complete(self, messages, result_model):
        self.calls.append((messages, result_model))
        outcome = self.outcomes[min(len(self.calls), len(self.outcomes)) - 1]
        if isinstance(outcome, BaseException):
            raise outcome
        if isinstance(outcome, dict):
            return result_model.model_validate(outcome)
        return outcome


@pytest.fixture
def scripted_collaborator():
    """Factory fixture for ScriptedCollaborator.

    Usage:
        collaborator = scripted_collaborator([RuntimeError("boom"), payload])
    """
    return ScriptedCollaborator
