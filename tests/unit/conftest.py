"""Unit test fixtures (mocks and stubs).

Provides mock objects for testing without external dependencies.
"""

from unittest.mock import Mock

import pytest

from conversation_classifier.llm.base_client import BaseLLMClient
from conversation_classifier.llm.prompt_builder import PromptBuilder


@pytest.fixture
def mock_llm_client(make_llm_response, make_match_payload):
    """Mock LLM client returning a valid classification by default."""
    mock = Mock(spec=BaseLLMClient)
    mock.generate = Mock(return_value=make_llm_response(make_match_payload()))
    mock.health_check = Mock(return_value=True)
    return mock


@pytest.fixture
def prompt_builder(taxonomy) -> PromptBuilder:
    """PromptBuilder over the built-in taxonomy and packaged templates."""
    return PromptBuilder(taxonomy)
