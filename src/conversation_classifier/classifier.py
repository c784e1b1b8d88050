"""
Conversation classifier: wires taxonomy, prompt builder, collaborator and
retry loop together.

Usage:
    with ConversationClassifier.from_settings(get_settings()) as classifier:
        result = classifier.classify("I have this article that needs ...")
"""

from typing import Optional

import httpx
import structlog

from conversation_classifier.config import Settings
from conversation_classifier.llm.base_client import BaseLLMClient
from conversation_classifier.llm.factory import build_llm_client, resolve_model_name
from conversation_classifier.llm.prompt_builder import PromptBuilder
from conversation_classifier.llm.structured import (
    CompletionCollaborator,
    StructuredCompletionClient,
)
from conversation_classifier.models.result import (
    ClassificationResult,
    build_classification_model,
)
from conversation_classifier.models.taxonomy import CategoryTaxonomy, load_taxonomy
from conversation_classifier.retry.engine import RetryEngine
from conversation_classifier.retry.metadata import RetryMetadata
from conversation_classifier.retry.policy import RetryPolicy

logger = structlog.get_logger(__name__)


class ConversationClassifier:
    """
    Classify conversations into a fixed category taxonomy.
    
    The collaborator is injected, so any object with a matching
    `complete(messages, result_model)` method can stand in for the chat API.
    """
    
    def __init__(
        self,
        taxonomy: CategoryTaxonomy,
        collaborator: CompletionCollaborator,
        policy: Optional[RetryPolicy] = None,
        prompt_builder: Optional[PromptBuilder] = None,
        llm_client: Optional[BaseLLMClient] = None,
    ):
        """
        Args:
            taxonomy: Categories to classify into
            collaborator: Structured completion capability
            policy: Retry policy (default: 3 attempts, no backoff)
            prompt_builder: Custom prompt builder (default: packaged templates)
            llm_client: Client owned by this classifier, closed by close()
        """
        self.taxonomy = taxonomy
        self.result_model = build_classification_model(taxonomy)
        self.prompt_builder = prompt_builder or PromptBuilder(taxonomy)
        self.engine = RetryEngine(collaborator, self.prompt_builder, self.result_model, policy)
        self._llm_client = llm_client
    
    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        taxonomy: Optional[CategoryTaxonomy] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> "ConversationClassifier":
        """
        Build a classifier backed by the configured chat API.
        
        Args:
            settings: Application settings
            taxonomy: Override the taxonomy from settings.TAXONOMY_PATH / default
            transport: Optional httpx transport for the LLM client
        """
        taxonomy = taxonomy or load_taxonomy(settings.TAXONOMY_PATH)
        policy = RetryPolicy(
            max_attempts=settings.MAX_ATTEMPTS,
            backoff_base=settings.RETRY_BACKOFF_BASE,
        )
        llm_client = build_llm_client(settings, transport=transport)
        collaborator = StructuredCompletionClient(
            llm_client=llm_client,
            taxonomy=taxonomy,
            model=resolve_model_name(settings),
            temperature=settings.LLM_TEMPERATURE,
            max_tokens=settings.LLM_MAX_TOKENS,
        )
        prompt_builder = PromptBuilder(
            taxonomy,
            templates_dir=settings.PROMPT_TEMPLATES_DIR,
            conversation_char_limit=settings.CONVERSATION_CHAR_LIMIT,
        )
        
        logger.info(
            "Classifier configured",
            provider=settings.LLM_PROVIDER,
            model=collaborator.model,
            categories=list(taxonomy.topics),
            max_attempts=policy.max_attempts,
        )
        return cls(
            taxonomy,
            collaborator,
            policy=policy,
            prompt_builder=prompt_builder,
            llm_client=llm_client,
        )
    
    def classify(self, conversation: str) -> ClassificationResult:
        """Classify a conversation and return only the result."""
        result, _ = self.engine.execute_with_retry(conversation)
        return result
    
    def classify_with_metadata(
        self, conversation: str
    ) -> tuple[ClassificationResult, RetryMetadata]:
        """Classify a conversation and return the result plus retry metadata."""
        return self.engine.execute_with_retry(conversation)
    
    def close(self) -> None:
        if self._llm_client is not None:
            self._llm_client.close()
    
    def __enter__(self):
        return self
    
    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
