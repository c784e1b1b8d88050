"""
Pydantic data models for the Conversation Classifier.

Includes:
- Taxonomy models (Category, CategoryTaxonomy)
- Output models (ClassificationResult, CategoryMatch, NewCategory)
- Enums (MessageRole, LLMProvider)
- LLM models (ChatMessage, LLMGenerationRequest, LLMGenerationResponse)
"""

from conversation_classifier.models.enums import LLMProvider, MessageRole
from conversation_classifier.models.llm_models import (
    ChatMessage,
    LLMGenerationRequest,
    LLMGenerationResponse,
)
from conversation_classifier.models.result import (
    NEW_CATEGORY_TAG,
    CategoryMatch,
    ClassificationResult,
    NewCategory,
    build_classification_model,
)
from conversation_classifier.models.taxonomy import (
    Category,
    CategoryTaxonomy,
    TaxonomyError,
    load_taxonomy,
)

__all__ = [
    # Enums
    "LLMProvider",
    "MessageRole",
    # Taxonomy
    "Category",
    "CategoryTaxonomy",
    "TaxonomyError",
    "load_taxonomy",
    # Output models
    "NEW_CATEGORY_TAG",
    "CategoryMatch",
    "ClassificationResult",
    "NewCategory",
    "build_classification_model",
    # LLM models
    "ChatMessage",
    "LLMGenerationRequest",
    "LLMGenerationResponse",
]
