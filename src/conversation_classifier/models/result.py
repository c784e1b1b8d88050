"""
Output data models for the Conversation Classifier.

The LLM answers with a ClassificationResult whose `classification` field is a
closed tagged union: one CategoryMatch variant per taxonomy topic (with the
topic fixed to that identifier) plus the NewCategory variant used when the
conversation fits no existing category.

Because the variants depend on the taxonomy, the concrete model is built at
startup with `build_classification_model(taxonomy)`.
"""

import re
from typing import Annotated, Any, Literal, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Discriminator,
    Field,
    Tag,
    create_model,
    model_validator,
)

from conversation_classifier.models.taxonomy import CategoryTaxonomy

NEW_CATEGORY_TAG = "new_category"


class NewCategory(BaseModel):
    """
    Proposal for a category that does not exist yet.

    Used when the conversation cannot be classified into the taxonomy.
    """

    model_config = ConfigDict(extra="forbid")

    message: str = Field(..., description="Why the conversation fits no existing category")
    topic: str = Field(..., description="Proposed topic for the new category in snake_case")
    tags: list[str] = Field(default_factory=list, description="Proposed tags in snake_case")
    title: str = Field(..., description="Short title summarizing the conversation (under 10 words)")


class CategoryMatch(BaseModel):
    """
    Match against a predefined category.

    Concrete variants narrow `topic` to a single taxonomy identifier.
    """

    model_config = ConfigDict(extra="forbid")

    topic: str = Field(..., description="Topic of the matching category")
    tags: list[str] = Field(
        default_factory=list,
        description="Relevant tags from the matching category, new tags allowed"
    )
    title: str = Field(..., description="Short title summarizing the conversation (under 10 words)")


class ClassificationResult(BaseModel):
    """
    Complete structured output from the LLM.

    Invariant: `error` is true exactly when the classification is a
    NewCategory proposal.
    """

    model_config = ConfigDict(extra="forbid")

    chain_of_thought: str = Field(
        ...,
        description="Step-by-step reasoning that leads to the classification"
    )
    error: bool = Field(
        default=False,
        description="True when the conversation fits none of the existing categories"
    )
    classification: Union[CategoryMatch, NewCategory] = Field(
        ...,
        description="The matching category, or a proposal for a new one"
    )

    @model_validator(mode="after")
    def error_flag_matches_variant(self) -> "ClassificationResult":
        is_new = isinstance(self.classification, NewCategory)
        if self.error and not is_new:
            raise ValueError(
                "error is true but the classification matches an existing category"
            )
        if not self.error and is_new:
            raise ValueError(
                "error is false but the classification proposes a new category"
            )
        return self

    @property
    def topic(self) -> str:
        return self.classification.topic

    @property
    def is_new_category(self) -> bool:
        return isinstance(self.classification, NewCategory)


def _variant_name(topic: str) -> str:
    parts = [part for part in re.split(r"[^0-9a-zA-Z]+", topic) if part]
    return "".join(part[:1].upper() + part[1:] for part in parts) or "Category"


def _variant_selector(topics: frozenset[str]):
    """Discriminator: pick the variant tag for a raw payload or model instance."""

    def select(value: Any) -> str:
        if isinstance(value, NewCategory):
            return NEW_CATEGORY_TAG
        if isinstance(value, dict):
            if "message" in value:
                return NEW_CATEGORY_TAG
            topic = value.get("topic")
        else:
            topic = getattr(value, "topic", None)
        if topic in topics:
            return topic
        return NEW_CATEGORY_TAG

    return select


def build_classification_model(taxonomy: CategoryTaxonomy) -> type[ClassificationResult]:
    """
    Build the concrete result model for a taxonomy.

    Each category becomes a CategoryMatch subclass whose `topic` is a
    Literal of the category identifier. The union is discriminated on the
    topic: known topics select their variant, anything else (or a payload
    carrying a `message`) selects NewCategory.

    Args:
        taxonomy: Categories the LLM may choose from

    Returns:
        ClassificationResult subclass with a closed `classification` union
    """
    variants: list[Any] = []
    for category in taxonomy.categories:
        variant = create_model(
            _variant_name(category.topic),
            __base__=CategoryMatch,
            __doc__=category.description or f"Match for the {category.topic} category.",
            topic=(
                Literal[category.topic],  # type: ignore[valid-type]
                Field(..., description="Topic of the matching category"),
            ),
        )
        variants.append(Annotated[variant, Tag(category.topic)])
    variants.append(Annotated[NewCategory, Tag(NEW_CATEGORY_TAG)])

    classification_type = Annotated[
        Union[tuple(variants)],  # type: ignore[valid-type]
        Discriminator(_variant_selector(frozenset(taxonomy.topics))),
    ]

    return create_model(
        "ConversationClassification",
        __base__=ClassificationResult,
        __doc__="Classification of a conversation into the category taxonomy.",
        classification=(
            classification_type,
            Field(..., description="The matching category, or a proposal for a new one"),
        ),
    )
