"""
Category taxonomy models.

A taxonomy is an ordered, immutable set of predefined categories. It is
defined at startup (built-in default or a JSON file) and sent to the LLM as
the list of existing categories.
"""

import json
import re
from pathlib import Path
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

SNAKE_CASE_PATTERN = re.compile(r"^[a-z][a-z0-9]*(?:_[a-z0-9]+)*$")


class TaxonomyError(ValueError):
    """Raised when a taxonomy definition is missing, malformed or inconsistent."""


class Category(BaseModel):
    """A predefined category the LLM can match a conversation against."""
    
    model_config = ConfigDict(frozen=True, extra="forbid")
    
    topic: str = Field(..., min_length=1, description="Unique topic identifier (snake_case)")
    description: str = Field(default="", description="Human-readable description")
    examples: tuple[str, ...] = Field(default=(), description="Example user utterances")
    potential_tags: tuple[str, ...] = Field(default=(), description="Suggested tags")
    
    @field_validator("topic")
    @classmethod
    def topic_is_snake_case(cls, value: str) -> str:
        if not SNAKE_CASE_PATTERN.match(value):
            raise ValueError(f"topic must be snake_case, got {value!r}")
        return value


class CategoryTaxonomy(BaseModel):
    """
    Ordered, immutable collection of categories.
    
    Topics are unique; order is preserved as given and is the order the
    categories are presented to the model.
    """
    
    model_config = ConfigDict(frozen=True)
    
    categories: tuple[Category, ...] = Field(..., min_length=1)
    
    @field_validator("categories")
    @classmethod
    def topics_are_unique(cls, value: tuple[Category, ...]) -> tuple[Category, ...]:
        seen: set[str] = set()
        duplicates = []
        for category in value:
            if category.topic in seen:
                duplicates.append(category.topic)
            seen.add(category.topic)
        if duplicates:
            raise ValueError(f"duplicate topics in taxonomy: {sorted(set(duplicates))}")
        return value
    
    @property
    def topics(self) -> tuple[str, ...]:
        return tuple(category.topic for category in self.categories)
    
    def get(self, topic: str) -> Optional[Category]:
        for category in self.categories:
            if category.topic == topic:
                return category
        return None
    
    def __contains__(self, topic: object) -> bool:
        return topic in self.topics
    
    def __len__(self) -> int:
        return len(self.categories)
    
    def to_prompt_payload(self) -> dict[str, Any]:
        """Structure embedded in the prompt as the list of existing categories."""
        capabilities = []
        for category in self.categories:
            entry: dict[str, Any] = {"topic": category.topic}
            if category.description:
                entry["description"] = category.description
            entry["potential_tags"] = list(category.potential_tags)
            entry["examples"] = list(category.examples)
            capabilities.append(entry)
        return {"capabilities": capabilities}
    
    @classmethod
    def from_payload(cls, payload: Any) -> "CategoryTaxonomy":
        """
        Build a taxonomy from a decoded JSON payload.
        
        Accepts either {"capabilities": [...]} or a bare list of categories.
        
        Raises:
            TaxonomyError: If the payload does not describe a valid taxonomy
        """
        if isinstance(payload, dict):
            entries = payload.get("capabilities")
        else:
            entries = payload
        if not isinstance(entries, list):
            raise TaxonomyError(
                "taxonomy must be a list of categories or an object with a 'capabilities' list"
            )
        try:
            return cls(categories=tuple(Category(**entry) for entry in entries))
        except (ValidationError, TypeError) as e:
            raise TaxonomyError(f"invalid taxonomy: {e}") from e
    
    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "CategoryTaxonomy":
        """
        Load a taxonomy from a JSON file.
        
        Raises:
            TaxonomyError: If the file is missing, unreadable, not JSON, or not a valid taxonomy
        """
        taxonomy_file = Path(path)
        if not taxonomy_file.exists():
            raise TaxonomyError(f"taxonomy file not found: {taxonomy_file}")
        try:
            with open(taxonomy_file, "r", encoding="utf-8") as f:
                payload = json.load(f)
        except json.JSONDecodeError as e:
            raise TaxonomyError(f"taxonomy file is not valid JSON: {e.msg}") from e
        except UnicodeDecodeError as e:
            raise TaxonomyError(f"taxonomy file is not UTF-8 text: {taxonomy_file}") from e
        except OSError as e:
            raise TaxonomyError(f"cannot read taxonomy file {taxonomy_file}: {e.strerror or e}") from e
        return cls.from_payload(payload)


def load_taxonomy(path: Optional[Union[str, Path]] = None) -> CategoryTaxonomy:
    """Load the taxonomy at `path`, or the built-in default when no path is given."""
    if path is None:
        from conversation_classifier.defaults import DEFAULT_TAXONOMY
        return DEFAULT_TAXONOMY
    return CategoryTaxonomy.from_file(path)
