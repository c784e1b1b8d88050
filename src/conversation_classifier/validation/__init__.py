"""
Multi-stage validation pipeline.

- pipeline.py: Orchestrator for all validation stages
- stage1_json_parse.py: JSON parsing (hard fail)
- stage2_schema.py: JSON Schema + pydantic model validation (hard fail)
- stage3_business_rules.py: Taxonomy rules for new-category proposals (hard fail)
- stage4_quality.py: Title and tag quality checks (warnings only)
"""

from .exceptions import (
    ClassificationRuleViolation,
    JSONParseError,
    SchemaValidationError,
    ValidationError,
)
from .pipeline import ValidationPipeline

__all__ = [
    "ValidationPipeline",
    "ValidationError",
    "JSONParseError",
    "SchemaValidationError",
    "ClassificationRuleViolation",
]
