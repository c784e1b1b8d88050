"""
Stage 3: Classification Rules Validation.

Validate taxonomy-specific constraints the schema cannot express:
- a new-category proposal must not reuse an existing topic
- a proposed topic must be snake_case

This is a hard-fail stage: violations trigger retry.
"""

import structlog

from ..models.result import ClassificationResult, NewCategory
from ..models.taxonomy import SNAKE_CASE_PATTERN, CategoryTaxonomy
from .exceptions import ClassificationRuleViolation

logger = structlog.get_logger(__name__)


class Stage3BusinessRules:
    """
    Stage 3 validator: taxonomy rules enforcement.
    
    Raises ClassificationRuleViolation on rule violations (hard fail).
    """
    
    def __init__(self, taxonomy: CategoryTaxonomy):
        self.taxonomy = taxonomy
    
    def validate(self, result: ClassificationResult) -> None:
        """
        Validate taxonomy rules against a classification.
        
        Args:
            result: Schema-validated classification
            
        Raises:
            ClassificationRuleViolation: If any rule is violated
        """
        if isinstance(result.classification, NewCategory):
            self._validate_new_topic_is_new(result.classification)
            self._validate_new_topic_format(result.classification)
        
        logger.debug("Stage 3: All classification rules validated successfully")
    
    def _validate_new_topic_is_new(self, proposal: NewCategory) -> None:
        if proposal.topic in self.taxonomy:
            raise ClassificationRuleViolation(
                f"New category proposal reuses existing topic '{proposal.topic}'",
                rule_name="new_topic_is_new",
                invalid_value=proposal.topic,
                expected_values=list(self.taxonomy.topics),
                field_path="classification.topic"
            )
    
    def _validate_new_topic_format(self, proposal: NewCategory) -> None:
        if not SNAKE_CASE_PATTERN.match(proposal.topic):
            raise ClassificationRuleViolation(
                f"Proposed topic is not snake_case: '{proposal.topic}'",
                rule_name="new_topic_snake_case",
                invalid_value=proposal.topic,
                field_path="classification.topic"
            )
