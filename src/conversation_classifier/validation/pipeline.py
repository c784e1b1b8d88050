"""
Validation Pipeline: multi-stage validation orchestrator.

Coordinates all validation stages:
- Stage 1: JSON Parse (hard fail)
- Stage 2: JSON Schema + pydantic model (hard fail)
- Stage 3: Classification rules (hard fail)
- Stage 4: Quality Checks (warnings)

Stages 1-3 raise exceptions (caught by the retry loop).
Stage 4 accumulates warnings (non-blocking).
"""

from typing import Any

import structlog

from ..models.llm_models import LLMGenerationResponse
from ..models.result import ClassificationResult
from ..models.taxonomy import CategoryTaxonomy
from .exceptions import ValidationError
from .stage1_json_parse import Stage1JSONParse
from .stage2_schema import Stage2SchemaValidation
from .stage3_business_rules import Stage3BusinessRules
from .stage4_quality import Stage4QualityChecks

logger = structlog.get_logger(__name__)


class ValidationPipeline:
    """
    Multi-stage validation pipeline orchestrator.
    
    Turns raw LLM content into a validated ClassificationResult, enforcing
    hard constraints and accumulating quality warnings.
    """
    
    def __init__(
        self,
        taxonomy: CategoryTaxonomy,
        result_model: type[ClassificationResult],
        title_max_words: int = 10,
    ):
        """
        Initialize validation pipeline.
        
        Args:
            taxonomy: Categories the classification is checked against
            result_model: Concrete classification model for the taxonomy
            title_max_words: Title length threshold for quality warnings
        """
        self.taxonomy = taxonomy
        self.result_model = result_model
        
        self.stage1 = Stage1JSONParse()
        self.stage2 = Stage2SchemaValidation(result_model)
        self.stage3 = Stage3BusinessRules(taxonomy)
        self.stage4 = Stage4QualityChecks(title_max_words=title_max_words)
    
    @property
    def json_schema(self) -> dict[str, Any]:
        return self.stage2.schema
    
    def validate(
        self,
        llm_response: LLMGenerationResponse,
    ) -> tuple[ClassificationResult, list[str]]:
        """
        Run the full validation pipeline on an LLM response.
        
        Args:
            llm_response: Raw LLM generation response
            
        Returns:
            Tuple of (validated ClassificationResult, list of warning strings)
            
        Raises:
            ValidationError: If any hard validation stage fails (Stages 1-3)
        """
        try:
            parsed_dict = self.stage1.validate(llm_response.content)
            result = self.stage2.validate(parsed_dict)
            self.stage3.validate(result)
            warnings = self.stage4.validate(result)
        except ValidationError as e:
            logger.warning(
                "Validation failed",
                error_type=type(e).__name__,
                error_message=e.message,
                error_details=e.details
            )
            raise
        
        if warnings:
            logger.warning("Validation completed with warnings", warnings=warnings)
        else:
            logger.debug("Validation completed successfully with no warnings")
        
        return result, warnings
