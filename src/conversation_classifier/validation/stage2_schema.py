"""
Stage 2: JSON Schema Validation.

Validate the parsed dict against the JSON Schema generated from the
classification model, then build the pydantic model from it.
This is a hard-fail stage: schema violations trigger retry.
"""

from typing import Any

import structlog
from jsonschema import Draft7Validator
from pydantic import ValidationError as PydanticValidationError

from ..models.result import ClassificationResult
from .exceptions import SchemaValidationError

logger = structlog.get_logger(__name__)

MAX_REPORTED_ERRORS = 10


class Stage2SchemaValidation:
    """
    Stage 2 validator: JSON Schema check plus pydantic model validation.
    
    Raises SchemaValidationError on violations (hard fail).
    """
    
    def __init__(self, result_model: type[ClassificationResult]):
        """
        Initialize schema validator.
        
        Args:
            result_model: Concrete classification model (see build_classification_model)
        """
        self.result_model = result_model
        self.schema: dict[str, Any] = result_model.model_json_schema()
        Draft7Validator.check_schema(self.schema)
        self._validator = Draft7Validator(self.schema)
    
    @property
    def schema_name(self) -> str:
        return self.result_model.__name__
    
    def check_schema(self, data: dict) -> None:
        """
        Validate data against the JSON Schema.
        
        Raises:
            SchemaValidationError: If data doesn't conform to the schema
        """
        errors = sorted(self._validator.iter_errors(data), key=lambda err: list(err.path))
        if errors:
            error_messages = []
            for error in errors[:MAX_REPORTED_ERRORS]:
                path = ".".join(str(p) for p in error.path) if error.path else "root"
                error_messages.append(f"{path}: {error.message}")
            
            raise SchemaValidationError(
                f"JSON Schema validation failed with {len(errors)} error(s)",
                validation_errors=error_messages,
                schema_name=self.schema_name
            )
    
    def build_model(self, data: dict) -> ClassificationResult:
        """
        Build the pydantic model from schema-valid data.
        
        Raises:
            SchemaValidationError: If pydantic validation fails (e.g. the
                error flag does not match the classification variant)
        """
        try:
            return self.result_model.model_validate(data)
        except PydanticValidationError as e:
            error_messages = [
                f"{'.'.join(str(loc) for loc in err['loc']) or 'root'}: {err['msg']}"
                for err in e.errors()
            ]
            raise SchemaValidationError(
                f"Pydantic model validation failed: {len(e.errors())} error(s)",
                validation_errors=error_messages[:MAX_REPORTED_ERRORS],
                schema_name=self.schema_name
            ) from e
    
    def validate(self, data: dict) -> ClassificationResult:
        """
        Run the JSON Schema check and build the model.
        
        Args:
            data: Parsed JSON dict
            
        Returns:
            Validated classification model instance
            
        Raises:
            SchemaValidationError: On any violation
        """
        self.check_schema(data)
        result = self.build_model(data)
        logger.debug("Stage 2: validated against classification schema")
        return result
