"""
Validation-specific exceptions for the multi-stage validation pipeline.

Each of these marks an attempt whose output could not be accepted. The
retry loop catches them and tries again until its attempts run out.
"""

from typing import Any


class ValidationError(Exception):
    """
    Base exception for all validation errors.
    
    Raised during the hard-fail stages (parse, schema, business rules).
    """
    
    def __init__(self, message: str, details: dict[str, Any] | None = None):
        """
        Initialize validation error.
        
        Args:
            message: Human-readable error description
            details: Structured error data for logging
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}
    
    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class JSONParseError(ValidationError):
    """
    Stage 1: JSON parsing failed.
    
    Raised when the LLM response content is not a JSON object.
    """
    
    def __init__(self, message: str, raw_content: str | None = None, parse_error: str | None = None):
        details = {}
        if raw_content:
            # First 500 chars are enough to debug without flooding logs
            details["content_snippet"] = raw_content[:500]
        if parse_error:
            details["parse_error"] = parse_error
        
        super().__init__(message, details)


class SchemaValidationError(ValidationError):
    """
    Stage 2: the parsed JSON does not conform to the classification schema.
    
    Also raised when pydantic model validation fails, including the
    error-flag / variant invariant.
    """
    
    def __init__(
        self,
        message: str,
        validation_errors: list[str] | None = None,
        schema_name: str | None = None
    ):
        details: dict[str, Any] = {}
        if validation_errors:
            details["validation_errors"] = validation_errors
        if schema_name:
            details["schema_name"] = schema_name
        
        super().__init__(message, details)


class ClassificationRuleViolation(ValidationError):
    """
    Stage 3: the classification violates a taxonomy rule.
    
    Examples:
    - A new-category proposal reuses an existing topic
    - A proposed topic is not snake_case
    """
    
    def __init__(
        self,
        message: str,
        rule_name: str | None = None,
        invalid_value: Any | None = None,
        expected_values: list[str] | None = None,
        field_path: str | None = None
    ):
        details: dict[str, Any] = {}
        if rule_name:
            details["rule_name"] = rule_name
        if invalid_value is not None:
            details["invalid_value"] = str(invalid_value)
        if expected_values:
            details["expected_values"] = expected_values[:20]
        if field_path:
            details["field_path"] = field_path
        
        super().__init__(message, details)
