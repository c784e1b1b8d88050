"""
Stage 1: JSON Parse Validation.

Parse raw LLM response content (string) into a Python dict.
This is a hard-fail stage: malformed JSON triggers retry.
"""

import json
import re

import structlog

from .exceptions import JSONParseError

logger = structlog.get_logger(__name__)

# ```json ... ``` wrapper some chat models add despite JSON mode
_CODE_FENCE_PATTERN = re.compile(r"^```(?:json)?\s*\n?(.*?)\n?```$", re.DOTALL | re.IGNORECASE)


class Stage1JSONParse:
    """
    Stage 1 validator: Parse JSON string to dict.
    
    Raises JSONParseError on malformed JSON (hard fail).
    """
    
    def validate(self, content: str) -> dict:
        """
        Parse JSON content from LLM response.
        
        Args:
            content: Raw JSON string from LLM response
            
        Returns:
            Parsed dict representation
            
        Raises:
            JSONParseError: If content is not a valid JSON object
        """
        if not content or not content.strip():
            raise JSONParseError(
                "LLM response content is empty or whitespace-only",
                raw_content=content,
                parse_error="Empty content"
            )
        
        text = content.strip()
        fenced = _CODE_FENCE_PATTERN.match(text)
        if fenced:
            text = fenced.group(1).strip()
        
        try:
            parsed = json.loads(text)
        except json.JSONDecodeError as e:
            raise JSONParseError(
                f"Failed to parse LLM response as JSON: {e.msg}",
                raw_content=content,
                parse_error=f"{e.msg} at line {e.lineno} col {e.colno}"
            ) from e
        
        if not isinstance(parsed, dict):
            raise JSONParseError(
                f"LLM response is not a JSON object (got {type(parsed).__name__})",
                raw_content=content,
                parse_error=f"Expected dict, got {type(parsed).__name__}"
            )
        
        logger.debug("Stage 1: parsed JSON", top_level_keys=len(parsed))
        return parsed
