"""
Stage 4: Quality Checks.

Non-blocking quality checks that produce warnings:
- Title length (should be under 10 words) and emptiness
- Missing, duplicate or non-snake_case tags

Unlike Stages 1-3, these do NOT raise exceptions - they accumulate warnings.
"""

import structlog

from ..models.result import ClassificationResult
from ..models.taxonomy import SNAKE_CASE_PATTERN

logger = structlog.get_logger(__name__)


class Stage4QualityChecks:
    """
    Stage 4 validator: Quality checks (non-blocking warnings).
    
    Returns list of warning strings instead of raising exceptions.
    """
    
    def __init__(self, title_max_words: int = 10):
        """
        Args:
            title_max_words: Titles must have fewer words than this
        """
        self.title_max_words = title_max_words
    
    def validate(self, result: ClassificationResult) -> list[str]:
        """
        Run quality checks and accumulate warnings.
        
        Returns:
            List of warning messages (empty if no quality issues)
        """
        warnings: list[str] = []
        warnings.extend(self._check_title(result))
        warnings.extend(self._check_tags(result))
        
        if warnings:
            logger.info("Stage 4: quality warnings generated", warnings_count=len(warnings))
        else:
            logger.debug("Stage 4: No quality issues detected")
        
        return warnings
    
    def _check_title(self, result: ClassificationResult) -> list[str]:
        title = result.classification.title.strip()
        if not title:
            return ["Title is empty"]
        words = len(title.split())
        if words >= self.title_max_words:
            return [f"Title has {words} words (should be under {self.title_max_words})"]
        return []
    
    def _check_tags(self, result: ClassificationResult) -> list[str]:
        tags = result.classification.tags
        if not tags:
            return ["No tags provided"]
        
        warnings: list[str] = []
        seen: set[str] = set()
        duplicates: set[str] = set()
        for tag in tags:
            if tag in seen:
                duplicates.add(tag)
            seen.add(tag)
        if duplicates:
            warnings.append(f"Duplicate tags: {sorted(duplicates)}")
        
        malformed = [tag for tag in tags if not SNAKE_CASE_PATTERN.match(tag)]
        if malformed:
            warnings.append(f"Tags not in snake_case: {malformed}")
        return warnings
