"""
Bounded retry loop for classification.

Main Components:
    - RetryEngine: Runs the classification loop
    - RetryPolicy: Attempt cap, backoff and error-flag handling
    - RetryMetadata: Immutable history of one run

Usage:
    >>> from conversation_classifier.retry import RetryEngine, RetryPolicy
    >>> engine = RetryEngine(collaborator, prompt_builder, result_model, RetryPolicy(max_attempts=3))
    >>> result, metadata = engine.execute_with_retry(conversation)
"""

from conversation_classifier.retry.engine import RetryEngine
from conversation_classifier.retry.metadata import RetryMetadata
from conversation_classifier.retry.policy import RetryPolicy

__all__ = [
    "RetryEngine",
    "RetryMetadata",
    "RetryPolicy",
]
