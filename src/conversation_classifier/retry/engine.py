"""
Bounded retry loop for conversation classification.

One call builds the prompt once, then asks the collaborator for a
classification up to `policy.max_attempts` times:

    1. Collaborator raises: retry; on the last attempt re-raise as-is
    2. Result with error=false: return immediately
    3. Result with error=true: remember it and retry
    4. Attempts used up without an exception: return the last error=true
       result, flagged as exhausted in the metadata

Usage:
    engine = RetryEngine(collaborator, prompt_builder, result_model, RetryPolicy())
    result, metadata = engine.execute_with_retry(conversation)
"""

import time
from typing import Optional

import structlog

from conversation_classifier.llm.prompt_builder import PromptBuilder
from conversation_classifier.llm.structured import CompletionCollaborator
from conversation_classifier.models.result import ClassificationResult
from conversation_classifier.retry.metadata import RetryMetadata
from conversation_classifier.retry.policy import RetryPolicy

logger = structlog.get_logger(__name__)


class RetryEngine:
    """
    Retry-until-valid classification loop.
    
    Stateless across calls: nothing from one run (or one attempt) is cached
    for the next.
    
    Attributes:
        collaborator: Structured completion capability
        prompt_builder: Builds the system + user messages
        result_model: Classification model requested from the collaborator
        policy: Attempt cap and backoff
    """
    
    def __init__(
        self,
        collaborator: CompletionCollaborator,
        prompt_builder: PromptBuilder,
        result_model: type[ClassificationResult],
        policy: Optional[RetryPolicy] = None,
    ):
        self.collaborator = collaborator
        self.prompt_builder = prompt_builder
        self.result_model = result_model
        self.policy = policy or RetryPolicy()
    
    def execute_with_retry(
        self, conversation: str
    ) -> tuple[ClassificationResult, RetryMetadata]:
        """
        Classify a conversation, retrying per policy.
        
        Args:
            conversation: Conversation transcript
        
        Returns:
            Tuple of (classification, retry metadata)
        
        Raises:
            ValueError: Empty conversation (before any attempt)
            Exception: Whatever the collaborator raised on the final attempt
        """
        messages, prompt_metadata = self.prompt_builder.build_messages(conversation)
        max_attempts = self.policy.max_attempts
        
        start_time = time.monotonic()
        failures: list[dict] = []
        unclassified_attempts = 0
        last_unclassified: Optional[ClassificationResult] = None
        
        logger.info(
            "Starting classification",
            max_attempts=max_attempts,
            conversation_length=prompt_metadata.get("conversation_length"),
            truncation_applied=prompt_metadata.get("truncation_applied"),
        )
        
        for attempt in range(1, max_attempts + 1):
            backoff_seconds = self.policy.backoff_seconds(attempt)
            if backoff_seconds > 0:
                logger.info("Applying backoff", attempt=attempt, backoff_seconds=backoff_seconds)
                time.sleep(backoff_seconds)
            
            try:
                result = self.collaborator.complete(messages, self.result_model)
            except Exception as e:
                failures.append({
                    "attempt": attempt,
                    "error_type": type(e).__name__,
                    "message": str(e)[:500],
                })
                if attempt >= max_attempts:
                    logger.error(
                        "Classification failed on final attempt",
                        attempt=attempt,
                        max_attempts=max_attempts,
                        error_type=type(e).__name__,
                        error=str(e),
                    )
                    raise
                logger.warning(
                    "Classification attempt failed, retrying",
                    attempt=attempt,
                    max_attempts=max_attempts,
                    error_type=type(e).__name__,
                    error=str(e),
                )
                continue
            
            if not result.error:
                metadata = self._build_metadata(
                    attempt, start_time, failures, unclassified_attempts, prompt_metadata
                )
                logger.info(
                    "Classification succeeded",
                    attempt=attempt,
                    topic=result.topic,
                    total_latency_ms=metadata.total_latency_ms,
                )
                return result, metadata
            
            unclassified_attempts += 1
            last_unclassified = result
            
            if not self.policy.retry_on_error_flag:
                logger.info(
                    "Model could not classify conversation, retry disabled",
                    attempt=attempt,
                    proposed_topic=result.topic,
                )
                metadata = self._build_metadata(
                    attempt, start_time, failures, unclassified_attempts, prompt_metadata
                )
                return result, metadata
            
            logger.info(
                "Model could not classify conversation",
                attempt=attempt,
                max_attempts=max_attempts,
                proposed_topic=result.topic,
            )
        
        # Every attempt either raised (final one re-raises) or returned error=true
        metadata = self._build_metadata(
            max_attempts, start_time, failures, unclassified_attempts, prompt_metadata,
            exhausted=True,
        )
        logger.warning(
            "Attempts exhausted without a classification, returning last proposal",
            total_attempts=max_attempts,
            unclassified_attempts=unclassified_attempts,
            proposed_topic=last_unclassified.topic if last_unclassified else None,
        )
        return last_unclassified, metadata
    
    def _build_metadata(
        self,
        attempts: int,
        start_time: float,
        failures: list[dict],
        unclassified_attempts: int,
        prompt_metadata: dict,
        exhausted: bool = False,
    ) -> RetryMetadata:
        return RetryMetadata(
            total_attempts=attempts,
            max_attempts=self.policy.max_attempts,
            total_latency_ms=int((time.monotonic() - start_time) * 1000),
            exhausted=exhausted,
            unclassified_attempts=unclassified_attempts,
            failures=list(failures),
            prompt_metadata=dict(prompt_metadata),
        )
