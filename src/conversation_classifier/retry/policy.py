"""Retry policy for the classification loop."""

from dataclasses import dataclass


@dataclass(frozen=True)
class RetryPolicy:
    """
    Bounds and pacing of the classification loop.
    
    Attributes:
        max_attempts: Total attempts, including the first one
        backoff_base: Sleep `backoff_base ** attempt` seconds before each
            retry; 0 disables sleeping, otherwise it must be >= 1 so delays
            never shrink
        retry_on_error_flag: Keep retrying when the model reports it cannot
            classify the conversation (`error=true`)
    """
    
    max_attempts: int = 3
    backoff_base: float = 0.0
    retry_on_error_flag: bool = True
    
    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        if self.backoff_base < 0:
            raise ValueError("backoff_base must be >= 0")
        if 0 < self.backoff_base < 1:
            raise ValueError("backoff_base must be 0 (disabled) or >= 1")
    
    def backoff_seconds(self, attempt: int) -> float:
        """Delay before `attempt` (1-indexed). No delay before the first one."""
        if attempt <= 1 or self.backoff_base <= 0:
            return 0.0
        return self.backoff_base ** attempt
