"""
Retry metadata tracking.

Captures the history of one classification run for logging and for the
CLI's --show-metadata output.
"""

from dataclasses import asdict, dataclass, field
from typing import Any


@dataclass(frozen=True)
class RetryMetadata:
    """
    History of one run of the classification loop.
    
    Attributes:
        total_attempts: Number of collaborator calls made
        max_attempts: Attempt cap from the policy
        total_latency_ms: Time from first attempt to final result (ms)
        exhausted: True when no attempt produced an `error=false` result and
            the last error-bearing result was returned instead
        unclassified_attempts: Attempts that returned `error=true`
        failures: One entry per attempt that raised ({"attempt", "error_type", "message"})
        prompt_metadata: Truncation and sizing info from the prompt builder
    """
    
    total_attempts: int
    max_attempts: int
    total_latency_ms: int
    exhausted: bool = False
    unclassified_attempts: int = 0
    failures: list[dict[str, Any]] = field(default_factory=list)
    prompt_metadata: dict[str, Any] = field(default_factory=dict)
    
    def __post_init__(self) -> None:
        """Validate metadata invariants."""
        if self.total_attempts < 1:
            raise ValueError("total_attempts must be >= 1")
        
        if self.total_attempts > self.max_attempts:
            raise ValueError(
                f"total_attempts ({self.total_attempts}) exceeds max_attempts ({self.max_attempts})"
            )
        
        if self.total_latency_ms < 0:
            raise ValueError("total_latency_ms must be >= 0")
    
    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
