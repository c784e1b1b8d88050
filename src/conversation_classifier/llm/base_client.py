"""
Abstract base client for LLM inference.

Defines the interface that all chat API clients (OpenAI-compatible, Ollama)
must adhere to. This abstraction allows swapping inference backends without
changing the validation pipeline or the retry loop.
"""

import json
import time
from abc import ABC, abstractmethod
from typing import Any, Optional

import httpx
import structlog

from conversation_classifier.llm.exceptions import (
    LLMAuthenticationError,
    LLMClientError,
    LLMConnectionError,
    LLMGenerationError,
    LLMModelNotAvailableError,
    LLMRateLimitError,
    LLMTimeoutError,
)
from conversation_classifier.models.llm_models import LLMGenerationRequest, LLMGenerationResponse


logger = structlog.get_logger(__name__)


class BaseLLMClient(ABC):
    """
    Abstract base class for chat API clients.
    
    Responsibilities:
    - Send generation requests to the chat API
    - Parse responses into standardized format
    - Map transport failures onto LLMClientError subclasses
    
    Does NOT handle:
    - Prompt construction (that's PromptBuilder's job)
    - Response validation (that's ValidationPipeline's job)
    - Retry logic for invalid classifications (that's RetryEngine's job)
    
    Connection-level retries (network errors) MAY be handled internally.
    """
    
    def __init__(
        self,
        base_url: str,
        timeout: int = 60,
        max_retries: int = 1,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """
        Initialize base client.
        
        Args:
            base_url: Base URL of the chat API
            timeout: Request timeout in seconds
            max_retries: Number of tries per generate() call for network errors
            transport: Optional httpx transport (tests pass httpx.MockTransport)
        """
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.max_retries = max(1, max_retries)
        self._transport = transport
        self._client: Optional[httpx.Client] = None
        
        logger.debug(
            "Initialized LLM client",
            client_class=self.__class__.__name__,
            base_url=self.base_url,
            timeout=timeout,
            max_retries=self.max_retries
        )
    
    def _default_headers(self) -> dict[str, str]:
        return {"Content-Type": "application/json"}
    
    def _get_client(self) -> httpx.Client:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.Client(
                base_url=self.base_url,
                timeout=httpx.Timeout(self.timeout),
                headers=self._default_headers(),
                transport=self._transport,
                follow_redirects=True,
            )
            logger.debug("Created new httpx Client", base_url=self.base_url)
        return self._client
    
    def _post_json(self, path: str, payload: dict[str, Any], model: str) -> dict[str, Any]:
        """
        POST a JSON payload and return the decoded JSON body.
        
        Network errors, timeouts and 5xx responses are retried up to
        max_retries with exponential backoff; other HTTP errors are raised
        immediately.
        
        Raises:
            LLMClientError subclass matching the failure
        """
        last_error: Optional[LLMClientError] = None
        for attempt in range(1, self.max_retries + 1):
            try:
                response = self._get_client().post(path, json=payload)
                response.raise_for_status()
                data = response.json()
                if not isinstance(data, dict):
                    raise LLMGenerationError(
                        "Unexpected response body from chat API",
                        details={"body_type": type(data).__name__}
                    )
                return data
                
            except httpx.TimeoutException as e:
                logger.warning(
                    "LLM request timeout",
                    attempt=attempt,
                    max_retries=self.max_retries,
                    timeout=self.timeout,
                    error=str(e)
                )
                last_error = LLMTimeoutError(
                    f"Request timeout after {self.timeout}s",
                    details={"attempt": attempt, "timeout": self.timeout}
                )
                
            except httpx.HTTPStatusError as e:
                status_code = e.response.status_code
                error_text = e.response.text[:500]
                
                logger.error(
                    "LLM HTTP error",
                    status_code=status_code,
                    error_text=error_text,
                    attempt=attempt
                )
                
                if status_code in (401, 403):
                    raise LLMAuthenticationError(
                        f"Authentication rejected by chat API: {status_code}",
                        details={"status": status_code}
                    ) from e
                if status_code == 404:
                    raise LLMModelNotAvailableError(
                        f"Model not found: {model}",
                        details={"model": model, "status": status_code}
                    ) from e
                if status_code == 429:
                    raise LLMRateLimitError(
                        "Rate limited by chat API",
                        details={
                            "status": status_code,
                            "retry_after": e.response.headers.get("retry-after"),
                        }
                    ) from e
                if status_code < 500:
                    raise LLMGenerationError(
                        f"Chat API client error: {status_code}",
                        details={"status": status_code, "error": error_text}
                    ) from e
                last_error = LLMGenerationError(
                    f"Chat API server error: {status_code}",
                    details={"status": status_code, "error": error_text}
                )
                
            except httpx.TransportError as e:
                logger.warning(
                    "LLM network error",
                    attempt=attempt,
                    max_retries=self.max_retries,
                    error=str(e)
                )
                last_error = LLMConnectionError(
                    f"Network error: {str(e)}",
                    details={"attempt": attempt, "error_type": type(e).__name__}
                )
                
            except json.JSONDecodeError as e:
                raise LLMGenerationError(
                    "Invalid JSON response from chat API",
                    details={"parse_error": str(e)}
                ) from e
            
            if attempt < self.max_retries:
                backoff = 2 ** attempt
                logger.info("Retrying LLM request after backoff", backoff_seconds=backoff)
                time.sleep(backoff)
        
        if last_error is None:
            last_error = LLMGenerationError("Generation failed after all retries")
        raise last_error
    
    @abstractmethod
    def generate(self, request: LLMGenerationRequest) -> LLMGenerationResponse:
        """
        Generate a completion from the chat API.
        
        Implementations should:
        1. Format the request according to the provider's API
        2. Send the HTTP request with timeout
        3. Parse the response and extract metadata (tokens, latency, etc.)
        4. Return LLMGenerationResponse or raise an LLMClientError subclass
        
        Raises:
            LLMConnectionError: Network errors
            LLMTimeoutError: Request exceeded timeout
            LLMGenerationError: Server-side generation errors
            LLMModelNotAvailableError: Model not found
            LLMRateLimitError: Rate limited
            LLMAuthenticationError: Credentials rejected
        """
        pass
    
    @abstractmethod
    def health_check(self) -> bool:
        """
        Check if the chat API is reachable.
        
        Returns:
            True if healthy, False otherwise. Never raises.
        """
        pass
    
    def close(self) -> None:
        """Close the HTTP client connection."""
        if self._client is not None and not self._client.is_closed:
            self._client.close()
            logger.debug("Closed LLM client", client_class=self.__class__.__name__)
    
    def __enter__(self):
        return self
    
    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
    
    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"base_url={self.base_url}, "
            f"timeout={self.timeout}s)"
        )
