"""
Custom exceptions for the LLM client layer.

These exceptions provide structured error handling for chat API calls.
The retry loop treats every one of them as a transient failure of the
attempt; the final attempt's error propagates to the caller unchanged.
"""


class LLMClientError(Exception):
    """
    Base exception for all LLM client errors.
    
    All LLM-specific exceptions inherit from this to allow catching
    any LLM-related error with a single except clause.
    """
    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class LLMConnectionError(LLMClientError):
    """
    Raised when unable to connect to the chat API.
    
    Includes network errors, timeouts, DNS failures, etc.
    """
    pass


class LLMGenerationError(LLMClientError):
    """
    Raised when the chat API returns an error during generation.
    
    Examples:
    - Server error (5xx)
    - Invalid parameters (4xx)
    - Empty or truncated completion
    """
    pass


class LLMSchemaViolationError(LLMClientError):
    """
    Raised when the API reports that it could not honour the requested schema.
    
    OpenAI-compatible servers signal this with a `refusal` in the message.
    """
    pass


class LLMRateLimitError(LLMClientError):
    """Raised when the chat API rate-limits the request (HTTP 429)."""
    pass


class LLMAuthenticationError(LLMClientError):
    """
    Raised when credentials are missing or rejected (HTTP 401/403).
    """
    pass


class LLMTimeoutError(LLMConnectionError):
    """
    Raised when the request exceeds the configured timeout.
    """
    pass


class LLMModelNotAvailableError(LLMGenerationError):
    """
    Raised when the requested model is not available on the server.
    """
    pass
