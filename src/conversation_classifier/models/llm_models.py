"""
LLM-specific data models for request/response cycle.

These models are internal to the LLM layer and handle the raw communication
with chat APIs (OpenAI-compatible, Ollama). They are separate from the
business models (ClassificationResult) to allow flexibility in the underlying
LLM client implementation.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from conversation_classifier.models.enums import MessageRole


class ChatMessage(BaseModel):
    """A single role-tagged chat message."""
    model_config = ConfigDict(frozen=True, use_enum_values=True)
    
    role: MessageRole
    content: str


class LLMGenerationRequest(BaseModel):
    """
    Internal request model for LLM generation.
    
    This is the standardized format sent to any LLM client implementation.
    It abstracts away provider-specific details.
    """
    model_config = ConfigDict(frozen=True)
    
    messages: list[ChatMessage] = Field(..., min_length=1, description="Role-tagged chat messages")
    model: str = Field(..., description="Model name/identifier (e.g., 'gpt-4o-mini')")
    temperature: float = Field(default=0.0, ge=0.0, le=2.0, description="Sampling temperature")
    max_tokens: int = Field(default=1024, ge=1, le=16384, description="Maximum tokens to generate")
    format_schema: Optional[Dict[str, Any]] = Field(
        default=None,
        description="JSON Schema for structured output constraint"
    )
    schema_name: str = Field(default="classification_result", description="Name reported with the schema")
    stream: bool = Field(default=False, description="Whether to stream response (always False for validation)")
    top_p: Optional[float] = Field(default=None, ge=0.0, le=1.0, description="Nucleus sampling parameter")
    seed: Optional[int] = Field(default=None, description="Random seed for reproducibility")


class LLMGenerationResponse(BaseModel):
    """
    Internal response model from LLM generation.
    
    Contains the raw generated text plus metadata for audit/logging.
    Validation of the content happens in the validation layer.
    """
    model_config = ConfigDict(frozen=True)
    
    content: str = Field(..., description="Generated text (typically JSON string)")
    model_version: str = Field(..., description="Actual model version used")
    finish_reason: str = Field(
        ...,
        description="Why generation stopped: 'stop', 'length', 'error', etc."
    )
    usage_tokens: Optional[int] = Field(
        default=None,
        description="Total tokens used (prompt + completion)"
    )
    prompt_tokens: Optional[int] = Field(default=None, description="Tokens in prompt")
    completion_tokens: Optional[int] = Field(default=None, description="Tokens in completion")
    latency_ms: int = Field(..., ge=0, description="Generation latency in milliseconds")
    created_at: Optional[str] = Field(default=None, description="Timestamp reported by the server")
    raw_metadata: Dict[str, Any] = Field(
        default_factory=dict,
        description="Provider-specific metadata (for debugging)"
    )
