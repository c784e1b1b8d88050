"""
Enumerations for Conversation Classifier data models.

All enums are closed sets - no values outside these sets are permitted.
"""

from enum import Enum


class MessageRole(str, Enum):
    """Role tag of a chat message sent to the LLM."""
    
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


class LLMProvider(str, Enum):
    """
    Supported LLM transports.
    
    OPENAI covers any OpenAI-compatible chat completions endpoint.
    """
    
    OPENAI = "openai"
    OLLAMA = "ollama"
