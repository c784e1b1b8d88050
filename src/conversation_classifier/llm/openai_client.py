"""
OpenAI-compatible chat completions client.

Communicates with any server implementing POST /chat/completions (OpenAI,
Azure-style gateways, vLLM, LiteLLM) using httpx. Supports:
- Structured output via response_format json_schema
- Bearer token authentication
- Health check via GET /models
"""

import time
from typing import Any, Optional

import httpx
import structlog

from conversation_classifier.llm.base_client import BaseLLMClient
from conversation_classifier.llm.exceptions import (
    LLMAuthenticationError,
    LLMGenerationError,
    LLMSchemaViolationError,
)
from conversation_classifier.models.llm_models import LLMGenerationRequest, LLMGenerationResponse


logger = structlog.get_logger(__name__)


class OpenAIChatClient(BaseLLMClient):
    """
    Client for OpenAI-compatible chat completion APIs.
    
    API Endpoints:
    - POST /chat/completions: Generate a completion for role-tagged messages
    - GET /models: List available models (health check)
    """
    
    def __init__(
        self,
        api_key: Optional[str],
        base_url: str = "https://api.openai.com/v1",
        timeout: int = 60,
        max_retries: int = 1,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """
        Initialize the client.
        
        Args:
            api_key: Bearer token sent in the Authorization header
            base_url: API root, including the version prefix
            timeout: Request timeout in seconds
            max_retries: Tries per generate() call for network errors
            transport: Optional httpx transport
            
        Raises:
            LLMAuthenticationError: If no API key is given
        """
        if not api_key:
            raise LLMAuthenticationError(
                "OPENAI_API_KEY is not set",
                details={"base_url": base_url}
            )
        self._api_key = api_key
        super().__init__(base_url, timeout, max_retries, transport)
    
    def _default_headers(self) -> dict[str, str]:
        headers = super()._default_headers()
        headers["Authorization"] = f"Bearer {self._api_key}"
        return headers
    
    def build_payload(self, request: LLMGenerationRequest) -> dict[str, Any]:
        """
        Build the chat completions payload:
        {
            "model": "gpt-4o-mini",
            "messages": [{"role": "system", "content": "..."}, ...],
            "temperature": 0.0,
            "max_tokens": 1024,
            "response_format": {
                "type": "json_schema",
                "json_schema": {"name": "...", "schema": {...}}
            }
        }
        """
        payload: dict[str, Any] = {
            "model": request.model,
            "messages": [message.model_dump() for message in request.messages],
            "temperature": request.temperature,
            "max_tokens": request.max_tokens,
            "stream": request.stream,
        }
        if request.top_p is not None:
            payload["top_p"] = request.top_p
        if request.seed is not None:
            payload["seed"] = request.seed
        
        if request.format_schema:
            payload["response_format"] = {
                "type": "json_schema",
                "json_schema": {
                    "name": request.schema_name,
                    "schema": request.format_schema,
                },
            }
        else:
            payload["response_format"] = {"type": "json_object"}
        return payload
    
    def generate(self, request: LLMGenerationRequest) -> LLMGenerationResponse:
        """
        Generate a completion via POST /chat/completions.
        
        Response:
        {
            "id": "chatcmpl-...",
            "model": "gpt-4o-mini",
            "created": 1700000000,
            "choices": [{"message": {"role": "assistant", "content": "..."},
                         "finish_reason": "stop"}],
            "usage": {"prompt_tokens": 50, "completion_tokens": 150, "total_tokens": 200}
        }
        """
        start_time = time.time()
        payload = self.build_payload(request)
        
        logger.info(
            "Sending chat completion request",
            model=request.model,
            messages_count=len(request.messages),
            temperature=request.temperature,
            max_tokens=request.max_tokens,
            has_schema=bool(request.format_schema)
        )
        
        data = self._post_json("/chat/completions", payload, request.model)
        latency_ms = int((time.time() - start_time) * 1000)
        
        choices = data.get("choices") or []
        if not choices:
            raise LLMGenerationError(
                "Chat completion returned no choices",
                details={"response_id": data.get("id")}
            )
        choice = choices[0]
        message = choice.get("message") or {}
        
        refusal = message.get("refusal")
        if refusal:
            raise LLMSchemaViolationError(
                "Model refused to produce structured output",
                details={"refusal": str(refusal)[:500]}
            )
        
        content = message.get("content") or ""
        if not content:
            raise LLMGenerationError(
                "Empty completion from chat API",
                details={"finish_reason": choice.get("finish_reason")}
            )
        
        usage = data.get("usage") or {}
        model_version = data.get("model", request.model)
        finish_reason = choice.get("finish_reason") or "stop"
        
        logger.info(
            "Chat completion successful",
            model=model_version,
            latency_ms=latency_ms,
            prompt_tokens=usage.get("prompt_tokens"),
            completion_tokens=usage.get("completion_tokens"),
            finish_reason=finish_reason
        )
        
        created = data.get("created")
        return LLMGenerationResponse(
            content=content,
            model_version=model_version,
            finish_reason=finish_reason,
            usage_tokens=usage.get("total_tokens"),
            prompt_tokens=usage.get("prompt_tokens"),
            completion_tokens=usage.get("completion_tokens"),
            latency_ms=latency_ms,
            created_at=str(created) if created is not None else None,
            raw_metadata={"response_id": data.get("id")},
        )
    
    def health_check(self) -> bool:
        """Check the API via GET /models. Returns False on any error."""
        try:
            response = self._get_client().get("/models", timeout=5.0)
            response.raise_for_status()
            logger.debug("Chat API health check passed")
            return True
        except httpx.HTTPError as e:
            logger.warning("Chat API health check failed", error=str(e))
            return False
