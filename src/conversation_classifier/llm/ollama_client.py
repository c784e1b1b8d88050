"""
Ollama client implementation for LLM inference.

Communicates with the Ollama chat API using httpx. Supports:
- Structured output via JSON Schema (format parameter)
- Health checks
"""

import time
from typing import Any, Optional

import httpx
import structlog

from conversation_classifier.llm.base_client import BaseLLMClient
from conversation_classifier.llm.exceptions import LLMGenerationError
from conversation_classifier.models.llm_models import LLMGenerationRequest, LLMGenerationResponse


logger = structlog.get_logger(__name__)


class OllamaClient(BaseLLMClient):
    """
    Ollama-specific LLM client.
    
    API Endpoints:
    - POST /api/chat: Chat completion with optional format constraint
    - GET /api/tags: Health check
    """
    
    def __init__(
        self,
        base_url: str = "http://localhost:11434",
        timeout: int = 60,
        max_retries: int = 1,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        super().__init__(base_url, timeout, max_retries, transport)
    
    def build_payload(self, request: LLMGenerationRequest) -> dict[str, Any]:
        """
        Build the /api/chat payload:
        {
            "model": "qwen2.5:7b",
            "messages": [...],
            "stream": false,
            "format": <JSON Schema or "json">,
            "options": {"temperature": 0.0, "num_predict": 1024}
        }
        """
        payload: dict[str, Any] = {
            "model": request.model,
            "messages": [message.model_dump() for message in request.messages],
            "stream": request.stream,
            "options": {
                "temperature": request.temperature,
                "num_predict": request.max_tokens,
            },
        }
        if request.top_p is not None:
            payload["options"]["top_p"] = request.top_p
        if request.seed is not None:
            payload["options"]["seed"] = request.seed
        
        # Ollama expects the schema object directly as "format"
        payload["format"] = request.format_schema if request.format_schema else "json"
        return payload
    
    def generate(self, request: LLMGenerationRequest) -> LLMGenerationResponse:
        """
        Generate completion using POST /api/chat.
        
        Response:
        {
            "model": "qwen2.5:7b",
            "created_at": "2026-02-19T...",
            "message": {"role": "assistant", "content": "..."},
            "done": true,
            "done_reason": "stop",
            "prompt_eval_count": 50,
            "eval_count": 150
        }
        """
        start_time = time.time()
        payload = self.build_payload(request)
        
        logger.info(
            "Sending chat request to Ollama",
            model=request.model,
            messages_count=len(request.messages),
            temperature=request.temperature,
            max_tokens=request.max_tokens,
            has_schema=bool(request.format_schema)
        )
        
        data = self._post_json("/api/chat", payload, request.model)
        latency_ms = int((time.time() - start_time) * 1000)
        
        content = (data.get("message") or {}).get("content", "")
        if not content:
            raise LLMGenerationError(
                "Empty response from Ollama",
                details={"done_reason": data.get("done_reason")}
            )
        
        model_version = data.get("model", request.model)
        if data.get("done"):
            finish_reason = data.get("done_reason") or "stop"
        else:
            finish_reason = "incomplete"
        
        prompt_tokens = data.get("prompt_eval_count")
        completion_tokens = data.get("eval_count")
        total_tokens = None
        if prompt_tokens is not None and completion_tokens is not None:
            total_tokens = prompt_tokens + completion_tokens
        
        logger.info(
            "Ollama generation successful",
            model=model_version,
            latency_ms=latency_ms,
            prompt_tokens=prompt_tokens,
            completion_tokens=completion_tokens,
            finish_reason=finish_reason
        )
        
        return LLMGenerationResponse(
            content=content,
            model_version=model_version,
            finish_reason=finish_reason,
            usage_tokens=total_tokens,
            prompt_tokens=prompt_tokens,
            completion_tokens=completion_tokens,
            latency_ms=latency_ms,
            created_at=data.get("created_at"),
            raw_metadata={
                "total_duration": data.get("total_duration"),
                "load_duration": data.get("load_duration"),
                "eval_duration": data.get("eval_duration"),
            }
        )
    
    def health_check(self) -> bool:
        """Check Ollama server health via GET /api/tags."""
        try:
            response = self._get_client().get("/api/tags", timeout=5.0)
            response.raise_for_status()
            logger.debug("Ollama health check passed")
            return True
        except httpx.HTTPError as e:
            logger.warning("Ollama health check failed", error=str(e))
            return False
    
