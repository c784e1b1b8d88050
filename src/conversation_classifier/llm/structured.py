"""
Structured completion: the collaborator the retry loop calls.

Given role-tagged messages and a target result model, return an instance
of that model or raise. The default implementation sends the model's JSON
Schema to a chat API client and runs the validation pipeline on the reply.
"""

from typing import Protocol

import structlog

from conversation_classifier.llm.base_client import BaseLLMClient
from conversation_classifier.models.llm_models import ChatMessage, LLMGenerationRequest
from conversation_classifier.models.result import ClassificationResult
from conversation_classifier.models.taxonomy import CategoryTaxonomy
from conversation_classifier.validation.pipeline import ValidationPipeline

logger = structlog.get_logger(__name__)


class CompletionCollaborator(Protocol):
    """
    Anything that can turn messages into a validated result model.
    
    Implementations raise on any failure (transport, malformed output,
    schema violation); the retry loop decides what to do with it.
    """
    
    def complete(
        self,
        messages: list[ChatMessage],
        result_model: type[ClassificationResult],
    ) -> ClassificationResult:
        ...


class StructuredCompletionClient:
    """
    CompletionCollaborator backed by an LLM client and a ValidationPipeline.
    
    One pipeline is built (and cached) per result model, since the JSON
    Schema sent to the API and checked on the way back depends on it.
    """
    
    def __init__(
        self,
        llm_client: BaseLLMClient,
        taxonomy: CategoryTaxonomy,
        model: str,
        temperature: float = 0.0,
        max_tokens: int = 1024,
    ):
        self.llm_client = llm_client
        self.taxonomy = taxonomy
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self._pipelines: dict[type[ClassificationResult], ValidationPipeline] = {}
    
    def pipeline_for(self, result_model: type[ClassificationResult]) -> ValidationPipeline:
        pipeline = self._pipelines.get(result_model)
        if pipeline is None:
            pipeline = ValidationPipeline(self.taxonomy, result_model)
            self._pipelines[result_model] = pipeline
        return pipeline
    
    def complete(
        self,
        messages: list[ChatMessage],
        result_model: type[ClassificationResult],
    ) -> ClassificationResult:
        """
        Generate and validate one classification.
        
        Raises:
            LLMClientError: Transport or API failure
            ValidationError: Output rejected by the validation pipeline
        """
        pipeline = self.pipeline_for(result_model)
        request = LLMGenerationRequest(
            messages=messages,
            model=self.model,
            temperature=self.temperature,
            max_tokens=self.max_tokens,
            format_schema=pipeline.json_schema,
            schema_name=result_model.__name__,
        )
        
        llm_response = self.llm_client.generate(request)
        result, warnings = pipeline.validate(llm_response)
        
        logger.info(
            "Structured completion validated",
            model=llm_response.model_version,
            topic=result.topic,
            error=result.error,
            warnings_count=len(warnings),
            tokens_used=llm_response.usage_tokens
        )
        return result
