"""
Prompt builder for classification requests.

Responsible for:
- Loading and rendering Jinja2 templates (system + user prompts)
- Embedding the category taxonomy as JSON
- Normalizing and truncating the conversation text
"""

import json
from pathlib import Path
from typing import Optional, Union

import structlog
from jinja2 import Environment, FileSystemLoader

from conversation_classifier.llm.text_utils import (
    normalize_conversation,
    truncate_at_sentence_boundary,
)
from conversation_classifier.models.enums import MessageRole
from conversation_classifier.models.llm_models import ChatMessage
from conversation_classifier.models.taxonomy import CategoryTaxonomy


logger = structlog.get_logger(__name__)

DEFAULT_TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "prompts"
TITLE_MAX_WORDS = 10


class PromptBuilder:
    """
    Build the chat messages sent for one classification.
    
    The system message is static. The user message carries the taxonomy
    (as `{"capabilities": [...]}` JSON) and the conversation text.
    """
    
    def __init__(
        self,
        taxonomy: CategoryTaxonomy,
        templates_dir: Optional[Union[str, Path]] = None,
        conversation_char_limit: int = 12000,
    ):
        """
        Initialize prompt builder.
        
        Args:
            taxonomy: Categories presented to the model
            templates_dir: Directory containing system_prompt.txt and
                user_prompt_template.txt (default: templates shipped with the package)
            conversation_char_limit: Max conversation characters sent to the model
        """
        self.taxonomy = taxonomy
        self.templates_dir = Path(templates_dir) if templates_dir else DEFAULT_TEMPLATES_DIR
        self.conversation_char_limit = conversation_char_limit
        
        self.jinja_env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            trim_blocks=True,
            lstrip_blocks=True,
            autoescape=False,  # Prompts, not HTML
            keep_trailing_newline=False,
        )
        
        try:
            self.system_template = self.jinja_env.get_template("system_prompt.txt")
            self.user_template = self.jinja_env.get_template("user_prompt_template.txt")
        except Exception as e:
            logger.error("Failed to load prompt templates", error=str(e), templates_dir=str(self.templates_dir))
            raise
        
        # The taxonomy is immutable, so its JSON is rendered once
        self.capabilities_json = json.dumps(taxonomy.to_prompt_payload(), indent=2, ensure_ascii=False)
        
        logger.debug(
            "PromptBuilder initialized",
            templates_dir=str(self.templates_dir),
            categories_count=len(taxonomy),
            conversation_char_limit=conversation_char_limit
        )
    
    def build_system_prompt(self) -> str:
        """Render the static system prompt."""
        return self.system_template.render().strip()
    
    def build_user_prompt(self, conversation: str) -> tuple[str, dict]:
        """
        Build the user prompt for a conversation.
        
        Args:
            conversation: Raw conversation transcript
            
        Returns:
            Tuple of (rendered_prompt, metadata_dict)
            
        Raises:
            ValueError: If the conversation is empty or whitespace-only
        """
        normalized = normalize_conversation(conversation)
        if not normalized:
            raise ValueError("conversation is empty")
        
        truncated = truncate_at_sentence_boundary(normalized, self.conversation_char_limit)
        truncation_applied = len(truncated) < len(normalized)
        if truncation_applied:
            logger.warning(
                "Conversation truncated",
                original_length=len(normalized),
                truncated_length=len(truncated),
                limit=self.conversation_char_limit
            )
        
        rendered = self.user_template.render(
            capabilities_json=self.capabilities_json,
            conversation=truncated,
            topics=list(self.taxonomy.topics),
            title_max_words=TITLE_MAX_WORDS,
        ).strip()
        
        metadata = {
            "truncation_applied": truncation_applied,
            "original_length": len(normalized),
            "conversation_length": len(truncated),
            "categories_count": len(self.taxonomy),
        }
        return rendered, metadata
    
    def build_messages(self, conversation: str) -> tuple[list[ChatMessage], dict]:
        """
        Build the system + user message list for a conversation.
        
        Returns:
            Tuple of (messages, metadata_dict)
        """
        system_prompt = self.build_system_prompt()
        user_prompt, metadata = self.build_user_prompt(conversation)
        messages = [
            ChatMessage(role=MessageRole.SYSTEM, content=system_prompt),
            ChatMessage(role=MessageRole.USER, content=user_prompt),
        ]
        metadata["prompt_length"] = len(system_prompt) + len(user_prompt)
        
        logger.debug("Messages built", **metadata)
        return messages, metadata
