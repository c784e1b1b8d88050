"""
Configuration settings for the Conversation Classifier.

All settings are loaded from environment variables with sensible defaults.
Use .env file for local development.
"""

from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""
    
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )
    
    # === Application ===
    APP_NAME: str = "Conversation Classifier"
    APP_VERSION: str = "0.1.0"
    LOG_LEVEL: str = "INFO"
    ENVIRONMENT: str = "development"
    
    # === Provider Selection ===
    LLM_PROVIDER: str = "openai"  # "openai" or "ollama"
    
    # === OpenAI-compatible Chat API ===
    OPENAI_API_KEY: Optional[str] = None
    OPENAI_BASE_URL: str = "https://api.openai.com/v1"
    OPENAI_MODEL: str = "gpt-4o-mini"
    
    # === Ollama ===
    OLLAMA_BASE_URL: str = "http://localhost:11434"
    OLLAMA_MODEL: str = "qwen2.5:7b"
    
    # === LLM Generation Parameters ===
    LLM_TIMEOUT: int = 60  # seconds
    LLM_TEMPERATURE: float = 0.0
    LLM_MAX_TOKENS: int = 1024
    LLM_CONNECTION_RETRIES: int = 1  # 1 = one HTTP call per classification attempt
    
    # === Retry Loop ===
    MAX_ATTEMPTS: int = 3
    RETRY_BACKOFF_BASE: float = 0.0  # 0 disables sleeping between attempts
    
    # === Input Processing ===
    CONVERSATION_CHAR_LIMIT: int = 12000
    
    # === Taxonomy & Prompts ===
    TAXONOMY_PATH: Optional[str] = None  # None = built-in default taxonomy
    PROMPT_TEMPLATES_DIR: Optional[str] = None  # None = templates shipped with the package


def get_settings() -> Settings:
    """Build a fresh Settings instance from the current environment."""
    return Settings()
