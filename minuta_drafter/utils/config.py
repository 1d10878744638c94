"""Configuration management using pydantic-settings"""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # API keys - support both Anthropic and Groq
    anthropic_api_key: Optional[str] = Field(default=None, description="Anthropic API key for Claude")
    groq_api_key: Optional[str] = Field(default=None, description="Groq API key for LLM access")

    # LLM provider: 'anthropic' or 'groq'
    llm_provider: str = Field(default="anthropic", description="LLM provider to use")

    log_level: str = Field(default="INFO", description="Logging level")

    # LLM settings
    llm_model: str = Field(default="claude-sonnet-4-20250514", description="LLM model to use")
    llm_temperature: float = Field(default=0.3, description="LLM temperature")
    llm_max_tokens: int = Field(default=4096, description="Max tokens in response")
    llm_timeout: float = Field(default=120.0, description="Transport timeout in seconds for one LLM call")

    # Session store settings
    session_ttl_minutes: int = Field(default=30, description="Idle minutes before a session is evicted")
    max_sessions: int = Field(default=1000, description="Max sessions kept in memory")

    # API server
    api_host: str = Field(default="127.0.0.1", description="Host for `minuta-drafter serve`")
    api_port: int = Field(default=8000, description="Port for `minuta-drafter serve`")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


def get_settings() -> Settings:
    """Get application settings"""
    return Settings()
