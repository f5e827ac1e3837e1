"""Configuration management using Pydantic Settings"""

from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # OpenAI
    openai_api_key: Optional[str] = None
    openai_base_url: Optional[str] = None
    openai_model: str = "gpt-3.5-turbo"
    openai_max_tokens: int = 1500
    openai_temperature: float = 0.7

    # Chatbot extraction uses a cheaper, more deterministic model
    openai_chat_model: str = "gpt-4o-mini"
    openai_chat_max_tokens: int = 500
    openai_chat_temperature: float = 0.3

    # Service
    service_name: str = "wealthease-insights"
    environment: str = "development"
    log_level: str = "INFO"
    port: int = 3001

    # HTTP Client
    http_timeout_seconds: float = 30.0

    # Rate limiting (per client IP, fixed window)
    analysis_rate_limit: int = 10
    analysis_rate_window_seconds: int = 15 * 60
    chatbot_rate_limit: int = 20
    chatbot_rate_window_seconds: int = 5 * 60

    @property
    def openai_configured(self) -> bool:
        return bool(self.openai_api_key)

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"


settings = Settings()
