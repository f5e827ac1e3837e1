"""Dependency injection for FastAPI endpoints"""

from typing import Optional

from fastapi import Request

from wealthease.config import Settings
from wealthease.domain.exceptions import LLMNotConfiguredError, RateLimitExceededError
from wealthease.infrastructure.clients.llm import LLMClient, OpenAIClient
from wealthease.infrastructure.observability.metrics import rate_limited_counter
from wealthease.infrastructure.store import TransactionStore


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_settings(request: Request) -> Settings:
    """Settings the app was created with"""
    return request.app.state.settings


def get_transaction_store(request: Request) -> TransactionStore:
    """Transaction store owned by the running app"""
    return request.app.state.store


def get_llm_client(request: Request) -> Optional[LLMClient]:
    """Provide an OpenAI client, or None when no API key is configured"""
    settings = get_settings(request)
    if not settings.openai_configured:
        return None
    return OpenAIClient(
        api_key=settings.openai_api_key,
        model=settings.openai_model,
        base_url=settings.openai_base_url,
        timeout=settings.http_timeout_seconds,
    )


def require_llm(client: Optional[LLMClient]) -> LLMClient:
    """Fail with a descriptive error instead of calling a missing client"""
    if client is None:
        raise LLMNotConfiguredError()
    return client


class RateLimit:
    """Route dependency that enforces one of the app's named limiters per client IP"""

    def __init__(self, limiter_name: str, message: str):
        self.limiter_name = limiter_name
        self.message = message

    def __call__(self, request: Request) -> None:
        limiter = request.app.state.rate_limiters[self.limiter_name]
        client_ip = request.client.host if request.client else "unknown"
        if not limiter.hit(client_ip):
            rate_limited_counter.labels(limiter=self.limiter_name).inc()
            raise RateLimitExceededError(self.message)


analysis_rate_limit = RateLimit("analysis", "Too many AI analysis requests, please try again later.")
chatbot_rate_limit = RateLimit("chatbot", "Too many chatbot requests, please try again later.")
