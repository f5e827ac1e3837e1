"""Language model client for analysis and transaction extraction"""

from typing import Optional, Protocol

import httpx
import openai
from openai import AsyncOpenAI

from wealthease.config import settings
from wealthease.domain.exceptions import (
    LLMAuthenticationError,
    LLMNotConfiguredError,
    LLMQuotaExceededError,
    LLMServiceError,
)
from wealthease.infrastructure.observability.metrics import llm_failures_counter, llm_latency_histogram


class LLMClient(Protocol):
    """Anything that turns a prompt into text"""

    async def complete(
        self,
        prompt: str,
        *,
        system: Optional[str] = None,
        model: Optional[str] = None,
        max_tokens: Optional[int] = None,
        temperature: Optional[float] = None,
    ) -> str:
        ...


class OpenAIClient:
    """Chat completions client for the OpenAI API"""

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_key = api_key or settings.openai_api_key
        if not self.api_key:
            raise LLMNotConfiguredError()
        self.model = model or settings.openai_model
        self.base_url = base_url or settings.openai_base_url
        self.timeout = timeout or settings.http_timeout_seconds
        self.max_tokens = settings.openai_max_tokens
        self.temperature = settings.openai_temperature
        self.transport = transport

    async def complete(
        self,
        prompt: str,
        *,
        system: Optional[str] = None,
        model: Optional[str] = None,
        max_tokens: Optional[int] = None,
        temperature: Optional[float] = None,
    ) -> str:
        """
        Send one chat completion and return the reply text.

        No retries: every failure is surfaced to the caller.

        Raises:
            LLMQuotaExceededError: 429 / insufficient quota
            LLMAuthenticationError: 401 / invalid key
            LLMServiceError: timeouts, connection problems, other API errors
        """
        messages = []
        if system:
            messages.append({"role": "system", "content": system})
        messages.append({"role": "user", "content": prompt})

        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as http_client:
            client = AsyncOpenAI(
                api_key=self.api_key,
                base_url=self.base_url,
                max_retries=0,
                http_client=http_client,
            )
            try:
                with llm_latency_histogram.time():
                    completion = await client.chat.completions.create(
                        model=model or self.model,
                        messages=messages,
                        max_tokens=max_tokens or self.max_tokens,
                        temperature=self.temperature if temperature is None else temperature,
                    )

            except openai.RateLimitError as e:
                llm_failures_counter.labels(reason="quota").inc()
                raise LLMQuotaExceededError() from e
            except openai.AuthenticationError as e:
                llm_failures_counter.labels(reason="auth").inc()
                raise LLMAuthenticationError() from e
            except openai.APITimeoutError as e:
                llm_failures_counter.labels(reason="timeout").inc()
                raise LLMServiceError(f"OpenAI API timeout after {self.timeout}s") from e
            except openai.APIStatusError as e:
                llm_failures_counter.labels(reason="upstream").inc()
                raise LLMServiceError(f"OpenAI API error: {e.status_code}") from e
            except openai.APIError as e:
                llm_failures_counter.labels(reason="upstream").inc()
                raise LLMServiceError(f"OpenAI API error: {e}") from e

        if not completion.choices:
            return ""
        return completion.choices[0].message.content or ""
