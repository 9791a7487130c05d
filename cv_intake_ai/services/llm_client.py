"""Chat-completion client used by the structurer, anonymizer and quality analyzer.

Clients are constructed explicitly and passed in; a missing client (None) means
every stage takes its deterministic fallback path.
"""

import asyncio
from typing import Optional, Protocol

from openai import (
    APIConnectionError,
    APIError,
    APITimeoutError,
    AsyncOpenAI,
    RateLimitError,
)

from cv_intake_ai.config import LLM_MAX_RETRIES, LLM_TIMEOUT_SECONDS, MODEL_NAME, OPENAI_API_KEY
from cv_intake_ai.utils.errors import ExternalServiceDegraded, LLMResponseError
from cv_intake_ai.utils.logger import get_logger

logger = get_logger(__name__)


class LLMClient(Protocol):
    """Text in, text out. Any failure is raised as ExternalServiceDegraded."""

    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: float,
        max_tokens: int,
    ) -> str:
        ...


class OpenAIChatClient:
    """OpenAI chat completions with a per-request timeout and bounded retry on transient errors."""

    def __init__(
        self,
        api_key: str,
        model: str = MODEL_NAME,
        timeout: float = LLM_TIMEOUT_SECONDS,
        max_retries: int = LLM_MAX_RETRIES,
        client: Optional[AsyncOpenAI] = None,
    ) -> None:
        self._model = model
        self._max_retries = max(0, max_retries)
        # Retries are handled here so the backoff and logging stay in one place
        self._client = client or AsyncOpenAI(api_key=api_key, timeout=timeout, max_retries=0)

    @property
    def model(self) -> str:
        return self._model

    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: float,
        max_tokens: int,
    ) -> str:
        last_error: Optional[Exception] = None
        for attempt in range(self._max_retries + 1):
            try:
                response = await self._client.chat.completions.create(
                    model=self._model,
                    messages=[
                        {"role": "system", "content": system_prompt},
                        {"role": "user", "content": user_prompt},
                    ],
                    temperature=temperature,
                    max_tokens=max_tokens,
                )
                choice = response.choices[0] if response.choices else None
                if not choice or not choice.message or not choice.message.content:
                    raise LLMResponseError("No content in LLM response")
                if choice.finish_reason == "length":
                    logger.warning("LLM response hit max_tokens=%s; output may be cut off", max_tokens)
                return choice.message.content
            except (APITimeoutError, APIConnectionError, RateLimitError) as e:
                last_error = e
                logger.warning("LLM request failed (attempt %s): %s", attempt + 1, str(e))
            except APIError as e:
                # Auth, bad request and other API errors will not improve on retry
                raise ExternalServiceDegraded(f"LLM API error: {e}") from e
            if attempt < self._max_retries:
                await asyncio.sleep(1.0 * (attempt + 1))  # Backoff

        raise ExternalServiceDegraded(
            f"LLM request failed after {self._max_retries + 1} attempts: {last_error}"
        ) from last_error


def build_llm_client(api_key: Optional[str] = None) -> Optional[OpenAIChatClient]:
    """Return an OpenAI client, or None when no API key is configured (fallback mode)."""
    key = OPENAI_API_KEY if api_key is None else api_key
    if not key:
        logger.warning("OPENAI_API_KEY is not set; using regex fallbacks for extraction")
        return None
    return OpenAIChatClient(api_key=key)


async def complete_or_degrade(
    client: LLMClient,
    system_prompt: str,
    user_prompt: str,
    temperature: float,
    max_tokens: int,
) -> str:
    """Call the client and turn any unexpected exception into ExternalServiceDegraded."""
    try:
        return await client.complete(system_prompt, user_prompt, temperature, max_tokens)
    except ExternalServiceDegraded:
        raise
    except Exception as e:
        raise ExternalServiceDegraded(f"LLM call failed: {e}") from e
