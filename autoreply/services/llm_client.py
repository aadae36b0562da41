# autoreply/services/llm_client.py
import asyncio
import re
from dataclasses import dataclass
from typing import Dict, Generic, List, Type, TypeVar, Union

import backoff  # For exponential backoff retries
from openai import AsyncOpenAI, OpenAIError, APIError, RateLimitError, APITimeoutError
from pydantic import BaseModel, ValidationError

from autoreply.core.config import logger

T = TypeVar("T")

@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

@dataclass(frozen=True)
class Err:
    reason: str

Result = Union[Ok[T], Err]

def unwrap_or(result: Result[T], default: T) -> T:
    """Returns the wrapped value, or ``default`` for an ``Err``."""
    if isinstance(result, Ok):
        return result.value
    return default

_CODE_FENCE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL | re.IGNORECASE)

def strip_code_fence(content: str) -> str:
    """Models sometimes wrap JSON in markdown fences despite being told not to."""
    match = _CODE_FENCE.match(content.strip())
    return match.group(1) if match else content.strip()


class ChatCompletionClient:
    """
    Thin wrapper over the OpenAI chat completions API.

    Built once per process (FastAPI lifespan or Celery worker) and injected
    into the services that need it. Transport problems never escape as
    exceptions: every call resolves to ``Ok`` or ``Err``.
    """

    def __init__(
        self,
        api_key: str = None,
        model: str = "gpt-4-turbo",
        organization: str = None,
        timeout: float = 30.0,
        max_tries: int = 1,
        client: AsyncOpenAI = None,
    ):
        self.model = model
        self._client = client or AsyncOpenAI(api_key=api_key, organization=organization, timeout=timeout)
        # Define retry strategy for transient OpenAI errors
        self._create = backoff.on_exception(
            backoff.expo,
            (RateLimitError, APITimeoutError, APIError),
            max_tries=max_tries,
            jitter=backoff.full_jitter,
        )(self._create_completion)

    @classmethod
    def from_settings(cls, settings) -> "ChatCompletionClient":
        return cls(
            api_key=settings.OPENAI_API_KEY,
            model=settings.OPENAI_MODEL,
            organization=settings.OPENAI_ORG_ID,
            timeout=settings.LLM_TIMEOUT_SECONDS,
            max_tries=settings.LLM_MAX_TRIES,
        )

    async def _create_completion(self, messages: List[Dict[str, str]], **params):
        return await self._client.chat.completions.create(model=self.model, messages=messages, **params)

    async def complete(self, messages: List[Dict[str, str]], **params) -> Result[str]:
        """Runs one chat completion and returns the stripped text content."""
        try:
            response = await self._create(messages, **params)
        except (OpenAIError, asyncio.TimeoutError) as e:
            logger.error(f"OpenAI request failed: {e}", exc_info=True)
            return Err(f"{type(e).__name__}: {e}")

        choices = getattr(response, "choices", None) or []
        if not choices:
            return Err("completion returned no choices")
        choice = choices[0]
        if getattr(choice, "finish_reason", None) == "content_filter" or getattr(choice.message, "refusal", None):
            logger.warning("Completion rejected by content policy")
            return Err("completion rejected by content policy")
        content = choice.message.content
        if not content or not content.strip():
            return Err("completion returned empty content")
        return Ok(content.strip())

    async def complete_json(self, messages: List[Dict[str, str]], schema: Type[BaseModel], **params) -> Result[BaseModel]:
        """Runs a completion and validates its content against ``schema``."""
        result = await self.complete(messages, **params)
        if isinstance(result, Err):
            return result
        try:
            return Ok(schema.model_validate_json(strip_code_fence(result.value)))
        except ValidationError as e:
            logger.warning(f"Malformed {schema.__name__} payload '{result.value[:50]}...': {e.error_count()} error(s)")
            return Err(f"malformed {schema.__name__} payload")

    async def aclose(self):
        await self._client.close()
