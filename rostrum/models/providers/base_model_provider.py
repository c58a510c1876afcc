from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from collections.abc import AsyncIterator, Awaitable, Callable
from typing import TYPE_CHECKING, Any, TypeVar

from openai import AsyncOpenAI, RateLimitError
from pydantic import BaseModel, ValidationError

from .exceptions import ProviderError, ProviderRateLimitError, ProviderSchemaError

if TYPE_CHECKING:
    from rostrum.config.settings import SystemConfig

logger = logging.getLogger(__name__)

SchemaT = TypeVar("SchemaT", bound=BaseModel)
T = TypeVar("T")


class BaseModelProvider(ABC):
    """Abstract base class for model providers.

    Concrete providers speak the OpenAI chat-completions protocol, so the
    streaming and structured calls live here and subclasses only build the
    client and list their models.
    """

    def __init__(
        self,
        system_config: "SystemConfig",
        *,
        max_retries: int = 3,
        retry_base_delay: float = 10.0,
    ):
        self.system_config = system_config
        self.max_retries = max_retries
        self.retry_base_delay = retry_base_delay
        self._client: AsyncOpenAI | None = None

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Return the name of this provider."""
        pass

    @abstractmethod
    async def get_available_models(self) -> list[str]:
        """Get list of available models from this provider."""
        pass

    def _extra_body(self) -> dict[str, Any] | None:
        """Provider-specific fields merged into every request body."""
        return None

    def _require_client(self) -> AsyncOpenAI:
        if self._client is None:
            raise ProviderError(
                self.provider_name, None, "client not initialized - check API key"
            )
        return self._client

    @staticmethod
    def _build_messages(system_prompt: str, user_prompt: str) -> list[dict[str, str]]:
        return [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_prompt},
        ]

    async def _call_with_backoff(
        self, model: str, request: Callable[[], Awaitable[T]]
    ) -> T:
        """Run a request, retrying rate-limit failures with exponential backoff.

        The delay before retry ``n`` (0-based) is ``retry_base_delay * 2**n``.
        After ``max_retries`` total attempts the failure is re-raised as
        ProviderRateLimitError.
        """
        for attempt in range(self.max_retries):
            try:
                return await request()
            except RateLimitError as exc:
                if attempt >= self.max_retries - 1:
                    raise ProviderRateLimitError(
                        provider=self.provider_name,
                        model=model,
                        status_code=429,
                        detail=f"Rate limited after {self.max_retries} attempts",
                    ) from exc

                delay = self.retry_base_delay * (2**attempt)
                logger.warning(
                    "Rate limit hit for %s. Retrying in %.1fs (attempt %s/%s)",
                    model,
                    delay,
                    attempt + 1,
                    self.max_retries,
                )
                await asyncio.sleep(delay)

        raise ProviderError(self.provider_name, model, "max_retries must be at least 1")

    async def stream_response(
        self,
        model: str,
        system_prompt: str,
        user_prompt: str,
        *,
        temperature: float = 0.7,
    ) -> AsyncIterator[str]:
        """Yield text fragments as the model produces them."""
        client = self._require_client()

        stream = await self._call_with_backoff(
            model,
            lambda: client.chat.completions.create(
                model=model,
                messages=self._build_messages(system_prompt, user_prompt),  # type: ignore[arg-type]
                temperature=temperature,
                stream=True,
                extra_body=self._extra_body(),
            ),
        )

        async for chunk in stream:
            if not chunk.choices:
                continue
            content = chunk.choices[0].delta.content
            if content:
                yield content

    async def generate_response(
        self,
        model: str,
        system_prompt: str,
        user_prompt: str,
        *,
        temperature: float = 0.7,
    ) -> str:
        """Generate a complete response by draining the stream."""
        parts: list[str] = []
        async for fragment in self.stream_response(
            model, system_prompt, user_prompt, temperature=temperature
        ):
            parts.append(fragment)
        return "".join(parts)

    async def generate_structured(
        self,
        model: str,
        system_prompt: str,
        user_prompt: str,
        schema: type[SchemaT],
        *,
        temperature: float = 0.7,
    ) -> SchemaT:
        """Generate a single object validated against ``schema``."""
        client = self._require_client()

        response = await self._call_with_backoff(
            model,
            lambda: client.chat.completions.create(
                model=model,
                messages=self._build_messages(system_prompt, user_prompt),  # type: ignore[arg-type]
                temperature=temperature,
                response_format={
                    "type": "json_schema",
                    "json_schema": {
                        "name": schema.__name__,
                        "strict": True,
                        "schema": schema.model_json_schema(),
                    },
                },
                extra_body=self._extra_body(),
            ),
        )

        content = ""
        if response.choices:
            content = response.choices[0].message.content or ""

        try:
            return schema.model_validate_json(content)
        except ValidationError as exc:
            logger.error(
                "Structured output from %s failed %s validation: %s",
                model,
                schema.__name__,
                exc,
            )
            raise ProviderSchemaError(
                self.provider_name,
                model,
                f"Response did not match {schema.__name__}: {exc.error_count()} error(s)",
                raw_content=content,
            ) from exc
