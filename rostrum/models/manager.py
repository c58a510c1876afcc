"""Model manager in front of the configured text-generation provider."""

from __future__ import annotations

import logging
import time
from collections.abc import AsyncIterator
from typing import TypeVar

from pydantic import BaseModel

from rostrum.config.settings import SystemConfig

from .providers.base_model_provider import BaseModelProvider
from .providers.providers import ProviderFactory

SchemaT = TypeVar("SchemaT", bound=BaseModel)

logger = logging.getLogger(__name__)


class ModelManager:
    """Routes generation calls to a single provider and logs their timing."""

    def __init__(
        self, system_config: SystemConfig, provider: BaseModelProvider | None = None
    ):
        self._system_config = system_config
        self._provider = provider

    @property
    def provider(self) -> BaseModelProvider:
        """Return (and cache) the configured provider instance."""
        if self._provider is None:
            self._provider = ProviderFactory.create_provider(
                self._system_config.provider, self._system_config
            )
        return self._provider

    async def stream_response(
        self,
        model: str,
        system_prompt: str,
        user_prompt: str,
        *,
        temperature: float = 0.7,
    ) -> AsyncIterator[str]:
        """Stream text fragments from the specified model."""
        start_time = time.time()
        total_chars = 0
        async for fragment in self.provider.stream_response(
            model, system_prompt, user_prompt, temperature=temperature
        ):
            total_chars += len(fragment)
            yield fragment

        logger.debug(
            "Streamed %s chars from %s (%s) in %sms",
            total_chars,
            model,
            self.provider.provider_name,
            int((time.time() - start_time) * 1000),
        )

    async def generate_response(
        self,
        model: str,
        system_prompt: str,
        user_prompt: str,
        *,
        temperature: float = 0.7,
    ) -> str:
        """Generate a complete, non-streamed response."""
        response = await self.provider.generate_response(
            model, system_prompt, user_prompt, temperature=temperature
        )
        logger.debug(
            "Generated %s chars from %s (%s)",
            len(response),
            model,
            self.provider.provider_name,
        )
        return response

    async def generate_structured(
        self,
        model: str,
        system_prompt: str,
        user_prompt: str,
        schema: type[SchemaT],
        *,
        temperature: float = 0.7,
    ) -> SchemaT:
        """Generate a schema-validated object from the specified model."""
        result = await self.provider.generate_structured(
            model, system_prompt, user_prompt, schema, temperature=temperature
        )
        logger.debug("Generated structured %s from %s", schema.__name__, model)
        return result

    async def get_available_models(self) -> list[str]:
        """List the provider's models, falling back to the static list."""
        try:
            models = await self.provider.get_available_models()
        except Exception as exc:  # noqa: BLE001
            logger.error(
                "Failed to get models from %s: %s", self._system_config.provider, exc
            )
            return list(self._system_config.fallback_models)

        if not models:
            logger.warning(
                "Provider %s returned no models, using fallback list",
                self._system_config.provider,
            )
            return list(self._system_config.fallback_models)
        return models
