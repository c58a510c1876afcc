from typing import TYPE_CHECKING, Any
import logging

import httpx
from openai import AsyncOpenAI

from .base_model_provider import BaseModelProvider

if TYPE_CHECKING:
    from rostrum.config.settings import SystemConfig

logger = logging.getLogger(__name__)


class OpenRouterProvider(BaseModelProvider):
    """OpenRouter model provider implementation."""

    def __init__(self, system_config: "SystemConfig", client: AsyncOpenAI | None = None):
        openrouter = system_config.openrouter
        super().__init__(
            system_config,
            max_retries=openrouter.max_retries,
            retry_base_delay=openrouter.retry_base_delay,
        )

        if client is not None:
            self._client = client
            return

        api_key = openrouter.resolve_api_key()
        if not api_key:
            logger.warning(
                "No OpenRouter API key found. Set OPENROUTER_API_KEY or configure in system settings."
            )
            self._client = None
        else:
            # Backoff is handled by _call_with_backoff, so the SDK must not retry on its own
            self._client = AsyncOpenAI(
                base_url=openrouter.base_url,
                api_key=api_key,
                timeout=openrouter.timeout,
                max_retries=0,
                default_headers=self._tracking_headers(),
            )

    @property
    def provider_name(self) -> str:
        return "openrouter"

    def _tracking_headers(self) -> dict[str, str]:
        headers = {}
        if self.system_config.openrouter.site_url:
            headers["HTTP-Referer"] = self.system_config.openrouter.site_url
        if self.system_config.openrouter.app_name:
            headers["X-Title"] = self.system_config.openrouter.app_name
        return headers

    def _extra_body(self) -> dict[str, Any] | None:
        effort = self.system_config.openrouter.reasoning_effort
        if not effort:
            return None
        return {"reasoning": {"effort": effort}}

    async def get_available_models(self) -> list[str]:
        """Fetch the model catalogue, sorted by id."""
        async with httpx.AsyncClient() as client:
            response = await client.get(
                f"{self.system_config.openrouter.base_url}/models",
                headers=self._tracking_headers(),
                timeout=30.0,
            )
            response.raise_for_status()
            payload = response.json()

        models = sorted(
            entry["id"] for entry in payload.get("data", []) if entry.get("id")
        )
        logger.info(f"OpenRouter: Fetched {len(models)} models")
        return models
