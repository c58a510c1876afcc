from typing import TYPE_CHECKING
import logging

import httpx
from openai import AsyncOpenAI

from .base_model_provider import BaseModelProvider

if TYPE_CHECKING:
    from rostrum.config.settings import SystemConfig

logger = logging.getLogger(__name__)


class OllamaProvider(BaseModelProvider):
    """Ollama model provider implementation."""

    def __init__(self, system_config: "SystemConfig", client: AsyncOpenAI | None = None):
        ollama = system_config.ollama
        super().__init__(
            system_config,
            max_retries=ollama.max_retries,
            retry_base_delay=ollama.retry_base_delay,
        )
        self._ollama_base_url = ollama.base_url
        self._client = client or AsyncOpenAI(
            base_url=f"{ollama.base_url}/v1",
            api_key="ollama",  # Ollama doesn't require real API key
            timeout=ollama.timeout,
            max_retries=0,
        )

    @property
    def provider_name(self) -> str:
        return "ollama"

    async def is_running(self) -> bool:
        """Fast health check to see if Ollama server is running."""
        try:
            async with httpx.AsyncClient(timeout=1.0) as client:
                response = await client.get(f"{self._ollama_base_url}/api/tags")
                response.raise_for_status()
                return True
        except httpx.HTTPError as e:
            logger.debug(f"Ollama health check failed: {e}")
            return False

    async def get_available_models(self) -> list[str]:
        """Get list of locally pulled models from Ollama."""
        async with httpx.AsyncClient(timeout=5.0) as client:
            response = await client.get(f"{self._ollama_base_url}/api/tags")
            response.raise_for_status()
            payload = response.json()

        return sorted(
            model["name"] for model in payload.get("models", []) if model.get("name")
        )
