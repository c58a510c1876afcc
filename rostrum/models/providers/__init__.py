"""Model providers package."""

from .providers import ProviderFactory
from .ollama_provider import OllamaProvider
from .open_router_provider import OpenRouterProvider
from .base_model_provider import BaseModelProvider
from .exceptions import ProviderError, ProviderRateLimitError, ProviderSchemaError

__all__ = [
    "ProviderFactory",
    "OllamaProvider",
    "OpenRouterProvider",
    "BaseModelProvider",
    "ProviderError",
    "ProviderRateLimitError",
    "ProviderSchemaError",
]
