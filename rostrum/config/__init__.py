"""Configuration models and loaders."""

from .settings import (
    AppConfig,
    DebateConfig,
    OllamaConfig,
    OpenRouterConfig,
    SystemConfig,
    get_default_config,
    get_template_config,
)

__all__ = [
    "AppConfig",
    "DebateConfig",
    "OllamaConfig",
    "OpenRouterConfig",
    "SystemConfig",
    "get_default_config",
    "get_template_config",
]
