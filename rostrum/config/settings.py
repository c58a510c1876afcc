"""Configuration settings and data models."""

import json
import os
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, Field, field_validator

DEFAULT_MODEL = "google/gemini-3-flash-preview"

FALLBACK_MODELS = [
    "google/gemini-2.0-flash-exp:free",
    "google/gemini-2.0-flash-thinking-exp:free",
    "openai/gpt-3.5-turbo",
    "openai/gpt-4-turbo",
    "anthropic/claude-3.5-sonnet",
]

JUDGE_PANEL_SIZE = 3


class OpenRouterConfig(BaseModel):
    """OpenRouter-specific configuration."""

    api_key: str | None = Field(
        default=None, description="OpenRouter API key (can also be set via OPENROUTER_API_KEY env var)"
    )
    base_url: str = Field(
        default="https://openrouter.ai/api/v1", description="OpenRouter API base URL"
    )
    site_url: str | None = Field(
        default=None, description="Your site URL for OpenRouter referrer tracking"
    )
    app_name: str | None = Field(
        default="Rostrum Debate Arena", description="App name for OpenRouter tracking"
    )
    max_retries: int = Field(
        default=3, ge=1, description="Total attempts per call when rate limited"
    )
    retry_base_delay: float = Field(
        default=10.0, ge=0.0, description="First backoff delay in seconds, doubled per attempt"
    )
    timeout: int = Field(default=60, description="API request timeout in seconds")
    reasoning_effort: str | None = Field(
        default="medium", description="Reasoning effort hint forwarded to OpenRouter"
    )

    def resolve_api_key(self) -> str | None:
        return self.api_key or os.getenv("OPENROUTER_API_KEY")


class OllamaConfig(BaseModel):
    """Ollama-specific configuration."""

    base_url: str = Field(default="http://localhost:11434", description="Ollama API URL")
    timeout: int = Field(
        default=120, description="Request timeout, generous to allow for model loading"
    )
    max_retries: int = Field(default=3, ge=1)
    retry_base_delay: float = Field(default=10.0, ge=0.0)


class DebateConfig(BaseModel):
    """Defaults applied to new debate sessions."""

    max_rounds: int = Field(default=3, ge=1, description="Debate rounds after openings")
    judge_models: list[str] = Field(
        default_factory=lambda: [DEFAULT_MODEL] * JUDGE_PANEL_SIZE,
        description="Models used for the three-judge panel",
    )
    position_model: str = Field(
        default=DEFAULT_MODEL, description="Model used to propose debate positions"
    )
    summary_model: str | None = Field(
        default=None, description="Model for the panel summary (defaults to the first judge)"
    )
    temperature: float = Field(default=0.7, description="Sampling temperature")
    context_window: int = Field(
        default=10, ge=1, description="Prior messages shown to a debater each turn"
    )

    @field_validator("judge_models")
    @classmethod
    def validate_judge_models(cls, v: list[str]) -> list[str]:
        if len(v) != JUDGE_PANEL_SIZE:
            raise ValueError(f"Exactly {JUDGE_PANEL_SIZE} judge models are required")
        return v


class SystemConfig(BaseModel):
    """System-wide configuration."""

    provider: Literal["openrouter", "ollama"] = Field(
        default="openrouter", description="Text generation provider"
    )
    openrouter: OpenRouterConfig = Field(
        default_factory=OpenRouterConfig, description="OpenRouter-specific settings"
    )
    ollama: OllamaConfig = Field(
        default_factory=OllamaConfig, description="Ollama-specific settings"
    )
    fallback_models: list[str] = Field(
        default_factory=lambda: list(FALLBACK_MODELS),
        description="Model list served when the provider cannot be queried",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(default="INFO")


class AppConfig(BaseModel):
    """Complete application configuration."""

    debate: DebateConfig = Field(default_factory=DebateConfig)
    system: SystemConfig = Field(default_factory=SystemConfig)

    @classmethod
    def load_from_file(cls, config_path: Path) -> "AppConfig":
        """Load configuration from a JSON or YAML file."""
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with open(config_path, "r", encoding="utf-8") as f:
            if config_path.suffix in (".yaml", ".yml"):
                data = yaml.safe_load(f) or {}
            else:
                data = json.load(f)

        if not isinstance(data, dict):
            raise ValueError(f"Config file must contain a mapping: {config_path}")

        unknown_sections = set(data) - {"debate", "system"}
        if unknown_sections:
            raise ValueError(f"Unknown config sections: {sorted(unknown_sections)}")

        return cls(**data)

    def save_to_file(self, config_path: Path) -> None:
        """Save configuration to YAML file."""
        config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(config_path, "w", encoding="utf-8") as f:
            yaml.dump(
                self.model_dump(exclude_unset=True),
                f,
                default_flow_style=False,
                indent=2,
            )


def get_default_config() -> AppConfig:
    """Load configuration from ROSTRUM_CONFIG (or debate_config.json), else the template."""
    config_path = Path(os.environ.get("ROSTRUM_CONFIG", "debate_config.json"))
    if not config_path.exists():
        return get_template_config()
    return AppConfig.load_from_file(config_path)


def get_template_config() -> AppConfig:
    """Get template configuration used when no config file is present."""
    return AppConfig(
        debate=DebateConfig(
            max_rounds=3,
            judge_models=[DEFAULT_MODEL] * JUDGE_PANEL_SIZE,
            position_model=DEFAULT_MODEL,
            temperature=0.7,
            context_window=10,
        ),
        system=SystemConfig(
            provider="openrouter",
            openrouter=OpenRouterConfig(
                api_key=None,  # Set here or use OPENROUTER_API_KEY env var
                base_url="https://openrouter.ai/api/v1",
                site_url=None,
                app_name="Rostrum Debate Arena",
                max_retries=3,
                retry_base_delay=10.0,
                timeout=60,
            ),
            log_level="INFO",
        ),
    )
