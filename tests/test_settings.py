"""Tests for configuration loading and validation."""

import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from rostrum.config.settings import (
    AppConfig,
    DebateConfig,
    FALLBACK_MODELS,
    OpenRouterConfig,
    get_default_config,
)


@pytest.mark.unit
def test_defaults_match_documented_values() -> None:
    config = AppConfig()

    assert config.debate.max_rounds == 3
    assert len(config.debate.judge_models) == 3
    assert config.debate.context_window == 10
    assert config.system.provider == "openrouter"
    assert config.system.openrouter.max_retries == 3
    assert config.system.openrouter.retry_base_delay == 10.0
    assert config.system.fallback_models == FALLBACK_MODELS


@pytest.mark.unit
def test_judge_models_must_be_exactly_three() -> None:
    with pytest.raises(ValidationError):
        DebateConfig(judge_models=["a", "b"])


@pytest.mark.unit
def test_api_key_falls_back_to_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("OPENROUTER_API_KEY", "env-key")

    assert OpenRouterConfig().resolve_api_key() == "env-key"
    assert OpenRouterConfig(api_key="explicit").resolve_api_key() == "explicit"


@pytest.mark.unit
def test_load_json_config(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"debate": {"max_rounds": 5}}), encoding="utf-8")

    config = AppConfig.load_from_file(path)

    assert config.debate.max_rounds == 5
    assert config.system.provider == "openrouter"


@pytest.mark.unit
def test_yaml_round_trip(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "config.yaml"
    original = AppConfig(debate=DebateConfig(max_rounds=2, judge_models=["x", "y", "z"]))

    original.save_to_file(path)
    loaded = AppConfig.load_from_file(path)

    assert loaded.debate.max_rounds == 2
    assert loaded.debate.judge_models == ["x", "y", "z"]


@pytest.mark.unit
def test_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        AppConfig.load_from_file(tmp_path / "absent.json")


@pytest.mark.unit
def test_unknown_section_rejected(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"tournament": {}}), encoding="utf-8")

    with pytest.raises(ValueError, match="Unknown config sections"):
        AppConfig.load_from_file(path)


@pytest.mark.unit
def test_default_config_uses_template_when_file_missing(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("ROSTRUM_CONFIG", str(tmp_path / "missing.json"))

    config = get_default_config()

    assert config.debate.max_rounds == 3
    assert config.system.openrouter.app_name == "Rostrum Debate Arena"


@pytest.mark.unit
def test_default_config_reads_env_path(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    path = tmp_path / "custom.yml"
    path.write_text("system:\n  provider: ollama\n", encoding="utf-8")
    monkeypatch.setenv("ROSTRUM_CONFIG", str(path))

    assert get_default_config().system.provider == "ollama"
