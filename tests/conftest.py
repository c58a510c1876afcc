"""Pytest configuration and shared fixtures.

Provides a deterministic in-process provider so the debate engine, the
judging panel and the web API can run end to end without network access.
"""

import asyncio
import json
from collections.abc import AsyncIterator
from typing import Any

import pytest

from rostrum.config.settings import DebateConfig, SystemConfig
from rostrum.debate_engine.broadcaster import EventBroadcaster
from rostrum.debate_engine.core import DebateEngine
from rostrum.debate_engine.models import Participant
from rostrum.debate_engine.session_store import SessionStore
from rostrum.debate_engine.types import DebatePhase
from rostrum.models.manager import ModelManager
from rostrum.models.providers import BaseModelProvider, ProviderRateLimitError

JUDGE_MODELS = ["judge/a", "judge/b", "judge/c"]


class FakeProvider(BaseModelProvider):
    """Scripted provider keyed by model name.

    - ``chunks``: fragments streamed per model (default ``["Hello ", "world"]``)
    - ``failing_models``: models whose stream raises a rate-limit error
    - ``structured``: payload (or exception) returned per model
    - ``responses``: text (or exception) returned per model for plain calls
    - ``stream_delay``: seconds slept before each streamed chunk
    """

    def __init__(
        self,
        *,
        chunks: dict[str, list[str]] | None = None,
        failing_models: set[str] | None = None,
        structured: dict[str, Any] | None = None,
        responses: dict[str, Any] | None = None,
        models: list[str] | None = None,
        stream_delay: float = 0.0,
    ):
        super().__init__(SystemConfig(), max_retries=1, retry_base_delay=0.0)
        self.chunks = chunks or {}
        self.failing_models = failing_models or set()
        self.structured = structured or {}
        self.responses = responses or {}
        self.models = models if models is not None else ["debater/pro", "debater/con"]
        self.stream_delay = stream_delay
        self.calls: list[dict[str, Any]] = []

    @property
    def provider_name(self) -> str:
        return "fake"

    async def get_available_models(self) -> list[str]:
        return list(self.models)

    async def stream_response(
        self,
        model: str,
        system_prompt: str,
        user_prompt: str,
        *,
        temperature: float = 0.7,
    ) -> AsyncIterator[str]:
        self.calls.append(
            {"kind": "stream", "model": model, "system": system_prompt, "prompt": user_prompt}
        )
        if model in self.failing_models:
            await asyncio.sleep(0.01)
            raise ProviderRateLimitError(provider="fake", model=model)

        for chunk in self.chunks.get(model, ["Hello ", "world"]):
            await asyncio.sleep(self.stream_delay)
            yield chunk

    async def generate_response(
        self,
        model: str,
        system_prompt: str,
        user_prompt: str,
        *,
        temperature: float = 0.7,
    ) -> str:
        self.calls.append(
            {"kind": "response", "model": model, "system": system_prompt, "prompt": user_prompt}
        )
        value = self.responses.get(model, "A fine debate.")
        if isinstance(value, Exception):
            raise value
        return value

    async def generate_structured(
        self,
        model: str,
        system_prompt: str,
        user_prompt: str,
        schema,
        *,
        temperature: float = 0.7,
    ):
        self.calls.append(
            {"kind": "structured", "model": model, "system": system_prompt, "prompt": user_prompt}
        )
        payload = self.structured[model]
        if isinstance(payload, Exception):
            raise payload
        return schema.model_validate(payload)

    def calls_of(self, kind: str) -> list[dict[str, Any]]:
        return [call for call in self.calls if call["kind"] == kind]


class RecordingConnection:
    """Push-channel connection that keeps every decoded event."""

    def __init__(self):
        self.events: list[dict[str, Any]] = []

    async def send_text(self, data: str) -> None:
        self.events.append(json.loads(data))

    def of_type(self, event_type: str) -> list[dict[str, Any]]:
        return [event for event in self.events if event["type"] == event_type]


class FailingConnection:
    """Connection whose socket has gone away."""

    async def send_text(self, data: str) -> None:
        raise RuntimeError("connection closed")


@pytest.fixture
def fake_provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture
def model_manager(fake_provider: FakeProvider) -> ModelManager:
    return ModelManager(SystemConfig(), provider=fake_provider)


@pytest.fixture
def debate_config() -> DebateConfig:
    return DebateConfig(judge_models=list(JUDGE_MODELS), position_model="positions/model")


@pytest.fixture
def store(debate_config: DebateConfig) -> SessionStore:
    return SessionStore(debate_config)


@pytest.fixture
def broadcaster() -> EventBroadcaster:
    return EventBroadcaster()


@pytest.fixture
def two_participants() -> list[Participant]:
    return [
        Participant(id="p1", model="debater/pro", position="Pro-X", name="Alice", color="blue"),
        Participant(id="p2", model="debater/con", position="Con-X", name="Bob", color="red"),
    ]


@pytest.fixture
def make_engine(store, broadcaster, model_manager, debate_config):
    """Build an engine for a session already confirmed and parked at ``phase``."""

    def factory(
        participants: list[Participant],
        phase: DebatePhase,
        *,
        max_rounds: int = 3,
        topic: str = "Should X be adopted?",
        recorder: RecordingConnection | None = None,
    ) -> DebateEngine:
        session_id = store.create()
        store.update(
            session_id,
            topic=topic,
            participants=list(participants),
            confirmed_positions=list(dict.fromkeys(p.position for p in participants)),
            max_rounds=max_rounds,
            phase=phase,
        )
        if recorder is not None:
            broadcaster.subscribe(session_id, recorder)
        return DebateEngine(session_id, store, broadcaster, model_manager, debate_config)

    return factory


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
