from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from rostrum.config.settings import JUDGE_PANEL_SIZE


class TopicRequest(BaseModel):
    """Request model for submitting a debate topic."""

    topic: str

    @field_validator("topic")
    @classmethod
    def validate_topic(cls, v: str) -> str:
        """Reject empty or whitespace-only topics."""
        v = v.strip()
        if not v:
            raise ValueError("Topic must not be empty")
        return v


class ParticipantInput(BaseModel):
    """One debater as submitted by the client."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str | None = None
    model: str = Field(min_length=1)
    position: str = Field(min_length=1)
    name: str | None = None
    color: str | None = None


class ConfirmRequest(BaseModel):
    """Request model for confirming positions and participants."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    participants: list[ParticipantInput] = Field(min_length=2)
    max_rounds: int | None = Field(default=None, ge=1)
    judge_models: list[str] | None = None
    custom_system_prompt: str | None = None
    positions: list[str] | None = None

    @field_validator("judge_models")
    @classmethod
    def validate_judge_models(cls, v):
        """Validate judge_models field."""
        if v is None:
            return v
        if len(v) != JUDGE_PANEL_SIZE:
            raise ValueError(f"Exactly {JUDGE_PANEL_SIZE} judge models are required")
        if not all(model.strip() for model in v):
            raise ValueError("Judge models must not be empty")
        return v

    @field_validator("custom_system_prompt")
    @classmethod
    def blank_prompt_is_none(cls, v: str | None) -> str | None:
        if v is None or not v.strip():
            return None
        return v

    @model_validator(mode="after")
    def validate_participants(self) -> "ConfirmRequest":
        ids = [p.id for p in self.participants if p.id]
        if len(ids) != len(set(ids)):
            raise ValueError("Participant ids must be unique")

        if self.positions is not None:
            allowed = set(self.positions)
            outside = [p.position for p in self.participants if p.position not in allowed]
            if outside:
                raise ValueError(f"Participant positions not in confirmed positions: {outside}")
        return self

    def resolved_positions(self) -> list[str]:
        """Confirmed positions, defaulting to participant positions in order."""
        if self.positions is not None:
            return list(self.positions)
        return list(dict.fromkeys(p.position for p in self.participants))
