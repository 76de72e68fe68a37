from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from ...core.models import RunState
from ...core.shuffle import U32_MASK

__all__ = [
    "CompleteRequest",
    "RunStatePayload",
    "ShuffleRequest",
    "StartRunRequest",
]


class _APIModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class RunStatePayload(_APIModel):
    run_id: int
    queue: list[str]
    completed: list[str]
    failed: bool
    # Absent timestamps serialise as null, never as 0.
    started_at_ms: int | None = None
    updated_at_ms: int | None = None

    @classmethod
    def from_state(cls, state: RunState) -> RunStatePayload:
        return cls(**state.to_dict())

    def to_state(self) -> RunState:
        return RunState(
            run_id=self.run_id,
            queue=tuple(self.queue),
            completed=tuple(self.completed),
            failed=self.failed,
            started_at_ms=self.started_at_ms,
            updated_at_ms=self.updated_at_ms,
        )


class ShuffleRequest(_APIModel):
    length: int = Field(..., alias="len", ge=0, le=U32_MASK)
    seed: int | None = Field(default=None, ge=0, le=U32_MASK)


class StartRunRequest(_APIModel):
    characters: list[str] = Field(default_factory=list)
    seed: int | None = Field(default=None, ge=0, le=U32_MASK)


class CompleteRequest(_APIModel):
    character: str | None = None
