from enum import Enum
from pathlib import Path
from typing import List, Optional
from pydantic import BaseModel, Field


class StageState(str, Enum):
    PENDING = "pending"
    RUNNING = "running"
    DONE = "done"
    SKIPPED = "skipped"


class BatchStats(BaseModel):
    succeeded: int = Field(0, ge=0, description="Items that completed successfully")
    failed: int = Field(0, ge=0, description="Items recorded with an item-local failure")
    elapsed_seconds: float = Field(0.0, ge=0.0, description="Wall time of the batch")

    @property
    def total(self) -> int:
        return self.succeeded + self.failed


class StageResult(BaseModel):
    artifact: Path = Field(..., description="Artifact produced by the stage")
    stats: BatchStats = Field(default_factory=BatchStats)


class StageOutcome(BaseModel):
    name: str = Field(..., description="Stage name (fetch, generate, publish)")
    state: StageState = Field(StageState.PENDING)
    artifact: Optional[Path] = Field(None, description="Artifact produced or reused")
    succeeded: int = Field(0, ge=0)
    failed: int = Field(0, ge=0)
    duration_seconds: float = Field(0.0, ge=0.0)


class PipelineRun(BaseModel):
    run_id: str
    stages: List[StageOutcome] = Field(default_factory=list)

    def outcome(self, name: str) -> StageOutcome:
        for stage in self.stages:
            if stage.name == name:
                return stage
        raise KeyError(f"Unknown stage: {name}")

    @property
    def is_terminal(self) -> bool:
        return all(s.state in (StageState.DONE, StageState.SKIPPED) for s in self.stages)

    @property
    def total_failed(self) -> int:
        return sum(s.failed for s in self.stages)
