import time
from pathlib import Path
from typing import Iterable, List, Optional

from infra.errors import ArtifactResolutionError
from infra.pipeline import display
from infra.pipeline.base_stage import BaseStage
from infra.pipeline.schemas import PipelineRun, StageOutcome, StageState


class StageSequencer:
    """Run stages in order, reusing existing artifacts for skipped stages.

    Each stage moves pending -> running -> done, or pending -> skipped.
    The artifact of one stage is the input of the next. Before anything
    runs, every skipped stage whose artifact a later executed stage needs
    must resolve to an existing file.
    """

    def __init__(
        self,
        stages: List[BaseStage],
        skip: Iterable[str] = (),
        show_display: bool = True
    ):
        if not stages:
            raise ValueError("StageSequencer needs at least one stage")

        for stage in stages:
            if not stage.name:
                raise ValueError(f"{stage.__class__.__name__}.name is not set")

        self.stages = stages
        self.skip = set(skip)
        unknown = self.skip - {s.name for s in stages}
        if unknown:
            raise ValueError(f"Unknown stage(s) to skip: {', '.join(sorted(unknown))}")

        self.show_display = show_display
        self.storage = stages[0].storage
        self.run_state = PipelineRun(
            run_id=self.storage.run_id,
            stages=[StageOutcome(name=s.name) for s in stages]
        )

    @property
    def logger(self):
        return self.storage.logger("pipeline")

    def is_skipped(self, stage: BaseStage) -> bool:
        return stage.name in self.skip

    def _consumed_later(self, index: int) -> bool:
        name = self.stages[index].name
        return any(
            later.consumes == name and not self.is_skipped(later)
            for later in self.stages[index + 1:]
        )

    def validate(self) -> List[Optional[Path]]:
        """Resolve every skipped stage's artifact up front.

        Returns the artifact resolved for each stage (None where it is only
        known after the stage runs).
        """
        resolved: List[Optional[Path]] = []
        artifact: Optional[Path] = None

        for index, stage in enumerate(self.stages):
            artifact = stage.resolve_output(artifact)
            resolved.append(artifact)

            if not self.is_skipped(stage) or not self._consumed_later(index):
                continue

            if artifact is None:
                raise ArtifactResolutionError(
                    f"Stage '{stage.name}' is skipped but its artifact location is unknown; "
                    f"pass it explicitly"
                )
            if not Path(artifact).exists():
                raise ArtifactResolutionError(
                    f"Stage '{stage.name}' is skipped but its artifact does not exist: {artifact}"
                )

        return resolved

    def run(self) -> PipelineRun:
        resolved = self.validate()

        if self.show_display:
            display.print_pipeline_banner(
                self.run_state.run_id,
                [s.name for s in self.stages],
                [s.name for s in self.stages if self.is_skipped(s)]
            )

        artifact: Optional[Path] = None

        for index, stage in enumerate(self.stages):
            outcome = self.run_state.stages[index]

            if self.is_skipped(stage):
                artifact = resolved[index] if artifact is None else stage.resolve_output(artifact)
                outcome.state = StageState.SKIPPED
                outcome.artifact = artifact
                self.logger.info(f"Skipping stage: {stage.name}", item=str(artifact) if artifact else None)
                if self.show_display:
                    display.print_stage_skipped(stage.name, str(artifact) if artifact else None)
                continue

            artifact = self.run_stage(stage, outcome, artifact)

        self.logger.info(
            "Pipeline complete",
            duration_seconds=round(sum(s.duration_seconds for s in self.run_state.stages), 2)
        )
        if self.show_display:
            display.print_run_summary(self.run_state)

        return self.run_state

    def run_stage(self, stage: BaseStage, outcome: StageOutcome, input_artifact: Optional[Path]) -> Path:
        logger = stage.logger
        outcome.state = StageState.RUNNING

        if self.show_display:
            display.print_stage_start(stage.name, stage.description)

        try:
            logger.info(f"Starting stage: {stage.name}", item=str(input_artifact) if input_artifact else None)
            stage.before(input_artifact)

            start_time = time.time()
            result = stage.run(input_artifact)
            elapsed_time = time.time() - start_time

        except Exception as e:
            logger.error(f"❌ Stage failed: {stage.name}", error=str(e))
            self.logger.error(f"Pipeline stopped at {stage.name}", error=str(e))
            if self.show_display:
                display.print_stage_error(stage.name, str(e))
            raise

        outcome.state = StageState.DONE
        outcome.artifact = result.artifact
        outcome.succeeded = result.stats.succeeded
        outcome.failed = result.stats.failed
        outcome.duration_seconds = elapsed_time

        logger.info(
            f"✅ Stage complete: {stage.name}",
            item=str(result.artifact),
            duration_seconds=round(elapsed_time, 2)
        )
        if self.show_display:
            display.print_stage_complete(stage.name, result.stats)

        return result.artifact


def run_pipeline(stages: List[BaseStage], skip: Iterable[str] = (), show_display: bool = True) -> PipelineRun:
    return StageSequencer(stages, skip=skip, show_display=show_display).run()
