"""
Tests for infra/pipeline/runner.py (StageSequencer).

Stages here are small in-memory stand-ins that write their artifact and
record the input they were handed.
"""

import pytest
from pathlib import Path

from infra.errors import ArtifactResolutionError, PipelineError
from infra.pipeline.base_stage import BaseStage
from infra.pipeline.runner import StageSequencer, run_pipeline
from infra.pipeline.schemas import BatchStats, StageResult, StageState


class RecordingStage(BaseStage):
    filename = None

    def __init__(self, storage, calls, fail_with=None):
        super().__init__(storage)
        self.calls = calls
        self.fail_with = fail_with

    def resolve_output(self, input_artifact):
        return self.storage.work_dir / self.filename

    def run(self, input_artifact):
        self.calls.append((self.name, input_artifact))
        if self.fail_with:
            raise self.fail_with
        output = self.resolve_output(input_artifact)
        output.write_text(self.name)
        return StageResult(artifact=output, stats=BatchStats(succeeded=2, failed=1))


class ListStage(RecordingStage):
    name = "fetch"
    filename = "image_metadata.csv"


class EnrichStage(RecordingStage):
    name = "generate"
    consumes = "fetch"
    filename = "image_metadata.json"


class ReportStage(RecordingStage):
    name = "publish"
    consumes = "generate"
    filename = "publish_report.json"


def make_stages(storage, calls, **fail):
    return [
        ListStage(storage, calls, fail.get("fetch")),
        EnrichStage(storage, calls, fail.get("generate")),
        ReportStage(storage, calls, fail.get("publish")),
    ]


class TestStageSequencer:

    def test_runs_all_stages_in_order(self, storage):
        calls = []

        run = run_pipeline(make_stages(storage, calls), show_display=False)

        assert [name for name, _ in calls] == ["fetch", "generate", "publish"]
        assert calls[0][1] is None
        assert calls[1][1] == storage.work_dir / "image_metadata.csv"
        assert calls[2][1] == storage.work_dir / "image_metadata.json"
        assert run.is_terminal
        assert all(s.state == StageState.DONE for s in run.stages)
        assert run.outcome("generate").succeeded == 2
        assert run.total_failed == 3

    def test_skipped_stage_reuses_existing_artifact(self, storage):
        listing = storage.work_dir / "image_metadata.csv"
        listing.write_text("existing")
        calls = []

        run = run_pipeline(make_stages(storage, calls), skip=["fetch"], show_display=False)

        assert [name for name, _ in calls] == ["generate", "publish"]
        assert calls[0][1] == listing
        assert run.outcome("fetch").state == StageState.SKIPPED
        assert run.outcome("fetch").artifact == listing
        assert listing.read_text() == "existing"

    def test_missing_skipped_artifact_fails_before_any_stage(self, storage):
        calls = []
        stages = make_stages(storage, calls)

        with pytest.raises(ArtifactResolutionError):
            run_pipeline(stages, skip=["generate"], show_display=False)

        assert calls == []

    def test_skipped_last_stage_needs_no_artifact(self, storage):
        calls = []

        run = run_pipeline(make_stages(storage, calls), skip=["publish"], show_display=False)

        assert [name for name, _ in calls] == ["fetch", "generate"]
        assert run.outcome("publish").state == StageState.SKIPPED

    def test_stage_failure_propagates_and_stops(self, storage):
        calls = []
        stages = make_stages(storage, calls, generate=PipelineError("quota exhausted"))
        sequencer = StageSequencer(stages, show_display=False)

        with pytest.raises(PipelineError, match="quota exhausted"):
            sequencer.run()

        assert [name for name, _ in calls] == ["fetch", "generate"]
        assert sequencer.run_state.outcome("fetch").state == StageState.DONE
        assert sequencer.run_state.outcome("generate").state == StageState.RUNNING
        assert sequencer.run_state.outcome("publish").state == StageState.PENDING
        assert not sequencer.run_state.is_terminal

    def test_missing_input_detected_before_run(self, storage):
        """A stage whose upstream produced nothing on disk is rejected by before()."""
        calls = []

        class VanishingList(ListStage):
            def run(self, input_artifact):
                self.calls.append((self.name, input_artifact))
                return StageResult(artifact=self.resolve_output(input_artifact))

        stages = [VanishingList(storage, calls), EnrichStage(storage, calls)]

        with pytest.raises(ArtifactResolutionError):
            run_pipeline(stages, show_display=False)

        assert [name for name, _ in calls] == ["fetch"]

    def test_unknown_skip_rejected(self, storage):
        with pytest.raises(ValueError, match="Unknown stage"):
            StageSequencer(make_stages(storage, []), skip=["download"])

    def test_empty_stage_list_rejected(self):
        with pytest.raises(ValueError):
            StageSequencer([])

    def test_pipeline_log_written(self, storage, jsonl):
        run_pipeline(make_stages(storage, []), show_display=False)
        storage.close_loggers()

        entries = jsonl(storage.log_dir / "pipeline.jsonl")
        assert entries[-1]["message"] == "Pipeline complete"
        assert entries[-1]["run_id"] == "test-run"
