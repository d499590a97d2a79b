"""
Tests for infra/pipeline/logger.py

Key behaviors to verify:
1. Lazy initialization - no files created until first log
2. Single append-only file per stage (no timestamps in filename)
3. JSON formatting with run_id, stage and structured fields
4. Log directory attached after the fact (fetch learns the work dir late)
"""

import json

from infra.pipeline.logger import PipelineLogger, create_logger


class TestPipelineLoggerLazyInit:
    """Test that logger initializes lazily."""

    def test_no_file_created_on_init(self, tmp_path):
        """Logger should not create any files on instantiation."""
        log_dir = tmp_path / "logs"

        logger = PipelineLogger(run_id="run1", stage="generate", log_dir=log_dir)

        assert not log_dir.exists(), "Log directory should not be created on init"
        assert logger.log_file is None, "Log file should be None before first log"

    def test_file_created_on_first_log(self, tmp_path):
        log_dir = tmp_path / "logs"
        logger = PipelineLogger(run_id="run1", stage="generate", log_dir=log_dir)

        logger.info("First message")

        assert log_dir.exists(), "Log directory should be created on first log"
        assert logger.log_file.exists(), "Log file should exist after logging"
        logger.close()

    def test_close_without_logging_creates_nothing(self, tmp_path):
        log_dir = tmp_path / "logs"
        logger = PipelineLogger(run_id="run1", stage="generate", log_dir=log_dir)

        logger.close()

        assert not log_dir.exists(), "Close should not create directories"

    def test_no_log_dir_means_no_file(self, tmp_path):
        logger = PipelineLogger(run_id="run1", stage="generate")
        logger.info("console only")
        logger.close()

        assert logger.log_file is None


class TestPipelineLoggerSingleFile:
    """Test single append-only file behavior."""

    def test_filename_is_stage_jsonl(self, tmp_path):
        logger = PipelineLogger(run_id="run1", stage="publish", log_dir=tmp_path / "logs")
        logger.info("test")
        logger.close()

        assert logger.log_file.name == "publish.jsonl"

    def test_multiple_runs_append_to_same_file(self, tmp_path, jsonl):
        log_dir = tmp_path / "logs"

        logger1 = PipelineLogger(run_id="run1", stage="fetch", log_dir=log_dir)
        logger1.info("message from run 1")
        logger1.close()

        logger2 = PipelineLogger(run_id="run2", stage="fetch", log_dir=log_dir)
        logger2.info("message from run 2")
        logger2.close()

        log_files = list(log_dir.glob("*.jsonl"))
        assert len(log_files) == 1

        entries = jsonl(log_files[0])
        assert [e["run_id"] for e in entries] == ["run1", "run2"]


class TestPipelineLoggerJsonFormat:

    def test_log_entry_has_required_fields(self, tmp_path, jsonl):
        logger = PipelineLogger(run_id="run1", stage="generate", log_dir=tmp_path / "logs")
        logger.info("test message")
        logger.close()

        entry = jsonl(logger.log_file)[0]

        assert "timestamp" in entry
        assert entry["level"] == "INFO"
        assert entry["message"] == "test message"
        assert entry["run_id"] == "run1"
        assert entry["stage"] == "generate"

    def test_structured_fields_in_log_entry(self, tmp_path, jsonl):
        logger = PipelineLogger(run_id="run1", stage="generate", log_dir=tmp_path / "logs")
        logger.info("response", item="abc.jpg", tokens=812, estimated_tokens=700, error_kind=None)
        logger.close()

        entry = jsonl(logger.log_file)[0]

        assert entry["item"] == "abc.jpg"
        assert entry["tokens"] == 812
        assert entry["estimated_tokens"] == 700
        assert "error_kind" not in entry

    def test_level_filtering(self, tmp_path, jsonl):
        logger = PipelineLogger(run_id="run1", stage="generate", log_dir=tmp_path / "logs", level="WARNING")

        logger.debug("hidden")
        logger.info("hidden")
        logger.warning("shown")
        logger.error("shown")
        logger.close()

        assert [e["level"] for e in jsonl(logger.log_file)] == ["WARNING", "ERROR"]


class TestAttachLogDir:

    def test_attach_after_console_only_logging(self, tmp_path, jsonl):
        logger = PipelineLogger(run_id="run1", stage="fetch")
        logger.info("before the work dir is known")

        logger.attach_log_dir(tmp_path / "logs")
        logger.info("after")
        logger.close()

        entries = jsonl(tmp_path / "logs" / "fetch.jsonl")
        assert [e["message"] for e in entries] == ["after"]

    def test_attach_is_noop_when_dir_already_set(self, tmp_path):
        logger = PipelineLogger(run_id="run1", stage="fetch", log_dir=tmp_path / "a")
        logger.attach_log_dir(tmp_path / "b")

        assert logger.log_dir == tmp_path / "a"


def test_create_logger_returns_pipeline_logger(tmp_path):
    logger = create_logger("run1", "fetch", log_dir=tmp_path / "logs")
    assert isinstance(logger, PipelineLogger)
