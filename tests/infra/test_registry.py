"""
Tests for infra/pipeline/registry.py
"""

import pytest

from infra.config import PipelineConfig
from infra.pipeline.registry import (
    STAGE_DEFINITIONS,
    STAGE_NAMES,
    get_all_stage_metadata,
    get_stage_class,
    get_stage_entry,
)
from pipeline.generate import GenerateStage


class TestRegistry:

    def test_run_order(self):
        assert STAGE_NAMES == ["fetch", "generate", "publish"]

    def test_stage_class_lookup(self):
        assert get_stage_class("generate") is GenerateStage

    def test_unknown_stage(self):
        with pytest.raises(ValueError, match="expected one of: fetch, generate, publish"):
            get_stage_entry("download")

    def test_settings_sections_exist_on_config(self):
        for entry in STAGE_DEFINITIONS:
            assert entry.settings_section in PipelineConfig.model_fields

    def test_metadata_chains_consumers(self):
        metadata = {stage['name']: stage for stage in get_all_stage_metadata()}

        assert metadata["fetch"]["consumes"] is None
        assert metadata["generate"]["consumes"] == "fetch"
        assert metadata["publish"]["consumes"] == "generate"
        assert metadata["generate"]["short_name"] == "Generate"
