from infra.pipeline.logger import PipelineLogger, create_logger
from infra.pipeline.base_stage import BaseStage
from infra.pipeline.batch_runner import ItemBatchRunner
from infra.pipeline.runner import StageSequencer, run_pipeline
from infra.pipeline.registry import (
    StageEntry,
    get_stage_class,
    get_stage_entry,
    get_all_stage_metadata,
    STAGE_NAMES,
    STAGE_DEFINITIONS
)
from infra.pipeline.schemas import (
    BatchStats,
    PipelineRun,
    StageOutcome,
    StageResult,
    StageState,
)
from infra.pipeline.storage import (
    RunStorage,
    JsonArraySink,
    CsvSink,
)

__all__ = [
    # Logger
    "PipelineLogger",
    "create_logger",

    # Stage base class
    "BaseStage",
    "ItemBatchRunner",

    # Runner
    "StageSequencer",
    "run_pipeline",

    # Registry
    "StageEntry",
    "get_stage_class",
    "get_stage_entry",
    "get_all_stage_metadata",
    "STAGE_NAMES",
    "STAGE_DEFINITIONS",

    # State
    "BatchStats",
    "PipelineRun",
    "StageOutcome",
    "StageResult",
    "StageState",

    # Storage
    "RunStorage",
    "JsonArraySink",
    "CsvSink",
]
