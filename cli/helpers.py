from typing import List

from infra.config import PipelineConfig
from infra.pipeline.base_stage import BaseStage
from infra.pipeline.registry import STAGE_DEFINITIONS, get_stage_class
from infra.pipeline.storage import RunStorage


def build_storage(config: PipelineConfig) -> RunStorage:
    paths = config.paths
    return RunStorage(
        work_dir=paths.work_dir,
        listing_path=paths.listing,
        enriched_path=paths.enriched,
        report_path=paths.report,
        log_dir=paths.log_dir,
        verbose=config.verbose
    )


def build_stages(config: PipelineConfig, storage: RunStorage) -> List[BaseStage]:
    stages = []
    for entry in STAGE_DEFINITIONS:
        stage_class = get_stage_class(entry.name)
        settings = getattr(config, entry.settings_section)
        stages.append(stage_class(storage, settings))
    return stages
