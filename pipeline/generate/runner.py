import time
from typing import Any, Callable, Dict, Tuple

from infra.llm.models import GenerationFailure
from infra.pipeline.batch_runner import ItemBatchRunner
from infra.pipeline.logger import PipelineLogger

from pipeline.schemas import WorkItem
from .processor import ItemProcessor


class GenerateRunner(ItemBatchRunner):
    phase_name = "generate"

    def __init__(
        self,
        processor: ItemProcessor,
        delay_seconds: float,
        logger: PipelineLogger,
        sleep: Callable[[float], None] = time.sleep
    ):
        super().__init__(delay_seconds, logger, sleep=sleep)
        self.processor = processor

    def handle(self, item: WorkItem, index: int, total: int) -> Tuple[Dict[str, Any], bool]:
        self.logger.info(f"Processing item {index + 1}/{total}", item=item.filename)

        result = self.processor.process(item)
        item.attach_result(result)

        if isinstance(result, GenerationFailure):
            self.logger.warning(
                f"✗ {result.marker}",
                item=item.filename,
                error_kind=result.kind.value
            )
        else:
            self.logger.info(f"✓ Generated content: {result.title}", item=item.filename)

        return item.enriched_record(), result.ok
