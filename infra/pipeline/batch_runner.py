import time
from pathlib import Path
from typing import Any, Callable, Dict, Sequence, Tuple

from infra.pipeline.logger import PipelineLogger
from infra.pipeline.schemas import BatchStats
from infra.pipeline.storage.artifact import JsonArraySink


class ItemBatchRunner:
    """Process items strictly in order, one record per item.

    Each record is appended to a temporary sink as soon as it is produced
    and the sink replaces `output_path` only after the last item. A fixed
    delay is slept between items (not after the last one) to bound the
    request rate.

    Subclasses implement handle(), which must turn every item-local
    failure into a record instead of raising.
    """
    phase_name: str = "batch"

    def __init__(
        self,
        delay_seconds: float,
        logger: PipelineLogger,
        sleep: Callable[[float], None] = time.sleep
    ):
        self.delay_seconds = max(0.0, float(delay_seconds))
        self.logger = logger
        self.sleep = sleep

    def handle(self, item: Any, index: int, total: int) -> Tuple[Dict[str, Any], bool]:
        """Return (record, succeeded) for one item."""
        raise NotImplementedError

    def run(self, items: Sequence[Any], output_path: Path) -> BatchStats:
        items = list(items)
        total = len(items)
        start_time = time.time()
        succeeded = 0
        failed = 0

        with JsonArraySink(output_path) as sink:
            for index, item in enumerate(items):
                record, ok = self.handle(item, index, total)
                sink.append(record)

                if ok:
                    succeeded += 1
                else:
                    failed += 1

                if index < total - 1 and self.delay_seconds > 0:
                    self.logger.debug(f"Waiting {self.delay_seconds:g}s before next item")
                    self.sleep(self.delay_seconds)

            sink.commit()

        elapsed = time.time() - start_time
        self.logger.info(
            f"{self.phase_name} complete: {succeeded} succeeded, {failed} failed",
            duration_seconds=round(elapsed, 2)
        )

        return BatchStats(succeeded=succeeded, failed=failed, elapsed_seconds=elapsed)
