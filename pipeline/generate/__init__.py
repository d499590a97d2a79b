import time
from pathlib import Path
from typing import Callable, List, Optional

from pydantic import ValidationError

from infra.config.schemas import GeminiSettings
from infra.errors import ListingFormatError
from infra.llm.budget import BudgetTracker
from infra.llm.gemini import GeminiClient
from infra.pipeline.base_stage import BaseStage
from infra.pipeline.schemas import StageResult
from infra.pipeline.storage.artifact import read_csv_rows
from infra.pipeline.storage.run_storage import RunStorage

from pipeline.schemas import WorkItem, missing_columns
from .processor import ItemProcessor
from .runner import GenerateRunner


class GenerateStage(BaseStage):

    name = "generate"
    consumes = "fetch"

    icon = "✍️"
    short_name = "Generate"
    description = "Write a blog post for each photo with Gemini"

    def __init__(
        self,
        storage: RunStorage,
        settings: GeminiSettings,
        client: Optional[GeminiClient] = None,
        clock: Callable[[], float] = time.time,
        sleep: Callable[[float], None] = time.sleep
    ):
        super().__init__(storage)
        self.settings = settings
        self._client = client
        self.clock = clock
        self.sleep = sleep

    @property
    def client(self) -> GeminiClient:
        if self._client is None:
            self._client = GeminiClient(
                self.settings.api_key,
                self.settings.model,
                logger=self.logger,
                max_output_tokens=self.settings.max_output_tokens
            )
        return self._client

    def resolve_output(self, input_artifact: Optional[Path]) -> Optional[Path]:
        return self.storage.enriched_path(input_artifact)

    def load_items(self, listing_path: Path) -> List[WorkItem]:
        header, rows = read_csv_rows(listing_path)

        missing = missing_columns(header)
        if missing:
            raise ListingFormatError(
                f"Listing {listing_path} is missing required columns: {', '.join(missing)}"
            )

        try:
            return [WorkItem.model_validate(row) for row in rows]
        except ValidationError as e:
            raise ListingFormatError(f"Unreadable listing {listing_path}: {e}") from e

    def run(self, input_artifact: Optional[Path]) -> StageResult:
        listing_path = Path(input_artifact)
        output_path = self.resolve_output(listing_path)

        items = self.load_items(listing_path)
        limits = self.settings.limits
        delay = self.settings.effective_delay

        self.logger.info(
            f"Images to process: {len(items)}, model: {self.settings.model}, "
            f"delay: {delay:g}s per request, token limit: {limits.tokens_per_minute:,} TPM, "
            f"temperature: {self.settings.temperature}"
        )
        if items:
            self.logger.info(f"Estimated time: at least {len(items) * delay / 60:.1f} minutes")

        budget = BudgetTracker(
            limits.tokens_per_minute,
            clock=self.clock,
            sleep=self.sleep,
            logger=self.logger
        )
        processor = ItemProcessor(
            self.client,
            budget,
            media_dir=self.storage.media_dir(listing_path),
            logger=self.logger,
            temperature=self.settings.temperature
        )
        runner = GenerateRunner(processor, delay, self.logger, sleep=self.sleep)

        stats = runner.run(items, output_path)

        status = budget.status()
        self.logger.info(
            f"Token budget: {status['total_admitted']:,} estimated tokens admitted, "
            f"{status['wait_count']} window wait(s), {status['total_waited_sec']:.1f}s waited"
        )

        return StageResult(artifact=output_path, stats=stats)
