import time
from pathlib import Path
from typing import Callable, List, Optional

from pydantic import ValidationError

from infra.config.schemas import GhostSettings
from infra.errors import ListingFormatError
from infra.ghost import GhostClient, GhostTokenSigner
from infra.pipeline.base_stage import BaseStage
from infra.pipeline.schemas import StageResult
from infra.pipeline.storage.artifact import load_json_array
from infra.pipeline.storage.run_storage import RunStorage

from pipeline.schemas import EnrichedItem
from .runner import PublishRunner


class PublishStage(BaseStage):

    name = "publish"
    consumes = "generate"

    icon = "🚀"
    short_name = "Publish"
    description = "Upload photos and create posts in Ghost"

    def __init__(
        self,
        storage: RunStorage,
        settings: GhostSettings,
        client: Optional[GhostClient] = None,
        sleep: Callable[[float], None] = time.sleep
    ):
        super().__init__(storage)
        self.settings = settings
        self._client = client
        self.sleep = sleep

    def build_client(self) -> GhostClient:
        signer = GhostTokenSigner.from_key_string(self.settings.admin_api_key)
        # Sign once up front so a bad key fails the stage before any item
        signer.sign()
        self.logger.debug("JWT token generated successfully")
        return GhostClient(self.settings.url, signer, logger=self.logger)

    def resolve_output(self, input_artifact: Optional[Path]) -> Optional[Path]:
        return self.storage.report_path(input_artifact)

    def load_items(self, enriched_path: Path) -> List[EnrichedItem]:
        try:
            records = load_json_array(enriched_path)
            return [EnrichedItem.model_validate(record) for record in records]
        except (ValueError, ValidationError) as e:
            raise ListingFormatError(f"Unreadable enriched listing {enriched_path}: {e}") from e

    def run(self, input_artifact: Optional[Path]) -> StageResult:
        enriched_path = Path(input_artifact)
        output_path = self.resolve_output(enriched_path)
        items = self.load_items(enriched_path)

        client = self._client or self.build_client()

        self.logger.info(
            f"Found {len(items)} items, Ghost URL: {self.settings.url}, "
            f"type: {self.settings.content_type}, status: {self.settings.status}"
            + (", mode: DRY RUN" if self.settings.dry_run else "")
        )

        runner = PublishRunner(
            client,
            self.settings,
            media_dir=self.storage.media_dir(enriched_path),
            logger=self.logger,
            sleep=self.sleep
        )
        stats = runner.run(items, output_path)

        return StageResult(artifact=output_path, stats=stats)
