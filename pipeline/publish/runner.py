import json
import time
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Tuple

import requests

from infra.config.schemas import GhostSettings
from infra.ghost import GhostClient
from infra.pipeline.batch_runner import ItemBatchRunner
from infra.pipeline.logger import PipelineLogger

from pipeline.schemas import EnrichedItem, PublishRecord
from .content import build_payload, created_url, error_summary


class PublishRunner(ItemBatchRunner):
    phase_name = "publish"

    def __init__(
        self,
        client: GhostClient,
        settings: GhostSettings,
        media_dir: Path,
        logger: PipelineLogger,
        sleep: Callable[[float], None] = time.sleep
    ):
        super().__init__(settings.delay, logger, sleep=sleep)
        self.client = client
        self.settings = settings
        self.media_dir = Path(media_dir)

    def _record(self, item: EnrichedItem, status: str, **fields) -> Dict[str, Any]:
        return PublishRecord(
            id=item.id,
            filename=item.filename,
            title=item.title,
            status=status,
            **fields
        ).model_dump()

    def handle(self, item: EnrichedItem, index: int, total: int) -> Tuple[Dict[str, Any], bool]:
        self.logger.info(f"Processing item {index + 1}/{total}", item=item.filename)

        skip_reason = item.skip_reason
        if skip_reason:
            self.logger.warning(f"✗ Skipped: {skip_reason}", item=item.filename)
            return self._record(item, "skipped", error=skip_reason), False

        content_type = self.settings.content_type
        image_path = self.media_dir / item.filename

        if self.settings.dry_run:
            payload = build_payload(
                item,
                content_type=content_type,
                status=self.settings.status,
                author_id=self.settings.author_id
            )
            self.logger.info(
                f"DRY RUN - would post to: {self.client.create_endpoint(content_type)}",
                item=item.filename
            )
            self.logger.debug(f"Payload:\n{json.dumps(payload, ensure_ascii=False, indent=2)}")
            return self._record(item, "dry_run"), True

        feature_image_url = ""
        if item.filename and image_path.is_file():
            feature_image_url = self.client.upload(image_path)
        else:
            self.logger.warning(f"Image file not found: {image_path}", item=item.filename)

        payload = build_payload(
            item,
            feature_image_url=feature_image_url,
            content_type=content_type,
            status=self.settings.status,
            author_id=self.settings.author_id
        )

        try:
            http_status, body = self.client.create(payload, content_type)
        except requests.exceptions.RequestException as e:
            self.logger.error(f"✗ Failed to create {content_type}", item=item.filename, error=str(e))
            return self._record(item, "failed", error=f"Request failed: {e}"), False

        if 200 <= http_status < 300:
            url = created_url(body, content_type)
            self.logger.info(
                f"✓ Created successfully{': ' + url if url else ''}",
                item=item.filename,
                http_status=http_status
            )
            return self._record(item, "published", http_status=http_status, url=url), True

        error = error_summary(body)
        self.logger.error(
            f"✗ Failed to create {content_type} (HTTP {http_status})",
            item=item.filename,
            http_status=http_status,
            error=error
        )
        return self._record(item, "failed", http_status=http_status, error=error), False
