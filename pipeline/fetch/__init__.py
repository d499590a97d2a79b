import time
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from infra.config.schemas import UnsplashSettings
from infra.errors import ListingFetchError, SourceCollectionError
from infra.pipeline.base_stage import BaseStage
from infra.pipeline.schemas import BatchStats, StageResult
from infra.pipeline.storage.artifact import CsvSink
from infra.pipeline.storage.run_storage import RunStorage, collection_dir_name
from infra.unsplash import UnsplashClient

from pipeline.schemas import LISTING_COLUMNS, WorkItem


PER_PAGE = 30


class FetchStage(BaseStage):

    name = "fetch"
    consumes = None

    icon = "📥"
    short_name = "Fetch"
    description = "Download photos and metadata from an Unsplash collection"

    def __init__(
        self,
        storage: RunStorage,
        settings: UnsplashSettings,
        client: Optional[UnsplashClient] = None,
        sleep: Callable[[float], None] = time.sleep,
        page_delay: float = 1.0,
        download_delay: float = 1.0
    ):
        super().__init__(storage)
        self.settings = settings
        self._client = client
        self.sleep = sleep
        self.page_delay = page_delay
        self.download_delay = download_delay

    @property
    def client(self) -> UnsplashClient:
        if self._client is None:
            self._client = UnsplashClient(
                self.settings.api_key,
                logger=self.logger,
                base_url=self.settings.api_url
            )
        return self._client

    def resolve_output(self, input_artifact: Optional[Path]) -> Optional[Path]:
        return self.storage.listing_path()

    def run(self, input_artifact: Optional[Path]) -> StageResult:
        start_time = time.time()
        collection_id = self.settings.collection_id

        self.logger.info(f"Checking collection info: {collection_id}")
        info = self.client.collection_info(collection_id)

        if info.total_photos == 0:
            raise SourceCollectionError(f"Collection {collection_id} is empty")

        self.storage.bind_work_dir(Path(collection_dir_name(info.id, info.title)))
        listing_path = self.storage.listing_path()

        self.logger.info(
            f"Collection: {info.title} ({info.total_photos} photos), output: {listing_path}"
        )

        count = self.settings.count
        if count > info.total_photos:
            self.logger.info(
                f"Requested {count} photos, but collection only has {info.total_photos}. "
                f"Fetching all {info.total_photos} photos."
            )
            count = info.total_photos

        photos = self.fetch_photos(collection_id, count)
        if not photos:
            raise SourceCollectionError(f"No photos found in collection {collection_id}")

        items = [WorkItem.from_photo(photo) for photo in photos]
        media_dir = self.storage.media_dir(listing_path)

        succeeded = 0
        failed = 0
        with CsvSink(listing_path, LISTING_COLUMNS) as sink:
            for index, item in enumerate(items):
                sink.append(item.listing_row())

                downloaded, attempted = self.download(item, media_dir / item.filename)
                if downloaded:
                    succeeded += 1
                else:
                    failed += 1

                if attempted and index < len(items) - 1 and self.download_delay > 0:
                    self.sleep(self.download_delay)

            sink.commit()

        self.logger.info(
            f"Download complete: {succeeded} downloaded, {failed} failed",
            item=str(listing_path)
        )

        stats = BatchStats(succeeded=succeeded, failed=failed, elapsed_seconds=time.time() - start_time)
        return StageResult(artifact=listing_path, stats=stats)

    def fetch_photos(self, collection_id: str, count: int) -> List[Dict[str, Any]]:
        """Page through the collection until `count` photos or a short page."""
        photos: List[Dict[str, Any]] = []
        page = 1

        while len(photos) < count:
            self.logger.debug(f"Fetching page {page}")
            listing_page = self.client.fetch(collection_id, page=page, per_page=PER_PAGE)

            if listing_page.errors:
                raise ListingFetchError(
                    f"Error on page {page}: {'; '.join(listing_page.errors)}"
                )

            page_items = listing_page.items
            if not page_items:
                self.logger.debug(f"No more photos found. Finished at page {page - 1}")
                break

            remaining = count - len(photos)
            photos.extend(page_items[:remaining])
            self.logger.debug(f"Found {len(page_items)} photos on page {page}, {len(photos)} so far")

            if len(photos) >= count or len(page_items) < PER_PAGE:
                break

            page += 1
            if self.page_delay > 0:
                self.sleep(self.page_delay)

        return photos

    def download(self, item: WorkItem, dest: Path):
        """Returns (downloaded, attempted). Non-empty files from earlier runs are kept."""
        if dest.exists() and dest.stat().st_size > 0:
            self.logger.debug("Already downloaded, keeping existing file", item=item.filename)
            return True, False

        if not item.download_url:
            self.logger.warning("No download URL", item=item.filename)
            return False, False

        ok = self.client.download(item.download_url, dest)
        if ok:
            self.logger.info("✓ Downloaded", item=item.filename)
        else:
            self.logger.warning("✗ Failed to download", item=item.filename)
        return ok, True
