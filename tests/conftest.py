"""
Shared fixtures.

All tests use real filesystem operations with temporary directories.
Services, clock and sleep are replaced by the fakes in tests/fakes.py.
"""

import csv
import json
import pytest
from pathlib import Path
from PIL import Image

from infra.pipeline.logger import PipelineLogger
from infra.pipeline.storage.run_storage import RunStorage
from pipeline.schemas import LISTING_COLUMNS, WorkItem
from tests.fakes import FakeClock, unsplash_photo


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def work_dir(tmp_path):
    path = tmp_path / "123_city_nights"
    path.mkdir()
    return path


@pytest.fixture
def storage(work_dir):
    storage = RunStorage(work_dir=work_dir, run_id="test-run", console_output=False)
    yield storage
    storage.close_loggers()


@pytest.fixture
def logger(tmp_path):
    logger = PipelineLogger("test-run", "test-stage", log_dir=tmp_path / "logs", level="DEBUG")
    yield logger
    logger.close()


def _write_jpeg(path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.new('RGB', (16, 16), color='orange').save(path, format='JPEG')
    return path


@pytest.fixture
def make_jpeg():
    return _write_jpeg


@pytest.fixture
def make_items():
    def _make(count: int):
        return [WorkItem.from_photo(unsplash_photo(f"photo{i}")) for i in range(1, count + 1)]
    return _make


@pytest.fixture
def write_listing(work_dir):
    """Write image_metadata.csv (and optionally the images) into the work dir."""
    def _write(items, with_images: bool = True, columns=LISTING_COLUMNS) -> Path:
        listing = work_dir / "image_metadata.csv"
        with open(listing, 'w', encoding='utf-8', newline='') as f:
            writer = csv.DictWriter(f, fieldnames=list(columns), extrasaction='ignore')
            writer.writeheader()
            for item in items:
                writer.writerow({k: ("" if v is None else v) for k, v in item.listing_row().items()})
        if with_images:
            for item in items:
                _write_jpeg(work_dir / item.filename)
        return listing
    return _write


@pytest.fixture
def write_enriched(work_dir):
    def _write(records) -> Path:
        path = work_dir / "image_metadata.json"
        path.write_text(json.dumps(records, indent=2), encoding='utf-8')
        return path
    return _write


def read_jsonl(path: Path):
    with open(path) as f:
        return [json.loads(line) for line in f if line.strip()]


@pytest.fixture
def jsonl():
    return read_jsonl
