import os
import re
import uuid
from pathlib import Path
from typing import Dict, Optional

from infra.pipeline.logger import PipelineLogger, create_logger


LISTING_FILENAME = "image_metadata.csv"
REPORT_FILENAME = "publish_report.json"
LOG_DIRNAME = "logs"


def slugify(title: str) -> str:
    slug = re.sub(r'[^a-z0-9]', '_', title.lower())
    slug = re.sub(r'_+', '_', slug)
    return slug.strip('_')


def collection_dir_name(collection_id: str, title: str) -> str:
    slug = slugify(title)
    return f"{collection_id}_{slug}" if slug else str(collection_id)


class RunStorage:
    """Artifact locations for one pipeline run.

    Explicit paths win; anything not given is resolved by convention:
        <work_dir>/image_metadata.csv        listing
        <listing dir>/<listing stem>.json    enriched listing
        <enriched dir>/publish_report.json   publish report
    Media files live beside the listing.
    """
    def __init__(
        self,
        work_dir: Optional[Path] = None,
        listing_path: Optional[Path] = None,
        enriched_path: Optional[Path] = None,
        report_path: Optional[Path] = None,
        log_dir: Optional[Path] = None,
        run_id: Optional[str] = None,
        console_output: bool = True,
        json_logs: bool = True,
        verbose: bool = False
    ):
        self._work_dir = Path(work_dir).expanduser() if work_dir else None
        self._listing_path = Path(listing_path).expanduser() if listing_path else None
        self._enriched_path = Path(enriched_path).expanduser() if enriched_path else None
        self._report_path = Path(report_path).expanduser() if report_path else None
        self._log_dir = Path(log_dir).expanduser() if log_dir else None

        self.run_id = run_id or uuid.uuid4().hex[:8]
        self.console_output = console_output
        self.json_logs = json_logs
        self.verbose = verbose

        self._loggers: Dict[str, PipelineLogger] = {}

    @property
    def work_dir(self) -> Optional[Path]:
        if self._work_dir:
            return self._work_dir
        if self._listing_path:
            return self._listing_path.parent
        return None

    def bind_work_dir(self, work_dir: Path) -> Path:
        """Set the work directory once it is known (fetch derives it from the collection)."""
        if self.work_dir is None:
            self._work_dir = Path(work_dir)
            if self.json_logs and self.log_dir:
                for logger in self._loggers.values():
                    logger.attach_log_dir(self.log_dir)
        return self.work_dir

    @property
    def log_dir(self) -> Optional[Path]:
        if self._log_dir:
            return self._log_dir
        if self.work_dir:
            return self.work_dir / LOG_DIRNAME
        return None

    def listing_path(self) -> Optional[Path]:
        if self._listing_path:
            return self._listing_path
        if self._work_dir:
            return self._work_dir / LISTING_FILENAME
        return None

    def enriched_path(self, listing: Optional[Path] = None) -> Optional[Path]:
        if self._enriched_path:
            return self._enriched_path
        listing = listing or self.listing_path()
        if listing:
            return Path(listing).with_suffix('.json')
        return None

    def report_path(self, enriched: Optional[Path] = None) -> Optional[Path]:
        if self._report_path:
            return self._report_path
        enriched = enriched or self.enriched_path()
        if enriched:
            return Path(enriched).parent / REPORT_FILENAME
        return None

    def media_dir(self, artifact: Path) -> Path:
        """Media files live beside the listing and the enriched listing."""
        return Path(artifact).parent

    def logger(self, stage: str) -> PipelineLogger:
        """Get logger for a stage, creating lazily.

        Log file is written to {log_dir}/{stage}.jsonl once the log dir is known.
        """
        if stage not in self._loggers:
            debug_env = os.environ.get("DEBUG", "").lower() in ("true", "1", "yes")
            log_level = "DEBUG" if (self.verbose or debug_env) else "INFO"
            self._loggers[stage] = create_logger(
                self.run_id,
                stage,
                log_dir=self.log_dir if self.json_logs else None,
                console_output=self.console_output,
                level=log_level
            )
        return self._loggers[stage]

    def close_loggers(self):
        for logger in self._loggers.values():
            logger.close()
        self._loggers = {}
