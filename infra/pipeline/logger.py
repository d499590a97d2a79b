import json
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional


STRUCTURED_FIELDS = (
    'run_id',
    'stage',
    'item',
    'tokens',
    'estimated_tokens',
    'duration_seconds',
    'http_status',
    'error_kind',
    'error',
)


class FlushingFileHandler(logging.FileHandler):
    """FileHandler that flushes after every emit for real-time log visibility."""
    def emit(self, record):
        super().emit(record)
        self.flush()


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now().astimezone().isoformat(),
            "level": record.levelname,
            "message": record.getMessage(),
        }

        for field in STRUCTURED_FIELDS:
            if hasattr(record, field):
                log_data[field] = getattr(record, field)

        return json.dumps(log_data, default=str)


class ConsoleFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        parts = [f"{record.levelname}:"]
        if hasattr(record, 'stage'):
            parts.append(f"[{record.stage}]")
        if hasattr(record, 'item'):
            parts.append(f"[{record.item}]")
        parts.append(record.getMessage())
        return ' '.join(parts)


class PipelineLogger:
    """Logger that writes to a single append-only JSONL file per stage.

    File handlers are created lazily on first log message to avoid
    creating empty log files when nothing is logged.
    """
    def __init__(
        self,
        run_id: str,
        stage: str,
        log_dir: Optional[Path] = None,
        console_output: bool = False,
        json_output: bool = True,
        level: str = "INFO",
        filename: str = None
    ):
        self.run_id = run_id
        self.stage = stage
        self.log_dir = Path(log_dir) if log_dir else None
        self.console_output = console_output
        self.json_output = json_output and log_dir is not None
        self.level = level
        self.filename = filename or f"{stage}.jsonl"

        # Lazy initialization - handlers created on first log
        self._logger = None
        self._initialized = False
        self.log_file = None

    def _ensure_initialized(self):
        if self._initialized:
            return

        logger_name = f"pipeline.{self.run_id}.{self.stage}.{id(self)}"
        self._logger = logging.getLogger(logger_name)
        self._logger.setLevel(getattr(logging, self.level.upper()))
        self._logger.propagate = False

        if self.console_output:
            console_handler = logging.StreamHandler(sys.stdout)
            console_handler.setFormatter(ConsoleFormatter())
            self._logger.addHandler(console_handler)

        if self.json_output:
            self.log_dir.mkdir(parents=True, exist_ok=True)
            json_file = self.log_dir / self.filename
            json_handler = FlushingFileHandler(json_file, mode='a', encoding='utf-8')
            json_handler.setFormatter(JSONFormatter())
            self._logger.addHandler(json_handler)
            self.log_file = json_file

        self._initialized = True

    @property
    def logger(self):
        self._ensure_initialized()
        return self._logger

    def _log(self, level: str, message: str, **kwargs):
        reserved_params = {}
        for param in ['exc_info', 'stack_info', 'stacklevel', 'extra']:
            if param in kwargs:
                reserved_params[param] = kwargs.pop(param)

        extra = {
            'run_id': self.run_id,
            'stage': self.stage,
            **{k: v for k, v in kwargs.items() if v is not None}
        }
        if 'extra' in reserved_params:
            extra.update(reserved_params.pop('extra'))

        self.logger.log(
            getattr(logging, level.upper()),
            message,
            extra=extra,
            **reserved_params
        )

    def debug(self, message: str, **kwargs):
        self._log('DEBUG', message, **kwargs)

    def info(self, message: str, **kwargs):
        self._log('INFO', message, **kwargs)

    def warning(self, message: str, **kwargs):
        self._log('WARNING', message, **kwargs)

    def error(self, message: str, **kwargs):
        self._log('ERROR', message, **kwargs)

    def attach_log_dir(self, log_dir: Path):
        """Start writing the JSONL file once the log directory becomes known."""
        if self.log_dir is not None:
            return
        self.log_dir = Path(log_dir)
        self.json_output = True
        if self._initialized:
            self.close()

    def close(self):
        if self._initialized and self._logger:
            for handler in self._logger.handlers[:]:
                handler.close()
                self._logger.removeHandler(handler)
            self._initialized = False

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False


def create_logger(run_id: str, stage: str, **kwargs) -> PipelineLogger:
    return PipelineLogger(run_id, stage, **kwargs)
