"""
Incremental, atomically committed artifact files.

Records are appended to a temporary file next to the final artifact and
flushed to disk one at a time. The temporary file replaces the final path
only on commit(), so an interrupted run never leaves a truncated artifact
under the final name. The partial file stays behind for inspection and is
overwritten by the next run.
"""

import csv
import json
import os
from pathlib import Path
from typing import Any, Dict, List, Sequence, Tuple


PARTIAL_SUFFIX = ".partial"


def partial_path_for(final_path: Path) -> Path:
    final_path = Path(final_path)
    return final_path.with_name(final_path.name + PARTIAL_SUFFIX)


class AtomicSink:
    """Base sink: owns the temp file and the commit rename."""

    def __init__(self, final_path: Path):
        self.final_path = Path(final_path)
        self.temp_path = partial_path_for(self.final_path)
        self.count = 0
        self.committed = False
        self._file = None

    def open(self):
        self.final_path.parent.mkdir(parents=True, exist_ok=True)
        self._file = open(self.temp_path, 'w', encoding='utf-8', newline='')
        self._write_header()
        self._sync()
        return self

    def append(self, record: Dict[str, Any]) -> None:
        if self._file is None:
            raise RuntimeError(f"Sink for {self.final_path} is not open")
        self._write_record(record)
        self.count += 1
        self._sync()

    def commit(self) -> Path:
        if self._file is None:
            raise RuntimeError(f"Sink for {self.final_path} is not open")
        self._write_footer()
        self._sync()
        self._file.close()
        self._file = None
        self.temp_path.replace(self.final_path)
        self.committed = True
        return self.final_path

    def close(self):
        if self._file is not None:
            self._file.close()
            self._file = None

    def _sync(self):
        self._file.flush()
        os.fsync(self._file.fileno())

    def _write_header(self):
        pass

    def _write_record(self, record: Dict[str, Any]):
        raise NotImplementedError

    def _write_footer(self):
        pass

    def __enter__(self):
        return self.open()

    def __exit__(self, exc_type, exc_val, exc_tb):
        # Uncommitted: leave the final artifact untouched
        self.close()
        return False


class JsonArraySink(AtomicSink):
    """Writes a JSON array one element at a time."""

    def _write_header(self):
        self._file.write("[")

    def _write_record(self, record: Dict[str, Any]):
        separator = "\n" if self.count == 0 else ",\n"
        self._file.write(separator + json.dumps(record, indent=2, ensure_ascii=False))

    def _write_footer(self):
        self._file.write("\n]\n" if self.count else "]\n")


class CsvSink(AtomicSink):
    """Writes CSV rows with a fixed column order."""

    def __init__(self, final_path: Path, columns: Sequence[str]):
        super().__init__(final_path)
        self.columns = list(columns)
        self._writer = None

    def _write_header(self):
        self._writer = csv.DictWriter(self._file, fieldnames=self.columns, extrasaction='ignore')
        self._writer.writeheader()

    def _write_record(self, record: Dict[str, Any]):
        row = {
            column: "" if record.get(column) is None else record.get(column)
            for column in self.columns
        }
        self._writer.writerow(row)


def load_json_array(path: Path) -> List[Dict[str, Any]]:
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    with open(path, 'r', encoding='utf-8') as f:
        data = json.load(f)

    if not isinstance(data, list):
        raise ValueError(f"Expected a JSON array in {path}, got {type(data).__name__}")

    return data


def read_csv_rows(path: Path) -> Tuple[List[str], List[Dict[str, str]]]:
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    with open(path, 'r', encoding='utf-8', newline='') as f:
        reader = csv.DictReader(f)
        rows = list(reader)
        header = list(reader.fieldnames or [])

    return header, rows
