"""
Tests for infra/pipeline/storage/artifact.py

Key behaviors to verify:
1. Nothing appears at the final path until commit
2. An interrupted write leaves the previous artifact untouched
3. JSON arrays are valid for 0..N records and keep order
4. CSV columns keep their order; None becomes an empty cell
"""

import csv
import json
import pytest

from infra.pipeline.storage.artifact import (
    CsvSink,
    JsonArraySink,
    load_json_array,
    partial_path_for,
    read_csv_rows,
)


class TestJsonArraySink:

    @pytest.mark.parametrize("count", [0, 1, 5])
    def test_commit_writes_valid_array_in_order(self, tmp_path, count):
        target = tmp_path / "out.json"

        with JsonArraySink(target) as sink:
            for i in range(count):
                sink.append({"index": i})
            sink.commit()

        assert json.loads(target.read_text()) == [{"index": i} for i in range(count)]
        assert not partial_path_for(target).exists()

    def test_final_path_absent_before_commit(self, tmp_path):
        target = tmp_path / "out.json"

        with JsonArraySink(target) as sink:
            sink.append({"a": 1})
            assert not target.exists()
            assert partial_path_for(target).exists()
            sink.commit()

        assert target.exists()

    def test_interrupted_run_keeps_previous_artifact(self, tmp_path):
        target = tmp_path / "out.json"
        target.write_text('[{"old": true}]')

        with pytest.raises(KeyboardInterrupt):
            with JsonArraySink(target) as sink:
                sink.append({"new": 1})
                raise KeyboardInterrupt

        assert json.loads(target.read_text()) == [{"old": True}]
        # partial file stays for inspection and is a readable prefix
        assert partial_path_for(target).read_text().startswith('[\n{\n  "new": 1\n}')

    def test_unicode_is_kept_readable(self, tmp_path):
        target = tmp_path / "out.json"
        with JsonArraySink(target) as sink:
            sink.append({"title": "Café à l'aube"})
            sink.commit()

        assert "Café à l'aube" in target.read_text(encoding='utf-8')

    def test_append_requires_open_sink(self, tmp_path):
        sink = JsonArraySink(tmp_path / "out.json")
        with pytest.raises(RuntimeError):
            sink.append({})


class TestCsvSink:

    def test_writes_header_and_rows_in_column_order(self, tmp_path):
        target = tmp_path / "listing.csv"

        with CsvSink(target, ["id", "description", "width"]) as sink:
            sink.append({"width": 10, "id": "a", "description": "hello, world"})
            sink.append({"id": "b", "description": None, "width": None, "extra": "x"})
            sink.commit()

        header, rows = read_csv_rows(target)
        assert header == ["id", "description", "width"]
        assert rows == [
            {"id": "a", "description": "hello, world", "width": "10"},
            {"id": "b", "description": "", "width": ""},
        ]

    def test_uncommitted_csv_not_visible(self, tmp_path):
        target = tmp_path / "listing.csv"
        with CsvSink(target, ["id"]) as sink:
            sink.append({"id": "a"})

        assert not target.exists()


class TestLoaders:

    def test_load_json_array_rejects_objects(self, tmp_path):
        path = tmp_path / "obj.json"
        path.write_text('{"a": 1}')

        with pytest.raises(ValueError):
            load_json_array(path)

    def test_missing_files_raise(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_json_array(tmp_path / "missing.json")
        with pytest.raises(FileNotFoundError):
            read_csv_rows(tmp_path / "missing.csv")
