from infra.pipeline.storage.artifact import (
    AtomicSink,
    JsonArraySink,
    CsvSink,
    partial_path_for,
    load_json_array,
    read_csv_rows,
)
from infra.pipeline.storage.run_storage import (
    RunStorage,
    LISTING_FILENAME,
    REPORT_FILENAME,
    collection_dir_name,
    slugify,
)

__all__ = [
    "AtomicSink",
    "JsonArraySink",
    "CsvSink",
    "partial_path_for",
    "load_json_array",
    "read_csv_rows",
    "RunStorage",
    "LISTING_FILENAME",
    "REPORT_FILENAME",
    "collection_dir_name",
    "slugify",
]
