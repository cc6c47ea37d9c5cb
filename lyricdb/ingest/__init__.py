from lyricdb.ingest.jsonl_reader import (
    load_platform,
    load_platforms,
    parse_record_line,
    stream_index_file,
)
from lyricdb.ingest.layout import find_data_dir, is_data_dir

__all__ = [
    "load_platform",
    "load_platforms",
    "parse_record_line",
    "stream_index_file",
    "find_data_dir",
    "is_data_dir",
]
