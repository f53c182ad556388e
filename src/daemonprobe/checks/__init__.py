"""The two health signals: status log freshness and process census."""

from daemonprobe.checks.census import run_census
from daemonprobe.checks.freshness import (
    parse_entry_time,
    read_status_record,
    read_status_record_async,
)

__all__ = [
    "parse_entry_time",
    "read_status_record",
    "read_status_record_async",
    "run_census",
]
