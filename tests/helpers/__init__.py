"""Shared test helpers for the daemonprobe test suite."""

from tests.helpers.fixtures import listing_command, write_status_log

__all__ = ["listing_command", "write_status_log"]
