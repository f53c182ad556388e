"""Freshness reader: latest timestamp embedded in the status log.

Each status line carries its epoch timestamp right after the first ``]``,
read as a base-10 integer. Lines without a ``]`` or with non-numeric text
there count as ``0``.
"""

from __future__ import annotations

import asyncio
import re
import threading
from pathlib import Path

from daemonprobe.errors import StatusLogError
from daemonprobe.types.evaluation import StatusRecord
from daemonprobe.utilities.logger import get_logger

logger = get_logger(__name__)

# Leading digits after optional whitespace and sign, like strtoul.
_LEADING_INT = re.compile(r"\s*\+?(\d+)", re.ASCII)


def parse_entry_time(line: str) -> int:
    """Return the timestamp carried by one status line, or 0."""
    _, sep, rest = line.partition("]")
    if not sep:
        return 0
    match = _LEADING_INT.match(rest)
    if match is None:
        return 0
    return int(match.group(1))


def read_status_record(path: str | Path) -> StatusRecord:
    """Scan the whole status log and keep the largest timestamp.

    Raises:
        StatusLogError: If the file cannot be opened for reading.
    """
    record = StatusRecord()
    try:
        fh = open(path, encoding="utf-8", errors="replace")
    except OSError as exc:
        raise StatusLogError(str(path), reason=exc.strerror or str(exc)) from exc
    with fh:
        for line in fh:
            record.lines_scanned += 1
            entry_time = parse_entry_time(line)
            if entry_time > record.latest_entry_time:
                record.latest_entry_time = entry_time
    logger.debug(
        "status_log_scanned",
        path=str(path),
        lines=record.lines_scanned,
        latest_entry_time=record.latest_entry_time,
    )
    return record


async def read_status_record_async(path: str | Path) -> StatusRecord:
    """Read the status log on a daemon thread and await the record.

    A log that blocks on open or read (a FIFO, a hung network mount) only
    holds the reader thread. Cancelling the await abandons that thread, and
    as a daemon thread it never delays interpreter exit.
    """
    loop = asyncio.get_running_loop()
    future: asyncio.Future[StatusRecord] = loop.create_future()

    def _deliver(outcome: StatusRecord | BaseException) -> None:
        if future.done():
            return
        if isinstance(outcome, BaseException):
            future.set_exception(outcome)
        else:
            future.set_result(outcome)

    def _worker() -> None:
        outcome: StatusRecord | BaseException
        try:
            outcome = read_status_record(path)
        except Exception as exc:
            outcome = exc
        if loop.is_closed():
            return
        try:
            loop.call_soon_threadsafe(_deliver, outcome)
        except RuntimeError:
            # Loop closed between the check and the call; nobody is waiting.
            return

    threading.Thread(target=_worker, name="status-log-reader", daemon=True).start()
    return await future
