"""Factories for fake process listings and status logs."""

from __future__ import annotations

import sys
from pathlib import Path


def listing_command(
    stdout_lines: list[str] | None = None,
    *,
    stderr: str = "",
    exit_code: int = 0,
    sleep: float = 0.0,
) -> list[str]:
    """argv for a child that behaves like a ``ps`` listing.

    The child writes ``stdout_lines``, then ``stderr``, optionally sleeps,
    and exits with ``exit_code``.
    """
    body = "\n".join(stdout_lines or [])
    if body:
        body += "\n"
    script = (
        "import sys, time\n"
        f"sys.stdout.write({body!r})\n"
        "sys.stdout.flush()\n"
        f"sys.stderr.write({stderr!r})\n"
        "sys.stderr.flush()\n"
        f"time.sleep({sleep!r})\n"
        f"sys.exit({exit_code!r})\n"
    )
    return [sys.executable, "-c", script]


def write_status_log(path: Path, timestamps: list[int | str]) -> Path:
    """Write a status log with one ``]<timestamp>`` entry per item."""
    lines = [f"[status]{ts} PROGRAM;running" for ts in timestamps]
    path.write_text("\n".join(lines) + ("\n" if lines else ""), encoding="utf-8")
    return path
