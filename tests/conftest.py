"""Global test fixtures for daemonprobe."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from pathlib import Path

import pytest
import structlog


@pytest.fixture
def status_log(tmp_path: Path) -> Path:
    return tmp_path / "status.log"


@pytest.fixture(autouse=True)
def _reset_structlog() -> Iterator[None]:
    yield
    structlog.reset_defaults()
    namespace = logging.getLogger("daemonprobe")
    for handler in list(namespace.handlers):
        namespace.removeHandler(handler)
    namespace.setLevel(logging.NOTSET)
    namespace.propagate = True


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "DAEMONPROBE_CONFIG",
        "DAEMONPROBE_TIMEOUT",
        "DAEMONPROBE_PS_COMMAND",
        "DAEMONPROBE_LABEL",
        "DAEMONPROBE_DEBUG",
        "DAEMONPROBE_LOG_JSON",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def status_fifo(tmp_path: Path) -> Iterator[Path]:
    """A status log that blocks any reader until a writer shows up."""
    if not hasattr(os, "mkfifo"):
        pytest.skip("named pipes not supported on this platform")
    path = tmp_path / "status.fifo"
    os.mkfifo(path)
    yield path
    # Release a reader thread still blocked in open().
    try:
        fd = os.open(path, os.O_WRONLY | os.O_NONBLOCK)
    except OSError:
        return
    os.close(fd)
