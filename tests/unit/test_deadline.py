"""Tests for the evaluation deadline."""

from __future__ import annotations

import asyncio
import time

import pytest

from daemonprobe.core.deadline import Deadline
from daemonprobe.errors import ProbeTimeoutError


class TestDeadline:
    def test_remaining_never_negative(self) -> None:
        deadline = Deadline(1.0, started_at=time.monotonic() - 5)
        assert deadline.remaining() == 0.0
        assert deadline.expired is True

    def test_check_raises_when_expired(self) -> None:
        deadline = Deadline(1.0, started_at=time.monotonic() - 5)
        with pytest.raises(ProbeTimeoutError, match="Plugin timed out after 1 seconds"):
            deadline.check()

    def test_check_passes_with_budget(self) -> None:
        Deadline(10.0).check()

    @pytest.mark.asyncio
    async def test_run_returns_value(self) -> None:
        async def _value() -> int:
            return 7

        assert await Deadline(5.0).run(_value()) == 7

    @pytest.mark.asyncio
    async def test_run_cancels_slow_awaitable(self) -> None:
        cancelled = False

        async def _slow() -> None:
            nonlocal cancelled
            try:
                await asyncio.sleep(30)
            except asyncio.CancelledError:
                cancelled = True
                raise

        with pytest.raises(ProbeTimeoutError):
            await Deadline(0.1).run(_slow())
        assert cancelled is True

    @pytest.mark.asyncio
    async def test_run_on_expired_deadline_does_not_start(self) -> None:
        started = False

        async def _work() -> None:
            nonlocal started
            started = True

        deadline = Deadline(1.0, started_at=time.monotonic() - 5)
        with pytest.raises(ProbeTimeoutError):
            await deadline.run(_work())
        assert started is False
