"""Evaluation deadline.

One wall-clock budget covers a whole run. It is passed explicitly into every
awaited I/O step; when it runs out the step is cancelled and
``ProbeTimeoutError`` is raised in its place.
"""

from __future__ import annotations

import asyncio
import inspect
import time
from collections.abc import Awaitable
from dataclasses import dataclass, field
from typing import TypeVar

from daemonprobe.errors import ProbeTimeoutError

T = TypeVar("T")

DEFAULT_TIMEOUT = 10.0


@dataclass(slots=True)
class Deadline:
    timeout: float = DEFAULT_TIMEOUT
    started_at: float = field(default_factory=time.monotonic)

    @property
    def elapsed(self) -> float:
        return time.monotonic() - self.started_at

    def remaining(self) -> float:
        return max(0.0, self.timeout - self.elapsed)

    @property
    def expired(self) -> bool:
        return self.remaining() <= 0.0

    def check(self) -> None:
        """Raise ProbeTimeoutError if the budget is spent."""
        if self.expired:
            raise ProbeTimeoutError(self.timeout)

    async def run(self, aw: Awaitable[T]) -> T:
        """Await ``aw`` within the remaining budget."""
        if self.expired:
            if inspect.iscoroutine(aw):
                aw.close()
            elif isinstance(aw, asyncio.Future):
                aw.cancel()
            raise ProbeTimeoutError(self.timeout)
        try:
            return await asyncio.wait_for(aw, timeout=self.remaining())
        except asyncio.TimeoutError:
            raise ProbeTimeoutError(self.timeout) from None
