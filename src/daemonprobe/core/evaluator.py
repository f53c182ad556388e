"""Severity reducer: combine freshness and census into one result.

Order of evaluation:

1. Validate the input. Failures conclude UNKNOWN before any I/O.
2. Read the status log. An unopenable log concludes CRITICAL.
3. Run the process census. A spawn failure concludes UNKNOWN; stderr
   output or an abnormal exit raises the floor to WARNING.
4. Zero matching processes concludes CRITICAL, whatever the floor.
5. A log older than the threshold raises the floor to WARNING.

Severities only escalate within one evaluation. The deadline covers every
step; running out concludes UNKNOWN.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Callable

from daemonprobe.checks.census import run_census, split_command
from daemonprobe.checks.freshness import read_status_record_async
from daemonprobe.config import ProbeConfig
from daemonprobe.core.deadline import Deadline
from daemonprobe.core.state_machine import EvaluationStateMachine
from daemonprobe.errors import ProbeError
from daemonprobe.types.evaluation import CensusResult, EvaluationInput, ProbeResult
from daemonprobe.types.severity import Severity, max_severity
from daemonprobe.utilities.logger import get_logger

logger = get_logger(__name__)


def _plural(count: int, singular: str, plural: str) -> str:
    return singular if count == 1 else plural


def format_summary(
    severity: Severity,
    match_count: int,
    age_seconds: int,
    *,
    label: str = "",
) -> str:
    """Summary line for a concluded run that found the daemon."""
    word = "ok" if severity == Severity.OK else "problem"
    prefix = f"{label} " if label else ""
    return (
        f"{prefix}{word}: located {match_count} "
        f"{_plural(match_count, 'process', 'processes')}, "
        f"status log updated {age_seconds} {_plural(age_seconds, 'second', 'seconds')} ago"
    )


def missing_process_message(label: str = "") -> str:
    if label:
        return f"Could not locate a running {label} process!"
    return "Could not locate a running process!"


class HealthEvaluator:
    """Runs one stateless evaluation per call to :meth:`evaluate`."""

    def __init__(
        self,
        config: ProbeConfig | None = None,
        *,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._config = config or ProbeConfig()
        self._clock = clock

    @property
    def config(self) -> ProbeConfig:
        return self._config

    async def evaluate(
        self,
        request: EvaluationInput,
        deadline: Deadline | None = None,
    ) -> ProbeResult:
        """Evaluate daemon health and return the concluded result."""
        deadline = deadline or Deadline(self._config.timeout)
        machine = EvaluationStateMachine()

        try:
            deadline.check()
            request.validate()
        except ProbeError as exc:
            return self._conclude(machine, _from_error(exc))

        machine.begin()
        try:
            result = await self._run_checks(request, deadline)
        except ProbeError as exc:
            result = _from_error(exc)
        return self._conclude(machine, result)

    async def _run_checks(self, request: EvaluationInput, deadline: Deadline) -> ProbeResult:
        record = await deadline.run(read_status_record_async(request.status_log_path))

        census = await run_census(
            split_command(self._config.ps_command),
            request.process_match_token,
            deadline,
        )
        floor = self._census_floor(census)

        if census.match_count == 0:
            return ProbeResult(
                severity=Severity.CRITICAL,
                message=missing_process_message(self._config.label),
                match_count=0,
            )

        age = max(0, int(self._clock()) - record.latest_entry_time)
        if age > request.stale_threshold_seconds:
            floor = floor.escalate(Severity.WARNING)

        return ProbeResult(
            severity=floor,
            message=format_summary(floor, census.match_count, age, label=self._config.label),
            match_count=census.match_count,
            age_seconds=age,
        )

    @staticmethod
    def _census_floor(census: CensusResult) -> Severity:
        return max_severity(Severity.OK, Severity.WARNING if census.degraded else Severity.OK)

    @staticmethod
    def _conclude(machine: EvaluationStateMachine, result: ProbeResult) -> ProbeResult:
        logger.debug(
            "evaluation_concluded",
            severity=result.severity.name,
            message=result.message,
        )
        return machine.conclude(result)


def _from_error(exc: ProbeError) -> ProbeResult:
    logger.debug("evaluation_failed", error=repr(exc), **exc.details)
    return ProbeResult(severity=exc.severity, message=str(exc))


def evaluate_sync(
    request: EvaluationInput,
    config: ProbeConfig | None = None,
    *,
    deadline: Deadline | None = None,
    clock: Callable[[], float] = time.time,
) -> ProbeResult:
    """Run one evaluation on a fresh event loop."""
    return asyncio.run(HealthEvaluator(config, clock=clock).evaluate(request, deadline))
