"""Inputs and results of a single evaluation."""

from __future__ import annotations

import re
from dataclasses import dataclass

from daemonprobe.errors import ProbeUsageError
from daemonprobe.types.severity import Severity

SECONDS_PER_MINUTE = 60

_DIGITS = re.compile(r"[0-9]+")


@dataclass(frozen=True, slots=True)
class EvaluationInput:
    """Validated arguments for one evaluation."""

    status_log_path: str
    stale_threshold_seconds: int
    process_match_token: str

    def validate(self) -> None:
        """Raise ProbeUsageError if a precondition does not hold."""
        if not self.status_log_path:
            raise ProbeUsageError("You must provide the status log")
        if not self.process_match_token:
            raise ProbeUsageError("You must provide a process string")
        if self.stale_threshold_seconds < 0:
            raise ProbeUsageError("Expiration time must be a non-negative integer (minutes)")

    @classmethod
    def from_cli(
        cls,
        status_log: str | None,
        expire_minutes: str | int | None,
        process_string: str | None,
    ) -> EvaluationInput:
        """Build an input from raw command-line values.

        ``expire_minutes`` is converted to seconds. A missing expiry means
        zero, as in the legacy plugin.
        """
        if not status_log:
            raise ProbeUsageError("You must provide the status log")
        if not process_string:
            raise ProbeUsageError("You must provide a process string")
        minutes = parse_nonnegative_int(expire_minutes)
        request = cls(
            status_log_path=status_log,
            stale_threshold_seconds=minutes * SECONDS_PER_MINUTE,
            process_match_token=process_string,
        )
        request.validate()
        return request


def parse_nonnegative_int(value: str | int | None) -> int:
    if value is None:
        return 0
    if isinstance(value, int) and not isinstance(value, bool):
        number = value
    else:
        text = str(value).strip()
        if not _DIGITS.fullmatch(text):
            raise ProbeUsageError("Expiration time must be a non-negative integer (minutes)")
        number = int(text)
    if number < 0:
        raise ProbeUsageError("Expiration time must be a non-negative integer (minutes)")
    return number


@dataclass(slots=True)
class StatusRecord:
    latest_entry_time: int = 0
    lines_scanned: int = 0


@dataclass(slots=True)
class CensusResult:
    """Outcome of one process listing."""

    match_count: int = 0
    anomaly_detected: bool = False
    exit_code: int | None = None

    @property
    def abnormal_exit(self) -> bool:
        return self.exit_code is not None and self.exit_code != 0

    @property
    def degraded(self) -> bool:
        """Whether the listing itself looked unhealthy."""
        return self.anomaly_detected or self.abnormal_exit


@dataclass(frozen=True, slots=True)
class ProbeResult:
    """Concluded outcome: one severity and one summary line."""

    severity: Severity
    message: str
    match_count: int | None = None
    age_seconds: int | None = None

    @property
    def exit_code(self) -> int:
        return self.severity.exit_code
