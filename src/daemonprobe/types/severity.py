"""Severity levels reported to the monitoring supervisor."""

from __future__ import annotations

from enum import IntEnum


class Severity(IntEnum):
    """Outcome of one probe run. The value is the process exit code."""

    OK = 0
    WARNING = 1
    CRITICAL = 2
    UNKNOWN = 3

    @property
    def exit_code(self) -> int:
        return int(self)

    @property
    def rank(self) -> int:
        """Position in the escalation order.

        UNKNOWN ranks below OK: it only survives a merge when nothing
        else has been established.
        """
        return _RANK[self]

    def escalate(self, other: Severity) -> Severity:
        """Return the more severe of the two (never de-escalates)."""
        return other if other.rank > self.rank else self


_RANK: dict[Severity, int] = {
    Severity.UNKNOWN: -1,
    Severity.OK: 0,
    Severity.WARNING: 1,
    Severity.CRITICAL: 2,
}


def max_severity(*levels: Severity) -> Severity:
    """Reduce several levels to the most severe one."""
    result = Severity.UNKNOWN
    for level in levels:
        result = result.escalate(level)
    return result
