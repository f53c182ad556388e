"""Daemonprobe error hierarchy."""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from daemonprobe.types.severity import Severity


class ErrorCategory(StrEnum):
    """Category of error for classification and reporting."""

    PRECONDITION = "precondition"
    INFRASTRUCTURE = "infrastructure"
    TIMEOUT = "timeout"
    CONFIGURATION = "configuration"


class ProbeError(Exception):
    """Base error for all probe failures.

    Every probe error concludes the evaluation with its ``severity``.
    Nothing is retried: a failure is reported once, immediately.
    """

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory = ErrorCategory.INFRASTRUCTURE,
        severity: Severity = Severity.UNKNOWN,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.category = category
        self.severity = severity
        self.details: dict[str, Any] = details or {}

    @property
    def retryable(self) -> bool:
        return False

    def __repr__(self) -> str:
        return f"{type(self).__name__}({str(self)!r}, category={self.category!r})"


class ProbeUsageError(ProbeError):
    """Missing or malformed input, detected before any I/O."""

    def __init__(self, message: str) -> None:
        super().__init__(message, category=ErrorCategory.PRECONDITION, severity=Severity.UNKNOWN)


class ConfigurationError(ProbeError):
    """Invalid probe configuration."""

    def __init__(self, message: str) -> None:
        super().__init__(message, category=ErrorCategory.CONFIGURATION, severity=Severity.UNKNOWN)


class StatusLogError(ProbeError):
    """The status log could not be opened for reading."""

    def __init__(self, path: str, *, reason: str = "") -> None:
        super().__init__(
            "Error: Cannot open status log for reading!",
            category=ErrorCategory.INFRASTRUCTURE,
            severity=Severity.CRITICAL,
            details={"path": path, "reason": reason},
        )
        self.path = path


class CensusSpawnError(ProbeError):
    """The process listing command could not be started."""

    def __init__(self, command: str, *, reason: str = "") -> None:
        super().__init__(
            f"Could not open pipe: {command}",
            category=ErrorCategory.INFRASTRUCTURE,
            severity=Severity.UNKNOWN,
            details={"command": command, "reason": reason},
        )
        self.command = command


class ProbeTimeoutError(ProbeError):
    """The evaluation ran past its deadline."""

    def __init__(self, timeout: float) -> None:
        super().__init__(
            f"Plugin timed out after {timeout:g} seconds",
            category=ErrorCategory.TIMEOUT,
            severity=Severity.UNKNOWN,
        )
        self.timeout = timeout
