"""Evaluation lifecycle: NotStarted -> Evaluating -> Concluded.

A concluded machine carries exactly one result and accepts no further
transitions.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum

from daemonprobe.types.evaluation import ProbeResult


class EvaluationPhase(StrEnum):
    NOT_STARTED = "not_started"
    EVALUATING = "evaluating"
    CONCLUDED = "concluded"


# Valid transitions: (from_phase, to_phase)
VALID_TRANSITIONS: set[tuple[EvaluationPhase, EvaluationPhase]] = {
    (EvaluationPhase.NOT_STARTED, EvaluationPhase.EVALUATING),
    # Precondition failures conclude before any I/O starts
    (EvaluationPhase.NOT_STARTED, EvaluationPhase.CONCLUDED),
    (EvaluationPhase.EVALUATING, EvaluationPhase.CONCLUDED),
}


class InvalidTransitionError(Exception):
    """Raised when a phase transition is not allowed."""

    def __init__(self, from_phase: EvaluationPhase, to_phase: EvaluationPhase) -> None:
        super().__init__(f"Invalid transition: {from_phase} -> {to_phase}")
        self.from_phase = from_phase
        self.to_phase = to_phase


@dataclass
class EvaluationStateMachine:
    _phase: EvaluationPhase = field(default=EvaluationPhase.NOT_STARTED)
    _result: ProbeResult | None = field(default=None, repr=False)
    _history: list[tuple[EvaluationPhase, EvaluationPhase]] = field(
        default_factory=list, repr=False,
    )

    @property
    def phase(self) -> EvaluationPhase:
        return self._phase

    @property
    def result(self) -> ProbeResult | None:
        return self._result

    @property
    def is_concluded(self) -> bool:
        return self._phase == EvaluationPhase.CONCLUDED

    @property
    def history(self) -> list[tuple[EvaluationPhase, EvaluationPhase]]:
        return list(self._history)

    def can_transition(self, to_phase: EvaluationPhase) -> bool:
        return (self._phase, to_phase) in VALID_TRANSITIONS

    def transition(self, to_phase: EvaluationPhase) -> None:
        if not self.can_transition(to_phase):
            raise InvalidTransitionError(self._phase, to_phase)
        self._history.append((self._phase, to_phase))
        self._phase = to_phase

    def begin(self) -> None:
        self.transition(EvaluationPhase.EVALUATING)

    def conclude(self, result: ProbeResult) -> ProbeResult:
        self.transition(EvaluationPhase.CONCLUDED)
        self._result = result
        return result
