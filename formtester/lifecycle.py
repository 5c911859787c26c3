"""Evaluation lifecycle of the form request a tester owns.

A tester builds its form request lazily and evaluates it exactly once. This
module enforces that ordering with a small state machine:

    not_built -> built_not_evaluated -> evaluated

Usage:
    >>> lifecycle = EvaluationLifecycle()
    >>> lifecycle.transition_to(EvaluationState.BUILT_NOT_EVALUATED)
    >>> lifecycle.transition_to(EvaluationState.EVALUATED)
    >>> lifecycle.is_terminal()
    True
"""

from dataclasses import dataclass, field
from typing import Dict, List, Set, Tuple

from formtester.errors import FormTesterError
from formtester.types import EvaluationState


class InvalidStateTransitionError(FormTesterError):
    """Raised when the lifecycle is asked to skip or repeat a step.

    Attributes:
        current_state: The state before the attempted transition
        target_state: The state that was attempted
    """

    def __init__(self, current_state: EvaluationState, target_state: EvaluationState, message: str):
        self.current_state = current_state
        self.target_state = target_state
        super().__init__(message)


VALID_TRANSITIONS: Dict[EvaluationState, Set[EvaluationState]] = {
    EvaluationState.NOT_BUILT: {EvaluationState.BUILT_NOT_EVALUATED},
    EvaluationState.BUILT_NOT_EVALUATED: {EvaluationState.EVALUATED},
    # Terminal: an evaluated form request is never evaluated again
    EvaluationState.EVALUATED: set(),
}


@dataclass
class EvaluationLifecycle:
    """Tracks how far a tester's form request has progressed.

    Attributes:
        state: Current lifecycle state
    """

    state: EvaluationState = EvaluationState.NOT_BUILT
    _history: List[Tuple[EvaluationState, EvaluationState]] = field(
        default_factory=list, init=False, repr=False
    )

    def can_transition_to(self, target_state: EvaluationState) -> bool:
        return target_state in VALID_TRANSITIONS.get(self.state, set())

    def transition_to(self, target_state: EvaluationState) -> None:
        """Move to the next state.

        Raises:
            InvalidStateTransitionError: If the transition is not allowed
        """
        if not self.can_transition_to(target_state):
            raise InvalidStateTransitionError(
                current_state=self.state,
                target_state=target_state,
                message=(
                    f"Invalid evaluation transition: cannot go from "
                    f"'{self.state.value}' to '{target_state.value}'"
                ),
            )
        self._history.append((self.state, target_state))
        self.state = target_state

    def is_built(self) -> bool:
        return self.state != EvaluationState.NOT_BUILT

    def is_evaluated(self) -> bool:
        return self.state == EvaluationState.EVALUATED

    def is_terminal(self) -> bool:
        return len(VALID_TRANSITIONS[self.state]) == 0

    def history(self) -> List[Tuple[EvaluationState, EvaluationState]]:
        """Transitions taken so far, oldest first."""
        return list(self._history)


__all__ = [
    "EvaluationLifecycle",
    "InvalidStateTransitionError",
    "VALID_TRANSITIONS",
]
