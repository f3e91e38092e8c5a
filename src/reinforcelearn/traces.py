from __future__ import annotations

from enum import Enum
import numpy as np

from reinforcelearn.errors import InvalidArgumentError


class TraceType(str, Enum):
    """
    How a visit updates the trace of (s, a).

    - ACCUMULATE: e(s,a) <- e(s,a) + 1
    - REPLACE:    e(s,a) <- 1
    """
    ACCUMULATE = "accumulate"
    REPLACE = "replace"


class EligibilityTrace:
    """
    Eligibility traces for a tabular action-value function.

    The trace is a table with the same shape as Q. It keeps a decaying memory of the recently
    visited (s, a) pairs, so one TD error can be propagated backwards to all of them at once:

        Q <- Q + alpha * delta * e
        e <- gamma * lambda * e

    A pair that is never revisited shrinks geometrically, by a factor gamma * lambda per step.

    :param n_states: Number of discrete states.
        :type n_states: int
    :param n_actions: Number of discrete actions.
        :type n_actions: int
    :param trace_type: Accumulating or replacing traces.
        :type trace_type: TraceType | str
    """

    def __init__(self, n_states: int, n_actions: int, trace_type: TraceType | str = TraceType.ACCUMULATE) -> None:
        try:
            self.trace_type = TraceType(trace_type)
        except ValueError as e:
            raise InvalidArgumentError(f"Unknown trace type {trace_type!r}") from e

        self.n_states = int(n_states)
        self.n_actions = int(n_actions)
        self.values = np.zeros(shape=(self.n_states, self.n_actions), dtype=np.float64)

    def visit(self, state: int, action: int) -> None:
        """
        Mark (state, action) as just visited.

        :param state: State index.
            :type state: int
        :param action: Action index.
            :type action: int

        :return: None
            :rtype: None
        """
        for index in (state, action):
            if isinstance(index, (bool, np.bool_)) or not isinstance(index, (int, np.integer)):
                raise InvalidArgumentError(f"Trace indices must be integers, got {index!r}")
        if not (0 <= state < self.n_states and 0 <= action < self.n_actions):
            raise InvalidArgumentError(f"(state={state}, action={action}) is outside the trace table")

        if self.trace_type is TraceType.ACCUMULATE:
            self.values[state, action] += 1.0
        else:
            self.values[state, action] = 1.0

    def decay(self, factor: float) -> None:
        """
        Multiply every trace by `factor` (usually gamma * lambda).

        :param factor: Decay factor in [0, 1].
            :type factor: float

        :return: None
            :rtype: None
        """
        self.values *= float(factor)

    def reset(self) -> None:
        self.values.fill(0.0)
