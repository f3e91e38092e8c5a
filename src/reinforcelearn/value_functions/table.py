from __future__ import annotations

from typing import Sequence
import numpy as np

from reinforcelearn.errors import InvalidArgumentError


class ValueTable:
    """
    Tabular action-value function Q[s, a].

    States and actions are integer indices in [0, n_states-1] and [0, n_actions-1].
    NumPy would silently wrap negative indices, so every lookup is range-checked and
    an out-of-range index raises InvalidArgumentError instead.

    :param n_states: Number of discrete states.
        :type n_states: int
    :param n_actions: Number of discrete actions.
        :type n_actions: int
    :param initial_value: Initial value for all entries, or a full (n_states, n_actions) array.
        :type initial_value: float | np.ndarray
    """

    def __init__(self, n_states: int, n_actions: int, initial_value: float | np.ndarray = 0.0) -> None:
        self.n_states = int(n_states)
        self.n_actions = int(n_actions)
        if self.n_states < 1 or self.n_actions < 1:
            raise InvalidArgumentError("n_states and n_actions must be >= 1")

        init = np.asarray(initial_value, dtype=np.float64)
        if init.ndim == 0:
            # starting from a constant (zeros by default) is the standard choice for tabular RL
            self.table = np.full(shape=(self.n_states, self.n_actions), fill_value=float(init), dtype=np.float64)
        elif init.shape == (self.n_states, self.n_actions):
            self.table = init.copy()
        else:
            raise InvalidArgumentError(
                f"initial_value must be a scalar or have shape {(self.n_states, self.n_actions)}, got {init.shape}"
            )

    def _check_state(self, state) -> int:
        if isinstance(state, (bool, np.bool_)) or not isinstance(state, (int, np.integer)):
            raise InvalidArgumentError(f"State index must be an integer, got {state!r}")
        if not (0 <= state < self.n_states):
            raise InvalidArgumentError(f"state={state} out of bounds [0, {self.n_states - 1}]")
        return int(state)

    def _check_action(self, action) -> int:
        if isinstance(action, (bool, np.bool_)) or not isinstance(action, (int, np.integer)):
            raise InvalidArgumentError(f"Action index must be an integer, got {action!r}")
        if not (0 <= action < self.n_actions):
            raise InvalidArgumentError(f"action={action} out of bounds [0, {self.n_actions - 1}]")
        return int(action)

    def get(self, state: int, action: int) -> float:
        """
        Read Q[state, action].

        :param state: State index.
            :type state: int
        :param action: Action index.
            :type action: int

        :return: Current estimate.
            :rtype: float
        """
        return float(self.table[self._check_state(state), self._check_action(action)])

    def set(self, state: int, action: int, value: float) -> None:
        """
        Write Q[state, action].
        """
        self.table[self._check_state(state), self._check_action(action)] = float(value)

    def action_values(self, state: int) -> np.ndarray:
        """
        All action values of one state (a copy, so policies cannot mutate the table).

        :param state: State index.
            :type state: int

        :return: Array of shape (n_actions,).
            :rtype: np.ndarray
        """
        return self.table[self._check_state(state)].copy()

    def predict(self, states: Sequence[int]) -> np.ndarray:
        """
        Action values for a batch of states.

        :param states: State indices.
            :type states: Sequence[int]

        :return: Array of shape (batch, n_actions).
            :rtype: np.ndarray
        """
        idxs = [self._check_state(s) for s in states]
        return self.table[idxs].copy()

    def add_scaled(self, matrix: np.ndarray, scale: float) -> None:
        """
        Bulk in-place update: Q <- Q + scale * matrix.

        Used by eligibility traces, where matrix is the trace table and scale = alpha * delta.
        Entries where matrix is zero are left untouched.

        :param matrix: Array of shape (n_states, n_actions).
            :type matrix: np.ndarray
        :param scale: Multiplier.
            :type scale: float

        :return: None
            :rtype: None
        """
        matrix = np.asarray(matrix, dtype=np.float64)
        if matrix.shape != self.table.shape:
            raise InvalidArgumentError(f"Expected shape {self.table.shape}, got {matrix.shape}")
        self.table += float(scale) * matrix

    def fit(self, states: Sequence[int], actions: Sequence[int], targets: Sequence[float], step_size: float) -> None:
        """
        Move each Q[s, a] a fraction `step_size` towards its target.

            Q(s,a) <- Q(s,a) + step_size * (target - Q(s,a))

        The pairs are processed in order, so a pair that appears twice in a batch is updated twice.

        :param states: State indices.
            :type states: Sequence[int]
        :param actions: Action indices.
            :type actions: Sequence[int]
        :param targets: Regression targets.
            :type targets: Sequence[float]
        :param step_size: Learning rate.
            :type step_size: float

        :return: None
            :rtype: None
        """
        if not (len(states) == len(actions) == len(targets)):
            raise InvalidArgumentError("states, actions and targets must have the same length")

        for s, a, y in zip(states, actions, targets):
            s, a = self._check_state(s), self._check_action(a)
            self.table[s, a] += float(step_size) * (float(y) - self.table[s, a])

    def greedy_policy(self) -> np.ndarray:
        """
        Greedy (deterministic) policy w.r.t. the table: first maximal action of every state.

        :return: Policy array of shape (n_states,).
            :rtype: np.ndarray
        """
        return np.argmax(self.table, axis=1).astype(np.int64)
