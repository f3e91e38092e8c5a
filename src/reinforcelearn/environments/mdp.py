from __future__ import annotations

from typing import Sequence
import warnings
import numpy as np
from gymnasium import spaces

from reinforcelearn.common.seeding import make_rng
from reinforcelearn.environments.base import Environment
from reinforcelearn.errors import InvalidArgumentError


class MdpEnvironment(Environment):
    """
    A finite Markov decision process given by its transition and reward arrays.

    - transitions[s, a, s'] = P(s' | s, a), each (s, a) row sums to 1
    - rewards[s, a] = expected reward of taking a in s

    States and actions are integers. A state is terminal when it is absorbing for every action
    (P(s | s, a) = 1 for all a). An episode ends when a terminal state is reached.

    :param transitions: Array of shape (n_states, n_actions, n_states).
        :type transitions: np.ndarray
    :param rewards: Array of shape (n_states, n_actions).
        :type rewards: np.ndarray
    :param initial_state: Start state, a collection of start states (sampled uniformly on reset),
        or None for a uniformly random non-terminal state.
        :type initial_state: int | Sequence[int] | None
    :param seed: Seed (or Generator) for transition sampling and start states.
        :type seed: int | np.random.Generator | None
    """

    def __init__(
        self,
        transitions: np.ndarray,
        rewards: np.ndarray,
        initial_state: int | Sequence[int] | None = None,
        seed: int | np.random.Generator | None = None,
    ) -> None:
        P = np.asarray(transitions, dtype=np.float64)
        R = np.asarray(rewards, dtype=np.float64)

        if P.ndim != 3 or P.shape[0] != P.shape[2]:
            raise InvalidArgumentError(f"transitions must have shape (n_states, n_actions, n_states), got {P.shape}")
        if R.shape != P.shape[:2]:
            raise InvalidArgumentError(f"rewards must have shape {P.shape[:2]}, got {R.shape}")
        if (P < 0.0).any() or not np.allclose(P.sum(axis=2), 1.0):
            raise InvalidArgumentError("Every transitions[s, a, :] must be a probability distribution")

        self.n_states = int(P.shape[0])
        super().__init__(action_space=spaces.Discrete(int(P.shape[1])), observation_space=spaces.Discrete(self.n_states))

        self.transitions = P
        self.rewards = R
        self.rng = make_rng(seed)

        diag = P[np.arange(self.n_states), :, np.arange(self.n_states)]  # (n_states, n_actions): P(s | s, a)
        self.terminal_states = {int(s) for s in np.flatnonzero(np.all(np.isclose(diag, 1.0), axis=1))}

        self.initial_states = self._resolve_initial_states(initial_state)

    def _resolve_initial_states(self, initial_state) -> list[int]:
        if initial_state is None:
            candidates = [s for s in range(self.n_states) if not self.is_terminal(s)]
            if not candidates:
                raise InvalidArgumentError("All states are terminal. Cannot sample a non-terminal start state.")
            return candidates

        starts = [int(s) for s in np.atleast_1d(initial_state)]
        for s in starts:
            if not (0 <= s < self.n_states):
                raise InvalidArgumentError(f"initial_state={s} out of bounds [0, {self.n_states - 1}]")
            if self.is_terminal(s):
                warnings.warn(message=f"The start state {s} is terminal, episodes starting there end immediately.",
                              category=RuntimeWarning)
        return starts

    def is_terminal(self, state: int) -> bool:
        return int(state) in self.terminal_states

    def _reset(self) -> int:
        return int(self.rng.choice(self.initial_states))

    def _step(self, action: int) -> tuple[int, float, bool]:
        s = int(self.state)
        next_state = int(self.rng.choice(self.n_states, p=self.transitions[s, action]))
        reward = float(self.rewards[s, action])
        return next_state, reward, self.is_terminal(next_state)
