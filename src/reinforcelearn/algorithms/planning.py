from __future__ import annotations

from typing import Iterable
import numpy as np

from reinforcelearn.errors import InvalidArgumentError


def q_value_iteration(
    transitions: np.ndarray,
    rewards: np.ndarray,
    gamma: float = 0.99,
    terminal_states: Iterable[int] | None = None,
    theta: float = 1e-10,
    max_iters: int = 100_000,
    deltas: list[float] | None = None,
) -> np.ndarray:
    """
    Value Iteration on action values for a finite MDP.

    Repeatedly applies the Bellman optimality backup:

        Q(s,a) <- R(s,a) + gamma * sum_{s'} P(s'|s,a) * max_a' Q(s',a')

    with terminal states contributing no future value. It stops when the largest change
    is below theta. The result is the optimal Q*, the fixed point tabular Q-learning converges to.

    :param transitions: P, shape (n_states, n_actions, n_states).
        :type transitions: np.ndarray
    :param rewards: R, expected rewards, shape (n_states, n_actions).
        :type rewards: np.ndarray
    :param gamma: Discount factor in [0, 1]. gamma = 1 needs every policy to terminate.
        :type gamma: float
    :param terminal_states: States with value 0 (absorbing). None means no terminal states.
        :type terminal_states: Iterable[int] | None
    :param theta: Convergence threshold on max |Q_{k+1} - Q_k|.
        :type theta: float
    :param max_iters: Maximum number of sweeps.
        :type max_iters: int
    :param deltas: Optional list receiving the convergence metric of every sweep.
        :type deltas: list[float] | None

    :return: Q*, shape (n_states, n_actions).
        :rtype: np.ndarray
    """
    P = np.asarray(transitions, dtype=np.float64)
    R = np.asarray(rewards, dtype=np.float64)
    if P.ndim != 3 or R.shape != P.shape[:2] or P.shape[0] != P.shape[2]:
        raise InvalidArgumentError(f"Inconsistent shapes: transitions {P.shape}, rewards {R.shape}")
    if not (0.0 <= float(gamma) <= 1.0):
        raise InvalidArgumentError(f"gamma must be in [0, 1], got {gamma}")

    nS = P.shape[0]
    terminal_mask = np.zeros(nS, dtype=bool)
    if terminal_states is not None:
        terminal_mask[list(terminal_states)] = True

    Q = np.zeros_like(R)

    for _ in range(int(max_iters)):
        V = np.max(Q, axis=1)
        V[terminal_mask] = 0.0  # no bootstrapping past terminal

        Q_new = R + float(gamma) * (P @ V)  # (nS, nA, nS) @ (nS,) -> (nS, nA)
        Q_new[terminal_mask] = 0.0

        delta = float(np.max(np.abs(Q_new - Q)))
        Q = Q_new

        if deltas is not None:
            deltas.append(delta)

        if delta < theta:
            break

    return Q
