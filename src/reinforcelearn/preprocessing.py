from __future__ import annotations

from typing import Callable, Sequence
import numpy as np

from reinforcelearn.errors import InvalidArgumentError


def one_hot(n_states: int) -> Callable[[int], np.ndarray]:
    """
    Build a preprocess function mapping a state index to a one-hot feature vector.

    Useful to feed tabular environments to a NeuralValueFunction (obs_dim = n_states).

    :param n_states: Number of discrete states.
        :type n_states: int

    :return: Function state -> np.ndarray of shape (n_states,).
        :rtype: Callable[[int], np.ndarray]
    """
    n_states = int(n_states)

    def _encode(state: int) -> np.ndarray:
        if not (0 <= int(state) < n_states):
            raise InvalidArgumentError(f"state={state} out of bounds [0, {n_states - 1}]")
        x = np.zeros(n_states, dtype=np.float32)
        x[int(state)] = 1.0
        return x

    return _encode


class GridDiscretizer:
    """
    Map a continuous observation to a single integer state by uniform binning.

    Every dimension d is cut into bins[d] equal intervals over [low[d], high[d]] (values outside
    are clipped into the first/last bin). The per-dimension bin indices are then combined
    row-major into one index in [0, n_states-1], so a ValueTable can be used on e.g. Mountain Car.

    :param low: Lower bound per dimension.
        :type low: Sequence[float]
    :param high: Upper bound per dimension.
        :type high: Sequence[float]
    :param bins: Number of bins per dimension.
        :type bins: int | Sequence[int]
    """

    def __init__(self, low: Sequence[float], high: Sequence[float], bins: int | Sequence[int]) -> None:
        self.low = np.asarray(low, dtype=np.float64)
        self.high = np.asarray(high, dtype=np.float64)
        if self.low.ndim != 1 or self.low.shape != self.high.shape:
            raise InvalidArgumentError("low and high must be 1D arrays of the same length")
        if not np.all(self.high > self.low):
            raise InvalidArgumentError("high must be greater than low in every dimension")

        self.bins = np.broadcast_to(np.asarray(bins, dtype=np.int64), self.low.shape).copy()
        if np.any(self.bins < 1):
            raise InvalidArgumentError("bins must be >= 1")

        self.n_states = int(np.prod(self.bins))
        # inner edges only, np.digitize then returns indices in [0, bins-1]
        self._edges = [np.linspace(lo, hi, int(b) + 1)[1:-1] for lo, hi, b in zip(self.low, self.high, self.bins)]

    def __call__(self, observation) -> int:
        x = np.asarray(observation, dtype=np.float64).reshape(-1)
        if x.shape != self.low.shape:
            raise InvalidArgumentError(f"Expected an observation of shape {self.low.shape}, got {x.shape}")

        idx = [int(np.digitize(v, edges)) for v, edges in zip(x, self._edges)]
        return int(np.ravel_multi_index(idx, dims=tuple(int(b) for b in self.bins)))
