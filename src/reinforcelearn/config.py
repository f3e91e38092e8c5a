from __future__ import annotations

from dataclasses import dataclass

from reinforcelearn.errors import InvalidArgumentError


def _check_unit_interval(name: str, value: float) -> None:
    if not (0.0 <= float(value) <= 1.0):
        raise InvalidArgumentError(f"{name} must be in [0, 1], got {value}")


@dataclass(frozen=True)
class QLearningConfig:
    """
    Configuration for the Q-learning learner.

    :param alpha: Learning rate (step size).
        :type alpha: float
    :param gamma: Discount factor.
        :type gamma: float
    :param lambda_: Trace decay parameter. 0 gives one-step Q-learning.
        :type lambda_: float
    :param trace_type: "accumulate" (e += 1) or "replace" (e = 1) on a visit.
        :type trace_type: str
    """

    alpha: float = 0.1
    gamma: float = 0.99
    lambda_: float = 0.0
    trace_type: str = "accumulate"

    def __post_init__(self) -> None:
        _check_unit_interval("alpha", self.alpha)
        _check_unit_interval("gamma", self.gamma)
        _check_unit_interval("lambda_", self.lambda_)
        if self.trace_type not in {"accumulate", "replace"}:
            raise InvalidArgumentError('trace_type must be either "accumulate" or "replace"')


@dataclass(frozen=True)
class ReplayConfig:
    """
    Configuration for experience replay.

    :param capacity: Maximum number of stored transitions.
        :type capacity: int
    :param batch_size: Transitions per learning update. Learning starts once this many are stored.
        :type batch_size: int
    """

    capacity: int = 10_000
    batch_size: int = 32

    def __post_init__(self) -> None:
        if int(self.capacity) < 1:
            raise InvalidArgumentError("capacity must be >= 1")
        if int(self.batch_size) < 1:
            raise InvalidArgumentError("batch_size must be >= 1")
        if int(self.batch_size) > int(self.capacity):
            raise InvalidArgumentError("batch_size cannot exceed capacity")
