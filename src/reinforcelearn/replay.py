from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterator
import numpy as np

from reinforcelearn.common.seeding import make_rng
from reinforcelearn.errors import InvalidArgumentError


@dataclass(frozen=True)  # a recorded transition never changes afterwards
class Transition:
    """
    One step of experience (s, a, r, s', done).

    :param state: State (or preprocessed features) at time t.
        :type state: Any
    :param action: Action taken at time t.
        :type action: Any
    :param reward: Reward observed after taking the action.
        :type reward: float
    :param next_state: State at time t+1.
        :type next_state: Any
    :param done: Whether the episode ended at t+1.
        :type done: bool
    """
    state: Any
    action: Any
    reward: float
    next_state: Any
    done: bool


class ReplayMemory:
    """
    Bounded replay memory with uniform minibatch sampling.

    Transitions are kept in a fixed-size ring: once the memory is full, every append overwrites
    the oldest stored transition. So the memory always holds the most recent `capacity` steps.

    Sampling draws distinct transitions (without replacement), uniformly over what is stored.
    Random minibatches break the correlation between consecutive steps of one trajectory.

    :param capacity: Maximum number of transitions.
        :type capacity: int
    :param seed: Seed (or Generator) for sampling.
        :type seed: int | np.random.Generator | None
    """

    def __init__(self, capacity: int, seed: int | np.random.Generator | None = None) -> None:
        if int(capacity) < 1:
            raise InvalidArgumentError(f"capacity must be >= 1, got {capacity}")

        self.capacity = int(capacity)
        self._rng = make_rng(seed)
        self._items: list[Transition] = []
        self._pos = 0  # slot that the next append overwrites once the memory is full

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Transition]:
        """
        Iterate from the oldest to the newest stored transition.
        """
        if len(self._items) < self.capacity:
            return iter(list(self._items))
        return iter(self._items[self._pos:] + self._items[:self._pos])

    def append(self, transition: Transition) -> None:
        """
        Store one transition, evicting the oldest one when the memory is full.

        :param transition: Transition to store.
            :type transition: Transition

        :return: None
            :rtype: None
        """
        if len(self._items) < self.capacity:
            self._items.append(transition)
            return

        self._items[self._pos] = transition
        self._pos = (self._pos + 1) % self.capacity

    def sample(self, batch_size: int) -> list[Transition]:
        """
        Sample a minibatch of distinct transitions uniformly at random.

        :param batch_size: Number of transitions to sample.
            :type batch_size: int

        :return: Sampled transitions, in random order.
            :rtype: list[Transition]
        """
        batch_size = int(batch_size)
        if batch_size < 1:
            raise InvalidArgumentError(f"batch_size must be >= 1, got {batch_size}")
        if batch_size > len(self._items):
            raise InvalidArgumentError(
                f"Cannot sample {batch_size} transitions, the memory holds only {len(self._items)}."
            )

        idxs = self._rng.choice(len(self._items), size=batch_size, replace=False)
        return [self._items[int(i)] for i in idxs]

    def clear(self) -> None:
        self._items.clear()
        self._pos = 0
