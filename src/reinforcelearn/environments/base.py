from __future__ import annotations

from typing import Any, Callable

import numpy as np
from gymnasium import spaces

from reinforcelearn.errors import InvalidArgumentError


class Environment:
    """
    Base class for environments.

    Contract:
        reset() -> state
        step(action) -> (next_state, reward, done)

    The base class does the bookkeeping shared by all environments (current state, step and
    episode counters, running return) and validates actions against `action_space`.
    Subclasses only implement `_reset()` and `_step(action)`.

    :param action_space: Declared action space.
        :type action_space: gymnasium.spaces.Space
    :param observation_space: Declared observation space (optional, informative).
        :type observation_space: gymnasium.spaces.Space | None
    """

    def __init__(self, action_space: spaces.Space, observation_space: spaces.Space | None = None) -> None:
        self.action_space = action_space
        self.observation_space = observation_space

        self.state: Any = None
        self.done = False
        self.n_steps = 0  # steps in the current episode
        self.episode = 0  # number of finished episodes
        self.episode_return = 0.0
        self._needs_reset = True

    @property
    def n_actions(self) -> int:
        if not isinstance(self.action_space, spaces.Discrete):
            raise AttributeError("n_actions is only defined for discrete action spaces")
        return int(self.action_space.n)

    @property
    def needs_reset(self) -> bool:
        return self._needs_reset or self.done

    def _reset(self) -> Any:
        raise NotImplementedError

    def _step(self, action) -> tuple[Any, float, bool]:
        raise NotImplementedError

    def _check_action(self, action):
        if isinstance(self.action_space, spaces.Discrete):
            if isinstance(action, (bool, np.bool_)) or not isinstance(action, (int, np.integer)):
                raise InvalidArgumentError(f"Action must be an integer, got {action!r}")
            action = int(action)
        elif isinstance(self.action_space, spaces.Box):
            action = np.asarray(action, dtype=self.action_space.dtype).reshape(self.action_space.shape)

        if not self.action_space.contains(action):
            raise InvalidArgumentError(f"Action {action!r} is outside the action space {self.action_space}")
        return action

    def reset(self) -> Any:
        """
        Start a new episode.

        :return: Initial state.
            :rtype: Any
        """
        self.state = self._reset()
        self.done = False
        self.n_steps = 0
        self.episode_return = 0.0
        self._needs_reset = False
        return self.state

    def truncate(self) -> None:
        """
        End the current episode without reaching a terminal state (e.g. a step limit).
        The next step() needs a reset() first.
        """
        self._needs_reset = True

    def step(self, action) -> tuple[Any, float, bool]:
        """
        Take one action.

        :param action: Action, must belong to `action_space`.
            :type action: Any

        :return: (next_state, reward, done)
            :rtype: tuple[Any, float, bool]
        """
        if self._needs_reset:
            raise RuntimeError("You must call reset() before step().")
        if self.done:
            raise RuntimeError("Episode is done. Call reset() before calling step() again.")

        action = self._check_action(action)
        next_state, reward, done = self._step(action)

        self.state = next_state
        self.done = bool(done)
        self.n_steps += 1
        self.episode_return += float(reward)
        if self.done:
            self.episode += 1

        return next_state, float(reward), self.done


class CallableEnvironment(Environment):
    """
    Environment built from two plain functions.

    :param reset_fn: Called without arguments, returns the initial state.
        :type reset_fn: Callable[[], Any]
    :param step_fn: Called as step_fn(state, action), returns (next_state, reward, done).
        :type step_fn: Callable[[Any, Any], tuple[Any, float, bool]]
    :param action_space: Declared action space.
        :type action_space: gymnasium.spaces.Space
    :param observation_space: Declared observation space (optional).
        :type observation_space: gymnasium.spaces.Space | None
    """

    def __init__(
        self,
        reset_fn: Callable[[], Any],
        step_fn: Callable[[Any, Any], tuple[Any, float, bool]],
        action_space: spaces.Space,
        observation_space: spaces.Space | None = None,
    ) -> None:
        super().__init__(action_space=action_space, observation_space=observation_space)
        self._reset_fn = reset_fn
        self._step_fn = step_fn

    def _reset(self) -> Any:
        return self._reset_fn()

    def _step(self, action) -> tuple[Any, float, bool]:
        return self._step_fn(self.state, action)
