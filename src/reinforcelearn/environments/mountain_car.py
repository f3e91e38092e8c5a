from __future__ import annotations

import numpy as np
from gymnasium import spaces

from reinforcelearn.common.seeding import make_rng
from reinforcelearn.environments.base import Environment

MIN_POSITION = -1.2
MAX_POSITION = 0.5
MAX_SPEED = 0.07
GOAL_POSITION = 0.5


class MountainCar(Environment):
    """
    Mountain Car (Sutton & Barto, Example 10.1).

    An underpowered car in a valley must rock back and forth to build up enough momentum
    to reach the goal on top of the right hill.

    State: np.array([position, velocity]) with position in [-1.2, 0.5], velocity in [-0.07, 0.07].
    Actions: 0 full throttle reverse, 1 zero throttle, 2 full throttle forward.
    Reward: -1 per step. The episode ends when position >= 0.5.

        velocity <- clip(velocity + 0.001 * (action - 1) - 0.0025 * cos(3 * position))
        position <- clip(position + velocity)

    Hitting the left wall sets velocity to 0. Each episode starts at a position drawn
    uniformly from [-0.6, -0.4] with zero velocity.

    :param seed: Seed (or Generator) for the start position.
        :type seed: int | np.random.Generator | None
    """

    force = 0.001
    gravity = 0.0025

    def __init__(self, seed: int | np.random.Generator | None = None) -> None:
        super().__init__(
            action_space=spaces.Discrete(3),
            observation_space=spaces.Box(
                low=np.array([MIN_POSITION, -MAX_SPEED], dtype=np.float32),
                high=np.array([MAX_POSITION, MAX_SPEED], dtype=np.float32),
                dtype=np.float32,
            ),
        )
        self.rng = make_rng(seed)

    def _reset(self) -> np.ndarray:
        position = self.rng.uniform(low=-0.6, high=-0.4)
        return np.array([position, 0.0], dtype=np.float64)

    def _throttle(self, action) -> float:
        return float(int(action) - 1)

    def _reward(self, throttle: float, reached_goal: bool) -> float:
        return -1.0

    def _step(self, action) -> tuple[np.ndarray, float, bool]:
        position, velocity = float(self.state[0]), float(self.state[1])
        throttle = self._throttle(action)

        velocity += throttle * self.force - self.gravity * np.cos(3.0 * position)
        velocity = float(np.clip(velocity, -MAX_SPEED, MAX_SPEED))
        position = float(np.clip(position + velocity, MIN_POSITION, MAX_POSITION))
        if position <= MIN_POSITION and velocity < 0.0:
            velocity = 0.0

        done = position >= GOAL_POSITION
        return np.array([position, velocity], dtype=np.float64), self._reward(throttle, done), done


class MountainCarContinuous(MountainCar):
    """
    Mountain Car with a continuous force in [-1, 1].

    Same dynamics as MountainCar with a stronger engine (0.0015 per unit of force).
    Reward: -0.1 * force^2 per step (fuel cost), +100 when the goal is reached.

    :param seed: Seed (or Generator) for the start position.
        :type seed: int | np.random.Generator | None
    """

    force = 0.0015

    def __init__(self, seed: int | np.random.Generator | None = None) -> None:
        super().__init__(seed=seed)
        self.action_space = spaces.Box(low=-1.0, high=1.0, shape=(1,), dtype=np.float32)

    def _throttle(self, action) -> float:
        return float(np.asarray(action).reshape(-1)[0])

    def _reward(self, throttle: float, reached_goal: bool) -> float:
        reward = -0.1 * throttle ** 2
        if reached_goal:
            reward += 100.0
        return float(reward)
