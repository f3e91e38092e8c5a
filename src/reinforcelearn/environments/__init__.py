"""
Environments following the reset() -> state / step(action) -> (state, reward, done) contract.

Includes:
- MdpEnvironment: any finite MDP given by transition / reward arrays
- Gridworld (plus the Windy Gridworld and Cliff Walking presets)
- MountainCar / MountainCarContinuous
- CallableEnvironment: wrap your own reset/step functions
"""

from __future__ import annotations

from enum import Enum

from reinforcelearn.errors import InvalidArgumentError
from .base import CallableEnvironment, Environment
from .gridworld import Gridworld, cliff_walking, windy_gridworld
from .mdp import MdpEnvironment
from .mountain_car import MountainCar, MountainCarContinuous


class EnvironmentKind(str, Enum):
    GRIDWORLD = "gridworld"
    WINDY_GRIDWORLD = "windy_gridworld"
    CLIFF_WALKING = "cliff_walking"
    MDP = "mdp"
    MOUNTAIN_CAR = "mountain_car"
    MOUNTAIN_CAR_CONTINUOUS = "mountain_car_continuous"
    CUSTOM = "custom"


_BUILDERS = {
    EnvironmentKind.GRIDWORLD: Gridworld,
    EnvironmentKind.WINDY_GRIDWORLD: windy_gridworld,
    EnvironmentKind.CLIFF_WALKING: cliff_walking,
    EnvironmentKind.MDP: MdpEnvironment,
    EnvironmentKind.MOUNTAIN_CAR: MountainCar,
    EnvironmentKind.MOUNTAIN_CAR_CONTINUOUS: MountainCarContinuous,
    EnvironmentKind.CUSTOM: CallableEnvironment,
}


def make_environment(kind: EnvironmentKind | str, **kwargs) -> Environment:
    """
    Build an environment from its kind.

    :param kind: Which environment to build.
        :type kind: EnvironmentKind | str
    :param kwargs: Constructor arguments of the chosen environment.

    :return: The environment.
        :rtype: Environment
    """
    try:
        kind = EnvironmentKind(kind)
    except ValueError as e:
        raise InvalidArgumentError(f"Unknown environment kind {kind!r}") from e
    return _BUILDERS[kind](**kwargs)


__all__ = [
    "Environment",
    "CallableEnvironment",
    "MdpEnvironment",
    "Gridworld",
    "windy_gridworld",
    "cliff_walking",
    "MountainCar",
    "MountainCarContinuous",
    "EnvironmentKind",
    "make_environment",
]
