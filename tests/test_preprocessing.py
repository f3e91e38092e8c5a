import numpy as np
import pytest

from reinforcelearn import Agent, InvalidArgumentError, MountainCar, QLearning, QLearningConfig, ValueTable, interact
from reinforcelearn.policies import EpsilonGreedyPolicy
from reinforcelearn.preprocessing import GridDiscretizer, one_hot


def test_one_hot() -> None:
    encode = one_hot(4)
    assert np.array_equal(encode(2), [0.0, 0.0, 1.0, 0.0])
    with pytest.raises(InvalidArgumentError):
        encode(4)


def test_grid_discretizer_bins_and_clips() -> None:
    disc = GridDiscretizer(low=[0.0, -1.0], high=[1.0, 1.0], bins=[4, 2])
    assert disc.n_states == 8

    assert disc([0.0, -1.0]) == 0
    assert disc([0.3, -0.5]) == 2  # bins (1, 0) -> 1 * 2 + 0
    assert disc([0.99, 0.5]) == 7  # bins (3, 1)
    assert disc([5.0, 5.0]) == 7  # clipped into the last bins
    assert disc([-5.0, -5.0]) == 0

    with pytest.raises(InvalidArgumentError):
        disc([0.5])
    with pytest.raises(InvalidArgumentError):
        GridDiscretizer(low=[0.0], high=[0.0], bins=3)


def test_tabular_agent_on_mountain_car_via_discretizer() -> None:
    """
    Mountain Car with a discretized state and a Q table: runs and respects the episode cap.
    """
    env = MountainCar(seed=0)
    disc = GridDiscretizer(low=[-1.2, -0.07], high=[0.5, 0.07], bins=10)
    agent = Agent(
        policy=EpsilonGreedyPolicy(epsilon=0.1, seed=0),
        value_function=ValueTable(n_states=disc.n_states, n_actions=env.n_actions),
        algorithm=QLearning(QLearningConfig(alpha=0.1, gamma=1.0, lambda_=0.9, trace_type="replace")),
        preprocess=disc,
    )

    result = interact(env, agent, n_episodes=3, max_steps_per_episode=200)
    assert len(result.steps) == 3
    assert all(s <= 200 for s in result.steps)
    assert agent.value_function.table.min() < 0.0
