import numpy as np
import pytest
from gymnasium import spaces

from reinforcelearn import (
    CallableEnvironment,
    EnvironmentKind,
    Gridworld,
    InvalidArgumentError,
    MdpEnvironment,
    cliff_walking,
    make_environment,
    windy_gridworld,
)


def test_gridworld_moves_and_walls() -> None:
    """
    Actions: 0 left, 1 right, 2 up, 3 down. Walls keep the agent in place.
    """
    env = Gridworld(shape=(4, 4), goal_states=(0, 15), initial_state=5, seed=0)

    assert env.reset() == 5
    assert env.step(1) == (6, -1.0, False)  # right
    assert env.step(3) == (10, -1.0, False)  # down
    assert env.step(0) == (9, -1.0, False)  # left
    assert env.step(2) == (5, -1.0, False)  # up

    env = Gridworld(shape=(4, 4), goal_states=(0, 15), initial_state=3, seed=0)
    env.reset()
    assert env.step(1) == (3, -1.0, False)  # right wall
    assert env.step(2) == (3, -1.0, False)  # top wall


def test_gridworld_goal_ends_episode_and_is_absorbing() -> None:
    env = Gridworld(shape=(4, 4), goal_states=(0, 15), initial_state=1, seed=0)
    env.reset()

    next_state, reward, done = env.step(0)
    assert (next_state, reward, done) == (0, -1.0, True)
    assert env.episode == 1
    assert env.is_terminal(0) and env.is_terminal(15)
    assert np.allclose(env.transitions[0, :, 0], 1.0)
    assert np.allclose(env.rewards[0], 0.0)

    with pytest.raises(RuntimeError):
        env.step(1)


def test_gridworld_random_start_avoids_goals() -> None:
    env = Gridworld(shape=(3, 3), goal_states=(4,), seed=0)
    starts = {env.reset() for _ in range(200)}
    assert 4 not in starts
    assert starts == {0, 1, 2, 3, 5, 6, 7, 8}


def test_windy_gridworld_pushes_up() -> None:
    """
    Moving right from (3, 3) lands in (3, 4), and the wind of column 3 pushes one row up -> (2, 4).
    """
    env = windy_gridworld()
    env.reset()
    env.state = env.pos_to_state(3, 3)

    next_state, reward, done = env.step(1)
    assert env.state_to_pos(next_state) == (2, 4)
    assert reward == -1.0 and not done


def test_windy_gridworld_wind_is_clipped_at_the_top() -> None:
    env = windy_gridworld()
    env.reset()
    env.state = env.pos_to_state(0, 6)

    next_state, _, _ = env.step(0)  # left, wind 2 in column 6
    assert env.state_to_pos(next_state) == (0, 5)


def test_cliff_walking_sends_back_to_start() -> None:
    env = cliff_walking(seed=0)
    assert env.reset() == 36

    next_state, reward, done = env.step(1)  # right, into the cliff
    assert (next_state, reward, done) == (36, -100.0, False)

    env.step(2)  # up to 24
    for _ in range(11):
        env.step(1)
    next_state, reward, done = env.step(3)
    assert (next_state, reward, done) == (47, -1.0, True)
    assert env.n_steps == 14
    assert env.episode_return == -100.0 - 13.0


def test_diagonal_moves_and_stochastic_model() -> None:
    env = Gridworld(shape=(3, 3), goal_states=(8,), diagonal_moves=True, stochasticity=0.3, initial_state=0, seed=0)

    assert env.n_actions == 8
    assert np.allclose(env.transitions.sum(axis=2), 1.0)
    # from the center, the intended right-down move reaches the goal w.p. 0.7 + 0.3 / 8
    assert np.isclose(env.transitions[4, 7, 8], 0.7 + 0.3 / 8)


def test_invalid_actions_are_rejected() -> None:
    env = Gridworld(shape=(2, 2), goal_states=(3,), initial_state=0, seed=0)
    env.reset()

    for action in (4, -1, 1.0, "up", True):
        with pytest.raises(InvalidArgumentError):
            env.step(action)
    assert env.n_steps == 0


def test_step_before_reset_fails() -> None:
    env = Gridworld(shape=(2, 2), goal_states=(3,), seed=0)
    with pytest.raises(RuntimeError):
        env.step(0)


def test_gridworld_argument_validation() -> None:
    with pytest.raises(InvalidArgumentError):
        Gridworld(shape=(2, 2), goal_states=(4,))
    with pytest.raises(InvalidArgumentError):
        Gridworld(shape=(2, 2), goal_states=(3,), wind=(1, 0, 0))
    with pytest.raises(InvalidArgumentError):
        Gridworld(shape=(2, 2), goal_states=(3,), cliff_states=(3,), initial_state=0)
    with pytest.raises(InvalidArgumentError):
        Gridworld(shape=(2, 3), goal_states=(5,), cliff_states=(4,))  # nowhere to send the agent


def test_render_policy() -> None:
    env = cliff_walking()
    grid = env.render_policy(np.ones(env.n_states, dtype=np.int64))
    rows = grid.splitlines()

    assert len(rows) == 4
    assert rows[0] == " ".join(["→"] * 12)
    assert rows[3] == "→ " + " ".join(["C"] * 10) + " G"


def test_mdp_environment_samples_transitions() -> None:
    P = np.zeros((3, 2, 3))
    P[0, 0] = [0.0, 0.5, 0.5]
    P[0, 1] = [0.0, 0.0, 1.0]
    P[1, :, 1] = 1.0  # terminal
    P[2, :, 2] = 1.0  # terminal
    R = np.array([[1.0, 2.0], [0.0, 0.0], [0.0, 0.0]])

    env = MdpEnvironment(P, R, initial_state=0, seed=0)
    assert env.terminal_states == {1, 2}

    seen = set()
    for _ in range(100):
        env.reset()
        next_state, reward, done = env.step(0)
        assert reward == 1.0 and done
        seen.add(next_state)
    assert seen == {1, 2}


def test_mdp_environment_validation() -> None:
    P = np.zeros((2, 1, 2))
    P[:, 0, 0] = 0.7  # rows do not sum to 1
    with pytest.raises(InvalidArgumentError):
        MdpEnvironment(P, np.zeros((2, 1)))

    P = np.ones((2, 1, 2)) / 2
    with pytest.raises(InvalidArgumentError):
        MdpEnvironment(P, np.zeros((2, 2)))
    with pytest.raises(InvalidArgumentError):
        MdpEnvironment(P, np.zeros((2, 1)), initial_state=2)


def test_callable_environment() -> None:
    """
    A counter that ends at 3: the custom environment contract is just two functions.
    """
    env = CallableEnvironment(
        reset_fn=lambda: 0,
        step_fn=lambda state, action: (state + action, 1.0, state + action >= 3),
        action_space=spaces.Discrete(2),
    )

    assert env.reset() == 0
    assert env.step(1) == (1, 1.0, False)
    assert env.step(0) == (1, 1.0, False)
    assert env.step(1) == (2, 1.0, False)
    assert env.step(1) == (3, 1.0, True)
    assert env.episode_return == 4.0

    env.reset()
    with pytest.raises(InvalidArgumentError):
        env.step(2)


def test_make_environment() -> None:
    assert isinstance(make_environment(EnvironmentKind.GRIDWORLD), Gridworld)
    env = make_environment("cliff_walking")
    assert env.n_states == 48
    env = make_environment(EnvironmentKind.WINDY_GRIDWORLD, diagonal_moves=True)
    assert env.n_actions == 8

    with pytest.raises(InvalidArgumentError):
        make_environment("cartpole")


def test_gridworld_rejects_starts_inside_the_cliff() -> None:
    with pytest.raises(InvalidArgumentError):
        Gridworld(shape=(2, 3), goal_states=(5,), cliff_states=(4,), initial_state=4)
    with pytest.raises(InvalidArgumentError):
        Gridworld(shape=(2, 3), goal_states=(5,), cliff_states=(4,), initial_state=(3, 4))
    with pytest.raises(InvalidArgumentError):
        Gridworld(shape=(2, 3), goal_states=(5,), cliff_states=(4,), initial_state=3, cliff_transition_states=(4,))

    env = Gridworld(shape=(2, 3), goal_states=(5,), cliff_states=(4,), initial_state=3, seed=0)
    assert env.reset() == 3
