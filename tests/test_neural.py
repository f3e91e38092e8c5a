from __future__ import annotations

import numpy as np
import pytest
import torch

from reinforcelearn import (
    Agent,
    EpsilonGreedyPolicy,
    Gridworld,
    InvalidArgumentError,
    NeuralValueFunction,
    QLearning,
    QLearningConfig,
    ReplayMemory,
    Transition,
    ValueFunctionKind,
    interact,
    make_value_function,
)
from reinforcelearn.preprocessing import one_hot
from reinforcelearn.value_functions import QNetwork


def test_q_network_outputs_one_value_per_action() -> None:
    torch.manual_seed(0)
    net = QNetwork(obs_dim=4, n_actions=3, hidden_sizes=(16,))

    x = torch.randn(5, 4)
    assert net(x).shape == (5, 3)


def test_neural_value_function_predict_shapes() -> None:
    vf = NeuralValueFunction(obs_dim=3, n_actions=2, hidden_sizes=(8,), seed=0, device=torch.device("cpu"))

    assert vf.action_values(np.zeros(3)).shape == (2,)
    assert vf.predict(np.zeros((7, 3))).shape == (7, 2)

    with pytest.raises(InvalidArgumentError):
        vf.predict(np.zeros((2, 4)))


def test_neural_fit_moves_the_taken_action_towards_the_target() -> None:
    """
    Repeated regression on one (s, a, target) drives Q(s, a) to the target,
    the other action is not supervised.
    """
    vf = NeuralValueFunction(obs_dim=2, n_actions=2, hidden_sizes=(16,), seed=0, device=torch.device("cpu"))
    x = np.array([[1.0, 0.0]], dtype=np.float32)

    for _ in range(300):
        loss = vf.fit(x, [1], [3.0], step_size=1e-2)

    assert abs(vf.action_values(x[0])[1] - 3.0) < 0.1
    assert loss < 0.01
    assert vf.num_updates == 300

    with pytest.raises(InvalidArgumentError):
        vf.fit(x, [2], [0.0], step_size=1e-2)


def test_td_target_masks_terminal_transitions() -> None:
    """
    Terminal handling in batched TD targets.
    If done=1, we must not bootstrap, so the target reduces to the immediate reward:
        y = r + (1 - done) * gamma * max_a Q(s', a)
    """
    vf = NeuralValueFunction(obs_dim=2, n_actions=2, hidden_sizes=(8,), seed=0, device=torch.device("cpu"))
    learner = QLearning(QLearningConfig(alpha=0.0, gamma=0.99))
    s2 = np.array([0.0, 1.0], dtype=np.float32)
    next_q = float(np.max(vf.action_values(s2)))

    terminal = Transition(state=np.array([1.0, 0.0]), action=0, reward=1.0, next_state=s2, done=True)
    running = Transition(state=np.array([1.0, 0.0]), action=0, reward=1.0, next_state=s2, done=False)

    assert learner.td_target(vf, terminal) == 1.0
    assert np.isclose(learner.td_target(vf, running), 1.0 + 0.99 * next_q)


def test_neural_agent_with_replay_on_a_corridor() -> None:
    """
    End-to-end smoke test: one-hot features, neural Q, replay memory.
    """
    env = Gridworld(shape=(1, 4), goal_states=(3,), initial_state=0, seed=0)
    vf = make_value_function(ValueFunctionKind.NEURAL_NETWORK, obs_dim=env.n_states, n_actions=env.n_actions,
                             hidden_sizes=(16,), seed=0, device=torch.device("cpu"))
    agent = Agent(
        policy=EpsilonGreedyPolicy(epsilon=0.2, seed=0),
        value_function=vf,
        algorithm=QLearning(QLearningConfig(alpha=1e-2, gamma=0.9)),
        replay_memory=ReplayMemory(capacity=1_000, seed=0),
        batch_size=8,
        preprocess=one_hot(env.n_states),
    )

    result = interact(env, agent, n_steps=300, max_steps_per_episode=50)
    assert result.total_steps == 300
    assert vf.num_updates == 300 - 7
    assert np.all(np.isfinite(vf.predict(np.eye(env.n_states))))


def test_traces_need_a_table() -> None:
    vf = NeuralValueFunction(obs_dim=2, n_actions=2, hidden_sizes=(4,), seed=0, device=torch.device("cpu"))
    with pytest.raises(InvalidArgumentError):
        Agent(
            policy=EpsilonGreedyPolicy(epsilon=0.1),
            value_function=vf,
            algorithm=QLearning(QLearningConfig(lambda_=0.5)),
        )
