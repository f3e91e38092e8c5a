"""
Train an agent on Mountain Car.

Two setups:
- tabular (default): the continuous state is binned by GridDiscretizer and learned with Q(lambda)
- --neural: normalized (position, velocity) features, a PyTorch Q-network and experience replay

Run from repo root:
    python examples/03_mountain_car/train_mountain_car.py
    python examples/03_mountain_car/train_mountain_car.py --neural --episodes 100
"""

from __future__ import annotations

import argparse
import numpy as np
import torch

from reinforcelearn import (
    Agent,
    EpsilonGreedyPolicy,
    MountainCar,
    NeuralValueFunction,
    QLearning,
    QLearningConfig,
    ReplayMemory,
    ValueTable,
    interact,
)
from reinforcelearn.common.seeding import seed_everything
from reinforcelearn.environments.mountain_car import MAX_POSITION, MAX_SPEED, MIN_POSITION
from reinforcelearn.preprocessing import GridDiscretizer


def normalize(observation: np.ndarray) -> np.ndarray:
    """
    Scale (position, velocity) to roughly [-1, 1] for the network.

    :param observation: Raw Mountain Car state.
        :type observation: np.ndarray

    :return: Feature vector of shape (2,).
        :rtype: np.ndarray
    """
    low = np.array([MIN_POSITION, -MAX_SPEED])
    high = np.array([MAX_POSITION, MAX_SPEED])
    return (2.0 * (np.asarray(observation) - low) / (high - low) - 1.0).astype(np.float32)


def tabular_agent(env: MountainCar, args: argparse.Namespace, rng: np.random.Generator) -> Agent:
    disc = GridDiscretizer(low=[MIN_POSITION, -MAX_SPEED], high=[MAX_POSITION, MAX_SPEED], bins=args.bins)
    return Agent(
        policy=EpsilonGreedyPolicy(epsilon=args.epsilon, seed=rng),
        value_function=ValueTable(n_states=disc.n_states, n_actions=env.n_actions),
        algorithm=QLearning(QLearningConfig(alpha=args.alpha, gamma=1.0, lambda_=args.lambda_, trace_type="replace")),
        preprocess=disc,
    )


def neural_agent(env: MountainCar, args: argparse.Namespace, rng: np.random.Generator) -> Agent:
    value_function = NeuralValueFunction(
        obs_dim=2,
        n_actions=env.n_actions,
        hidden_sizes=(64, 64),
        seed=args.seed,
        device=torch.device("cpu"),
    )
    return Agent(
        policy=EpsilonGreedyPolicy(epsilon=args.epsilon, seed=rng),
        value_function=value_function,
        algorithm=QLearning(QLearningConfig(alpha=1e-3, gamma=0.99)),
        replay_memory=ReplayMemory(capacity=50_000, seed=rng),
        batch_size=64,
        preprocess=normalize,
    )


def parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Q-learning on Mountain Car.")
    p.add_argument("--episodes", type=int, default=300, help="Training episodes.")
    p.add_argument("--max-steps", type=int, default=5_000, help="Max steps per episode.")
    p.add_argument("--alpha", type=float, default=0.1, help="Learning rate (tabular).")
    p.add_argument("--lambda", dest="lambda_", type=float, default=0.9, help="Trace decay (tabular).")
    p.add_argument("--epsilon", type=float, default=0.0, help="Exploration probability (zero-initialised values already explore).")
    p.add_argument("--bins", type=int, default=20, help="Bins per state dimension (tabular).")
    p.add_argument("--neural", action="store_true", help="Use a neural Q-function with experience replay.")
    p.add_argument("--seed", type=int, default=0, help="Master seed.")
    return p.parse_args()


def main():
    args = parse_args()
    rng = seed_everything(args.seed, use_torch=args.neural)

    env = MountainCar(seed=rng)
    agent = neural_agent(env, args, rng) if args.neural else tabular_agent(env, args, rng)

    result = interact(env, agent, n_episodes=args.episodes, max_steps_per_episode=args.max_steps)

    steps = np.asarray(result.steps)
    chunk = max(1, args.episodes // 10)
    print("Mean episode length per block of episodes:")
    for start in range(0, len(steps), chunk):
        block = steps[start:start + chunk]
        print(f"  episodes {start + 1:4d}-{start + len(block):4d}: {block.mean():8.1f}")


if __name__ == "__main__":
    main()
