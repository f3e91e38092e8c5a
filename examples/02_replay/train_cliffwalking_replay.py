"""
Online Q-learning vs Q-learning with experience replay on Cliff Walking.

Both agents use the same ε-greedy behaviour and the same learning rate. The replay agent does one
minibatch update per environment step, reusing old transitions, so it usually needs fewer episodes
to find the path along the cliff.

Run from repo root:
    python examples/02_replay/train_cliffwalking_replay.py
"""

from __future__ import annotations

import argparse
import numpy as np

from reinforcelearn import (
    Agent,
    EpsilonGreedyPolicy,
    QLearning,
    QLearningConfig,
    ReplayConfig,
    ReplayMemory,
    ValueTable,
    cliff_walking,
    interact,
)
from reinforcelearn.common.seeding import seed_everything


def make_agent(env, args: argparse.Namespace, rng: np.random.Generator, replay: ReplayConfig | None) -> Agent:
    return Agent(
        policy=EpsilonGreedyPolicy(epsilon=args.epsilon, seed=rng),
        value_function=ValueTable(n_states=env.n_states, n_actions=env.n_actions),
        algorithm=QLearning(QLearningConfig(alpha=args.alpha, gamma=args.gamma)),
        replay_memory=None if replay is None else ReplayMemory(capacity=replay.capacity, seed=rng),
        batch_size=32 if replay is None else replay.batch_size,
    )


def parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Online vs replay Q-learning on Cliff Walking.")
    p.add_argument("--episodes", type=int, default=200, help="Episodes per agent.")
    p.add_argument("--max-steps", type=int, default=500, help="Max steps per episode.")
    p.add_argument("--alpha", type=float, default=0.1, help="Learning rate.")
    p.add_argument("--gamma", type=float, default=0.99, help="Discount factor.")
    p.add_argument("--epsilon", type=float, default=0.1, help="Exploration probability.")
    p.add_argument("--capacity", type=int, default=5_000, help="Replay memory capacity.")
    p.add_argument("--batch-size", type=int, default=32, help="Replay minibatch size.")
    p.add_argument("--seed", type=int, default=0, help="Master seed.")
    return p.parse_args()


def main():
    args = parse_args()
    rng = seed_everything(args.seed)
    replay = ReplayConfig(capacity=args.capacity, batch_size=args.batch_size)

    for name, cfg in (("online", None), ("replay", replay)):
        env = cliff_walking(seed=rng)
        agent = make_agent(env, args, rng, cfg)
        result = interact(env, agent, n_episodes=args.episodes, max_steps_per_episode=args.max_steps)

        returns = np.asarray(result.returns)
        tail = max(1, args.episodes // 10)
        print(f"{name:>6}: mean return of last {tail} episodes {returns[-tail:].mean():8.2f}, "
              f"mean length {np.mean(result.steps[-tail:]):6.1f} steps")
        print(env.render_policy(agent.value_function.greedy_policy()))
        print()


if __name__ == "__main__":
    main()
