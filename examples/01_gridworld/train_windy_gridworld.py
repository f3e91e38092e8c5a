"""
Train Q(lambda) on the Windy Gridworld for several values of lambda.

This script prints:
- the mean episode length over the last episodes, per lambda
- the greedy policy learned with the largest lambda, as arrows
- the optimal episode length computed by value iteration on the known model, for reference

Run from repo root:
    python examples/01_gridworld/train_windy_gridworld.py --lambdas 0 0.5 0.9
"""

from __future__ import annotations

import argparse
import logging
import numpy as np

from reinforcelearn import (
    Agent,
    EpsilonGreedyPolicy,
    GreedyPolicy,
    QLearning,
    QLearningConfig,
    ValueTable,
    interact,
    q_value_iteration,
    windy_gridworld,
)
from reinforcelearn.common.seeding import seed_everything


def optimal_episode_length(gamma: float) -> int:
    """
    Follow the greedy policy of Q* from the start state and count the steps.

    :param gamma: Discount factor used for planning.
        :type gamma: float

    :return: Number of steps to the goal.
        :rtype: int
    """
    env = windy_gridworld()
    Q = q_value_iteration(env.transitions, env.rewards, gamma=gamma, terminal_states=env.terminal_states)
    agent = Agent(policy=GreedyPolicy(), value_function=ValueTable(env.n_states, env.n_actions, Q))
    result = interact(env, agent, n_episodes=1, max_steps_per_episode=1_000, learn=False)
    return result.steps[0]


def parse_args() -> argparse.Namespace:
    """
    Parse command-line arguments.

    :return: Parsed arguments.
        :rtype: argparse.Namespace
    """
    p = argparse.ArgumentParser(description="Q(lambda) on the Windy Gridworld.")
    p.add_argument("--episodes", type=int, default=300, help="Episodes per lambda.")
    p.add_argument("--max-steps", type=int, default=2_000, help="Max steps per episode.")
    p.add_argument("--alpha", type=float, default=0.5, help="Learning rate.")
    p.add_argument("--gamma", type=float, default=1.0, help="Discount factor.")
    p.add_argument("--epsilon", type=float, default=0.1, help="Exploration probability.")
    p.add_argument("--lambdas", type=float, nargs="+", default=[0.0, 0.5, 0.9], help="Trace decay values to compare.")
    p.add_argument("--trace-type", choices=["accumulate", "replace"], default="replace", help="Trace update on a visit.")
    p.add_argument("--seed", type=int, default=0, help="Master seed.")
    p.add_argument("--verbose", action="store_true", help="Log every finished episode.")
    return p.parse_args()


def main():
    args = parse_args()
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    rng = seed_everything(args.seed)

    tail = max(1, args.episodes // 10)
    last_agent = None
    env = None

    for lam in args.lambdas:
        env = windy_gridworld(seed=rng)
        agent = Agent(
            policy=EpsilonGreedyPolicy(epsilon=args.epsilon, random_tie_break=True, seed=rng),
            value_function=ValueTable(n_states=env.n_states, n_actions=env.n_actions),
            algorithm=QLearning(QLearningConfig(alpha=args.alpha, gamma=args.gamma, lambda_=lam, trace_type=args.trace_type)),
        )
        result = interact(env, agent, n_episodes=args.episodes, max_steps_per_episode=args.max_steps)

        steps = np.asarray(result.steps, dtype=np.float64)
        print(f"lambda={lam:.2f}: first episode {int(steps[0])} steps, "
              f"mean of last {tail} episodes {steps[-tail:].mean():.1f} steps, total {result.total_steps} steps")
        last_agent = agent

    print(f"\nShortest path (value iteration on the model): {optimal_episode_length(gamma=min(args.gamma, 0.999))} steps")

    if last_agent is not None and env is not None:
        print(f"\nGreedy policy learned with lambda={args.lambdas[-1]}:")
        print(env.render_policy(last_agent.value_function.greedy_policy()))


if __name__ == "__main__":
    main()
