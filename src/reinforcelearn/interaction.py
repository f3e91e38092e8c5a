from __future__ import annotations

from dataclasses import dataclass, field
import logging
import math
from typing import Optional

from reinforcelearn.agent import Agent
from reinforcelearn.environments.base import Environment
from reinforcelearn.errors import InvalidArgumentError

logger = logging.getLogger(__name__)


@dataclass
class InteractionResult:
    """
    Per-episode statistics of one interact() call.

    :param returns: Undiscounted return of every finished (or cut) episode.
        :type returns: list[float]
    :param steps: Number of steps of every finished (or cut) episode.
        :type steps: list[int]
    :param total_steps: Environment steps taken during the call.
        :type total_steps: int
    """
    returns: list[float] = field(default_factory=list)
    steps: list[int] = field(default_factory=list)
    total_steps: int = 0


def interact(
    env: Environment,
    agent: Agent,
    n_steps: Optional[int] = None,
    n_episodes: Optional[int] = None,
    max_steps_per_episode: Optional[int] = None,
    learn: bool = True,
) -> InteractionResult:
    """
    Run the agent in the environment.

    Each step:
        action = agent.act(state)
        next_state, reward, done = env.step(action)
        agent.observe(state, action, reward, next_state, done)   (if learn)

    The loop stops after n_steps environment steps or n_episodes episodes, whichever comes first.
    An episode longer than max_steps_per_episode is cut: it is recorded like a finished episode and
    the environment is reset. The environment is only reset while the loop goes on, so after the
    last recorded episode it is left as is and the next call starts with reset(). An episode still running when the step budget ends is not recorded,
    and a later call continues it from the current environment state.

    :param env: Environment to interact with.
        :type env: Environment
    :param agent: Agent choosing actions (and learning).
        :type agent: Agent
    :param n_steps: Maximum number of steps. None means unbounded.
        :type n_steps: int | None
    :param n_episodes: Maximum number of episodes. None means unbounded.
        :type n_episodes: int | None
    :param max_steps_per_episode: Cut episodes after this many steps. None means never.
        :type max_steps_per_episode: int | None
    :param learn: If False the agent only acts, nothing is updated.
        :type learn: bool

    :return: Returns and lengths of the episodes that ended during this call.
        :rtype: InteractionResult
    """
    if n_steps is None and n_episodes is None:
        raise InvalidArgumentError("Specify at least one of n_steps or n_episodes")
    for name, value in (("n_steps", n_steps), ("n_episodes", n_episodes), ("max_steps_per_episode", max_steps_per_episode)):
        if value is not None and int(value) < 1:
            raise InvalidArgumentError(f"{name} must be >= 1, got {value}")

    step_budget = math.inf if n_steps is None else int(n_steps)
    episode_budget = math.inf if n_episodes is None else int(n_episodes)
    episode_cap = math.inf if max_steps_per_episode is None else int(max_steps_per_episode)

    result = InteractionResult()

    state = env.reset() if env.needs_reset else env.state

    while result.total_steps < step_budget and len(result.returns) < episode_budget:
        action = agent.act(state)
        next_state, reward, done = env.step(action)
        result.total_steps += 1

        if learn:
            agent.observe(state, action, reward, next_state, done)

        state = next_state

        if done or env.n_steps >= episode_cap:
            result.returns.append(env.episode_return)
            result.steps.append(env.n_steps)
            logger.debug(
                "episode %d finished: return=%.3f steps=%d%s",
                len(result.returns), env.episode_return, env.n_steps, "" if done else " (cut)",
            )
            agent.end_episode()
            if result.total_steps < step_budget and len(result.returns) < episode_budget:
                state = env.reset()
            elif not done:
                env.truncate()

    if result.returns:
        logger.info(
            "interact: %d steps, %d episodes, mean return %.3f",
            result.total_steps, len(result.returns), sum(result.returns) / len(result.returns),
        )
    else:
        logger.info("interact: %d steps, no finished episode", result.total_steps)

    return result
