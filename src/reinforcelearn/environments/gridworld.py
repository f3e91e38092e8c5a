from __future__ import annotations

from typing import Iterable, Sequence
import numpy as np

from reinforcelearn.environments.mdp import MdpEnvironment
from reinforcelearn.errors import InvalidArgumentError

# (row offset, column offset) per action
MOVES: tuple[tuple[int, int], ...] = (
    (0, -1),   # 0: left
    (0, 1),    # 1: right
    (-1, 0),   # 2: up
    (1, 0),    # 3: down
    (-1, -1),  # 4: left-up
    (-1, 1),   # 5: right-up
    (1, -1),   # 6: left-down
    (1, 1),    # 7: right-down
)

ARROWS = ("←", "→", "↑", "↓", "↖", "↗", "↙", "↘")


class Gridworld(MdpEnvironment):
    """
    A configurable Gridworld, represented as a finite MDP.

    States are integers in [0, n_states-1], mapped row-major from (row, col).

    Actions:
    - 0: left, 1: right, 2: up, 3: down
    - with diagonal_moves=True also 4: left-up, 5: right-up, 6: left-down, 7: right-down

    Dynamics:
    - stepping into walls keeps you in the same cell
    - wind[col] pushes you that many rows up, using the column you moved from
    - entering a cliff cell gives `reward_cliff` and sends you to a cliff transition state
    - every other step gives `reward_step`
    - goal states are absorbing and end the episode
    - with probability `stochasticity` the chosen action is replaced by a uniformly random one

    The whole model is compiled into transitions[s, a, s'] and rewards[s, a] at construction time,
    so the arrays can also be used for planning (see reinforcelearn.algorithms.q_value_iteration).

    :param shape: (rows, columns).
        :type shape: tuple[int, int]
    :param goal_states: Goal (terminal) state indices.
        :type goal_states: Iterable[int]
    :param cliff_states: Cliff state indices.
        :type cliff_states: Iterable[int]
    :param reward_step: Reward of a normal step.
        :type reward_step: float
    :param reward_cliff: Reward for stepping into a cliff.
        :type reward_cliff: float
    :param cliff_transition_states: Where the agent is sent after a cliff (uniform if several).
        Defaults to the initial state(s).
        :type cliff_transition_states: Iterable[int] | None
    :param diagonal_moves: Enable the four diagonal actions.
        :type diagonal_moves: bool
    :param wind: Upward wind strength per column (length = number of columns).
        :type wind: Sequence[int] | None
    :param stochasticity: Probability that a random action is executed instead.
        :type stochasticity: float
    :param initial_state: Start state(s). None means a random non-goal, non-cliff state.
        :type initial_state: int | Sequence[int] | None
    :param seed: Seed (or Generator) for simulation.
        :type seed: int | np.random.Generator | None
    """

    def __init__(
        self,
        shape: tuple[int, int] = (4, 4),
        goal_states: Iterable[int] = (0, 15),
        cliff_states: Iterable[int] = (),
        reward_step: float = -1.0,
        reward_cliff: float = -100.0,
        cliff_transition_states: Iterable[int] | None = None,
        diagonal_moves: bool = False,
        wind: Sequence[int] | None = None,
        stochasticity: float = 0.0,
        initial_state: int | Sequence[int] | None = None,
        seed: int | np.random.Generator | None = None,
    ) -> None:
        self.height, self.width = int(shape[0]), int(shape[1])
        if self.height < 1 or self.width < 1:
            raise InvalidArgumentError(f"shape must be positive, got {shape}")
        n_states = self.height * self.width

        self.goal_states = sorted({int(s) for s in goal_states})
        self.cliff_states = sorted({int(s) for s in cliff_states})
        for s in self.goal_states + self.cliff_states:
            if not (0 <= s < n_states):
                raise InvalidArgumentError(f"state {s} out of bounds [0, {n_states - 1}]")
        if set(self.goal_states) & set(self.cliff_states):
            raise InvalidArgumentError("A state cannot be both a goal and a cliff")

        self.wind = np.zeros(self.width, dtype=np.int64) if wind is None else np.asarray(wind, dtype=np.int64)
        if self.wind.shape != (self.width,):
            raise InvalidArgumentError(f"wind must have one entry per column ({self.width}), got {self.wind.shape}")

        if not (0.0 <= float(stochasticity) <= 1.0):
            raise InvalidArgumentError(f"stochasticity must be in [0, 1], got {stochasticity}")
        self.stochasticity = float(stochasticity)

        self.reward_step = float(reward_step)
        self.reward_cliff = float(reward_cliff)
        self.diagonal_moves = bool(diagonal_moves)
        n_actions = 8 if self.diagonal_moves else 4

        if initial_state is None:
            blocked = set(self.goal_states) | set(self.cliff_states)
            starts = [s for s in range(n_states) if s not in blocked]
        else:
            starts = [int(s) for s in np.atleast_1d(initial_state)]
            if set(starts) & set(self.cliff_states):
                raise InvalidArgumentError(f"initial_state {initial_state} lies inside the cliff")

        if cliff_transition_states is None:
            if self.cliff_states and initial_state is None:
                raise InvalidArgumentError("A gridworld with cliffs needs initial_state or cliff_transition_states")
            self.cliff_transition_states = starts
        else:
            self.cliff_transition_states = [int(s) for s in cliff_transition_states]
        for s in self.cliff_transition_states:
            if not (0 <= s < n_states):
                raise InvalidArgumentError(f"cliff transition state {s} out of bounds [0, {n_states - 1}]")
            if s in self.cliff_states:
                raise InvalidArgumentError(f"cliff transition state {s} lies inside the cliff")

        transitions, rewards = self._build_model(n_states, n_actions)
        super().__init__(transitions=transitions, rewards=rewards, initial_state=starts, seed=seed)

    def pos_to_state(self, row: int, col: int) -> int:
        """
        Convert grid position (row, col) to a state index.
        """
        return row * self.width + col

    def state_to_pos(self, state: int) -> tuple[int, int]:
        """
        Convert a state index to grid position (row, col).
        """
        return int(state // self.width), int(state % self.width)

    def _move(self, state: int, action: int) -> int:
        row, col = self.state_to_pos(state)
        d_row, d_col = MOVES[action]

        row2 = min(self.height - 1, max(0, row + d_row))
        col2 = min(self.width - 1, max(0, col + d_col))
        # wind of the column the move started from
        row2 = min(self.height - 1, max(0, row2 - int(self.wind[col])))
        return self.pos_to_state(row2, col2)

    def _build_model(self, n_states: int, n_actions: int) -> tuple[np.ndarray, np.ndarray]:
        P = np.zeros(shape=(n_states, n_actions, n_states), dtype=np.float64)
        R = np.zeros(shape=(n_states, n_actions), dtype=np.float64)
        goals = set(self.goal_states)
        cliffs = set(self.cliff_states)

        for s in range(n_states):
            if s in goals:
                P[s, :, s] = 1.0  # absorbing, reward 0
                continue

            for a in range(n_actions):
                # the executed action is `a` w.p. 1 - stochasticity, otherwise uniform over all actions
                weights = np.full(n_actions, self.stochasticity / n_actions, dtype=np.float64)
                weights[a] += 1.0 - self.stochasticity

                for b in range(n_actions):
                    if weights[b] == 0.0:
                        continue
                    s2 = self._move(s, b)
                    if s2 in cliffs:
                        share = weights[b] / len(self.cliff_transition_states)
                        for t in self.cliff_transition_states:
                            P[s, a, t] += share
                        R[s, a] += weights[b] * self.reward_cliff
                    else:
                        P[s, a, s2] += weights[b]
                        R[s, a] += weights[b] * self.reward_step

        return P, R

    def render_policy(self, policy: Sequence[int]) -> str:
        """
        Format a deterministic policy as a grid of arrows ('G' goal, 'C' cliff).

        :param policy: One action per state, shape (n_states,).
            :type policy: Sequence[int]

        :return: Multi-line string.
            :rtype: str
        """
        policy = np.asarray(policy, dtype=np.int64)
        if policy.shape != (self.n_states,):
            raise InvalidArgumentError(f"policy must have shape ({self.n_states},), got {policy.shape}")

        lines = []
        for row in range(self.height):
            cells = []
            for col in range(self.width):
                s = self.pos_to_state(row, col)
                if s in self.goal_states:
                    cells.append("G")
                elif s in self.cliff_states:
                    cells.append("C")
                else:
                    cells.append(ARROWS[int(policy[s])])
            lines.append(" ".join(cells))
        return "\n".join(lines)


def windy_gridworld(**kwargs) -> Gridworld:
    """
    Windy Gridworld (Sutton & Barto, Example 6.5): 7x10 grid, start 30, goal 37,
    upward wind (0, 0, 0, 1, 1, 1, 2, 2, 1, 0).

    Keyword arguments override the defaults (e.g. diagonal_moves=True for King's moves).
    """
    params = dict(
        shape=(7, 10),
        goal_states=(37,),
        wind=(0, 0, 0, 1, 1, 1, 2, 2, 1, 0),
        initial_state=30,
        reward_step=-1.0,
    )
    params.update(kwargs)
    return Gridworld(**params)


def cliff_walking(**kwargs) -> Gridworld:
    """
    Cliff Walking (Sutton & Barto, Example 6.6): 4x12 grid, start 36, goal 47,
    cliff 37..46 with reward -100 and a transition back to the start.
    """
    params = dict(
        shape=(4, 12),
        goal_states=(47,),
        cliff_states=tuple(range(37, 47)),
        reward_step=-1.0,
        reward_cliff=-100.0,
        cliff_transition_states=(36,),
        initial_state=36,
    )
    params.update(kwargs)
    return Gridworld(**params)
