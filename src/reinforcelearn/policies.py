from __future__ import annotations

from enum import Enum
import numpy as np

from reinforcelearn.common.seeding import make_rng
from reinforcelearn.errors import InvalidArgumentError


def _as_values(action_values) -> np.ndarray:
    q = np.asarray(action_values, dtype=np.float64)
    if q.ndim != 1 or q.size == 0:
        raise InvalidArgumentError(f"action_values must be a non-empty 1D array, got shape {q.shape}")
    if not np.all(np.isfinite(q)):
        raise InvalidArgumentError(f"action_values must be finite, got {q}")
    return q


class Policy:
    """
    Base class for policies over a discrete action set.

    A policy maps the action values of the current state to a distribution over actions.
    Subclasses implement `probabilities`; `select_action` samples from it.

    :param seed: Seed (or Generator) for action sampling.
        :type seed: int | np.random.Generator | None
    """

    def __init__(self, seed: int | np.random.Generator | None = None) -> None:
        self.rng = make_rng(seed)

    def probabilities(self, action_values) -> np.ndarray:
        raise NotImplementedError

    def select_action(self, action_values) -> int:
        """
        Sample an action from the policy distribution.

        :param action_values: Action values of the current state, shape (n_actions,).
            :type action_values: np.ndarray

        :return: Action index.
            :rtype: int
        """
        probs = self.probabilities(action_values)
        return int(self.rng.choice(probs.size, p=probs))


class RandomPolicy(Policy):
    """
    Uniform random policy. The action values are only used for the number of actions.
    """

    def probabilities(self, action_values) -> np.ndarray:
        q = _as_values(action_values)
        return np.full(shape=q.size, fill_value=1.0 / q.size, dtype=np.float64)


class GreedyPolicy(Policy):
    """
    Greedy policy: always an action with the maximal value.

    Ties (exactly equal values) go to the lowest action index, so the choice is the same every time
    for the same values. With random_tie_break=True the probability mass is split evenly among the
    (numerically close) tied actions instead
    (this avoids an "action 0 bias" early on, when many values are still equal).

    :param random_tie_break: Spread probability over tied maximal actions.
        :type random_tie_break: bool
    :param seed: Seed (or Generator) for action sampling.
        :type seed: int | np.random.Generator | None
    """

    def __init__(self, random_tie_break: bool = False, seed: int | np.random.Generator | None = None) -> None:
        super().__init__(seed=seed)
        self.random_tie_break = bool(random_tie_break)

    def _best_actions(self, q: np.ndarray) -> np.ndarray:
        # nearly equal values only count as ties when ties are broken at random
        if self.random_tie_break:
            return np.flatnonzero(np.isclose(a=q, b=np.max(q)))
        return np.flatnonzero(q == np.max(q))

    def _greedy_mass(self, q: np.ndarray) -> np.ndarray:
        probs = np.zeros(q.size, dtype=np.float64)
        best_actions = self._best_actions(q)
        if self.random_tie_break:
            probs[best_actions] = 1.0 / best_actions.size
        else:
            probs[best_actions[0]] = 1.0
        return probs

    def probabilities(self, action_values) -> np.ndarray:
        return self._greedy_mass(_as_values(action_values))

    def select_action(self, action_values) -> int:
        best_actions = self._best_actions(_as_values(action_values))
        if not self.random_tie_break:
            return int(best_actions[0])
        return int(self.rng.choice(best_actions))


class EpsilonGreedyPolicy(GreedyPolicy):
    """
    ε-greedy policy.

        - with probability ε: a uniformly random action
        - with probability 1-ε: a greedy action

    So every action gets ε/n_actions and the greedy action(s) additionally get 1-ε.
    With ε = 0 this is exactly GreedyPolicy.

    :param epsilon: Exploration probability in [0, 1].
        :type epsilon: float
    :param random_tie_break: Spread the greedy mass over tied maximal actions.
        :type random_tie_break: bool
    :param seed: Seed (or Generator) for action sampling.
        :type seed: int | np.random.Generator | None
    """

    def __init__(
        self,
        epsilon: float = 0.1,
        random_tie_break: bool = False,
        seed: int | np.random.Generator | None = None,
    ) -> None:
        super().__init__(random_tie_break=random_tie_break, seed=seed)
        if not (0.0 <= float(epsilon) <= 1.0):
            raise InvalidArgumentError(f"epsilon must be in [0, 1], got {epsilon}")
        self.epsilon = float(epsilon)

    def probabilities(self, action_values) -> np.ndarray:
        q = _as_values(action_values)
        probs = np.full(shape=q.size, fill_value=self.epsilon / q.size, dtype=np.float64)
        probs += (1.0 - self.epsilon) * self._greedy_mass(q)
        return probs

    def select_action(self, action_values) -> int:
        q = _as_values(action_values)
        # Exploration
        if self.epsilon > 0.0 and self.rng.random() < self.epsilon:
            return int(self.rng.integers(low=0, high=q.size))
        # Exploitation
        return super().select_action(q)


class SoftmaxPolicy(Policy):
    """
    Softmax (Boltzmann) policy.

        pi(a|s) = exp(Q(s,a) / tau) / sum_b exp(Q(s,b) / tau)

    High temperature -> close to uniform, low temperature -> close to greedy.
    The maximum is subtracted before exponentiating, which does not change the distribution
    but keeps exp() from overflowing.

    :param temperature: Temperature tau > 0.
        :type temperature: float
    :param seed: Seed (or Generator) for action sampling.
        :type seed: int | np.random.Generator | None
    """

    def __init__(self, temperature: float = 1.0, seed: int | np.random.Generator | None = None) -> None:
        super().__init__(seed=seed)
        if not float(temperature) > 0.0:
            raise InvalidArgumentError(f"temperature must be > 0, got {temperature}")
        self.temperature = float(temperature)

    def probabilities(self, action_values) -> np.ndarray:
        q = _as_values(action_values)
        z = (q - np.max(q)) / self.temperature
        e = np.exp(z)
        return e / np.sum(e)


class PolicyKind(str, Enum):
    RANDOM = "random"
    GREEDY = "greedy"
    EPSILON_GREEDY = "epsilon_greedy"
    SOFTMAX = "softmax"


_POLICIES: dict[PolicyKind, type[Policy]] = {
    PolicyKind.RANDOM: RandomPolicy,
    PolicyKind.GREEDY: GreedyPolicy,
    PolicyKind.EPSILON_GREEDY: EpsilonGreedyPolicy,
    PolicyKind.SOFTMAX: SoftmaxPolicy,
}


def make_policy(kind: PolicyKind | str, **kwargs) -> Policy:
    """
    Build a policy from its kind.

    :param kind: Which policy to build.
        :type kind: PolicyKind | str
    :param kwargs: Constructor arguments of the chosen policy (epsilon, temperature, seed, ...).

    :return: The policy.
        :rtype: Policy
    """
    try:
        kind = PolicyKind(kind)
    except ValueError as e:
        raise InvalidArgumentError(f"Unknown policy kind {kind!r}") from e
    return _POLICIES[kind](**kwargs)
