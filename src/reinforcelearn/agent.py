from __future__ import annotations

from typing import Any, Callable, Optional

from reinforcelearn.algorithms.q_learning import QLearning
from reinforcelearn.errors import InvalidArgumentError
from reinforcelearn.policies import Policy
from reinforcelearn.replay import ReplayMemory, Transition
from reinforcelearn.traces import EligibilityTrace
from reinforcelearn.value_functions import ValueTable


class Agent:
    """
    An agent = policy + value function (+ learning algorithm, + replay memory).

    - act(state): preprocess the state, look up its action values, let the policy choose
    - observe(...): turn one environment step into a Transition and learn from it

    Learning modes:
    - no algorithm: the agent only acts (e.g. a fixed random policy)
    - online: every transition updates the value function right away, using eligibility traces
      when the value function is a ValueTable and lambda > 0
    - replay: transitions go to the replay memory, and once it holds batch_size of them every new
      step triggers one update on a uniformly sampled minibatch

    :param policy: Behaviour policy.
        :type policy: Policy
    :param value_function: Action-value estimates.
        :type value_function: ValueTable | NeuralValueFunction
    :param algorithm: Learning algorithm, None for a non-learning agent.
        :type algorithm: QLearning | None
    :param replay_memory: Replay memory, None for online learning.
        :type replay_memory: ReplayMemory | None
    :param batch_size: Minibatch size for replay updates.
        :type batch_size: int
    :param preprocess: Maps raw environment states to what the value function expects.
        :type preprocess: Callable[[Any], Any] | None
    """

    def __init__(
        self,
        policy: Policy,
        value_function,
        algorithm: Optional[QLearning] = None,
        replay_memory: Optional[ReplayMemory] = None,
        batch_size: int = 32,
        preprocess: Optional[Callable[[Any], Any]] = None,
    ) -> None:
        self.policy = policy
        self.value_function = value_function
        self.algorithm = algorithm
        self.replay_memory = replay_memory
        self.batch_size = int(batch_size)
        self.preprocess = preprocess

        if self.batch_size < 1:
            raise InvalidArgumentError("batch_size must be >= 1")
        if replay_memory is not None and self.batch_size > replay_memory.capacity:
            raise InvalidArgumentError("batch_size cannot exceed the replay memory capacity")

        self.trace: EligibilityTrace | None = None
        if algorithm is not None and algorithm.config.lambda_ > 0.0:
            if replay_memory is not None:
                raise InvalidArgumentError("Eligibility traces (lambda > 0) cannot be combined with experience replay")
            if not isinstance(value_function, ValueTable):
                raise InvalidArgumentError("Eligibility traces (lambda > 0) need a tabular value function")
            self.trace = algorithm.make_trace(value_function.n_states, value_function.n_actions)

        self.last_td_error: float | None = None

    def _features(self, state):
        return self.preprocess(state) if self.preprocess is not None else state

    def act(self, state) -> int:
        """
        Choose an action for a raw environment state.

        :param state: Environment state.
            :type state: Any

        :return: Action index.
            :rtype: int
        """
        return self.policy.select_action(self.value_function.action_values(self._features(state)))

    def observe(self, state, action: int, reward: float, next_state, done: bool) -> Optional[float]:
        """
        Learn from one environment step.

        :param state: Raw state at time t.
            :type state: Any
        :param action: Action taken at time t.
            :type action: int
        :param reward: Reward observed.
            :type reward: float
        :param next_state: Raw state at time t+1.
            :type next_state: Any
        :param done: Whether the episode ended at t+1.
            :type done: bool

        :return: TD error of the update (mean absolute TD error for replay), or None if nothing was learned.
            :rtype: float | None
        """
        if self.algorithm is None:
            return None

        transition = Transition(
            state=self._features(state),
            action=int(action),
            reward=float(reward),
            next_state=self._features(next_state),
            done=bool(done),
        )

        if self.replay_memory is None:
            self.last_td_error = self.algorithm.update(transition, self.value_function, trace=self.trace)
            return self.last_td_error

        self.replay_memory.append(transition)
        if len(self.replay_memory) < self.batch_size:
            return None

        batch = self.replay_memory.sample(self.batch_size)
        self.last_td_error = self.algorithm.batch_update(batch, self.value_function)
        return self.last_td_error

    def end_episode(self) -> None:
        """
        Called at episode boundaries: traces must not leak from one episode into the next.
        """
        if self.trace is not None:
            self.trace.reset()
