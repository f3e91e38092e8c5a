from __future__ import annotations

from typing import Sequence
import numpy as np

from reinforcelearn.config import QLearningConfig
from reinforcelearn.errors import InvalidArgumentError
from reinforcelearn.replay import Transition
from reinforcelearn.traces import EligibilityTrace


def _check_action(action, n_actions: int) -> int:
    if isinstance(action, (bool, np.bool_)) or not isinstance(action, (int, np.integer)):
        raise InvalidArgumentError(f"Action index must be an integer, got {action!r}")
    if not (0 <= action < n_actions):
        raise InvalidArgumentError(f"action={action} out of bounds [0, {n_actions - 1}]")
    return int(action)


class QLearning:
    """
    Q-learning, optionally with eligibility traces, Q(lambda).

    One-step target (off-policy: the target assumes greedy behaviour at the next state,
    whatever policy collected the data):

        target = r + gamma * max_a' Q(s',a') * (1 - done)
        delta  = target - Q(s,a)

    Online update with a trace e:

        e(s,a) <- e(s,a) + 1          (or = 1 for replacing traces)
        Q      <- Q + alpha * delta * e
        e      <- gamma * lambda * e

    With lambda = 0 the trace is wiped after every step and this is exactly
        Q(s,a) <- Q(s,a) + alpha * delta

    For experience replay, `batch_update` computes the targets of a whole minibatch from the current
    estimates first and only then moves the estimates (like a DQN-style fixed label).

    :param config: Learning rate, discount, trace parameters.
        :type config: QLearningConfig
    """

    def __init__(self, config: QLearningConfig | None = None) -> None:
        self.config = config if config is not None else QLearningConfig()

    @property
    def alpha(self) -> float:
        return self.config.alpha

    @property
    def gamma(self) -> float:
        return self.config.gamma

    @property
    def trace_decay(self) -> float:
        """
        Factor applied to the traces after every update: gamma * lambda.
        """
        return self.config.gamma * self.config.lambda_

    def make_trace(self, n_states: int, n_actions: int) -> EligibilityTrace:
        return EligibilityTrace(n_states=n_states, n_actions=n_actions, trace_type=self.config.trace_type)

    def td_target(self, value_function, transition: Transition) -> float:
        """
        Compute r + gamma * max_a' Q(s',a') * (1 - done).

        :param value_function: ValueTable or NeuralValueFunction.
            :type value_function: ValueTable | NeuralValueFunction
        :param transition: One transition.
            :type transition: Transition

        :return: TD target.
            :rtype: float
        """
        target = float(transition.reward)
        if not transition.done:
            target += self.gamma * float(np.max(value_function.action_values(transition.next_state)))
        return target

    def update(self, transition: Transition, value_function, trace: EligibilityTrace | None = None) -> float:
        """
        Apply one online Q-learning update.

        :param transition: The transition just observed.
            :type transition: Transition
        :param value_function: Estimates to update in place.
            :type value_function: ValueTable | NeuralValueFunction
        :param trace: Eligibility trace (tabular only). None means a one-step update.
            :type trace: EligibilityTrace | None

        :return: TD error delta.
            :rtype: float
        """
        action = _check_action(transition.action, value_function.n_actions)
        target = self.td_target(value_function, transition)
        q_sa = float(value_function.action_values(transition.state)[action])
        delta = target - q_sa

        if trace is None:
            value_function.fit([transition.state], [action], [target], step_size=self.alpha)
            return delta

        trace.visit(transition.state, action)
        value_function.add_scaled(trace.values, self.alpha * delta)  # entries with zero trace are untouched
        trace.decay(self.trace_decay)
        return delta

    def batch_update(self, transitions: Sequence[Transition], value_function) -> float:
        """
        Q-learning update on a minibatch (experience replay).

        :param transitions: Sampled transitions.
            :type transitions: Sequence[Transition]
        :param value_function: Estimates to update in place.
            :type value_function: ValueTable | NeuralValueFunction

        :return: Mean absolute TD error of the batch (before the update).
            :rtype: float
        """
        if len(transitions) == 0:
            raise InvalidArgumentError("Cannot update on an empty batch")

        states = [tr.state for tr in transitions]
        actions = [_check_action(tr.action, value_function.n_actions) for tr in transitions]
        rewards = np.array([tr.reward for tr in transitions], dtype=np.float64)
        dones = np.array([1.0 if tr.done else 0.0 for tr in transitions], dtype=np.float64)

        next_q = np.max(value_function.predict([tr.next_state for tr in transitions]), axis=1)
        # Terminal masking: if done=1 the target is just the reward (no bootstrap)
        targets = rewards + (1.0 - dones) * self.gamma * next_q

        q_sa = value_function.predict(states)[np.arange(len(actions)), actions]
        value_function.fit(states, actions, targets, step_size=self.alpha)
        return float(np.mean(np.abs(targets - q_sa)))
