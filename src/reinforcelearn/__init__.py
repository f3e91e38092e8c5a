"""
reinforcelearn: small reinforcement learning building blocks.

- value functions (tabular, neural)
- policies (random, greedy, ε-greedy, softmax)
- Q-learning with eligibility traces and experience replay
- toy environments (gridworlds, finite MDPs, mountain car)
- an interaction loop tying them together
"""

from .agent import Agent
from .algorithms import QLearning, q_value_iteration
from .config import QLearningConfig, ReplayConfig
from .environments import (
    CallableEnvironment,
    Environment,
    EnvironmentKind,
    Gridworld,
    MdpEnvironment,
    MountainCar,
    MountainCarContinuous,
    cliff_walking,
    make_environment,
    windy_gridworld,
)
from .errors import InvalidArgumentError
from .interaction import InteractionResult, interact
from .policies import (
    EpsilonGreedyPolicy,
    GreedyPolicy,
    Policy,
    PolicyKind,
    RandomPolicy,
    SoftmaxPolicy,
    make_policy,
)
from .replay import ReplayMemory, Transition
from .traces import EligibilityTrace, TraceType
from .value_functions import NeuralValueFunction, ValueFunctionKind, ValueTable, make_value_function

__all__ = [
    "Agent",
    "QLearning",
    "q_value_iteration",
    "QLearningConfig",
    "ReplayConfig",
    "Environment",
    "CallableEnvironment",
    "MdpEnvironment",
    "Gridworld",
    "windy_gridworld",
    "cliff_walking",
    "MountainCar",
    "MountainCarContinuous",
    "EnvironmentKind",
    "make_environment",
    "InvalidArgumentError",
    "interact",
    "InteractionResult",
    "Policy",
    "RandomPolicy",
    "GreedyPolicy",
    "EpsilonGreedyPolicy",
    "SoftmaxPolicy",
    "PolicyKind",
    "make_policy",
    "ReplayMemory",
    "Transition",
    "EligibilityTrace",
    "TraceType",
    "ValueTable",
    "NeuralValueFunction",
    "ValueFunctionKind",
    "make_value_function",
]
