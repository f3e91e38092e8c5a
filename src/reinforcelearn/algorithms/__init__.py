"""
Learning and planning algorithms.

- QLearning: online Q(lambda) with eligibility traces and batched (replay) updates
- q_value_iteration: optimal action values of a known finite MDP
"""

from .planning import q_value_iteration
from .q_learning import QLearning

__all__ = [
    "QLearning",
    "q_value_iteration",
]
