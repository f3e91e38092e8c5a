"""
Action-value functions.

- ValueTable: tabular Q[s, a]
- NeuralValueFunction: PyTorch MLP over state features
"""

from __future__ import annotations

from enum import Enum

from reinforcelearn.errors import InvalidArgumentError
from .neural import NeuralValueFunction, QNetwork
from .table import ValueTable


class ValueFunctionKind(str, Enum):
    TABLE = "table"
    NEURAL_NETWORK = "neural_network"


_BUILDERS = {
    ValueFunctionKind.TABLE: ValueTable,
    ValueFunctionKind.NEURAL_NETWORK: NeuralValueFunction,
}


def make_value_function(kind: ValueFunctionKind | str, **kwargs) -> ValueTable | NeuralValueFunction:
    """
    Build a value function from its kind.

    :param kind: Which value function to build.
        :type kind: ValueFunctionKind | str
    :param kwargs: Constructor arguments of the chosen class.

    :return: The value function.
        :rtype: ValueTable | NeuralValueFunction
    """
    try:
        kind = ValueFunctionKind(kind)
    except ValueError as e:
        raise InvalidArgumentError(f"Unknown value function kind {kind!r}") from e
    return _BUILDERS[kind](**kwargs)


__all__ = [
    "ValueTable",
    "NeuralValueFunction",
    "QNetwork",
    "ValueFunctionKind",
    "make_value_function",
]
