import numpy as np
import pytest

from reinforcelearn import InvalidArgumentError, ValueFunctionKind, ValueTable, make_value_function


def test_value_table_read_write() -> None:
    table = ValueTable(n_states=3, n_actions=2, initial_value=0.5)

    assert table.get(2, 1) == 0.5
    table.set(2, 1, -4.0)
    assert table.get(2, 1) == -4.0
    assert np.allclose(table.action_values(2), [0.5, -4.0])


def test_value_table_rejects_out_of_range_indices() -> None:
    """
    NumPy would accept -1 as "last row", the table must not.
    """
    table = ValueTable(n_states=3, n_actions=2)

    for state, action in [(3, 0), (-1, 0), (0, 2), (0, -1)]:
        with pytest.raises(InvalidArgumentError):
            table.get(state, action)
        with pytest.raises(InvalidArgumentError):
            table.set(state, action, 1.0)

    with pytest.raises(InvalidArgumentError):
        table.action_values(1.5)
    with pytest.raises(InvalidArgumentError):
        table.predict([0, 5])


def test_value_table_action_values_is_a_copy() -> None:
    table = ValueTable(n_states=2, n_actions=2)
    row = table.action_values(0)
    row[:] = 99.0
    assert table.get(0, 0) == 0.0


def test_value_table_add_scaled_and_fit() -> None:
    table = ValueTable(n_states=2, n_actions=2)
    trace = np.array([[1.0, 0.0], [0.5, 0.0]])

    table.add_scaled(trace, 2.0)
    assert np.allclose(table.table, [[2.0, 0.0], [1.0, 0.0]])

    # (0,0) appears twice: 2 -> 3 -> 3.5
    table.fit(states=[0, 0, 1], actions=[0, 0, 1], targets=[4.0, 4.0, 10.0], step_size=0.5)
    assert np.isclose(table.get(0, 0), 3.5)
    assert np.isclose(table.get(1, 1), 5.0)

    with pytest.raises(InvalidArgumentError):
        table.add_scaled(np.zeros((3, 2)), 1.0)
    with pytest.raises(InvalidArgumentError):
        table.fit(states=[0], actions=[0, 1], targets=[1.0], step_size=0.1)


def test_value_table_initial_array_and_greedy_policy() -> None:
    init = np.array([[0.0, 1.0], [3.0, 3.0], [-1.0, -2.0]])
    table = ValueTable(n_states=3, n_actions=2, initial_value=init)

    assert np.array_equal(table.greedy_policy(), [1, 0, 0])
    with pytest.raises(InvalidArgumentError):
        ValueTable(n_states=2, n_actions=2, initial_value=init)


def test_make_value_function_table() -> None:
    table = make_value_function(ValueFunctionKind.TABLE, n_states=4, n_actions=3)
    assert isinstance(table, ValueTable)
    assert table.table.shape == (4, 3)

    assert isinstance(make_value_function("table", n_states=1, n_actions=1), ValueTable)
    with pytest.raises(InvalidArgumentError):
        make_value_function("lookup", n_states=1, n_actions=1)
