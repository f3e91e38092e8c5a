import pytest

from reinforcelearn import InvalidArgumentError, QLearningConfig, ReplayConfig


def test_q_learning_config_defaults_and_validation() -> None:
    cfg = QLearningConfig()
    assert (cfg.alpha, cfg.gamma, cfg.lambda_, cfg.trace_type) == (0.1, 0.99, 0.0, "accumulate")

    for kwargs in ({"alpha": -0.1}, {"gamma": 1.5}, {"lambda_": 2.0}, {"trace_type": "dutch"}):
        with pytest.raises(InvalidArgumentError):
            QLearningConfig(**kwargs)


def test_replay_config_validation() -> None:
    assert ReplayConfig(capacity=10, batch_size=10).batch_size == 10

    with pytest.raises(InvalidArgumentError):
        ReplayConfig(capacity=0)
    with pytest.raises(InvalidArgumentError):
        ReplayConfig(capacity=10, batch_size=11)


def test_configs_are_frozen() -> None:
    cfg = QLearningConfig()
    with pytest.raises(AttributeError):
        cfg.alpha = 0.5  # type: ignore[misc]
