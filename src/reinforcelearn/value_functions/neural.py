from __future__ import annotations

from typing import Optional, Sequence
import numpy as np
import torch
import torch.nn as nn
import torch.nn.functional as F

from reinforcelearn.errors import InvalidArgumentError


class QNetwork(nn.Module):
    """
    A plain MLP that outputs one action value per action.

    :param obs_dim: Feature dimension of the (preprocessed) state.
        :type obs_dim: int
    :param n_actions: Number of discrete actions.
        :type n_actions: int
    :param hidden_sizes: Hidden layer sizes.
        :type hidden_sizes: tuple[int, ...]
    """

    def __init__(self, obs_dim: int, n_actions: int, hidden_sizes: tuple[int, ...]) -> None:
        super().__init__()

        layers: list[nn.Module] = []
        in_dim = int(obs_dim)

        # Linear + ReLU trunk, then a linear head with one output per action
        for h in hidden_sizes:
            layers.append(nn.Linear(in_dim, int(h)))
            layers.append(nn.ReLU())
            in_dim = int(h)

        layers.append(nn.Linear(in_dim, int(n_actions)))
        self.net = nn.Sequential(*layers)

    def forward(self, x: torch.Tensor) -> torch.Tensor:
        """
        :param x: Batch of features, shape (batch, obs_dim).
            :type x: torch.Tensor

        :return: Action values, shape (batch, n_actions).
            :rtype: torch.Tensor
        """
        return self.net(x)


class NeuralValueFunction:
    """
    Action-value function approximated by a neural network.

    It has the same surface as ValueTable (action_values / predict / fit), so the learner and the
    agent do not care which one they hold. States must be feature vectors, for tabular environments
    use reinforcelearn.preprocessing.one_hot as the agent's preprocess step.

    fit() performs a single Adam step on the Huber loss between Q(s, a_taken) and the targets.
    The step_size passed by the learner becomes the optimizer's learning rate.

    :param obs_dim: Feature dimension.
        :type obs_dim: int
    :param n_actions: Number of discrete actions.
        :type n_actions: int
    :param hidden_sizes: Hidden layer sizes.
        :type hidden_sizes: tuple[int, ...]
    :param seed: Torch seed for weight initialisation.
        :type seed: int | None
    :param device: Torch device. If None, picks CUDA if available else CPU.
        :type device: torch.device | None
    """

    def __init__(
        self,
        obs_dim: int,
        n_actions: int,
        hidden_sizes: tuple[int, ...] = (64, 64),
        seed: int | None = None,
        device: Optional[torch.device] = None,
    ) -> None:
        self.obs_dim = int(obs_dim)
        self.n_actions = int(n_actions)
        if self.obs_dim < 1 or self.n_actions < 1:
            raise InvalidArgumentError("obs_dim and n_actions must be >= 1")

        self.device = device if device is not None else torch.device(
            "cuda" if torch.cuda.is_available() else "cpu"
        )

        if seed is not None:
            torch.manual_seed(int(seed))

        self.q_net = QNetwork(obs_dim=self.obs_dim, n_actions=self.n_actions, hidden_sizes=tuple(hidden_sizes))
        self.q_net.to(self.device)
        self.optim = torch.optim.Adam(self.q_net.parameters(), lr=1e-3)
        self._updates = 0

    @property
    def num_updates(self) -> int:
        return self._updates

    def _as_batch(self, states) -> torch.Tensor:
        x = np.asarray(states, dtype=np.float32)
        if x.ndim == 1:
            x = x[None, :]
        if x.ndim != 2 or x.shape[1] != self.obs_dim:
            raise InvalidArgumentError(f"Expected features of dimension {self.obs_dim}, got shape {x.shape}")
        return torch.as_tensor(x, device=self.device)

    def action_values(self, state) -> np.ndarray:
        """
        Action values of one state.

        :param state: Feature vector, shape (obs_dim,).
            :type state: np.ndarray

        :return: Array of shape (n_actions,).
            :rtype: np.ndarray
        """
        return self.predict([state])[0]

    def predict(self, states) -> np.ndarray:
        """
        Action values for a batch of states.

        :param states: Feature vectors, shape (batch, obs_dim).
            :type states: Sequence[np.ndarray] | np.ndarray

        :return: Array of shape (batch, n_actions).
            :rtype: np.ndarray
        """
        with torch.no_grad():
            q = self.q_net(self._as_batch(states))
        return q.cpu().numpy().astype(np.float64)

    def fit(self, states, actions: Sequence[int], targets: Sequence[float], step_size: float) -> float:
        """
        One gradient step regressing Q(s, a_taken) towards the targets.

        :param states: Feature vectors, shape (batch, obs_dim).
            :type states: Sequence[np.ndarray] | np.ndarray
        :param actions: Actions taken, shape (batch,).
            :type actions: Sequence[int]
        :param targets: TD targets, shape (batch,).
            :type targets: Sequence[float]
        :param step_size: Learning rate for this step.
            :type step_size: float

        :return: Scalar loss value.
            :rtype: float
        """
        obs = self._as_batch(states)
        acts = torch.as_tensor(np.asarray(actions, dtype=np.int64), device=self.device)
        y = torch.as_tensor(np.asarray(targets, dtype=np.float32), device=self.device)

        if not (obs.shape[0] == acts.shape[0] == y.shape[0]):
            raise InvalidArgumentError("states, actions and targets must have the same length")
        if bool(((acts < 0) | (acts >= self.n_actions)).any()):
            raise InvalidArgumentError(f"Actions must be in [0, {self.n_actions - 1}]")

        for group in self.optim.param_groups:
            group["lr"] = float(step_size)

        # each transition only supervises the value of the action that was actually taken
        q_sa = self.q_net(obs).gather(dim=1, index=acts.unsqueeze(1)).squeeze(1)
        loss = F.smooth_l1_loss(q_sa, y)

        self.optim.zero_grad(set_to_none=True)
        loss.backward()
        self.optim.step()
        self._updates += 1

        return float(loss.item())
