from __future__ import annotations
import random
import numpy as np


def make_rng(seed: int | np.random.Generator | None = None) -> np.random.Generator:
    """
    Turn a seed into a NumPy Generator.

    Every stochastic component (policies, replay memory, environments) accepts `seed` in any of these forms,
    so one Generator can also be shared between components when you want a single random stream.

    :param seed: None (fresh entropy), an integer seed, or an existing Generator (returned as is).
        :type seed: int | np.random.Generator | None

    :return: A NumPy random Generator.
        :rtype: np.random.Generator
    """
    if isinstance(seed, np.random.Generator):
        return seed
    return np.random.default_rng(seed)


def seed_everything(seed: int, use_torch: bool = False) -> np.random.Generator:
    """
    Seed the global RNGs for reproducibility and return a Generator built from the same seed.

    Seeds:
    - Python's random
    - NumPy's legacy global RNG
    - PyTorch (CPU + CUDA, if available) when use_torch=True

    :param seed: Master seed.
        :type seed: int
    :param use_torch: If True, also seed PyTorch.
        :type use_torch: bool

    :return: np.random.default_rng(seed)
        :rtype: np.random.Generator
    """
    seed = int(seed)
    random.seed(seed)
    np.random.seed(seed)

    if use_torch:
        import torch

        torch.manual_seed(seed)
        if torch.cuda.is_available():
            torch.cuda.manual_seed_all(seed)

    return np.random.default_rng(seed)
