from __future__ import annotations

from typing import Optional

import numpy as np


def random_instance(
    n: int,
    rng: Optional[np.random.Generator] = None,
    max_weight: int = 100,
    symmetric: bool = False,
) -> np.ndarray:
    """Random complete directed graph with integer weights in ``[1, max_weight]``."""
    if n < 2:
        raise ValueError(f"An ATSP instance needs at least 2 vertices, got {n}")
    if rng is None:
        rng = np.random.default_rng()
    weights = rng.integers(1, max_weight + 1, size=(n, n), dtype=np.int64)
    if symmetric:
        weights = np.triu(weights, 1)
        weights = weights + weights.T
    np.fill_diagonal(weights, 0)
    return weights


def constant_instance(n: int, weight: int) -> np.ndarray:
    """Instance where every off-diagonal edge costs ``weight``; every tour costs ``n * weight``."""
    weights = np.full((n, n), weight, dtype=np.int64)
    np.fill_diagonal(weights, 0)
    return weights


__all__ = ["constant_instance", "random_instance"]
