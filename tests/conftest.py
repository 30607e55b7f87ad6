from __future__ import annotations

import itertools

import numpy as np
import pytest

from ExactTSP import SOLVER_REGISTRY, get_solver


@pytest.fixture
def four_city_weights() -> np.ndarray:
    return np.array(
        [
            [0, 10, 15, 20],
            [10, 0, 35, 25],
            [15, 35, 0, 30],
            [20, 25, 30, 0],
        ],
        dtype=np.int64,
    )


@pytest.fixture
def three_city_weights() -> np.ndarray:
    return np.array(
        [
            [0, 3, 5],
            [4, 0, 2],
            [6, 1, 0],
        ],
        dtype=np.int64,
    )


@pytest.fixture(params=sorted(SOLVER_REGISTRY.keys()))
def solver(request):
    return get_solver(request.param)


def reference_optimum(weights: np.ndarray) -> int:
    """Independent optimum via itertools, origin fixed at the last vertex."""
    n = len(weights)
    origin = n - 1
    best = None
    for order in itertools.permutations(range(origin)):
        tour = (origin, *order, origin)
        cost = sum(int(weights[a, b]) for a, b in zip(tour, tour[1:]))
        if best is None or cost < best:
            best = cost
    return best
