from __future__ import annotations

import math

import numpy as np
import pytest

from ExactTSP.instances import random_instance
from ExactTSP.solvers.base import compute_cycle_cost, is_valid_tour
from ExactTSP.solvers.exact.brute_force import BruteForceSolver

from conftest import reference_optimum


def test_four_city_optimum(four_city_weights):
    result = BruteForceSolver().solve(four_city_weights)

    assert result.status == "complete"
    assert result.cost == 80
    assert result.path[0] == result.path[-1] == 3
    assert compute_cycle_cost(four_city_weights, result.path) == 80


@pytest.mark.parametrize("n", [2, 3, 4, 5, 6, 7])
def test_every_permutation_checked_once(n):
    weights = random_instance(n, np.random.default_rng(n))
    result = BruteForceSolver().solve(weights)

    assert result.metadata["permutations_checked"] == math.factorial(n - 1)


@pytest.mark.parametrize("seed", range(5))
def test_matches_reference(seed):
    weights = random_instance(7, np.random.default_rng(seed))
    result = BruteForceSolver().solve(weights)

    assert result.cost == reference_optimum(weights)
    assert is_valid_tour(weights, result.path)
    assert compute_cycle_cost(weights, result.path) == result.cost


def test_zero_time_limit_reports_timeout():
    weights = random_instance(7, np.random.default_rng(3))
    result = BruteForceSolver().solve(weights, time_limit=0.0)

    assert result.status == "timeout"
    assert result.cost == compute_cycle_cost(weights, result.path)
