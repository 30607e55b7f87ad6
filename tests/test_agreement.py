from __future__ import annotations

import numpy as np
import pytest

from ExactTSP import (
    MatrixGraph,
    branch_and_bound,
    brute_force,
    constant_instance,
    held_karp,
    random_instance,
)
from ExactTSP.solvers.base import compute_cycle_cost, is_valid_tour

from conftest import reference_optimum


@pytest.mark.parametrize("n", range(2, 10))
@pytest.mark.parametrize("seed", range(3))
def test_solvers_agree_on_random_instances(n, seed):
    weights = random_instance(n, np.random.default_rng(1000 * n + seed))

    expected = brute_force(weights)
    assert held_karp(weights) == expected
    assert branch_and_bound(weights) == expected


@pytest.mark.parametrize("seed", range(4))
def test_solvers_agree_on_symmetric_instances(seed):
    weights = random_instance(8, np.random.default_rng(seed), max_weight=20, symmetric=True)

    expected = reference_optimum(weights)
    assert brute_force(weights) == held_karp(weights) == branch_and_bound(weights) == expected


def test_solvers_agree_on_ten_vertices():
    weights = random_instance(10, np.random.default_rng(2024), max_weight=1000)

    expected = held_karp(weights)
    assert brute_force(weights) == expected
    assert branch_and_bound(weights) == expected


def test_four_city_scenario(solver, four_city_weights):
    result = solver.solve(four_city_weights)

    assert result.status == "complete"
    assert result.cost == 80
    assert is_valid_tour(four_city_weights, result.path)


def test_two_vertices_cost_both_edges(solver):
    weights = np.array([[0, 13], [29, 0]])

    assert solver.solve(weights).cost == 42


@pytest.mark.parametrize("n", [2, 3, 5, 7])
def test_constant_weights(solver, n):
    assert solver.solve(constant_instance(n, 6)).cost == n * 6


def test_solving_twice_is_idempotent(solver):
    weights = random_instance(7, np.random.default_rng(77))
    pristine = weights.copy()

    first = solver.solve(weights)
    second = solver.solve(weights)

    assert first.cost == second.cost
    assert np.array_equal(weights, pristine)


def test_graph_view_input(solver, four_city_weights):
    graph = MatrixGraph(four_city_weights)

    result = solver.solve(graph)

    assert result.cost == 80
    assert compute_cycle_cost(graph.weights, result.path) == 80
    assert graph.edge_weight(1, 2) == 35


def test_asymmetric_direction_matters(solver):
    # Cheap ring 0 -> 1 -> 2 -> 3 -> 0, expensive in reverse.
    weights = np.full((4, 4), 50)
    for i in range(4):
        weights[i, (i + 1) % 4] = 1

    result = solver.solve(weights)

    assert result.cost == 4
    assert result.path == [3, 0, 1, 2, 3]
