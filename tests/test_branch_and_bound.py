from __future__ import annotations

import numpy as np
import pytest

from ExactTSP.graph import INFINITY
from ExactTSP.instances import random_instance
from ExactTSP.solvers.base import compute_cycle_cost, is_valid_tour
from ExactTSP.solvers.exact.branch_and_bound import (
    BBNode,
    BranchAndBoundSolver,
    leaf_tour,
    reduce_matrix,
    select_branch_cell,
)

from conftest import reference_optimum

INF = INFINITY


def test_reduce_matrix_rows_then_columns():
    matrix = np.array([[INF, 3, 5], [4, INF, 2], [6, 1, INF]], dtype=np.int64)

    total = reduce_matrix(matrix, [0, 1, 2], [0, 1, 2])

    assert total == 8
    assert matrix.tolist() == [[INF, 0, 2], [0, INF, 0], [3, 0, INF]]


def test_reduce_matrix_ignores_closed_rows_and_columns():
    matrix = np.array([[INF, INF, INF], [INF, INF, 4], [INF, 7, INF]], dtype=np.int64)

    total = reduce_matrix(matrix, [1, 2], [1, 2])

    assert total == 11
    assert matrix[0].tolist() == [INF, INF, INF]


def test_reduce_matrix_detects_dead_row():
    matrix = np.array([[INF, INF], [3, INF]], dtype=np.int64)

    assert reduce_matrix(matrix, [0, 1], [0, 1]) == INFINITY


def test_branch_cell_has_highest_exclusion_penalty():
    reduced = np.array([[INF, 0, 2], [0, INF, 0], [3, 0, INF]], dtype=np.int64)

    cell, penalty = select_branch_cell(reduced)

    assert cell == (1, 0)
    assert penalty == 3


def test_root_node(three_city_weights):
    root = BBNode.root(three_city_weights)

    assert root.lower_bound == 8
    assert root.fixed_count == 0
    assert root.branch_cell == (1, 0)
    assert not root.matrix.flags.writeable
    assert three_city_weights[0, 0] == 0


def test_exclude_child_raises_bound_by_penalty(three_city_weights):
    root = BBNode.root(three_city_weights)
    child = root.exclude_child()

    assert child.fixed_count == 0
    assert child.lower_bound == root.lower_bound + root.branch_penalty
    assert child.matrix[1, 0] == INFINITY
    assert root.matrix[1, 0] == 0


def test_include_child_forbids_premature_cycle(three_city_weights):
    root = BBNode.root(three_city_weights)
    child = root.include_child()

    assert child.edges == ((1, 0),)
    assert child.chain_heads == {0: 1}
    assert child.chain_tails == {1: 0}
    assert (child.matrix[1, :] == INFINITY).all()
    assert (child.matrix[:, 0] == INFINITY).all()
    assert child.matrix[0, 1] == INFINITY
    assert child.is_leaf
    assert child.closing_edges() == ((0, 2), (2, 1))
    assert leaf_tour(child, origin=2) == [2, 1, 0, 2]


def test_chains_merge_across_includes():
    weights = random_instance(6, np.random.default_rng(5))
    node = BBNode.root(weights)
    while node.fixed_count < 3:
        node = node.include_child()
        assert node.is_feasible

    successors = dict(node.edges)
    for tail, head in node.chain_heads.items():
        # Walk from head along fixed edges; the walk must end at the recorded tail.
        vertex = head
        while vertex in successors:
            vertex = successors[vertex]
        assert vertex == tail
        assert node.chain_tails[head] == tail
        assert node.matrix[tail, head] == INFINITY


def test_three_city_search(three_city_weights):
    result = BranchAndBoundSolver().solve(three_city_weights)

    assert result.cost == 10
    assert result.path == [2, 1, 0, 2]
    assert result.metadata["root_lower_bound"] == 8
    assert result.metadata["upper_bounds"] == [11, 10]


def test_four_city_optimum(four_city_weights):
    result = BranchAndBoundSolver().solve(four_city_weights)

    assert result.status == "complete"
    assert result.cost == 80
    assert compute_cycle_cost(four_city_weights, result.path) == 80


def test_two_vertices():
    weights = np.array([[0, 7], [3, 0]])
    result = BranchAndBoundSolver().solve(weights)

    assert result.cost == 10
    assert result.path == [1, 0, 1]
    assert result.metadata["nodes_explored"] == 0


@pytest.mark.parametrize("seed", range(8))
def test_bounds_bracket_the_optimum(seed):
    weights = random_instance(8, np.random.default_rng(100 + seed))
    optimum = reference_optimum(weights)
    result = BranchAndBoundSolver().solve(weights)

    upper_bounds = result.metadata["upper_bounds"]
    assert result.metadata["root_lower_bound"] <= optimum
    assert all(a > b for a, b in zip(upper_bounds, upper_bounds[1:]))
    assert upper_bounds[-1] == optimum
    assert result.cost == optimum
    assert is_valid_tour(weights, result.path)
    assert compute_cycle_cost(weights, result.path) == optimum


def test_zero_weight_edges():
    weights = np.zeros((5, 5), dtype=np.int64)
    weights[0, 1] = 9

    assert BranchAndBoundSolver().solve(weights).cost == reference_optimum(weights) == 0
