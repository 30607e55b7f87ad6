from __future__ import annotations

import heapq
import itertools
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Sequence, Tuple

import numpy as np

from ExactTSP.graph import INFINITY
from ExactTSP.solvers.base import (
    AlgorithmResult,
    BaseSolver,
    TimeLimitExpired,
    compute_cycle_cost,
    current_time,
    enforce_time_budget,
    tour_from_order,
)
from ExactTSP.utils.taxonomy import AlgorithmFamily

logger = logging.getLogger(__name__)

Edge = Tuple[int, int]


def reduce_matrix(matrix: np.ndarray, rows: Sequence[int], cols: Sequence[int]) -> int:
    """Row then column reduce ``matrix`` in place over the given rows/columns.

    Entries at ``INFINITY`` are left untouched. Returns the total subtracted,
    or ``INFINITY`` when some row or column has no finite entry left (no tour
    can complete the assignment).
    """
    index = np.ix_(np.asarray(rows, dtype=np.intp), np.asarray(cols, dtype=np.intp))
    sub = matrix[index]
    finite = sub < INFINITY
    if not finite.any(axis=1).all() or not finite.any(axis=0).all():
        return INFINITY

    row_min = np.where(finite, sub, INFINITY).min(axis=1)
    sub = np.where(finite, sub - row_min[:, None], INFINITY)
    col_min = np.where(finite, sub, INFINITY).min(axis=0)
    sub = np.where(finite, sub - col_min[None, :], INFINITY)
    matrix[index] = sub
    return int(row_min.sum()) + int(col_min.sum())


def select_branch_cell(matrix: np.ndarray) -> Tuple[Edge, int]:
    """Pick the zero cell whose exclusion would raise the bound the most.

    The penalty of a zero at ``(i, j)`` is the smallest other entry of row
    ``i`` plus the smallest other entry of column ``j``.
    """
    zeros = np.argwhere(matrix == 0)
    if zeros.size == 0:
        raise ValueError("Reduced matrix has no zero cell to branch on")
    # Second smallest of each row/column is the minimum once the zero is removed.
    row_second = np.partition(matrix, 1, axis=1)[:, 1]
    col_second = np.partition(matrix, 1, axis=0)[1, :]
    penalties = np.minimum(row_second[zeros[:, 0]] + col_second[zeros[:, 1]], INFINITY)
    best = int(np.argmax(penalties))
    i, j = zeros[best]
    return (int(i), int(j)), int(penalties[best])


@dataclass(frozen=True, eq=False)
class BBNode:
    """Partial assignment in the branch-and-bound tree.

    ``matrix`` is the node's own reduced cost matrix (read-only). Rows of
    vertices that already have a successor and columns of vertices that already
    have a predecessor are set to ``INFINITY``. ``chain_heads`` maps the open
    end of every fixed path segment to its start and ``chain_tails`` is the
    inverse; vertices outside any segment are their own head and tail.
    """

    matrix: np.ndarray
    lower_bound: int
    edges: Tuple[Edge, ...]
    chain_heads: Dict[int, int]
    chain_tails: Dict[int, int]
    branch_cell: Edge | None = None
    branch_penalty: int = 0

    @property
    def size(self) -> int:
        return int(self.matrix.shape[0])

    @property
    def fixed_count(self) -> int:
        return len(self.edges)

    @property
    def is_feasible(self) -> bool:
        return self.lower_bound < INFINITY

    @property
    def is_leaf(self) -> bool:
        return self.fixed_count == self.size - 2

    def open_rows(self) -> List[int]:
        taken = {i for i, _ in self.edges}
        return [v for v in range(self.size) if v not in taken]

    def open_cols(self) -> List[int]:
        taken = {j for _, j in self.edges}
        return [v for v in range(self.size) if v not in taken]

    def closing_edges(self) -> Tuple[Edge, Edge]:
        """The two edges that complete a leaf into a Hamiltonian cycle.

        A leaf has exactly two open segments; joining each one's tail to the
        other one's head is the only completion without a sub-cycle.
        """
        if not self.is_leaf:
            raise ValueError("Only a node with n - 2 fixed edges has a forced completion")
        tail_a, tail_b = self.open_rows()
        head_a = self.chain_heads.get(tail_a, tail_a)
        head_b = self.chain_heads.get(tail_b, tail_b)
        return (tail_a, head_b), (tail_b, head_a)

    @classmethod
    def build(
        cls,
        matrix: np.ndarray,
        parent_bound: int,
        edges: Tuple[Edge, ...],
        chain_heads: Dict[int, int],
        chain_tails: Dict[int, int],
    ) -> "BBNode":
        size = matrix.shape[0]
        taken_rows = {i for i, _ in edges}
        taken_cols = {j for _, j in edges}
        rows = [v for v in range(size) if v not in taken_rows]
        cols = [v for v in range(size) if v not in taken_cols]
        reduction = reduce_matrix(matrix, rows, cols)
        lower_bound = INFINITY if reduction >= INFINITY else min(parent_bound + reduction, INFINITY)

        branch_cell: Edge | None = None
        branch_penalty = 0
        if lower_bound < INFINITY and len(edges) < size - 2:
            branch_cell, branch_penalty = select_branch_cell(matrix)
        matrix.setflags(write=False)
        return cls(
            matrix=matrix,
            lower_bound=lower_bound,
            edges=edges,
            chain_heads=chain_heads,
            chain_tails=chain_tails,
            branch_cell=branch_cell,
            branch_penalty=branch_penalty,
        )

    @classmethod
    def root(cls, weights: np.ndarray) -> "BBNode":
        matrix = weights.astype(np.int64, copy=True)
        np.fill_diagonal(matrix, INFINITY)
        return cls.build(matrix, 0, (), {}, {})

    def include_child(self) -> "BBNode":
        """Child that commits the branch edge ``i -> j``."""
        i, j = self._require_branch_cell()
        matrix = np.array(self.matrix, copy=True)
        matrix[i, :] = INFINITY
        matrix[:, j] = INFINITY

        heads = dict(self.chain_heads)
        tails = dict(self.chain_tails)
        head = heads.pop(i, i)
        tail = tails.pop(j, j)
        heads[tail] = head
        tails[head] = tail
        # Closing the merged segment on itself would be a premature sub-cycle.
        matrix[tail, head] = INFINITY
        return BBNode.build(matrix, self.lower_bound, self.edges + ((i, j),), heads, tails)

    def exclude_child(self) -> "BBNode":
        """Child that forbids the branch edge ``i -> j``."""
        i, j = self._require_branch_cell()
        matrix = np.array(self.matrix, copy=True)
        matrix[i, j] = INFINITY
        return BBNode.build(matrix, self.lower_bound, self.edges, dict(self.chain_heads), dict(self.chain_tails))

    def _require_branch_cell(self) -> Edge:
        if self.branch_cell is None:
            raise ValueError("Node has no branch cell (leaf or infeasible)")
        return self.branch_cell


def leaf_tour(node: BBNode, origin: int) -> List[int]:
    """Closed tour (starting at ``origin``) formed by a leaf's edges and its completion."""
    successors = dict(node.edges)
    successors.update(dict(node.closing_edges()))
    order = []
    vertex = successors[origin]
    while vertex != origin:
        order.append(vertex)
        vertex = successors[vertex]
    return tour_from_order(order, origin)


class BranchAndBoundSolver(BaseSolver):
    """Best-first branch-and-bound over reduced cost matrices (Little et al.).

    Nodes are expanded in order of increasing lower bound, preferring nodes
    with more fixed edges on ties. Each expansion branches on the zero cell
    with the largest exclusion penalty into an include and an exclude child.
    """

    name = "branch_and_bound"
    family = AlgorithmFamily.BRANCH_AND_BOUND

    def solve(self, graph: Any, time_limit: float | None = None) -> AlgorithmResult:
        weights = self._weights(graph)
        start_time = current_time()
        n = weights.shape[0]
        origin = n - 1

        best_path = tour_from_order(range(origin), origin)
        upper_bound = compute_cycle_cost(weights, best_path)
        upper_bounds = [upper_bound]
        nodes_explored = 0
        nodes_pruned = 0

        root = BBNode.root(weights)
        frontier: list[tuple[int, int, int, BBNode]] = []
        sequence = itertools.count()

        def offer(node: BBNode) -> None:
            nonlocal upper_bound, best_path, nodes_pruned
            if node.is_leaf:
                path = leaf_tour(node, origin)
                cost = compute_cycle_cost(weights, path)
                if cost < upper_bound:
                    upper_bound = cost
                    best_path = path
                    upper_bounds.append(cost)
                    logger.debug("incumbent improved to %d", cost)
                return
            if node.lower_bound >= upper_bound:
                nodes_pruned += 1
                return
            heapq.heappush(frontier, (node.lower_bound, -node.fixed_count, next(sequence), node))

        offer(root)
        status = "complete"
        try:
            while frontier:
                lower_bound, _, _, node = heapq.heappop(frontier)
                if lower_bound >= upper_bound:
                    break
                enforce_time_budget(start_time, time_limit)
                nodes_explored += 1
                offer(node.include_child())
                offer(node.exclude_child())
        except TimeLimitExpired:
            status = "timeout"

        elapsed = current_time() - start_time
        logger.debug(
            "branch and bound n=%d cost=%d explored=%d pruned=%d",
            n,
            upper_bound,
            nodes_explored,
            nodes_pruned,
        )
        return AlgorithmResult(
            name=self.name,
            path=best_path,
            cost=int(upper_bound),
            elapsed=elapsed,
            status=status,
            metadata={
                "root_lower_bound": int(root.lower_bound),
                "nodes_explored": nodes_explored,
                "nodes_pruned": nodes_pruned,
                "upper_bounds": upper_bounds,
            },
        )


__all__ = ["BBNode", "BranchAndBoundSolver", "leaf_tour", "reduce_matrix", "select_branch_cell"]
