from __future__ import annotations

import logging
from typing import Any, List

import numpy as np

from ExactTSP.solvers.base import (
    AlgorithmResult,
    BaseSolver,
    TimeLimitExpired,
    current_time,
    enforce_time_budget,
    tour_from_order,
)
from ExactTSP.utils.taxonomy import AlgorithmFamily

logger = logging.getLogger(__name__)

UNSOLVED = -1
# Table size grows as n * 2**(n - 1); beyond this the memory cost dominates.
PRACTICAL_VERTEX_LIMIT = 20


class PartialPathTable:
    """Memo table for Held-Karp states ``(end, mask)``.

    ``mask`` is a bitmask over the non-origin vertices ``0 .. n - 2`` and must
    contain ``end``. Each slot holds the cheapest cost of a path leaving the
    origin, visiting exactly ``mask`` and stopping at ``end``, together with
    the vertex visited just before ``end``.
    """

    def __init__(self, n_vertices: int):
        size = n_vertices - 1
        self.costs = np.full((size, 1 << size), UNSOLVED, dtype=np.int64)
        self.predecessors = np.full((size, 1 << size), UNSOLVED, dtype=np.int64)

    @property
    def shape(self) -> tuple[int, int]:
        return tuple(self.costs.shape)

    def is_solved(self, end: int, mask: int) -> bool:
        return self.costs[end, mask] != UNSOLVED

    def cost(self, end: int, mask: int) -> int:
        return int(self.costs[end, mask])

    def predecessor(self, end: int, mask: int) -> int:
        return int(self.predecessors[end, mask])

    def store(self, end: int, mask: int, cost: int, predecessor: int) -> None:
        if self.is_solved(end, mask):
            raise RuntimeError(f"Held-Karp state ({end}, {mask:#b}) is already solved")
        self.costs[end, mask] = cost
        self.predecessors[end, mask] = predecessor


class HeldKarpSolver(BaseSolver):
    """Dynamic programme over (end vertex, visited subset) pairs.

    States are solved lazily by memoised recursion starting from the full
    subset; every recursive call drops one vertex from the subset, so the
    recursion bottoms out on the singleton states seeded with
    ``w(origin, end)``.
    """

    name = "held_karp"
    family = AlgorithmFamily.DYNAMIC_PROGRAMMING

    def solve(self, graph: Any, time_limit: float | None = None) -> AlgorithmResult:
        weights = self._weights(graph)
        start_time = current_time()
        n = weights.shape[0]
        origin = n - 1
        rows = weights.tolist()
        if n > PRACTICAL_VERTEX_LIMIT:
            logger.warning(
                "Held-Karp on %d vertices needs a %d x %d table", n, origin, 1 << origin
            )

        table = PartialPathTable(n)
        for end in range(origin):
            table.store(end, 1 << end, rows[origin][end], origin)
        states_computed = 0

        def partial_path_cost(end: int, mask: int) -> int:
            nonlocal states_computed
            if table.is_solved(end, mask):
                return table.cost(end, mask)
            enforce_time_budget(start_time, time_limit)
            subset = mask & ~(1 << end)
            best_cost = None
            best_previous = UNSOLVED
            for previous in range(origin):
                if not subset & (1 << previous):
                    continue
                cost = partial_path_cost(previous, subset) + rows[previous][end]
                if best_cost is None or cost < best_cost:
                    best_cost = cost
                    best_previous = previous
            table.store(end, mask, best_cost, best_previous)
            states_computed += 1
            return best_cost

        full_mask = (1 << origin) - 1
        best_cost = None
        best_last = UNSOLVED
        try:
            for end in range(origin):
                cost = partial_path_cost(end, full_mask) + rows[end][origin]
                if best_cost is None or cost < best_cost:
                    best_cost = cost
                    best_last = end
        except TimeLimitExpired:
            logger.debug("Held-Karp stopped after %d states", states_computed)
            return AlgorithmResult(
                name=self.name,
                path=None,
                cost=None,
                elapsed=current_time() - start_time,
                status="timeout",
                metadata={"states_computed": states_computed, "table_shape": table.shape},
            )

        path = tour_from_order(self._reconstruct(table, full_mask, best_last), origin)
        elapsed = current_time() - start_time
        logger.debug("Held-Karp n=%d cost=%d states=%d", n, best_cost, states_computed)
        return AlgorithmResult(
            name=self.name,
            path=path,
            cost=int(best_cost),
            elapsed=elapsed,
            status="complete",
            metadata={"states_computed": states_computed, "table_shape": table.shape},
        )

    @staticmethod
    def _reconstruct(table: PartialPathTable, mask: int, last: int) -> List[int]:
        order = []
        while mask:
            order.append(last)
            previous = table.predecessor(last, mask)
            mask &= ~(1 << last)
            last = previous
        return list(reversed(order))


__all__ = ["HeldKarpSolver", "PartialPathTable", "UNSOLVED"]
