from __future__ import annotations

import logging
from typing import Any, List, Sequence

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


def _order_cost(rows: List[List[int]], origin: int, order: Sequence[int]) -> int:
    cost = rows[origin][order[0]]
    for k in range(len(order) - 1):
        cost += rows[order[k]][order[k + 1]]
    return cost + rows[order[-1]][origin]


class BruteForceSolver(BaseSolver):
    """Exhaustive search over every ordering of the non-origin vertices.

    Orderings are produced with Heap's algorithm: a counter per position drives
    exactly one swap per new permutation, so each of the ``(n - 1)!``
    permutations is visited once without being rebuilt from scratch.
    """

    name = "brute_force"
    family = AlgorithmFamily.ENUMERATION

    def solve(self, graph: Any, time_limit: float | None = None) -> AlgorithmResult:
        weights = self._weights(graph)
        start_time = current_time()
        n = weights.shape[0]
        origin = n - 1
        rows = weights.tolist()

        order = list(range(origin))
        best_cost = _order_cost(rows, origin, order)
        best_order = list(order)
        permutations_checked = 1

        counters = [0] * origin
        position = 1
        status = "complete"
        try:
            while position < origin:
                if counters[position] < position:
                    enforce_time_budget(start_time, time_limit)
                    swap_with = 0 if position % 2 == 0 else counters[position]
                    order[swap_with], order[position] = order[position], order[swap_with]
                    permutations_checked += 1
                    cost = _order_cost(rows, origin, order)
                    if cost < best_cost:
                        best_cost = cost
                        best_order = list(order)
                    counters[position] += 1
                    position = 1
                else:
                    counters[position] = 0
                    position += 1
        except TimeLimitExpired:
            status = "timeout"
            logger.debug("brute force stopped after %d permutations", permutations_checked)

        elapsed = current_time() - start_time
        logger.debug("brute force n=%d cost=%d permutations=%d", n, best_cost, permutations_checked)
        return AlgorithmResult(
            name=self.name,
            path=tour_from_order(best_order, origin),
            cost=int(best_cost),
            elapsed=elapsed,
            status=status,
            metadata={"permutations_checked": permutations_checked},
        )


__all__ = ["BruteForceSolver"]
