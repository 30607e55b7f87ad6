from __future__ import annotations

import logging
import time
from typing import Any, Dict

from ExactTSP.graph import as_weight_matrix
from ExactTSP.selectors import BaseSelector, get_selector
from ExactTSP.solvers import AlgorithmResult, get_solver

logger = logging.getLogger(__name__)


class ExactTSP:
    """End-to-end pipeline: instance size -> selector -> exact solver."""

    def __init__(self, selector: BaseSelector | None = None, selector_name: str = "rule_based", selector_kwargs: Dict | None = None):
        if selector is not None:
            self.selector = selector
        else:
            self.selector = get_selector(selector_name, **(selector_kwargs or {}))

    def solve(self, graph: Any, time_limit: float | None = None) -> AlgorithmResult:
        start_time = time.perf_counter()
        weights = as_weight_matrix(graph)
        n = weights.shape[0]
        solver_cls = self.selector.predict(n)
        solver = get_solver(solver_cls.name)
        logger.info("solving %d-vertex instance with %s", n, solver.name)

        result = solver.solve(weights, time_limit=time_limit)
        metadata = dict(result.metadata)
        metadata.update(
            {
                "selected_solver": solver.name,
                "n_vertices": n,
                "wallclock_total": time.perf_counter() - start_time,
            }
        )
        return AlgorithmResult(
            name=result.name,
            path=result.path,
            cost=result.cost,
            elapsed=result.elapsed,
            status=result.status,
            metadata=metadata,
        )


__all__ = ["ExactTSP"]
