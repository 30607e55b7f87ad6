from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Sequence, Type

import numpy as np

from ExactTSP.graph import as_weight_matrix
from ExactTSP.utils.taxonomy import AlgorithmFamily


@dataclass
class AlgorithmResult:
    """Container capturing the outcome of running an exact ATSP solver."""

    name: str
    path: List[int] | None
    cost: int | None
    elapsed: float
    status: str
    metadata: Dict[str, Any] = field(default_factory=dict)


class TimeLimitExpired(Exception):
    """Raised when an algorithm exceeds the allotted wall clock budget."""


def current_time() -> float:
    return time.perf_counter()


def remaining_budget(start_time: float, time_limit: float | None) -> float:
    if time_limit is None:
        return float("inf")
    return time_limit - (current_time() - start_time)


def enforce_time_budget(start_time: float, time_limit: float | None) -> None:
    if time_limit is not None and remaining_budget(start_time, time_limit) <= 0:
        raise TimeLimitExpired("Time budget exhausted")


def compute_cycle_cost(weights: np.ndarray | Sequence[Sequence[int]], cycle: Sequence[int]) -> int:
    """Compute tour cost. A closed cycle (first == last) is not double counted."""
    if not cycle:
        raise ValueError("Cannot cost an empty cycle")
    vertices = list(cycle)
    if len(vertices) > 1 and vertices[0] == vertices[-1]:
        vertices = vertices[:-1]
    cost = 0
    for i in range(len(vertices)):
        a = vertices[i]
        b = vertices[(i + 1) % len(vertices)]
        cost += int(weights[a][b])
    return cost


def tour_from_order(order: Sequence[int], origin: int) -> List[int]:
    """Closed tour leaving ``origin``, visiting ``order`` and returning."""
    return [origin, *order, origin]


def is_valid_tour(weights: np.ndarray, path: Sequence[int]) -> bool:
    """True if ``path`` is a closed Hamiltonian cycle over every vertex of ``weights``."""
    n = len(weights)
    if len(path) != n + 1 or path[0] != path[-1]:
        return False
    return sorted(path[:-1]) == list(range(n))


@dataclass(frozen=True)
class SolverSpec:
    """Metadata describing a solver implementation."""

    name: str
    cls: Type["BaseSolver"]
    family: AlgorithmFamily


class BaseSolver:
    """Common interface for the exact ATSP solvers.

    Every solver fixes vertex ``n - 1`` as the tour origin, works on its own
    copy of the weights and leaves the input graph untouched.
    """

    name: str
    family: AlgorithmFamily

    def solve(self, graph: Any, time_limit: float | None = None) -> AlgorithmResult:  # noqa: D401
        """Solve an ATSP instance given as a GraphView or a weight matrix."""
        raise NotImplementedError

    def solve_cost(self, graph: Any) -> int:
        """Return only the optimal tour cost."""
        result = self.solve(graph)
        if result.status != "complete" or result.cost is None:
            raise RuntimeError(f"{self.name} did not complete: {result.status}")
        return result.cost

    def __call__(self, graph: Any, time_limit: float | None = None) -> AlgorithmResult:
        return self.solve(graph, time_limit=time_limit)

    @staticmethod
    def _weights(graph: Any) -> np.ndarray:
        return as_weight_matrix(graph)


__all__ = [
    "AlgorithmResult",
    "AlgorithmFamily",
    "BaseSolver",
    "SolverSpec",
    "TimeLimitExpired",
    "compute_cycle_cost",
    "current_time",
    "enforce_time_budget",
    "is_valid_tour",
    "remaining_budget",
    "tour_from_order",
]
