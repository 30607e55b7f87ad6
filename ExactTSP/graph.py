from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

import numpy as np

# Sentinel for forbidden edges. Sums of a few of these stay inside int64.
INFINITY = int(np.iinfo(np.int64).max // 4)


class InvalidInstanceError(ValueError):
    """Raised when an ATSP instance violates the solver preconditions."""


@runtime_checkable
class GraphView(Protocol):
    """Read-only view of a complete directed graph with integer edge weights."""

    def vertex_count(self) -> int:
        ...

    def edge_weight(self, i: int, j: int) -> int:
        ...


class MatrixGraph:
    """GraphView backed by a dense weight matrix.

    The matrix is copied and write-protected, so the view stays immutable for
    the lifetime of any solve. Vertex ``n - 1`` is the tour origin.
    """

    def __init__(self, weights: Any):
        matrix = as_weight_matrix(weights)
        matrix.setflags(write=False)
        self._weights = matrix

    @property
    def origin(self) -> int:
        return self._weights.shape[0] - 1

    @property
    def weights(self) -> np.ndarray:
        return self._weights

    def vertex_count(self) -> int:
        return int(self._weights.shape[0])

    def edge_weight(self, i: int, j: int) -> int:
        return int(self._weights[i, j])

    def __repr__(self) -> str:
        return f"MatrixGraph(n={self.vertex_count()})"


def _rows_from_view(graph: GraphView) -> list[list[Any]]:
    n = int(graph.vertex_count())
    if n < 2:
        raise InvalidInstanceError(f"ATSP instance needs at least 2 vertices, got {n}")
    return [[0 if i == j else graph.edge_weight(i, j) for j in range(n)] for i in range(n)]


def as_weight_matrix(graph: Any) -> np.ndarray:
    """Return a fresh ``int64`` weight matrix for ``graph``.

    ``graph`` may be a :class:`GraphView` or anything ``numpy`` can turn into a
    square 2-D array. Diagonal entries are ignored and zeroed in the result.
    """
    if isinstance(graph, MatrixGraph):
        return graph.weights.copy()
    if isinstance(graph, GraphView):
        graph = _rows_from_view(graph)

    try:
        raw = np.array(graph)
    except (TypeError, ValueError) as exc:
        raise InvalidInstanceError(f"Cannot interpret graph as a weight matrix: {exc}") from exc

    if raw.ndim != 2 or raw.shape[0] != raw.shape[1]:
        raise InvalidInstanceError(f"Weight matrix must be square, got shape {raw.shape}")
    n = raw.shape[0]
    if n < 2:
        raise InvalidInstanceError(f"ATSP instance needs at least 2 vertices, got {n}")
    if raw.dtype.kind not in "biuf":
        raise InvalidInstanceError(f"Edge weights must be numeric, got dtype {raw.dtype}")

    off_diagonal = ~np.eye(n, dtype=bool)
    values = raw[off_diagonal]
    if raw.dtype.kind == "f":
        if not np.all(np.isfinite(values)):
            raise InvalidInstanceError("Off-diagonal weights must be finite")
        if np.any(values != np.round(values)):
            raise InvalidInstanceError("Edge weights must be integers")
    if np.any(values < 0):
        raise InvalidInstanceError("Edge weights must be non-negative")
    if int(values.max()) * n >= INFINITY:
        raise InvalidInstanceError("Edge weights are too large for exact integer accumulation")

    matrix = np.zeros((n, n), dtype=np.int64)
    matrix[off_diagonal] = values.astype(np.int64)
    return matrix


__all__ = [
    "INFINITY",
    "GraphView",
    "InvalidInstanceError",
    "MatrixGraph",
    "as_weight_matrix",
]
