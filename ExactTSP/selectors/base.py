from __future__ import annotations

from ExactTSP.solvers.base import BaseSolver


class BaseSelector:
    """Interface for choosing an exact solver for an instance."""

    def predict(self, n_vertices: int) -> type[BaseSolver]:
        raise NotImplementedError


__all__ = ["BaseSelector"]
