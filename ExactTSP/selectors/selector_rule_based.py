from __future__ import annotations

from ExactTSP.selectors.base import BaseSelector
from ExactTSP.solvers import BranchAndBoundSolver, BruteForceSolver, HeldKarpSolver
from ExactTSP.solvers.base import BaseSolver


class RuleBasedSelector(BaseSelector):
    """Size thresholds: enumeration, then dynamic programming, then branch-and-bound."""

    def __init__(self, brute_force_limit: int = 8, held_karp_limit: int = 16):
        if brute_force_limit > held_karp_limit:
            raise ValueError("brute_force_limit must not exceed held_karp_limit")
        self.brute_force_limit = brute_force_limit
        self.held_karp_limit = held_karp_limit

    def predict(self, n_vertices: int) -> type[BaseSolver]:
        n = int(n_vertices)
        if n <= self.brute_force_limit:
            return BruteForceSolver
        # Held-Karp memory grows as n * 2**n.
        if n <= self.held_karp_limit:
            return HeldKarpSolver
        return BranchAndBoundSolver


__all__ = ["RuleBasedSelector"]
