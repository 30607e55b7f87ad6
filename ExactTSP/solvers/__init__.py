from __future__ import annotations

from typing import Any

from ExactTSP.solvers.base import AlgorithmResult, BaseSolver, SolverSpec
from ExactTSP.solvers.exact import BranchAndBoundSolver, BruteForceSolver, HeldKarpSolver
from ExactTSP.utils.taxonomy import AlgorithmFamily

SOLVER_SPECS: dict[str, SolverSpec] = {
    BruteForceSolver.name: SolverSpec(
        name=BruteForceSolver.name,
        cls=BruteForceSolver,
        family=BruteForceSolver.family,
    ),
    HeldKarpSolver.name: SolverSpec(
        name=HeldKarpSolver.name,
        cls=HeldKarpSolver,
        family=HeldKarpSolver.family,
    ),
    BranchAndBoundSolver.name: SolverSpec(
        name=BranchAndBoundSolver.name,
        cls=BranchAndBoundSolver,
        family=BranchAndBoundSolver.family,
    ),
}

SOLVER_REGISTRY: dict[str, type[BaseSolver]] = {name: spec.cls for name, spec in SOLVER_SPECS.items()}
SOLVER_FAMILIES: dict[str, AlgorithmFamily] = {name: spec.family for name, spec in SOLVER_SPECS.items()}


def get_solver(name: str) -> BaseSolver:
    solver_cls = SOLVER_REGISTRY.get(name)
    if solver_cls is None:
        raise KeyError(f"Unknown solver: {name}")
    return solver_cls()


def brute_force(graph: Any) -> int:
    """Optimal tour cost by exhaustive permutation search."""
    return BruteForceSolver().solve_cost(graph)


def held_karp(graph: Any) -> int:
    """Optimal tour cost by Held-Karp dynamic programming."""
    return HeldKarpSolver().solve_cost(graph)


def branch_and_bound(graph: Any) -> int:
    """Optimal tour cost by reduced-matrix branch-and-bound."""
    return BranchAndBoundSolver().solve_cost(graph)


__all__ = [
    "AlgorithmResult",
    "BaseSolver",
    "SOLVER_FAMILIES",
    "SOLVER_REGISTRY",
    "SOLVER_SPECS",
    "AlgorithmFamily",
    "get_solver",
    "brute_force",
    "held_karp",
    "branch_and_bound",
    "BranchAndBoundSolver",
    "BruteForceSolver",
    "HeldKarpSolver",
]
