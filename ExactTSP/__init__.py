from ExactTSP.core import ExactTSP
from ExactTSP.graph import INFINITY, GraphView, InvalidInstanceError, MatrixGraph, as_weight_matrix
from ExactTSP.instances import constant_instance, random_instance
from ExactTSP.selectors import BaseSelector, RuleBasedSelector, get_selector
from ExactTSP.solvers import (
    AlgorithmResult,
    BaseSolver,
    BranchAndBoundSolver,
    BruteForceSolver,
    HeldKarpSolver,
    SOLVER_FAMILIES,
    SOLVER_REGISTRY,
    SOLVER_SPECS,
    branch_and_bound,
    brute_force,
    get_solver,
    held_karp,
)
from ExactTSP.utils.taxonomy import AlgorithmFamily

__all__ = [
    "ExactTSP",
    "AlgorithmResult",
    "AlgorithmFamily",
    "BaseSelector",
    "BaseSolver",
    "BranchAndBoundSolver",
    "BruteForceSolver",
    "GraphView",
    "HeldKarpSolver",
    "INFINITY",
    "InvalidInstanceError",
    "MatrixGraph",
    "RuleBasedSelector",
    "SOLVER_FAMILIES",
    "SOLVER_REGISTRY",
    "SOLVER_SPECS",
    "as_weight_matrix",
    "branch_and_bound",
    "brute_force",
    "constant_instance",
    "get_selector",
    "get_solver",
    "held_karp",
    "random_instance",
]
