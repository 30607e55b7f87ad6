#!/usr/bin/env python3
from __future__ import annotations

import argparse
import hashlib
import json
import pathlib
import sys
from dataclasses import asdict
from typing import Iterable

import numpy as np

PROJECT_ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from ExactTSP import SOLVER_REGISTRY, get_solver, random_instance


def parse_args(raw_args: Iterable[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Cross-check the exact ATSP solvers on random instances.")
    parser.add_argument(
        "--sizes",
        nargs="+",
        type=int,
        default=[2, 3, 4, 5, 6, 7, 8, 9],
        help="Vertex counts to generate.",
    )
    parser.add_argument(
        "--instances-per-size",
        type=int,
        default=5,
        help="How many instances to generate per vertex count.",
    )
    parser.add_argument(
        "--max-weight",
        type=int,
        default=100,
        help="Edge weights drawn uniformly from [1, max-weight].",
    )
    parser.add_argument(
        "--symmetric",
        action="store_true",
        help="Generate symmetric instances instead of asymmetric ones.",
    )
    parser.add_argument(
        "--solvers",
        nargs="+",
        choices=sorted(SOLVER_REGISTRY.keys()),
        help="Subset of solvers to execute (default: all).",
    )
    parser.add_argument(
        "--time-limit",
        type=float,
        default=None,
        help="Per-solver time budget in seconds (default: unlimited).",
    )
    parser.add_argument(
        "--results",
        type=pathlib.Path,
        default=None,
        help="Optional destination JSONL file for solver outcomes.",
    )
    parser.add_argument("--seed", type=int, default=42, help="Random seed (default: 42).")
    return parser.parse_args(raw_args)


def instance_id(weights: np.ndarray) -> str:
    return hashlib.sha1(np.ascontiguousarray(weights).tobytes()).hexdigest()


def main(raw_args: Iterable[str] | None = None) -> int:
    args = parse_args(raw_args)
    rng = np.random.default_rng(args.seed)
    selected = args.solvers or list(SOLVER_REGISTRY.keys())
    disagreements = 0
    runs = 0

    out = None
    if args.results is not None:
        args.results.parent.mkdir(parents=True, exist_ok=True)
        out = args.results.open("a", encoding="utf-8")
    try:
        for size in args.sizes:
            for iteration in range(1, args.instances_per_size + 1):
                weights = random_instance(size, rng, max_weight=args.max_weight, symmetric=args.symmetric)
                problem_id = instance_id(weights)
                costs: dict[str, int] = {}
                for solver_name in selected:
                    result = get_solver(solver_name).solve(weights, time_limit=args.time_limit)
                    runs += 1
                    print(
                        f"{solver_name} on problem {problem_id[:12]} (vertices={size}, instance={iteration}) "
                        f"-> {result.status} cost={result.cost} time={result.elapsed:.4f}s"
                    )
                    if result.status == "complete" and result.cost is not None:
                        costs[solver_name] = result.cost
                    if out is not None:
                        record = asdict(result)
                        record.update({"algorithm": solver_name, "problem_id": problem_id, "num_vertices": size})
                        out.write(json.dumps(record))
                        out.write("\n")
                if len(set(costs.values())) > 1:
                    disagreements += 1
                    print(f"  MISMATCH on problem {problem_id[:12]}: {costs}")
    finally:
        if out is not None:
            out.close()

    print(f"Completed {runs} runs, {disagreements} disagreements.")
    return 1 if disagreements else 0


if __name__ == "__main__":
    raise SystemExit(main())
