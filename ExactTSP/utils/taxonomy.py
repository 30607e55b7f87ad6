from __future__ import annotations

from enum import Enum


class AlgorithmFamily(str, Enum):
    ENUMERATION = "enumeration"
    DYNAMIC_PROGRAMMING = "dynamic_programming"
    BRANCH_AND_BOUND = "branch_and_bound"
    AUTO = "exacttsp"


__all__ = ["AlgorithmFamily"]
