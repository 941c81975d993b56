# pivotlab/planning/heuristics/__init__.py

from .base import Heuristic
from .euclidean import EuclideanHeuristic
from .zero import ZeroHeuristic


__all__ = [
    "Heuristic",
    "EuclideanHeuristic",
    "ZeroHeuristic",
]
