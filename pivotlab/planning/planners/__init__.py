# pivotlab/planning/planners/__init__.py

from .base import SteppedSearch
from .dijkstra import DijkstraSearch, run_baseline_search
from .a_star import AStarSegmentResolver, SegmentResult, SegmentResolutionError, resolve_segment
from .hierarchical import HierarchicalSearch, run_hierarchical_search



__all__ = [
    "SteppedSearch",
    "DijkstraSearch",
    "run_baseline_search",
    "AStarSegmentResolver",
    "SegmentResult",
    "SegmentResolutionError",
    "resolve_segment",
    "HierarchicalSearch",
    "run_hierarchical_search",
]
