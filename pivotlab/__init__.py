# pivotlab/__init__.py

from pivotlab.graph.clustering import preprocess
from pivotlab.planning.planners.dijkstra import run_baseline_search
from pivotlab.planning.planners.hierarchical import run_hierarchical_search

__all__ = ["preprocess", "run_baseline_search", "run_hierarchical_search"]
