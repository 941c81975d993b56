# pivotlab/graph/__init__.py

from .base import GraphBase
from .road_graph import RoadGraph
from .generator import CityGraphGenerator, CityGraphConfig
from .clustering import ClusterIndex, preprocess

__all__ = [
    "GraphBase",
    "RoadGraph",
    "CityGraphGenerator",
    "CityGraphConfig",
    "ClusterIndex",
    "preprocess",
]
