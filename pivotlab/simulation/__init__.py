# pivotlab/simulation/__init__.py

from .session import SimulationSession, SortingStats, sorting_load

__all__ = ["SimulationSession", "SortingStats", "sorting_load"]
