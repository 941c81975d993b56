# pivotlab/planning/snapshots.py
"""
搜索过程快照
每一步都生成一份完全独立的拷贝 (frozenset / tuple / 只读映射)，
调用方可以任意保留历史快照，不会被后续步骤修改。
"""
from dataclasses import dataclass
from enum import Enum
from typing import FrozenSet, Mapping, Optional, Tuple


class BaselinePhase(Enum):
    FRONTIER_SORTED = "Frontier Sorted"
    PROCESSING = "Processing Node"
    FOUND = "Destination Reached!"
    UNREACHABLE = "Target Unreachable!"


class HierarchicalAction(Enum):
    SORTING_LEADERS = "Sorting Leaders (Fast)"
    CHECKING_LEADER = "Checking Group Leader"
    FILLING_NEIGHBORHOOD = "Filling Neighborhood"
    TARGET_FOUND = "Target Found! Resolving Path..."
    RESOLVING_SEGMENT = "Resolving Segment"
    RESOLVED = "Destination Reached! Path Resolved."
    UNREACHABLE = "Target Unreachable!"


@dataclass(frozen=True)
class FrontierEntry:
    node: int
    distance: float


@dataclass(frozen=True)
class ClusterFrontierEntry:
    cluster_id: int
    distance: float


@dataclass(frozen=True)
class BaselineState:
    visited: FrozenSet[int]
    frontier: Tuple[FrontierEntry, ...]
    distances: Mapping[int, float]
    phase: BaselinePhase
    step: int
    current: Optional[int] = None
    path: Tuple[int, ...] = ()
    finished: bool = False


@dataclass(frozen=True)
class HierarchicalState:
    visited: FrozenSet[int]
    active_clusters: FrozenSet[int]
    processed_clusters: FrozenSet[int]
    cluster_frontier: Tuple[ClusterFrontierEntry, ...]
    phase: HierarchicalAction
    current_action: str
    step: int
    current_cluster: Optional[int] = None
    path: Tuple[int, ...] = ()
    resolved_path: Tuple[int, ...] = ()
    # 回退成 [from, to] 的分段下标，非空时 resolved_path 不保证是真实路径
    inexact_segments: Tuple[int, ...] = ()
    finished: bool = False

    @property
    def is_exact(self) -> bool:
        return not self.inexact_segments
