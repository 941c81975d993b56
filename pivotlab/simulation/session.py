# pivotlab/simulation/session.py
import math
from dataclasses import dataclass
from typing import Any, List, Optional

from pivotlab.planning.planners.base import SteppedSearch
from pivotlab.planning.snapshots import BaselineState, HierarchicalState


@dataclass
class SortingStats:
    """
    运行统计
    sorting_ops 近似每一步排序的开销: n * ln(n)，
    n 为基线的 frontier 大小，或层次搜索的活跃簇数量
    """
    steps: int = 0
    sorting_ops: int = 0

    def add(self, frontier_size: int):
        self.steps += 1
        self.sorting_ops += int(math.floor(frontier_size * math.log(max(frontier_size, 1))))


def sorting_load(snapshot: Any) -> int:
    """从快照中取出参与排序的规模"""
    if isinstance(snapshot, BaselineState):
        return len(snapshot.frontier)
    if isinstance(snapshot, HierarchicalState):
        return len(snapshot.active_clusters)
    raise TypeError(f"Unsupported snapshot type: {type(snapshot).__name__}")


class SimulationSession:
    """
    逐 tick 驱动一个搜索引擎
    每次 tick() 恰好拉取一个快照并累计统计，不含任何定时器，
    节奏由外部 (渲染循环 / 测试) 决定。
    """

    def __init__(self, engine: SteppedSearch, keep_history: bool = True):
        self.engine = engine
        self.keep_history = keep_history
        self.stats = SortingStats()
        self.history: List[Any] = []
        self.latest: Optional[Any] = None

    @property
    def finished(self) -> bool:
        return self.engine.done

    def tick(self) -> Optional[Any]:
        """拉取下一个快照；引擎已结束时返回 None"""
        snapshot, done = self.engine.advance()
        if done:
            return None

        self.stats.add(sorting_load(snapshot))
        self.latest = snapshot
        if self.keep_history:
            self.history.append(snapshot)
        return snapshot

    def run(self, max_ticks: int = 100000) -> Any:
        """一直 tick 到终止快照，超过 max_ticks 视为调用方错误"""
        for _ in range(max_ticks):
            snapshot = self.tick()
            if snapshot is None or snapshot.finished:
                return self.latest
        raise RuntimeError(f"Search did not finish within {max_ticks} ticks")
