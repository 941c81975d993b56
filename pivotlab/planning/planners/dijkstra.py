# pivotlab/planning/planners/dijkstra.py
import math
from types import MappingProxyType
from typing import Dict, List, Optional, Set

from pivotlab.graph.base import GraphBase
from pivotlab.planning.interfaces import ISearchObserver
from pivotlab.planning.planners.base import SteppedSearch
from pivotlab.planning.snapshots import BaselineState, BaselinePhase, FrontierEntry


class _FrontierItem:
    """frontier 内部条目，距离可以原地更新"""
    __slots__ = ("node", "distance")

    def __init__(self, node: int, distance: float):
        self.node = node
        self.distance = distance


class DijkstraSearch(SteppedSearch[BaselineState]):
    """
    逐步执行的 Dijkstra (基线算法)

    每轮外层循环：
    1. 对整个 frontier 做一次完整的稳定排序 -> 快照 FRONTIER_SORTED
    2. 取出最小项；已访问过的陈旧项直接丢弃，不产生快照；否则标记访问 -> 快照 PROCESSING
    3. 命中目标 -> 回溯路径，终止快照 FOUND
    4. 否则松弛所有未访问邻居 (不产生快照)

    注意：这里故意不用堆。每轮全量排序正是要可视化的开销。
    """

    def __init__(self,
                 graph: GraphBase,
                 source: int,
                 target: int,
                 observer: Optional[ISearchObserver] = None):
        super().__init__(graph, source, target, observer)

        self.distances: Dict[int, float] = {n.id: math.inf for n in graph.nodes}
        self.distances[source] = 0.0
        self.visited: Set[int] = set()
        self.previous: Dict[int, int] = {}

        # 每个节点在 frontier 中至多出现一次，_entries 用于原地更新
        self.frontier: List[_FrontierItem] = [_FrontierItem(source, 0.0)]
        self._entries: Dict[int, _FrontierItem] = {source: self.frontier[0]}

        self._current: Optional[int] = None
        self._phase = "sort"

        self.observer.log(f"Start Dijkstra: {source} -> {target}", level='INFO',
                          payload={'source': source, 'target': target, 'nodes': len(graph)})

    def _step(self) -> BaselineState:
        while True:
            if self._phase == "sort":
                if not self.frontier:
                    self.observer.log("Frontier exhausted, target unreachable.", level='WARN')
                    self._phase = "done"
                    self._current = None
                    return self._snapshot(BaselinePhase.UNREACHABLE, frontier=(), finished=True)

                # list.sort 是稳定排序，距离相同时保持插入顺序
                self.frontier.sort(key=lambda item: item.distance)
                self._phase = "extract"
                return self._snapshot(BaselinePhase.FRONTIER_SORTED)

            if self._phase == "extract":
                item = self.frontier.pop(0)
                self._entries.pop(item.node, None)

                if item.node in self.visited:
                    # 陈旧项，静默丢弃，回到排序
                    self._phase = "sort"
                    continue

                self.visited.add(item.node)
                self._current = item.node
                self.observer.record_current_expansion(item.node)
                self._phase = "found" if item.node == self.target else "relax"
                return self._snapshot(BaselinePhase.PROCESSING)

            if self._phase == "found":
                path = self._reconstruct_path()
                self.observer.log(f"Target reached, path length {len(path)} nodes.", level='INFO',
                                  payload={'cost': self.distances[self.target], 'visited': len(self.visited)})
                self._phase = "done"
                return self._snapshot(BaselinePhase.FOUND, frontier=(), path=tuple(path), finished=True)

            if self._phase == "relax":
                self._relax(self._current)
                self._phase = "sort"
                continue

            raise RuntimeError(f"Invalid search phase: {self._phase}")

    def _relax(self, u: int):
        d = self.distances[u]
        for edge in self.graph.neighbors(u):
            v = edge.node
            if v in self.visited:
                continue

            alt = d + edge.weight
            if alt < self.distances[v]:
                self.distances[v] = alt
                self.previous[v] = u

                existing = self._entries.get(v)
                if existing is not None:
                    existing.distance = alt
                else:
                    item = _FrontierItem(v, alt)
                    self.frontier.append(item)
                    self._entries[v] = item
                self.observer.record_frontier_entry(v, alt)

    def _reconstruct_path(self) -> List[int]:
        path = []
        curr = self.target
        while curr is not None:
            path.append(curr)
            curr = self.previous.get(curr)
        return path[::-1]

    def _snapshot(self, phase: BaselinePhase, frontier=None, path=(), finished=False) -> BaselineState:
        if frontier is None:
            frontier = tuple(FrontierEntry(item.node, item.distance) for item in self.frontier)
        return BaselineState(
            visited=frozenset(self.visited),
            frontier=frontier,
            distances=MappingProxyType(dict(self.distances)),
            phase=phase,
            step=self.steps,
            current=self._current,
            path=path,
            finished=finished,
        )


def run_baseline_search(graph: GraphBase,
                        source: int,
                        target: int,
                        observer: Optional[ISearchObserver] = None) -> DijkstraSearch:
    """基线搜索入口：返回一个新的逐步搜索实例"""
    return DijkstraSearch(graph, source, target, observer)
