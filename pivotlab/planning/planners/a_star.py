# pivotlab/planning/planners/a_star.py
import heapq
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from pivotlab.graph.base import GraphBase
from pivotlab.planning.heuristics.base import Heuristic
from pivotlab.planning.heuristics.euclidean import EuclideanHeuristic
from pivotlab.planning.interfaces import ISearchObserver
from pivotlab.visualization.observers import EfficientObserver


class SegmentResolutionError(RuntimeError):
    """严格模式下，两点之间找不到路径"""


@dataclass(frozen=True)
class SegmentResult:
    path: Tuple[int, ...]
    cost: float        # 回退路径的 cost 为 inf
    exact: bool        # False 表示是 [from, to] 回退，而不是真实路径
    expanded: int


class AStarSegmentResolver:
    """
    点到点 A*，用于把簇级路线 (枢纽 -> 枢纽) 解析成真实的街道级路径。
    同步执行，不产生快照。

    工作流程：
    1. OpenSet 以 f = g + h 排序，h 为两点直线距离 (可替换启发式)
    2. 弹出 f 最小的节点，命中终点则沿 came_from 回溯
    3. 否则松弛所有出边，g 值变小则更新并重新入队

    OpenSet 耗尽时返回退化路径 [from, to]：这只是兜底，不是正确性保证，
    结果中 exact=False 会标出来。strict=True 时改为抛出 SegmentResolutionError。
    """

    def __init__(self,
                 graph: GraphBase,
                 heuristic: Optional[Heuristic] = None,
                 strict: bool = False,
                 observer: Optional[ISearchObserver] = None):
        self.graph = graph
        self.h_fn = heuristic if heuristic is not None else EuclideanHeuristic()
        self.strict = strict
        self.observer = observer if observer is not None else EfficientObserver()

    def resolve(self, from_id: int, to_id: int) -> List[int]:
        return list(self.resolve_detailed(from_id, to_id).path)

    def resolve_detailed(self, from_id: int, to_id: int) -> SegmentResult:
        if not (self.graph.has_node(from_id) and self.graph.has_node(to_id)):
            raise ValueError(f"Segment endpoints must exist in the graph: {from_id} -> {to_id}")

        goal = self.graph.node(to_id)

        # OpenSet: 存储 (f_score, node_id)，同 f 时按 id 决定顺序
        open_set: List[Tuple[float, int]] = []
        g_scores: Dict[int, float] = {from_id: 0.0}
        f_scores: Dict[int, float] = {from_id: self.h_fn.estimate(self.graph.node(from_id), goal)}
        came_from: Dict[int, int] = {}
        heapq.heappush(open_set, (f_scores[from_id], from_id))

        expanded = 0
        while open_set:
            current_f, current = heapq.heappop(open_set)

            # 已经有更好的 f 值入队过，这一项过期了
            if current_f > f_scores[current]:
                continue
            expanded += 1

            # A. 终止条件
            if current == to_id:
                path = self._reconstruct_path(came_from, current)
                for u, v in zip(path, path[1:]):
                    self.observer.record_edge(u, v)
                return SegmentResult(tuple(path), g_scores[current], True, expanded)

            # B. 扩展邻居
            for edge in self.graph.neighbors(current):
                tentative_g = g_scores[current] + edge.weight
                if tentative_g < g_scores.get(edge.node, float('inf')):
                    came_from[edge.node] = current
                    g_scores[edge.node] = tentative_g
                    f_val = tentative_g + self.h_fn.estimate(self.graph.node(edge.node), goal)
                    f_scores[edge.node] = f_val
                    heapq.heappush(open_set, (f_val, edge.node))

        if self.strict:
            raise SegmentResolutionError(f"No path between {from_id} and {to_id}")

        self.observer.log(f"Segment {from_id} -> {to_id} unresolved, falling back to direct hop.",
                          level='WARN', payload={'from': from_id, 'to': to_id, 'expanded': expanded})
        return SegmentResult((from_id, to_id), float('inf'), False, expanded)

    def _reconstruct_path(self, came_from: Dict[int, int], current: int) -> List[int]:
        path = [current]
        while current in came_from:
            current = came_from[current]
            path.append(current)
        return path[::-1]


def resolve_segment(graph: GraphBase, from_id: int, to_id: int) -> List[int]:
    """默认参数下的分段解析"""
    return AStarSegmentResolver(graph).resolve(from_id, to_id)
