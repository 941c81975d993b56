# pivotlab/planning/planners/hierarchical.py
from typing import Dict, List, Optional, Set

from pivotlab.graph.base import GraphBase
from pivotlab.planning.interfaces import ISearchObserver
from pivotlab.planning.planners.base import SteppedSearch
from pivotlab.planning.planners.a_star import AStarSegmentResolver
from pivotlab.planning.snapshots import HierarchicalState, HierarchicalAction, ClusterFrontierEntry


class _ClusterItem:
    __slots__ = ("cluster_id", "distance")

    def __init__(self, cluster_id: int, distance: float):
        self.cluster_id = cluster_id
        self.distance = distance


class HierarchicalSearch(SteppedSearch[HierarchicalState]):
    """
    簇 + 枢纽 两层搜索

    在簇上做和基线相同的 "排序 -> 取最小 -> 处理" 循环，但 frontier 只装簇，规模小得多：
    1. 排序簇 frontier -> SORTING_LEADERS
    2. 取最小簇；已处理的静默丢弃；否则标记 -> CHECKING_LEADER
    3. 整簇节点一次性标记为已访问 -> FILLING_NEIGHBORHOOD
    4. 命中目标簇：回溯簇路线，映射为 [起点, 各簇枢纽..., 终点] -> TARGET_FOUND，
       然后逐段用 A* 解析，每段一个 RESOLVING_SEGMENT 快照，最后 RESOLVED 终止
    5. 否则扫描簇内所有节点的出边，得到未处理的相邻簇，以 distance + 1 入队

    簇之间的邻接关系不预先计算，每次展开时现扫。
    依赖 graph 已经过 preprocess (node.cluster_id / node.is_pivot)。
    """

    def __init__(self,
                 graph: GraphBase,
                 source: int,
                 target: int,
                 resolver: Optional[AStarSegmentResolver] = None,
                 observer: Optional[ISearchObserver] = None):
        super().__init__(graph, source, target, observer)

        source_cluster = graph.node(source).cluster_id
        self.target_cluster = graph.node(target).cluster_id
        if source_cluster is None or self.target_cluster is None:
            raise ValueError("Graph has not been clustered, run preprocess() first")

        self.resolver = resolver if resolver is not None else AStarSegmentResolver(graph, observer=self.observer)

        # 簇成员 (插入顺序) 与枢纽，从节点标注中读出
        self._members: Dict[int, List[int]] = {}
        self._pivots: Dict[int, int] = {}
        for node in graph.nodes:
            self._members.setdefault(node.cluster_id, []).append(node.id)
            if node.is_pivot:
                self._pivots[node.cluster_id] = node.id

        self.visited: Set[int] = set()
        self.active_clusters: Set[int] = {source_cluster}
        self.processed_clusters: Set[int] = set()
        self.cluster_frontier: List[_ClusterItem] = [_ClusterItem(source_cluster, 0)]
        self.came_from: Dict[int, int] = {}

        self._current: Optional[_ClusterItem] = None
        self._path: List[int] = []
        self._resolved: List[int] = []
        self._inexact: List[int] = []
        self._segment = 0   # 下一个待解析的分段下标
        self._phase = "sort"

        self.observer.log(f"Start hierarchical search: {source} -> {target}", level='INFO',
                          payload={'source_cluster': source_cluster,
                                   'target_cluster': self.target_cluster,
                                   'clusters': len(self._members)})

    @property
    def segment_count(self) -> int:
        return max(len(self._path) - 1, 0)

    def _step(self) -> HierarchicalState:
        while True:
            if self._phase == "sort":
                if not self.cluster_frontier:
                    self.observer.log("Cluster frontier exhausted, target unreachable.", level='WARN')
                    self._phase = "done"
                    self._current = None
                    return self._snapshot(HierarchicalAction.UNREACHABLE, finished=True)

                self.cluster_frontier.sort(key=lambda item: item.distance)
                self._phase = "extract"
                return self._snapshot(HierarchicalAction.SORTING_LEADERS)

            if self._phase == "extract":
                item = self.cluster_frontier.pop(0)
                if item.cluster_id in self.processed_clusters:
                    self._phase = "sort"
                    continue

                self.processed_clusters.add(item.cluster_id)
                self.active_clusters.discard(item.cluster_id)
                self._current = item
                self.observer.record_current_expansion(item.cluster_id)
                self._phase = "fill"
                return self._snapshot(HierarchicalAction.CHECKING_LEADER)

            if self._phase == "fill":
                # 整个簇一次点亮
                self.visited.update(self._members.get(self._current.cluster_id, []))
                self._phase = "route" if self._current.cluster_id == self.target_cluster else "expand"
                return self._snapshot(HierarchicalAction.FILLING_NEIGHBORHOOD)

            if self._phase == "expand":
                self._expand(self._current)
                self._phase = "sort"
                continue

            if self._phase == "route":
                self._path = self._coarse_route()
                self._phase = "resolve"
                self.observer.log(f"Target cluster reached, coarse route has {len(self._path)} nodes.",
                                  level='INFO', payload={'path': list(self._path)})
                return self._snapshot(HierarchicalAction.TARGET_FOUND)

            if self._phase == "resolve":
                # 上一次宣布的分段在这里真正解析
                if self._segment > 0:
                    self._resolve_segment(self._segment - 1)

                if self._segment < self.segment_count:
                    self._segment += 1
                    self._current = None
                    return self._snapshot(HierarchicalAction.RESOLVING_SEGMENT,
                                          label=f"Resolving Segment {self._segment}/{self.segment_count}...")

                self._phase = "done"
                self._current = None
                if self._inexact:
                    self.observer.log("Resolved path contains fallback segments.", level='WARN',
                                      payload={'segments': list(self._inexact)})
                return self._snapshot(HierarchicalAction.RESOLVED, finished=True)

            raise RuntimeError(f"Invalid search phase: {self._phase}")

    def _expand(self, item: _ClusterItem):
        """扫描簇内所有节点的出边，按首次出现顺序收集未处理的相邻簇"""
        neighbor_clusters: Dict[int, None] = {}
        for node_id in self._members.get(item.cluster_id, []):
            for edge in self.graph.neighbors(node_id):
                cid = self.graph.node(edge.node).cluster_id
                if cid != item.cluster_id and cid not in self.processed_clusters:
                    neighbor_clusters[cid] = None

        for cid in neighbor_clusters:
            if cid in self.active_clusters:
                continue
            self.active_clusters.add(cid)
            self.came_from[cid] = item.cluster_id
            # 簇间统一按 1 跳计费
            self.cluster_frontier.append(_ClusterItem(cid, item.distance + 1))
            self.observer.record_frontier_entry(cid, item.distance + 1)

    def _coarse_route(self) -> List[int]:
        clusters = [self.target_cluster]
        curr = self.target_cluster
        while curr in self.came_from:
            curr = self.came_from[curr]
            clusters.append(curr)
        clusters.reverse()

        # 起点 + 途经各簇的枢纽 + 终点 (起终点不一定是所在簇的枢纽)
        route = [self.source]
        for cid in clusters:
            pivot = self._pivots.get(cid)
            if pivot is not None:
                route.append(pivot)
        route.append(self.target)
        return route

    def _resolve_segment(self, index: int):
        u, v = self._path[index], self._path[index + 1]
        result = self.resolver.resolve_detailed(u, v)
        if not result.exact:
            self._inexact.append(index)

        segment = list(result.path)
        # 拼接时去掉重复的衔接节点
        if self._resolved:
            segment = segment[1:]
        self._resolved.extend(segment)

    def _snapshot(self, action: HierarchicalAction, label: Optional[str] = None, finished=False) -> HierarchicalState:
        return HierarchicalState(
            visited=frozenset(self.visited),
            active_clusters=frozenset(self.active_clusters),
            processed_clusters=frozenset(self.processed_clusters),
            cluster_frontier=tuple(ClusterFrontierEntry(i.cluster_id, i.distance) for i in self.cluster_frontier),
            phase=action,
            current_action=label if label is not None else action.value,
            step=self.steps,
            current_cluster=self._current.cluster_id if self._current is not None else None,
            path=tuple(self._path),
            resolved_path=tuple(self._resolved),
            inexact_segments=tuple(self._inexact),
            finished=finished,
        )


def run_hierarchical_search(graph: GraphBase,
                            source: int,
                            target: int,
                            observer: Optional[ISearchObserver] = None) -> HierarchicalSearch:
    """层次搜索入口：graph 必须已经 preprocess"""
    return HierarchicalSearch(graph, source, target, observer=observer)
