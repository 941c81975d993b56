# pivotlab/graph/road_graph.py
import math
from typing import Dict, List, Optional

import numpy as np
from scipy.spatial import cKDTree

from pivotlab.types import Node, Edge
from .base import GraphBase


class RoadGraph(GraphBase):
    """
    合成路网
    节点只能追加，id 按插入顺序稠密分配；生成器负责建边，建完后对搜索只读。
    """

    def __init__(self):
        self._nodes: List[Node] = []
        self._adjacency: Dict[int, List[Edge]] = {}
        self._kdtree: Optional[cKDTree] = None  # 懒构建，加点后失效

    @property
    def nodes(self) -> List[Node]:
        return self._nodes

    @property
    def positions(self) -> np.ndarray:
        if not self._nodes:
            return np.zeros((0, 2), dtype=float)
        return np.array([(n.x, n.y) for n in self._nodes], dtype=float)

    def add_node(self, x: float, y: float, is_highway: bool = False) -> Node:
        node = Node(id=len(self._nodes), x=float(x), y=float(y), is_highway=is_highway)
        self._nodes.append(node)
        self._adjacency[node.id] = []
        self._kdtree = None
        return node

    def add_edge(self, u: int, v: int, weight: float, bidirectional: bool = True):
        if not (self.has_node(u) and self.has_node(v)):
            raise ValueError(f"Both endpoints must exist: {u} -> {v}")
        if not (weight > 0 and math.isfinite(weight)):
            raise ValueError(f"Edge weight must be positive and finite, got {weight}")

        self._adjacency[u].append(Edge(v, float(weight)))
        if bidirectional:
            self._adjacency[v].append(Edge(u, float(weight)))

    def node(self, node_id: int) -> Node:
        if not self.has_node(node_id):
            raise ValueError(f"Node {node_id} is not in the graph")
        return self._nodes[node_id]

    def has_node(self, node_id: int) -> bool:
        return isinstance(node_id, (int, np.integer)) and 0 <= node_id < len(self._nodes)

    def neighbors(self, node_id: int) -> List[Edge]:
        return self._adjacency.get(node_id, [])

    def nearest_node(self, x: float, y: float) -> int:
        if not self._nodes:
            raise ValueError("Graph is empty")
        if self._kdtree is None:
            self._kdtree = cKDTree(self.positions)
        _, idx = self._kdtree.query((x, y))
        return int(idx)

    def validate(self):
        """
        检查图不变量:
        1. 邻接表中出现的每个 id 都对应已有节点
        2. 所有边权为正
        """
        for u, edges in self._adjacency.items():
            if not self.has_node(u):
                raise ValueError(f"Adjacency references unknown node {u}")
            for e in edges:
                if not self.has_node(e.node):
                    raise ValueError(f"Edge {u} -> {e.node} references unknown node")
                if e.weight <= 0:
                    raise ValueError(f"Edge {u} -> {e.node} has non-positive weight {e.weight}")

    def __repr__(self):
        n_edges = sum(len(v) for v in self._adjacency.values())
        return f"RoadGraph(nodes={len(self._nodes)}, directed_edges={n_edges})"
