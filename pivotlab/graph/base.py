# pivotlab/graph/base.py
from abc import ABC, abstractmethod
from typing import List, Tuple

import numpy as np

from pivotlab.types import Node, Edge


class GraphBase(ABC):
    """
    加权有向图抽象基类
    约定：节点 id 稠密且从 0 开始；邻接关系只读，搜索引擎不会修改它。
    """

    @property
    @abstractmethod
    def nodes(self) -> List[Node]:
        """按 id 顺序排列的节点列表 (插入顺序即 id 顺序)"""
        pass

    @property
    @abstractmethod
    def positions(self) -> np.ndarray:
        """(n, 2) 的坐标矩阵，主要用于可视化和最近邻查询"""
        pass

    @abstractmethod
    def node(self, node_id: int) -> Node:
        """按 id 取节点，不存在时抛出 ValueError"""
        pass

    @abstractmethod
    def has_node(self, node_id: int) -> bool:
        pass

    @abstractmethod
    def neighbors(self, node_id: int) -> List[Edge]:
        """
        [关键接口] 返回节点的全部出边
        没有出边的节点返回空列表
        """
        pass

    @abstractmethod
    def nearest_node(self, x: float, y: float) -> int:
        """返回离物理坐标最近的节点 id"""
        pass

    def __len__(self) -> int:
        return len(self.nodes)

    @property
    def edges(self) -> List[Tuple[int, int, float]]:
        """展开后的有向边列表 (u, v, w)"""
        return [(node.id, e.node, e.weight) for node in self.nodes for e in self.neighbors(node.id)]

    def path_cost(self, path: List[int]) -> float:
        """
        计算路径上所有边权之和。
        如果相邻两点之间不存在边，抛出 ValueError。
        """
        total = 0.0
        for u, v in zip(path, path[1:]):
            weights = [e.weight for e in self.neighbors(u) if e.node == v]
            if not weights:
                raise ValueError(f"No edge {u} -> {v} in graph")
            # 平行边取最小的那条
            total += min(weights)
        return total

    def is_walk(self, path: List[int]) -> bool:
        """路径中每一对相邻节点之间都存在真实边"""
        if not path:
            return False
        if not all(self.has_node(n) for n in path):
            return False
        return all(any(e.node == v for e in self.neighbors(u)) for u, v in zip(path, path[1:]))
