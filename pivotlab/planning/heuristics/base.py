from abc import ABC, abstractmethod
from pivotlab.types import Node


class Heuristic(ABC):
    @abstractmethod
    def estimate(self, current: Node, goal: Node) -> float:
        """统一接口：只接受当前节点和目标节点"""
        pass
