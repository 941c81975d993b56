# pivotlab/planning/heuristics/zero.py
from pivotlab.types import Node
from .base import Heuristic


class ZeroHeuristic(Heuristic):
    """
    零启发式 (h=0).
    这将使 A* 退化为 Dijkstra 算法，保证分段最优，但展开的节点最多。
    """
    def estimate(self, current: Node, goal: Node) -> float:
        return 0.0
