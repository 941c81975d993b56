# pivotlab/planning/heuristics/euclidean.py
import math
from pivotlab.types import Node
from .base import Heuristic


class EuclideanHeuristic(Heuristic):
    """
    欧氏距离启发式 (直线距离)
    scale 把像素距离换算成边权单位。
    生成器的边权约为 1 / 格点间距，所以 scale = 1 / node_spacing 时近似可采纳；
    默认 scale = 1.0 直接使用像素距离，更贪婪，但分段路径可能不是最短。
    """
    def __init__(self, scale: float = 1.0):
        if scale < 0:
            raise ValueError(f"scale must be >= 0, got {scale}")
        self.scale = scale

    def estimate(self, current: Node, goal: Node) -> float:
        return self.scale * math.hypot(current.x - goal.x, current.y - goal.y)
