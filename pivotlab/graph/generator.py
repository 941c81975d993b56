# pivotlab/graph/generator.py
from dataclasses import dataclass
from typing import Optional

import numpy as np

from .road_graph import RoadGraph


@dataclass
class CityGraphConfig:
    """城市网格生成参数"""
    width: int = 40                 # 网格列数
    height: int = 30                # 网格行数
    density: float = 0.7            # 每个格点生成节点的概率
    node_spacing: float = 20.0      # [px] 相邻格点间距
    jitter: float = 5.0             # [px] 坐标随机扰动上限
    weight_noise: float = 0.2       # 边权乘性噪声幅度，模拟路况: w * U(1-noise, 1+noise)
    highway_every: int = 0          # 每隔多少行标记一条快速路，0 表示不标记

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Grid size must be positive, got {self.width}x{self.height}")
        if not (0.0 < self.density <= 1.0):
            raise ValueError(f"density must be in (0, 1], got {self.density}")
        if self.node_spacing <= 0:
            raise ValueError(f"node_spacing must be positive, got {self.node_spacing}")
        if self.jitter < 0 or self.jitter >= self.node_spacing:
            raise ValueError("jitter must be in [0, node_spacing)")
        if not (0.0 <= self.weight_noise < 1.0):
            raise ValueError("weight_noise must be in [0, 1), weights must stay positive")
        if self.highway_every < 0:
            raise ValueError("highway_every must be >= 0")


class CityGraphGenerator:
    """
    合成路网生成器
    在规则网格上随机撒点 + 坐标扰动，然后连接 4 个方向的邻居 (右/下/两条对角)，
    所有边双向添加。相同 seed 生成完全相同的图。
    """

    # (dx, dy, 基础代价) 直行 1.0，斜行 1.414
    DIRECTIONS = [
        (1, 0, 1.0),
        (0, 1, 1.0),
        (1, 1, 1.414),
        (1, -1, 1.414),
    ]

    def __init__(self, config: Optional[CityGraphConfig] = None, seed: Optional[int] = None):
        self.config = config or CityGraphConfig()
        self.seed = seed
        self.rng = np.random.default_rng(seed)

    def generate(self) -> RoadGraph:
        cfg = self.config
        graph = RoadGraph()

        # 1. 撒点 (行优先，保证 id 顺序与网格扫描顺序一致)
        grid = np.full((cfg.height, cfg.width), -1, dtype=np.int64)
        occupied = self.rng.random((cfg.height, cfg.width)) < cfg.density
        for gy in range(cfg.height):
            for gx in range(cfg.width):
                if not occupied[gy, gx]:
                    continue
                x = gx * cfg.node_spacing + self.rng.random() * cfg.jitter
                y = gy * cfg.node_spacing + self.rng.random() * cfg.jitter
                is_highway = cfg.highway_every > 0 and gy % cfg.highway_every == 0
                grid[gy, gx] = graph.add_node(x, y, is_highway=is_highway).id

        # 2. 连边
        for gy in range(cfg.height):
            for gx in range(cfg.width):
                u = grid[gy, gx]
                if u < 0:
                    continue
                for dx, dy, base in self.DIRECTIONS:
                    nx, ny = gx + dx, gy + dy
                    if not (0 <= nx < cfg.width and 0 <= ny < cfg.height):
                        continue
                    v = grid[ny, nx]
                    if v < 0:
                        continue
                    noise = self.rng.uniform(1.0 - cfg.weight_noise, 1.0 + cfg.weight_noise)
                    graph.add_edge(int(u), int(v), base * noise, bidirectional=True)

        return graph
