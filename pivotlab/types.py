# pivotlab/types.py
from dataclasses import dataclass
from typing import Optional


@dataclass
class Node:
    """
    路网节点
    id 由图在构造时统一分配 (从 0 开始的稠密整数)，之后不再变化。
    cluster_id / is_pivot 只由聚类预处理写入一次。
    """
    id: int
    x: float             # [px] 画布坐标
    y: float             # [px]
    cluster_id: Optional[int] = None
    is_pivot: bool = False
    is_highway: bool = False   # 仅供渲染层使用，搜索算法不读取


@dataclass(frozen=True)
class Edge:
    """有向出边: 当前节点 -> node，代价 weight (> 0)"""
    node: int
    weight: float
