# pivotlab/graph/clustering.py
import math
from dataclasses import dataclass, field
from typing import Dict, List, Tuple

from .base import GraphBase


@dataclass
class ClusterIndex:
    """预处理结果: 簇 -> 成员节点 id 列表 (插入顺序)，簇 -> 枢纽节点 id"""
    clusters: Dict[int, List[int]] = field(default_factory=dict)
    pivots: Dict[int, int] = field(default_factory=dict)

    def members(self, cluster_id: int) -> List[int]:
        return self.clusters.get(cluster_id, [])


def cluster_bin(x: float, y: float, cell_size: float) -> Tuple[int, int]:
    """物理坐标 -> 簇网格索引 (向下取整)"""
    return int(math.floor(x / cell_size)), int(math.floor(y / cell_size))


def preprocess(graph: GraphBase,
               cluster_span: int = 10,
               node_spacing: float = 20.0,
               cluster_id_stride: int = 100) -> ClusterIndex:
    """
    按空间分箱把节点划分成簇，并为每个簇选出一个枢纽 (pivot)。

    cluster_id = bin_y * cluster_id_stride + bin_x
    stride 必须严格大于 bin_x 的取值范围，否则不同的 (bin_x, bin_y) 会撞号，
    所以这里要求 0 <= bin_x < stride 且 bin_y >= 0，越界直接抛 ValueError。

    会原地写入 node.cluster_id / node.is_pivot。重复调用是安全的：
    参数不变时得到完全相同的枢纽。
    """
    if cluster_span <= 0:
        raise ValueError(f"cluster_span must be positive, got {cluster_span}")
    if node_spacing <= 0:
        raise ValueError(f"node_spacing must be positive, got {node_spacing}")
    if cluster_id_stride <= 0:
        raise ValueError(f"cluster_id_stride must be positive, got {cluster_id_stride}")

    cell_size = node_spacing * cluster_span
    index = ClusterIndex()

    # 1. 分箱
    for node in graph.nodes:
        bx, by = cluster_bin(node.x, node.y, cell_size)
        if not (0 <= bx < cluster_id_stride) or by < 0:
            raise ValueError(
                f"Node {node.id} at ({node.x:.1f}, {node.y:.1f}) falls in bin ({bx}, {by}), "
                f"outside the range supported by cluster_id_stride={cluster_id_stride}"
            )
        cid = by * cluster_id_stride + bx
        node.cluster_id = cid
        node.is_pivot = False
        index.clusters.setdefault(cid, []).append(node.id)

    # 2. 取成员列表的中间元素作为枢纽
    for cid, members in index.clusters.items():
        pivot_id = members[len(members) // 2]
        graph.node(pivot_id).is_pivot = True
        index.pivots[cid] = pivot_id

    return index
