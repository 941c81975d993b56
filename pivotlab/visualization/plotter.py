# 绘图逻辑 (Matplotlib)

import matplotlib.pyplot as plt
from matplotlib.collections import LineCollection

from pivotlab.graph.base import GraphBase
from pivotlab.planning.snapshots import BaselineState, HierarchicalState


class SnapshotPlotter:
    """
    把一个搜索快照画到 matplotlib Axes 上
    底图 (边/快速路/枢纽) + 已访问 + frontier + 当前点 + 路径
    """
    def __init__(self, graph: GraphBase):
        self.graph = graph
        self.positions = graph.positions
        # 预先算好簇 -> 枢纽，层次搜索的 frontier 用枢纽位置表示
        self.pivots = {n.cluster_id: n.id for n in graph.nodes if n.is_pivot}

    def draw(self, snapshot, ax=None, title=None):
        # 先检查类型，避免在不支持的快照上画出半张图
        if not isinstance(snapshot, (BaselineState, HierarchicalState)):
            raise TypeError(f"Unsupported snapshot type: {type(snapshot).__name__}")
        if ax is None:
            _, ax = plt.subplots(figsize=(10, 8))

        # 1. 底图
        segments = [(self.positions[u], self.positions[v]) for u, v, _ in self.graph.edges if u < v]
        if segments:
            ax.add_collection(LineCollection(segments, colors='lightgray', linewidths=0.5, zorder=1))
        ax.scatter(self.positions[:, 0], self.positions[:, 1], c='gray', s=4, zorder=2)

        highways = [n.id for n in self.graph.nodes if n.is_highway]
        if highways:
            self._scatter(ax, highways, c='gold', s=6, label='Highway')

        if self.pivots:
            self._scatter(ax, list(self.pivots.values()), c='purple', s=18, marker='D', label='Pivot')

        # 2. 搜索进度
        if snapshot.visited:
            self._scatter(ax, sorted(snapshot.visited), c='tab:blue', s=8, alpha=0.5, label='Visited')

        if isinstance(snapshot, BaselineState):
            frontier = [entry.node for entry in snapshot.frontier]
            if snapshot.current is not None:
                self._scatter(ax, [snapshot.current], c='red', s=40, label='Current')
            action = snapshot.phase.value
        else:
            frontier = [self.pivots[c] for c in sorted(snapshot.active_clusters) if c in self.pivots]
            if snapshot.current_cluster is not None and snapshot.current_cluster in self.pivots:
                self._scatter(ax, [self.pivots[snapshot.current_cluster]], c='red', s=40, label='Current Leader')
            action = snapshot.current_action

        if frontier:
            self._scatter(ax, frontier, c='green', s=12, label='Frontier')

        # 3. 路径: 层次搜索的粗路线画虚线，真实路径画实线
        if isinstance(snapshot, HierarchicalState):
            if snapshot.path:
                self._line(ax, snapshot.path, 'm--', linewidth=1.5, label='Pivot Route')
            if snapshot.resolved_path:
                self._line(ax, snapshot.resolved_path, 'b-', linewidth=2.5, label='Resolved Path')
        elif snapshot.path:
            self._line(ax, snapshot.path, 'b-', linewidth=2.5, label='Path')

        ax.set_title(title or f"Step {snapshot.step}: {action}")
        ax.set_aspect('equal')
        ax.autoscale_view()
        ax.legend(loc='upper right', fontsize='small')
        return ax

    def save(self, snapshot, filename: str, dpi: int = 100):
        fig, ax = plt.subplots(figsize=(10, 8))
        self.draw(snapshot, ax=ax)
        fig.tight_layout()
        fig.savefig(filename, dpi=dpi)
        plt.close(fig)

    def _scatter(self, ax, node_ids, **kwargs):
        pts = self.positions[list(node_ids)]
        ax.scatter(pts[:, 0], pts[:, 1], zorder=3, **kwargs)

    def _line(self, ax, node_ids, fmt, **kwargs):
        pts = self.positions[list(node_ids)]
        ax.plot(pts[:, 0], pts[:, 1], fmt, zorder=4, **kwargs)
