# [关键] 全局配置定义

# pivotlab/config.py
from dataclasses import dataclass


@dataclass
class GlobalConfig:
    node_spacing: float = 20.0      # [px] 1 个网格单位对应的像素间距
    cluster_span: int = 10          # 每个簇覆盖的网格单位数
    cluster_id_stride: int = 100    # cluster_id = bin_y * stride + bin_x, 必须大于 bin_x 的取值范围
    max_ticks: int = 100000         # SimulationSession 的默认步数上限
    debug_mode: bool = False

    def __post_init__(self):
        if self.node_spacing <= 0:
            raise ValueError(f"node_spacing must be positive, got {self.node_spacing}")
        if self.cluster_span <= 0:
            raise ValueError(f"cluster_span must be positive, got {self.cluster_span}")
        if self.cluster_id_stride <= 0:
            raise ValueError(f"cluster_id_stride must be positive, got {self.cluster_id_stride}")
        if self.max_ticks <= 0:
            raise ValueError(f"max_ticks must be positive, got {self.max_ticks}")
