import os

from pivotlab.config import GlobalConfig
from pivotlab.graph.generator import CityGraphConfig


class BenchmarkConfig:
    # --- Experiment Settings ---
    GRID_SIZES = [(10, 8), (20, 15), (40, 30)]   # (width, height) 网格规模梯度
    NUM_TRIALS = 5                  # Number of trials per grid size
    RANDOM_SEED_BASE = 1000         # Base seed for reproducibility
    DENSITY = 0.7

    # --- Output Paths ---
    _BASE_DIR = os.path.dirname(os.path.abspath(__file__))
    _PROJECT_DIR = os.path.dirname(_BASE_DIR)
    LOG_DIR = os.path.join(_PROJECT_DIR, "logs", "experiments")

    # --- Clustering ---
    GLOBAL_CONFIG = GlobalConfig(
        node_spacing=20.0,
        cluster_span=10,
        cluster_id_stride=100,
        max_ticks=200000,
    )

    # --- Graph Generation ---
    @staticmethod
    def graph_config(width: int, height: int) -> CityGraphConfig:
        return CityGraphConfig(
            width=width,
            height=height,
            density=BenchmarkConfig.DENSITY,
            node_spacing=BenchmarkConfig.GLOBAL_CONFIG.node_spacing,
            jitter=5.0,
            weight_noise=0.2,
            highway_every=5,
        )
