import os
import time
import argparse
from typing import List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd
import matplotlib.pyplot as plt

from pivotlab.graph import CityGraphGenerator, preprocess
from pivotlab.planning.planners import run_baseline_search, run_hierarchical_search
from pivotlab.simulation import SimulationSession
from experiments.benchmark_config import BenchmarkConfig as cfg


def _run_engine(engine, max_ticks: int):
    """跑完一个引擎，返回 (终止快照, 统计, 耗时 ms)"""
    session = SimulationSession(engine, keep_history=False)
    t0 = time.perf_counter()
    final = session.run(max_ticks=max_ticks)
    t1 = time.perf_counter()
    return final, session.stats, (t1 - t0) * 1000


def run_comparison(grid_sizes: Optional[Sequence[Tuple[int, int]]] = None,
                   num_trials: Optional[int] = None,
                   seed_base: Optional[int] = None) -> pd.DataFrame:
    """
    在同一批随机路网上对比 Dijkstra 与 簇+枢纽 层次搜索
    每个 (规模, trial) 生成一张图，两种算法都从第一个节点跑到最后一个节点。
    """
    grid_sizes = grid_sizes or cfg.GRID_SIZES
    num_trials = cfg.NUM_TRIALS if num_trials is None else num_trials
    seed_base = cfg.RANDOM_SEED_BASE if seed_base is None else seed_base
    gcfg = cfg.GLOBAL_CONFIG

    results: List[dict] = []
    print(f"{'Grid':<10} | {'Algo':<12} | {'Steps':<8} | {'SortOps':<10} | {'Visited':<8} | {'Cost':<8}")
    print("-" * 70)

    for width, height in grid_sizes:
        for trial in range(num_trials):
            seed = seed_base + trial + width * 1000 + height
            graph = CityGraphGenerator(cfg.graph_config(width, height), seed=seed).generate()
            if len(graph) < 2:
                continue
            preprocess(graph, gcfg.cluster_span, gcfg.node_spacing, gcfg.cluster_id_stride)

            source, target = graph.nodes[0].id, graph.nodes[-1].id

            # --- A. Dijkstra ---
            final, stats, ms = _run_engine(run_baseline_search(graph, source, target), gcfg.max_ticks)
            path = list(final.path)
            results.append({
                'Grid': f"{width}x{height}",
                'Nodes': len(graph),
                'Trial': trial,
                'Algorithm': 'Dijkstra',
                'Success': bool(path),
                'Steps': stats.steps,
                'SortingOps': stats.sorting_ops,
                'Visited': len(final.visited),
                'PathCost': graph.path_cost(path) if path else np.nan,
                'TimeMs': ms,
            })

            # --- B. Hierarchical ---
            final, stats, ms = _run_engine(run_hierarchical_search(graph, source, target), gcfg.max_ticks)
            resolved = list(final.resolved_path)
            exact = bool(resolved) and final.is_exact
            results.append({
                'Grid': f"{width}x{height}",
                'Nodes': len(graph),
                'Trial': trial,
                'Algorithm': 'Hierarchical',
                'Success': exact,
                'Steps': stats.steps,
                'SortingOps': stats.sorting_ops,
                'Visited': len(final.visited),
                'PathCost': graph.path_cost(resolved) if exact else np.nan,
                'TimeMs': ms,
            })

            for row in results[-2:]:
                print(f"{row['Grid']:<10} | {row['Algorithm']:<12} | {row['Steps']:<8} | "
                      f"{row['SortingOps']:<10} | {row['Visited']:<8} | {row['PathCost']:<8.2f}")

    return pd.DataFrame(results)


def summarize(df: pd.DataFrame) -> pd.DataFrame:
    """按 (规模, 算法) 求均值，并给出层次搜索相对 Dijkstra 的路径代价比"""
    summary = (df.groupby(['Grid', 'Algorithm'], sort=False)
                 .agg(Nodes=('Nodes', 'mean'),
                      SuccessRate=('Success', 'mean'),
                      StepsMean=('Steps', 'mean'),
                      SortingOpsMean=('SortingOps', 'mean'),
                      VisitedMean=('Visited', 'mean'),
                      PathCostMean=('PathCost', 'mean'),
                      TimeMean=('TimeMs', 'mean'))
                 .reset_index())
    summary['SuccessRate'] *= 100

    baseline = summary[summary['Algorithm'] == 'Dijkstra'].set_index('Grid')['PathCostMean']
    summary['CostRatio'] = summary['PathCostMean'] / summary['Grid'].map(baseline)
    return summary


def plot_comparisons(summary: pd.DataFrame, save_path: Optional[str] = None):
    """可视化对比图表"""
    fig, axes = plt.subplots(1, 4, figsize=(24, 5))

    metrics = [
        ('StepsMean', 'Snapshots', 'Steps'),
        ('SortingOpsMean', 'Sorting Ops ("The Tax")', 'Sorting Cost'),
        ('VisitedMean', 'Visited Nodes', 'Exploration'),
        ('PathCostMean', 'Path Cost', 'Optimality'),
    ]

    grids = list(summary['Grid'].unique())
    x = np.arange(len(grids))
    for ax, (metric, ylabel, title) in zip(axes, metrics):
        for offset, (algo, color) in zip((-0.2, 0.2), (('Dijkstra', 'tab:red'), ('Hierarchical', 'tab:green'))):
            data = summary[summary['Algorithm'] == algo].set_index('Grid').reindex(grids)
            ax.bar(x + offset, data[metric], width=0.4, label=algo, color=color)
        ax.set_xticks(x)
        ax.set_xticklabels(grids)
        ax.set_xlabel('Grid Size')
        ax.set_ylabel(ylabel)
        ax.set_title(title)
        ax.grid(True, linestyle=':', alpha=0.3)
        ax.legend()

    fig.tight_layout()
    if save_path:
        fig.savefig(save_path)
        plt.close(fig)
    return fig


def main(argv=None):
    parser = argparse.ArgumentParser(description="Dijkstra vs. cluster + pivot benchmark")
    parser.add_argument("--trials", type=int, default=cfg.NUM_TRIALS)
    parser.add_argument("--seed", type=int, default=cfg.RANDOM_SEED_BASE)
    parser.add_argument("--grid", type=str, action="append",
                        help="Grid size as WIDTHxHEIGHT, may repeat (default: config sizes)")
    parser.add_argument("--out", type=str, default=cfg.LOG_DIR, help="Output directory for CSV and plots")
    parser.add_argument("--no-plot", action="store_true")
    args = parser.parse_args(argv)

    grid_sizes = None
    if args.grid:
        grid_sizes = []
        for g in args.grid:
            w, h = g.lower().split("x")
            grid_sizes.append((int(w), int(h)))

    df = run_comparison(grid_sizes, args.trials, args.seed)
    summary = summarize(df)
    print(summary.to_string(index=False))

    os.makedirs(args.out, exist_ok=True)
    timestamp = time.strftime("%Y%m%d_%H%M%S")
    df.to_csv(os.path.join(args.out, f"benchmark_{timestamp}.csv"), index=False)
    if not args.no_plot:
        plot_comparisons(summary, os.path.join(args.out, f"benchmark_{timestamp}.png"))
    return summary


if __name__ == "__main__":
    main()
