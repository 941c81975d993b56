import os
import argparse

from pivotlab.config import GlobalConfig
from pivotlab.graph import CityGraphGenerator, CityGraphConfig, preprocess
from pivotlab.planning.planners import run_baseline_search, run_hierarchical_search
from pivotlab.simulation import SimulationSession
from pivotlab.visualization.observers import DebugObserver, ExperimentObserver
from pivotlab.visualization.plotter import SnapshotPlotter
from pivotlab.planning.snapshots import HierarchicalState


def describe_result(graph, final) -> str:
    """终止快照的一行摘要。含回退分段的层次路径不是真实路径，不计算代价"""
    if isinstance(final, HierarchicalState):
        path = final.resolved_path
        if path and not final.is_exact:
            return f"Path found: {len(path)} nodes, inexact (fallback segments {list(final.inexact_segments)})"
    else:
        path = final.path
    if not path:
        return "No path found."
    return f"Path found: {len(path)} nodes, cost {graph.path_cost(list(path)):.2f}"


def run_experiment(algo="hierarchical", width=40, height=30, density=0.7, seed=42,
                   debug=False, plot_path=None, verbose=True):
    """在一张随机路网上完整跑一次指定算法，返回 (session, observer)"""
    print(f"=== Running Experiment (Algo={algo}, Grid={width}x{height}, Density={density}, Seed={seed}) ===")
    config = GlobalConfig(debug_mode=debug)

    # 1. Setup Graph
    graph = CityGraphGenerator(CityGraphConfig(width=width, height=height, density=density,
                                               node_spacing=config.node_spacing), seed=seed).generate()
    index = preprocess(graph, config.cluster_span, config.node_spacing, config.cluster_id_stride)
    print(f"Graph: {graph}, clusters: {len(index.clusters)}")

    source, target = graph.nodes[0].id, graph.nodes[-1].id
    observer = DebugObserver() if config.debug_mode else ExperimentObserver()

    # 2. Setup Engine
    if algo == "dijkstra":
        engine = run_baseline_search(graph, source, target, observer=observer)
    elif algo == "hierarchical":
        engine = run_hierarchical_search(graph, source, target, observer=observer)
    else:
        raise ValueError(f"Unknown algorithm: {algo}")

    # 3. Drive
    session = SimulationSession(engine)
    final = session.run(max_ticks=config.max_ticks)
    if verbose:
        for snap in session.history[-5:]:
            label = getattr(snap, "current_action", None) or snap.phase.value
            print(f"  step {snap.step:>5}: {label}")

    print(describe_result(graph, final))
    print(f"Steps: {session.stats.steps}, Sorting Ops: {session.stats.sorting_ops}")

    # 4. Plot
    if plot_path:
        os.makedirs(os.path.dirname(os.path.abspath(plot_path)), exist_ok=True)
        SnapshotPlotter(graph).save(final, plot_path)
        print(f"Saved plot to {plot_path}")

    return session, observer


def main(argv=None):
    parser = argparse.ArgumentParser(description="Run one step-by-step search on a generated city graph")
    parser.add_argument("--algo", choices=["dijkstra", "hierarchical"], default="hierarchical")
    parser.add_argument("--width", type=int, default=40)
    parser.add_argument("--height", type=int, default=30)
    parser.add_argument("--density", type=float, default=0.7)
    parser.add_argument("--seed", type=int, default=42)
    parser.add_argument("--debug", action="store_true", help="Write a detailed log under logs/search_debug")
    parser.add_argument("--plot", type=str, default=None, help="Save the final snapshot to this image file")
    args = parser.parse_args(argv)

    return run_experiment(args.algo, args.width, args.height, args.density, args.seed,
                          debug=args.debug, plot_path=args.plot)


if __name__ == "__main__":
    main()
