import pytest

from pivotlab.graph import RoadGraph, CityGraphGenerator, CityGraphConfig, preprocess
from pivotlab.planning.planners import (
    AStarSegmentResolver, HierarchicalSearch, SegmentResolutionError, run_hierarchical_search,
)
from pivotlab.planning.snapshots import HierarchicalAction
from pivotlab.visualization.observers import ExperimentObserver


def make_graph(points, edges):
    g = RoadGraph()
    for x, y in points:
        g.add_node(x, y)
    for u, v, w in edges:
        g.add_edge(u, v, w, bidirectional=False)
    return g


def final_state(engine):
    state = None
    for s in engine:
        state = s
        if s.finished:
            break
    return state


@pytest.fixture
def two_clusters():
    # 簇 0: 节点 0, 1    簇 1: 节点 2, 3    仅 1 <-> 2 跨簇
    g = make_graph(
        [(0, 0), (20, 0), (250, 0), (270, 0)],
        [(0, 1, 1), (1, 0, 1), (1, 2, 10), (2, 1, 10), (2, 3, 1), (3, 2, 1)],
    )
    preprocess(g, 10)
    return g


def test_path_between_clusters(two_clusters):
    assert two_clusters.nodes[0].cluster_id != two_clusters.nodes[2].cluster_id

    state = final_state(run_hierarchical_search(two_clusters, 0, 3))
    assert state.finished
    assert state.phase == HierarchicalAction.RESOLVED
    assert state.path[0] == 0 and state.path[-1] == 3
    assert state.resolved_path == (0, 1, 2, 3)
    assert state.is_exact
    assert two_clusters.is_walk(list(state.resolved_path))


def test_coarse_route_uses_pivots(two_clusters):
    state = final_state(run_hierarchical_search(two_clusters, 0, 3))
    # [起点, 簇0枢纽, 簇1枢纽, 终点]
    assert state.path == (0, 1, 3, 3)


def test_same_cluster_pair_resolves_direct():
    g = make_graph([(0, 0), (10, 0)], [(0, 1, 1)])
    preprocess(g)
    state = final_state(run_hierarchical_search(g, 0, 1))
    assert state.resolved_path == (0, 1)


def test_action_sequence(two_clusters):
    snaps = list(run_hierarchical_search(two_clusters, 0, 3))
    actions = [s.current_action for s in snaps]
    assert actions == [
        "Sorting Leaders (Fast)", "Checking Group Leader", "Filling Neighborhood",
        "Sorting Leaders (Fast)", "Checking Group Leader", "Filling Neighborhood",
        "Target Found! Resolving Path...",
        "Resolving Segment 1/3...", "Resolving Segment 2/3...", "Resolving Segment 3/3...",
        "Destination Reached! Path Resolved.",
    ]
    assert [s.step for s in snaps] == list(range(len(snaps)))

    # 分段快照展示的是之前已解析的部分
    resolving = [s for s in snaps if s.phase == HierarchicalAction.RESOLVING_SEGMENT]
    assert [s.resolved_path for s in resolving] == [(), (0, 1), (0, 1, 2, 3)]
    assert all(s.current_cluster is None for s in resolving)


def test_bulk_fill_marks_whole_cluster(two_clusters):
    snaps = list(run_hierarchical_search(two_clusters, 0, 3))
    checking, filling = snaps[1], snaps[2]
    assert checking.visited == frozenset()
    assert checking.current_cluster == 0
    assert filling.visited == frozenset({0, 1})
    assert 0 in filling.processed_clusters
    assert 0 not in filling.active_clusters


def test_neighbor_clusters_enqueued_at_hop_distance():
    # 三个簇排成一行: 0 | 1 | 2
    g = make_graph(
        [(0, 0), (250, 0), (450, 0)],
        [(0, 1, 1), (1, 0, 1), (1, 2, 1), (2, 1, 1)],
    )
    preprocess(g)
    snaps = list(run_hierarchical_search(g, 0, 2))
    sorted_snaps = [s for s in snaps if s.phase == HierarchicalAction.SORTING_LEADERS]
    assert [(e.cluster_id, e.distance) for e in sorted_snaps[1].cluster_frontier] == [(1, 1)]
    assert [(e.cluster_id, e.distance) for e in sorted_snaps[2].cluster_frontier] == [(2, 2)]
    assert snaps[-1].resolved_path == (0, 1, 2)


def test_unreachable_target_cluster():
    g = make_graph([(0, 0), (20, 0), (450, 0)], [(0, 1, 1), (1, 0, 1)])
    preprocess(g)
    state = final_state(run_hierarchical_search(g, 0, 2))
    assert state.finished
    assert state.phase == HierarchicalAction.UNREACHABLE
    assert state.current_action == "Target Unreachable!"
    assert state.path == ()
    assert state.resolved_path == ()


def test_fallback_segment_is_flagged():
    # 簇级可达 (0 -> 2 跨簇)，但簇内 0 到不了枢纽 1
    g = make_graph([(0, 0), (20, 0), (40, 0), (250, 0)], [(0, 3, 1)])
    preprocess(g)
    assert g.nodes[1].is_pivot

    observer = ExperimentObserver()
    state = final_state(run_hierarchical_search(g, 0, 3, observer=observer))
    assert state.finished
    assert not state.is_exact
    assert 0 in state.inexact_segments
    assert state.resolved_path[0] == 0 and state.resolved_path[-1] == 3
    assert any(level == 'WARN' for level, _ in observer.messages)


def test_strict_resolver_propagates_error():
    g = make_graph([(0, 0), (20, 0), (40, 0), (250, 0)], [(0, 3, 1)])
    preprocess(g)
    engine = HierarchicalSearch(g, 0, 3, resolver=AStarSegmentResolver(g, strict=True))
    with pytest.raises(SegmentResolutionError):
        list(engine)


@pytest.mark.parametrize("seed", [3, 8, 13])
def test_resolved_path_is_valid_walk(seed):
    graph = CityGraphGenerator(CityGraphConfig(width=30, height=20, density=1.0), seed=seed).generate()
    preprocess(graph, cluster_span=5)
    source, target = 0, len(graph) - 1

    state = HierarchicalSearch(graph, source, target).run_to_completion()
    assert state.finished
    path = list(state.resolved_path)
    assert path[0] == source and path[-1] == target
    assert graph.is_walk(path)
    assert state.is_exact


def test_frontier_smaller_than_baseline():
    from pivotlab.planning.planners import DijkstraSearch

    graph = CityGraphGenerator(CityGraphConfig(width=30, height=20, density=1.0), seed=1).generate()
    preprocess(graph, cluster_span=5)
    target = len(graph) - 1
    base_peak = max(len(s.frontier) for s in DijkstraSearch(graph, 0, target))
    hier_peak = max(len(s.cluster_frontier) for s in HierarchicalSearch(graph, 0, target))
    assert hier_peak < base_peak


def test_requires_preprocessing():
    g = make_graph([(0, 0), (10, 0)], [(0, 1, 1)])
    with pytest.raises(ValueError):
        run_hierarchical_search(g, 0, 1)


def test_unknown_ids_rejected(two_clusters):
    with pytest.raises(ValueError):
        run_hierarchical_search(two_clusters, 0, 17)
