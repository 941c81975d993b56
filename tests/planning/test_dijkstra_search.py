import heapq
import math
import pytest

from pivotlab.graph import RoadGraph, CityGraphGenerator, CityGraphConfig
from pivotlab.planning.planners import DijkstraSearch, run_baseline_search
from pivotlab.planning.snapshots import BaselinePhase


def directed_graph(n, edges):
    """测试用有向图，坐标无关紧要"""
    g = RoadGraph()
    for i in range(n):
        g.add_node(i * 20.0, 0.0)
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


def reference_cost(graph, source, target):
    """独立的堆实现，用来校验最优性"""
    dist = {source: 0.0}
    heap = [(0.0, source)]
    done = set()
    while heap:
        d, u = heapq.heappop(heap)
        if u in done:
            continue
        done.add(u)
        if u == target:
            return d
        for e in graph.neighbors(u):
            nd = d + e.weight
            if nd < dist.get(e.node, math.inf):
                dist[e.node] = nd
                heapq.heappush(heap, (nd, e.node))
    return math.inf


def test_linear_graph():
    g = directed_graph(3, [(0, 1, 1), (1, 2, 1)])
    state = final_state(run_baseline_search(g, 0, 2))
    assert state.finished
    assert state.phase == BaselinePhase.FOUND
    assert state.path == (0, 1, 2)


def test_prefers_lower_weight_path():
    g = directed_graph(4, [(0, 1, 10), (0, 3, 1), (1, 2, 10), (3, 2, 1)])
    state = final_state(run_baseline_search(g, 0, 2))
    assert state.path == (0, 3, 2)
    assert state.distances[2] == pytest.approx(2.0)


def test_unreachable_target():
    g = directed_graph(3, [(0, 1, 1)])
    state = final_state(run_baseline_search(g, 0, 2))
    assert state.finished
    assert state.phase == BaselinePhase.UNREACHABLE
    assert state.path == ()
    assert state.current is None
    assert math.isinf(state.distances[2])


def test_source_equals_target():
    g = directed_graph(2, [(0, 1, 1)])
    state = final_state(run_baseline_search(g, 1, 1))
    assert state.path == (1,)


def test_snapshot_sequence_follows_protocol():
    g = directed_graph(3, [(0, 1, 1), (1, 2, 1)])
    phases = [s.phase for s in run_baseline_search(g, 0, 2)]
    assert phases == [
        BaselinePhase.FRONTIER_SORTED, BaselinePhase.PROCESSING,   # 0
        BaselinePhase.FRONTIER_SORTED, BaselinePhase.PROCESSING,   # 1
        BaselinePhase.FRONTIER_SORTED, BaselinePhase.PROCESSING,   # 2 (target)
        BaselinePhase.FOUND,
    ]


def test_advance_protocol_after_finish():
    g = directed_graph(2, [(0, 1, 1)])
    engine = run_baseline_search(g, 0, 1)
    snaps = []
    while True:
        snap, done = engine.advance()
        if done:
            break
        snaps.append(snap)
    assert snaps[-1].finished
    assert [s.step for s in snaps] == list(range(len(snaps)))
    assert engine.done
    assert engine.advance() == (None, True)
    with pytest.raises(StopIteration):
        next(engine)


def test_frontier_sorted_and_unique():
    graph = CityGraphGenerator(CityGraphConfig(width=12, height=10), seed=2).generate()
    for s in run_baseline_search(graph, 0, len(graph) - 1):
        nodes = [e.node for e in s.frontier]
        assert len(nodes) == len(set(nodes))
        if s.phase == BaselinePhase.FRONTIER_SORTED:
            dists = [e.distance for e in s.frontier]
            assert dists == sorted(dists)


def test_frontier_entry_updated_in_place():
    # 2 先以 5 入队，处理 1 之后被改成 2，而不是再插入一条
    g = directed_graph(3, [(0, 2, 5), (0, 1, 1), (1, 2, 1)])
    snaps = list(run_baseline_search(g, 0, 2))
    after_one = [s for s in snaps if s.phase == BaselinePhase.FRONTIER_SORTED][2]
    assert [(e.node, e.distance) for e in after_one.frontier] == [(2, 2.0)]
    assert snaps[-1].path == (0, 1, 2)


def test_tie_break_is_insertion_order():
    # 1 和 2 到源点距离相同，先插入的 1 先被处理
    g = directed_graph(4, [(0, 1, 1), (0, 2, 1), (1, 3, 5), (2, 3, 5)])

    def order():
        return [s.current for s in run_baseline_search(g, 0, 3) if s.phase == BaselinePhase.PROCESSING]

    first = order()
    assert first[:3] == [0, 1, 2]
    for _ in range(3):
        assert order() == first
    assert final_state(run_baseline_search(g, 0, 3)).path == (0, 1, 3)


def test_snapshots_are_independent_copies():
    g = directed_graph(3, [(0, 1, 1), (1, 2, 1)])
    snaps = list(run_baseline_search(g, 0, 2))
    first = snaps[0]
    assert first.visited == frozenset()
    assert first.distances[1] == math.inf
    with pytest.raises(TypeError):
        first.distances[1] = 0.0  # 只读映射
    assert snaps[-1].visited == frozenset({0, 1, 2})


@pytest.mark.parametrize("seed", [1, 2, 3, 4, 5])
def test_path_is_valid_and_optimal(seed):
    graph = CityGraphGenerator(CityGraphConfig(width=10, height=8, density=0.75), seed=seed).generate()
    source, target = 0, len(graph) - 1
    state = DijkstraSearch(graph, source, target).run_to_completion()

    expected = reference_cost(graph, source, target)
    if math.isinf(expected):
        assert state.path == ()
        return
    path = list(state.path)
    assert path[0] == source and path[-1] == target
    assert graph.is_walk(path)
    assert graph.path_cost(path) == pytest.approx(expected)


def test_unknown_ids_rejected():
    g = directed_graph(2, [(0, 1, 1)])
    with pytest.raises(ValueError):
        run_baseline_search(g, 0, 5)
    with pytest.raises(ValueError):
        run_baseline_search(g, -1, 1)
