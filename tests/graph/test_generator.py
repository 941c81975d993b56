import pytest

from pivotlab.graph.generator import CityGraphGenerator, CityGraphConfig


def test_same_seed_same_graph():
    cfg = CityGraphConfig(width=12, height=9, density=0.7)
    g1 = CityGraphGenerator(cfg, seed=7).generate()
    g2 = CityGraphGenerator(cfg, seed=7).generate()

    assert len(g1) == len(g2)
    assert [(n.x, n.y) for n in g1.nodes] == [(n.x, n.y) for n in g2.nodes]
    assert g1.edges == g2.edges


def test_generated_graph_invariants():
    cfg = CityGraphConfig(width=15, height=10, density=0.8, node_spacing=20.0, jitter=5.0)
    graph = CityGraphGenerator(cfg, seed=3).generate()
    graph.validate()

    assert [n.id for n in graph.nodes] == list(range(len(graph)))

    # 每条边都有反向边且权重一致
    directed = {(u, v): w for u, v, w in graph.edges}
    for (u, v), w in directed.items():
        assert directed[(v, u)] == pytest.approx(w)
        assert w > 0

    # 坐标在 格点 * 间距 + [0, jitter) 范围内
    for n in graph.nodes:
        assert 0 <= n.x < cfg.width * cfg.node_spacing
        assert 0 <= n.y < cfg.height * cfg.node_spacing
        assert (n.x % cfg.node_spacing) < cfg.jitter + 1e-9


def test_full_density_grid_degree():
    cfg = CityGraphConfig(width=4, height=4, density=1.0, jitter=0.0, weight_noise=0.0)
    graph = CityGraphGenerator(cfg, seed=0).generate()
    assert len(graph) == 16
    # 内部格点连 8 个方向
    inner = graph.nearest_node(20.0, 20.0)
    assert len(graph.neighbors(inner)) == 8
    weights = sorted({round(e.weight, 3) for e in graph.neighbors(inner)})
    assert weights == [1.0, 1.414]


def test_highway_rows_tagged():
    cfg = CityGraphConfig(width=5, height=6, density=1.0, jitter=0.0, highway_every=3)
    graph = CityGraphGenerator(cfg, seed=0).generate()
    rows = {int(n.y // cfg.node_spacing) for n in graph.nodes if n.is_highway}
    assert rows == {0, 3}


@pytest.mark.parametrize("kwargs", [
    {"width": 0},
    {"density": 0.0},
    {"density": 1.5},
    {"jitter": 25.0},
    {"weight_noise": 1.0},
    {"highway_every": -1},
])
def test_bad_config_rejected(kwargs):
    with pytest.raises(ValueError):
        CityGraphConfig(**kwargs)
