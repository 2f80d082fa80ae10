import pytest

from constellation.core.errors import UnknownLayoutError
from constellation.core.math import snap
from constellation.domain.models import Edge, Skill
from constellation.services.layout.basic import grid_layout
from constellation.services.layout.engine import compute_layout, compute_layout_async
from constellation.services.layout.settings import LayoutSettings


def test_cyclic_graph_falls_back_to_grid():
    nodes = [Skill(id="A", name="A"), Skill(id="B", name="B")]
    edges = [Edge(source="A", target="B"), Edge(source="B", target="A")]
    st = LayoutSettings(algorithm="hierarchical")
    assert compute_layout(nodes, edges, st) == grid_layout(nodes, edges, st)

def test_unknown_algorithm():
    with pytest.raises(UnknownLayoutError):
        compute_layout([], [], algorithm="radial")

def test_snap_to_grid_pass(make_skills):
    st = LayoutSettings(algorithm="spiral", snap_to_grid=True, grid_size=50)
    pos = compute_layout(make_skills(6), [], st)
    for p in pos.values():
        assert p.x % 50 == 0
        assert p.y % 50 == 0

def test_snap_rounds_half_up():
    assert snap(74.9, 50) == 50
    assert snap(75, 50) == 100
    assert snap(-25, 50) == 0
    with pytest.raises(ValueError):
        snap(10, 0)

def test_algorithm_argument_overrides_settings(abc_graph):
    st = LayoutSettings(algorithm="grid")
    pos = compute_layout(abc_graph.nodes, abc_graph.edges, st, algorithm="hierarchical")
    assert pos["C"].y == 600

def test_layout_settings_from_env(monkeypatch):
    from constellation.config.settings import get_settings
    monkeypatch.setenv("LAYOUT_SPACING", "200")
    get_settings.cache_clear()
    st = LayoutSettings.from_settings(algorithm="grid")
    assert st.spacing == 200
    assert st.algorithm == "grid"

@pytest.mark.asyncio
async def test_async_dispatch(abc_graph):
    st = LayoutSettings(algorithm="force", snap_to_grid=True)
    pos = await compute_layout_async(abc_graph.nodes, abc_graph.edges, st)
    assert set(pos) == {"A", "B", "C"}
    assert all(p.x % 50 == 0 for p in pos.values())
    grid = await compute_layout_async(abc_graph.nodes, abc_graph.edges, LayoutSettings(algorithm="grid"))
    assert grid == grid_layout(abc_graph.nodes, abc_graph.edges)
