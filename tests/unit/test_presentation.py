import pytest

from constellation.domain.models import StarType
from constellation.services.editor.connection_mode import EditorMode
from constellation.services.presentation.views import build_edge_views, build_node_views
from constellation.services.progression.budget import PointBudget
from constellation.services.progression.store import ProgressionStore


@pytest.fixture
def store(abc_graph):
    return ProgressionStore(abc_graph, budget=PointBudget(base=5, bonus=5, step=10))

def test_learner_node_views(abc_graph, store):
    views = {v.id: v for v in build_node_views(abc_graph, store, "u1")}
    assert views["A"].data.is_available and views["A"].data.can_allocate
    assert not views["B"].data.is_available and not views["B"].data.can_allocate
    assert views["A"].data.star_size == 36
    assert views["A"].data.available_points == 5
    assert views["A"].position is not None

@pytest.mark.asyncio
async def test_learner_star_type_follows_investment(abc_graph, store):
    for _ in range(3):
        await store.allocate("u1", "A", 1)
    view = {v.id: v for v in build_node_views(abc_graph, store, "u1")}["A"]
    assert view.data.user_level == 3
    assert view.data.star_type == StarType.GIANT

def test_admin_node_views(abc_graph):
    views = build_node_views(abc_graph, admin_mode=True, mode=EditorMode.CONNECT, first_selected="B", node_scale=1.5)
    by_id = {v.id: v for v in views}
    assert by_id["A"].data.star_type == StarType.DWARF
    assert by_id["A"].data.star_size == 36
    assert by_id["B"].data.is_first_selected
    assert not by_id["A"].data.is_first_selected
    assert by_id["A"].data.connection_mode == EditorMode.CONNECT
    assert by_id["A"].data.is_admin_mode

@pytest.mark.asyncio
async def test_edge_flags_follow_source_status(abc_graph, store):
    await store.allocate("u1", "A", 1)
    edges = {e.id: e for e in build_edge_views(abc_graph, store, "u1")}
    assert edges["A-B"].data.is_active and edges["A-B"].data.is_available
    assert not edges["B-C"].data.is_active
    assert edges["B-C"].data.is_available

def test_delete_mode_flag(abc_graph):
    edges = build_edge_views(abc_graph, delete_mode=True)
    assert all(e.data.is_delete_mode for e in edges)
