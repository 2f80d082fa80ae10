import pytest

from constellation.domain.models import Position
from constellation.schemas.gestures import ConnectionDrawn, EdgeClicked, NodeClicked
from constellation.services.editor.connection_mode import EditorMode
from constellation.services.editor.session import GraphEditSession
from constellation.services.presentation.router import GestureRouter


@pytest.fixture
def router(abc_graph):
    return GestureRouter(GraphEditSession(abc_graph))

def test_click_selects_in_select_mode(router):
    router.dispatch(NodeClicked(node_id="B"))
    assert router.selected_nodes == ["B"]
    router.dispatch(NodeClicked(node_id="ghost"))
    assert router.selected_nodes == ["B"]

def test_clicks_connect_in_connect_mode(router):
    router.session.set_mode(EditorMode.CONNECT)
    router.dispatch(NodeClicked(node_id="A"))
    assert {v.id: v for v in router.node_views()}["A"].data.is_first_selected
    edge = router.dispatch(NodeClicked(node_id="C"))
    assert edge.id == "A-C"

def test_edge_click_deletes_in_delete_mode(router):
    router.dispatch(EdgeClicked(edge_id="A-B"))
    assert router.selected_edge == "A-B"
    assert router.session.graph.has_edge("A", "B")
    router.session.set_mode(EditorMode.DELETE_EDGES)
    assert all(e.data.is_delete_mode for e in router.edge_views())
    router.dispatch(EdgeClicked(edge_id="A-B"))
    assert not router.session.graph.has_edge("A", "B")

def test_drag_from_raw_payload_is_not_recorded(router):
    moved = router.dispatch({"kind": "node_dragged", "node_id": "A", "position": {"x": 10, "y": 20}})
    assert moved is True
    assert router.session.graph.get("A").position == Position(x=10, y=20)
    assert router.session.history.undo_depth == 0

def test_drawn_connection_creates_edge(router):
    edge = router.dispatch(ConnectionDrawn(source_id="A", target_id="C"))
    assert edge.id == "A-C"
    assert router.session.history.undo_depth == 1

def test_prune_selection(router):
    router.dispatch(NodeClicked(node_id="B"))
    router.dispatch(EdgeClicked(edge_id="B-C"))
    router.session.delete_nodes(["B"])
    router.prune_selection()
    assert router.selected_nodes == []
    assert router.selected_edge is None
