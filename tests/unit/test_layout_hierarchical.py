import pytest

from constellation.core.errors import CyclicGraphError
from constellation.domain.models import Edge, Skill
from constellation.services.layout.hierarchical import compute_levels, hierarchical_layout


def _skills(*ids):
    return [Skill(id=i, name=i) for i in ids]

def test_levels_follow_longest_chain():
    nodes = _skills("A", "B", "C", "D")
    edges = [Edge(source="A", target="B"), Edge(source="B", target="C"), Edge(source="A", target="C"), Edge(source="D", target="C")]
    assert compute_levels(nodes, edges) == {"A": 0, "B": 1, "C": 2, "D": 0}

def test_hierarchical_layout_orders_dag(abc_graph):
    pos = hierarchical_layout(abc_graph.nodes, abc_graph.edges)
    for e in abc_graph.edges:
        assert pos[e.target].y > pos[e.source].y
    assert pos["A"].y == 300
    assert pos["C"].y == 600
    assert pos["B"].x == pytest.approx(325)

def test_band_is_centred():
    nodes = _skills("A", "B")
    pos = hierarchical_layout(nodes, [])
    assert pos["A"].x == pytest.approx(250)
    assert pos["B"].x == pytest.approx(400)

def test_cycle_raises_with_cycles():
    nodes = _skills("A", "B", "C")
    edges = [Edge(source="A", target="B"), Edge(source="B", target="A")]
    with pytest.raises(CyclicGraphError) as exc:
        compute_levels(nodes, edges)
    assert [sorted(c) for c in exc.value.cycles] == [["A", "B"]]

def test_edges_to_unknown_nodes_are_ignored():
    nodes = _skills("A")
    assert compute_levels(nodes, [Edge(source="A", target="ghost")]) == {"A": 0}
