import math

import pytest

from constellation.domain.models import Position, Skill
from constellation.services.layout.basic import circular_layout, grid_layout, spiral_layout
from constellation.services.layout.settings import LayoutSettings


def test_grid_layout_is_deterministic(make_skills):
    nodes = make_skills(5)
    assert grid_layout(nodes) == grid_layout(nodes)

def test_grid_layout_positions(make_skills):
    pos = grid_layout(make_skills(5), settings=LayoutSettings(spacing=150))
    # ceil(sqrt(5)) == 3 columns
    assert pos["S0"] == Position(x=400, y=300)
    assert pos["S2"] == Position(x=700, y=300)
    assert pos["S3"] == Position(x=400, y=450)
    assert pos["S4"] == Position(x=550, y=450)

def test_grid_layout_empty():
    assert grid_layout([]) == {}

def test_circular_layout_single_group(make_skills):
    pos = circular_layout(make_skills(4))
    assert pos["S0"].x == pytest.approx(600)
    assert pos["S0"].y == pytest.approx(300)
    assert pos["S1"].x == pytest.approx(400)
    assert pos["S1"].y == pytest.approx(500)

def test_circular_layout_groups_by_category():
    nodes = [Skill(id="a", name="a", category="x"), Skill(id="b", name="b", category="y")]
    pos = circular_layout(nodes)
    # second group: radius 350 around (800, 300)
    assert pos["b"].x == pytest.approx(1150)
    assert pos["b"].y == pytest.approx(300)
    flat = circular_layout(nodes, settings=LayoutSettings(group_by_category=False))
    assert flat["b"].x == pytest.approx(200)

def test_spiral_layout(make_skills):
    pos = spiral_layout(make_skills(3))
    assert pos["S0"] == Position(x=450, y=300)
    r = 50 + 15 * 2
    assert pos["S2"].x == pytest.approx(400 + math.cos(1.0) * r)
    assert pos["S2"].y == pytest.approx(300 + math.sin(1.0) * r)
