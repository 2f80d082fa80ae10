"""Deterministic layouts: grid, circular and spiral. None of them look at edges."""

import math
from typing import Dict, Optional, Sequence

from constellation.domain.models import Edge, Position, Skill
from constellation.services.layout.settings import LayoutSettings, category_groups

CIRCLE_BASE_RADIUS = 200.0
CIRCLE_RADIUS_STEP = 150.0
CIRCLE_GROUP_OFFSET = 400.0
SPIRAL_ANGLE_STEP = 0.5
SPIRAL_BASE_RADIUS = 50.0
SPIRAL_RADIUS_STEP = 15.0
SPIRAL_GROUP_OFFSET = 600.0
META_GRID_COLUMNS = 3


def grid_layout(nodes: Sequence[Skill], edges: Sequence[Edge] = (), settings: Optional[LayoutSettings] = None) -> Dict[str, Position]:
    st = settings or LayoutSettings()
    if not nodes:
        return {}
    cols = math.ceil(math.sqrt(len(nodes)))
    out: Dict[str, Position] = {}
    for i, n in enumerate(nodes):
        out[n.id] = Position(
            x=(i % cols) * st.spacing + st.center_x,
            y=(i // cols) * st.spacing + st.center_y,
        )
    return out


def _group_center(st: LayoutSettings, group_index: int, offset: float) -> tuple[float, float]:
    cx = st.center_x + (group_index % META_GRID_COLUMNS) * offset
    cy = st.center_y + (group_index // META_GRID_COLUMNS) * offset
    return cx, cy


def circular_layout(nodes: Sequence[Skill], edges: Sequence[Edge] = (), settings: Optional[LayoutSettings] = None) -> Dict[str, Position]:
    st = settings or LayoutSettings()
    out: Dict[str, Position] = {}
    for g, group in enumerate(category_groups(nodes, st.group_by_category)):
        radius = CIRCLE_BASE_RADIUS + g * CIRCLE_RADIUS_STEP
        cx, cy = _group_center(st, g, CIRCLE_GROUP_OFFSET)
        size = len(group)
        for i, n in enumerate(group):
            angle = (i / size) * 2 * math.pi
            out[n.id] = Position(x=cx + math.cos(angle) * radius, y=cy + math.sin(angle) * radius)
    return out


def spiral_layout(nodes: Sequence[Skill], edges: Sequence[Edge] = (), settings: Optional[LayoutSettings] = None) -> Dict[str, Position]:
    st = settings or LayoutSettings()
    out: Dict[str, Position] = {}
    for g, group in enumerate(category_groups(nodes, st.group_by_category)):
        cx, cy = _group_center(st, g, SPIRAL_GROUP_OFFSET)
        for i, n in enumerate(group):
            angle = i * SPIRAL_ANGLE_STEP
            radius = SPIRAL_BASE_RADIUS + i * SPIRAL_RADIUS_STEP
            out[n.id] = Position(x=cx + math.cos(angle) * radius, y=cy + math.sin(angle) * radius)
    return out
