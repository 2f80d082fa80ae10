import math
from typing import Dict, Iterable, Sequence

from constellation.core.math import snap
from constellation.domain.models import Position, Skill
from constellation.services.graph.model import group_by_constellation

CONSTELLATION_COLUMNS = 3
CONSTELLATION_WIDTH = 800.0
CONSTELLATION_HEIGHT = 600.0
IMPORT_COLUMNS = 4
IMPORT_ORIGIN = (200.0, 200.0)
IMPORT_STEP = (200.0, 150.0)


def snap_positions(positions: Dict[str, Position], grid_size: int) -> Dict[str, Position]:
    return {nid: Position(x=snap(p.x, grid_size), y=snap(p.y, grid_size)) for nid, p in positions.items()}


def constellation_center(index: int) -> Position:
    return Position(
        x=(index % CONSTELLATION_COLUMNS) * CONSTELLATION_WIDTH + CONSTELLATION_WIDTH / 2,
        y=(index // CONSTELLATION_COLUMNS) * CONSTELLATION_HEIGHT + CONSTELLATION_HEIGHT / 2,
    )


def default_constellation_positions(skills: Iterable[Skill]) -> Dict[str, Position]:
    """Spiral each constellation around its own cell of a 3-column meta grid.

    Only skills without a position get one.
    """
    out: Dict[str, Position] = {}
    for c, members in enumerate(group_by_constellation(skills).values()):
        center = constellation_center(c)
        for i, s in enumerate(members):
            if s.position is not None:
                continue
            angle = i * 2.4 + c * 0.8
            radius = 80.0 + i * 30.0
            out[s.id] = center.offset(math.cos(angle) * radius, math.sin(angle) * radius)
    return out


def import_positions(skill_ids: Sequence[str], grid_size: int) -> Dict[str, Position]:
    ox, oy = IMPORT_ORIGIN
    sx, sy = IMPORT_STEP
    out: Dict[str, Position] = {}
    for i, sid in enumerate(skill_ids):
        col, row = i % IMPORT_COLUMNS, i // IMPORT_COLUMNS
        out[sid] = Position(x=snap(ox + col * sx, grid_size), y=snap(oy + row * sy, grid_size))
    return out
