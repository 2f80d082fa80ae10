"""
Force-directed layout.

Every unordered pair of nodes repels with ``REPULSION / (d + 1) ** 2``; every
edge pulls its endpoints toward a rest length of ``settings.spacing`` with
stiffness ``SPRING``. Velocities start at zero and are damped by ``DAMPING``
after each step. Nodes without a position are seeded from the grid layout.
"""

import asyncio
import math
from typing import Dict, Iterator, List, Optional, Sequence

from constellation.domain.models import Edge, Position, Skill
from constellation.services.layout.basic import grid_layout
from constellation.services.layout.settings import LayoutSettings

REPULSION = 5000.0
SPRING = 0.1
DAMPING = 0.9
DEFAULT_BATCH = 25
_EPS = 1e-9
_GOLDEN_ANGLE = math.pi * (3.0 - math.sqrt(5.0))


class _Body:
    __slots__ = ("x", "y", "vx", "vy")

    def __init__(self, x: float, y: float):
        self.x = x
        self.y = y
        self.vx = 0.0
        self.vy = 0.0


def _seed(nodes: Sequence[Skill], edges: Sequence[Edge], st: LayoutSettings) -> Dict[str, _Body]:
    fallback = grid_layout(nodes, edges, st)
    bodies: Dict[str, _Body] = {}
    for n in nodes:
        p = n.position or fallback[n.id]
        bodies[n.id] = _Body(p.x, p.y)
    return bodies


def _direction(dx: float, dy: float, salt: int) -> tuple[float, float, float]:
    dist = math.hypot(dx, dy)
    if dist < _EPS:
        # coincident bodies: separate along a fixed per-pair direction
        a = salt * _GOLDEN_ANGLE
        return math.cos(a), math.sin(a), 0.0
    return dx / dist, dy / dist, dist


def _step(ids: List[str], bodies: Dict[str, _Body], springs: List[tuple[str, str]], rest: float) -> None:
    for i in range(len(ids)):
        a = bodies[ids[i]]
        for j in range(i + 1, len(ids)):
            b = bodies[ids[j]]
            ux, uy, dist = _direction(b.x - a.x, b.y - a.y, i * len(ids) + j)
            f = REPULSION / ((dist + 1.0) ** 2)
            a.vx -= ux * f
            a.vy -= uy * f
            b.vx += ux * f
            b.vy += uy * f
    for k, (s, t) in enumerate(springs):
        a, b = bodies[s], bodies[t]
        ux, uy, dist = _direction(b.x - a.x, b.y - a.y, k)
        f = (dist - rest) * SPRING
        a.vx += ux * f
        a.vy += uy * f
        b.vx -= ux * f
        b.vy -= uy * f
    for body in bodies.values():
        body.x += body.vx
        body.y += body.vy
        body.vx *= DAMPING
        body.vy *= DAMPING


def _positions(bodies: Dict[str, _Body]) -> Dict[str, Position]:
    return {nid: Position(x=b.x, y=b.y) for nid, b in bodies.items()}


def force_directed_steps(
    nodes: Sequence[Skill],
    edges: Sequence[Edge] = (),
    settings: Optional[LayoutSettings] = None,
    batch: int = DEFAULT_BATCH,
) -> Iterator[Dict[str, Position]]:
    """Run the simulation, yielding intermediate positions every ``batch`` iterations.

    The last yielded mapping is the final layout.
    """
    if batch <= 0:
        raise ValueError("batch must be positive")
    st = settings or LayoutSettings()
    if not nodes:
        yield {}
        return
    bodies = _seed(nodes, edges, st)
    ids = list(bodies)
    springs = [(e.source, e.target) for e in edges if e.source in bodies and e.target in bodies and e.source != e.target]
    for it in range(1, st.iterations + 1):
        _step(ids, bodies, springs, st.spacing)
        if it % batch == 0 or it == st.iterations:
            yield _positions(bodies)


def force_directed_layout(nodes: Sequence[Skill], edges: Sequence[Edge] = (), settings: Optional[LayoutSettings] = None) -> Dict[str, Position]:
    result: Dict[str, Position] = {}
    for result in force_directed_steps(nodes, edges, settings):
        pass
    return result


async def force_directed_layout_async(
    nodes: Sequence[Skill],
    edges: Sequence[Edge] = (),
    settings: Optional[LayoutSettings] = None,
    batch: int = DEFAULT_BATCH,
) -> Dict[str, Position]:
    result: Dict[str, Position] = {}
    for result in force_directed_steps(nodes, edges, settings, batch=batch):
        await asyncio.sleep(0)
    return result
