from typing import Dict, List, Optional, Sequence

from constellation.core.errors import CyclicGraphError
from constellation.domain.models import Edge, Position, Skill
from constellation.services.integrity import check_prereq_cycles
from constellation.services.layout.settings import LayoutSettings


def compute_levels(nodes: Sequence[Skill], edges: Sequence[Edge]) -> Dict[str, int]:
    """
    Longest prerequisite chain ending at each node.

    Relaxation is capped at ``len(nodes) + 1`` passes: on acyclic input the
    levels settle after at most ``len(nodes) - 1`` passes, so a pass that still
    changes something past that point means the edges contain a cycle.
    """
    level: Dict[str, int] = {n.id: 0 for n in nodes}
    relevant = [e for e in edges if e.source in level and e.target in level]
    for _ in range(len(level) + 1):
        changed = False
        for e in relevant:
            if level[e.target] <= level[e.source]:
                level[e.target] = level[e.source] + 1
                changed = True
        if not changed:
            return level
    cycles = check_prereq_cycles(relevant)
    raise CyclicGraphError(f"prerequisite graph contains {len(cycles)} cycle(s)", cycles=cycles)


def hierarchical_layout(nodes: Sequence[Skill], edges: Sequence[Edge] = (), settings: Optional[LayoutSettings] = None) -> Dict[str, Position]:
    st = settings or LayoutSettings()
    level = compute_levels(nodes, edges)
    bands: Dict[int, List[Skill]] = {}
    for n in nodes:
        bands.setdefault(level[n.id], []).append(n)
    out: Dict[str, Position] = {}
    for lvl, band in bands.items():
        for i, n in enumerate(band):
            out[n.id] = Position(
                x=(i - len(band) / 2) * st.spacing + st.center_x,
                y=lvl * st.spacing + st.center_y,
            )
    return out
