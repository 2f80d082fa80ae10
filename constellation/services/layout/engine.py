from typing import Callable, Dict, Optional, Sequence

from constellation.core.errors import CyclicGraphError, UnknownLayoutError
from constellation.core.logging import logger
from constellation.domain.models import Edge, Position, Skill
from constellation.services.layout.basic import circular_layout, grid_layout, spiral_layout
from constellation.services.layout.force import force_directed_layout, force_directed_layout_async
from constellation.services.layout.hierarchical import hierarchical_layout
from constellation.services.layout.placement import snap_positions
from constellation.services.layout.settings import LayoutAlgorithm, LayoutSettings

LayoutFn = Callable[[Sequence[Skill], Sequence[Edge], LayoutSettings], Dict[str, Position]]

LAYOUTS: Dict[LayoutAlgorithm, LayoutFn] = {
    LayoutAlgorithm.FORCE: force_directed_layout,
    LayoutAlgorithm.CIRCULAR: circular_layout,
    LayoutAlgorithm.HIERARCHICAL: hierarchical_layout,
    LayoutAlgorithm.GRID: grid_layout,
    LayoutAlgorithm.SPIRAL: spiral_layout,
}


def _resolve(algorithm: LayoutAlgorithm | str) -> LayoutAlgorithm:
    try:
        return LayoutAlgorithm(algorithm)
    except ValueError:
        raise UnknownLayoutError(f"unknown layout algorithm: {algorithm}") from None


def _finish(positions: Dict[str, Position], st: LayoutSettings) -> Dict[str, Position]:
    if st.snap_to_grid:
        return snap_positions(positions, st.grid_size)
    return positions


def compute_layout(
    nodes: Sequence[Skill],
    edges: Sequence[Edge],
    settings: Optional[LayoutSettings] = None,
    algorithm: LayoutAlgorithm | str | None = None,
) -> Dict[str, Position]:
    """Positions for every node under the selected algorithm.

    A cyclic prerequisite graph cannot be ranked; the hierarchical layout then
    falls back to the grid layout.
    """
    st = settings or LayoutSettings()
    algo = _resolve(algorithm or st.algorithm)
    try:
        positions = LAYOUTS[algo](nodes, edges, st)
    except CyclicGraphError as e:
        logger.warning("layout_cycle_fallback", algorithm=algo.value, fallback="grid", cycles=e.cycles)
        positions = grid_layout(nodes, edges, st)
    logger.info("layout_computed", algorithm=algo.value, nodes=len(positions), snapped=st.snap_to_grid)
    return _finish(positions, st)


async def compute_layout_async(
    nodes: Sequence[Skill],
    edges: Sequence[Edge],
    settings: Optional[LayoutSettings] = None,
    algorithm: LayoutAlgorithm | str | None = None,
) -> Dict[str, Position]:
    st = settings or LayoutSettings()
    algo = _resolve(algorithm or st.algorithm)
    if algo is not LayoutAlgorithm.FORCE:
        return compute_layout(nodes, edges, st, algo)
    positions = await force_directed_layout_async(nodes, edges, st)
    logger.info("layout_computed", algorithm=algo.value, nodes=len(positions), snapped=st.snap_to_grid)
    return _finish(positions, st)
