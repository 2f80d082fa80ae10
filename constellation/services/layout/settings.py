from enum import Enum
from typing import Dict, List, Sequence

from pydantic import BaseModel, Field

from constellation.config.settings import get_settings
from constellation.domain.models import DEFAULT_CATEGORY, Skill


class LayoutAlgorithm(str, Enum):
    FORCE = "force"
    CIRCULAR = "circular"
    HIERARCHICAL = "hierarchical"
    GRID = "grid"
    SPIRAL = "spiral"


class LayoutSettings(BaseModel):
    algorithm: LayoutAlgorithm = LayoutAlgorithm.FORCE
    spacing: float = Field(default=150.0, ge=50.0, le=400.0)
    center_x: float = 400.0
    center_y: float = 300.0
    group_by_category: bool = True
    snap_to_grid: bool = False
    grid_size: int = Field(default=50, gt=0)
    iterations: int = Field(default=300, gt=0)

    @classmethod
    def from_settings(cls, **overrides) -> "LayoutSettings":
        s = get_settings()
        base = {
            "spacing": s.layout_spacing,
            "center_x": s.layout_center_x,
            "center_y": s.layout_center_y,
            "grid_size": s.grid_size,
            "iterations": s.force_iterations,
        }
        base.update(overrides)
        return cls(**base)


def category_groups(nodes: Sequence[Skill], group_by_category: bool) -> List[List[Skill]]:
    if not group_by_category:
        return [list(nodes)] if nodes else []
    groups: Dict[str, List[Skill]] = {}
    for n in nodes:
        groups.setdefault(n.category or DEFAULT_CATEGORY, []).append(n)
    return list(groups.values())
