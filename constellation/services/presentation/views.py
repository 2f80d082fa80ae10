from typing import List, Optional

from constellation.domain.models import Skill, SkillStatus
from constellation.schemas.views import EdgeFlags, EdgeView, NodeDisplay, NodeView
from constellation.services.editor.connection_mode import EditorMode
from constellation.services.graph.model import SkillGraph
from constellation.services.graph.stars import investment_star_type, star_size
from constellation.services.layout.placement import default_constellation_positions
from constellation.services.progression.store import ProgressionStore


def _status(graph: SkillGraph, skill: Skill, store: Optional[ProgressionStore], user_id: Optional[str]) -> SkillStatus:
    if store is not None and user_id is not None:
        return store.status_of(user_id, skill)
    # no learner context: only prerequisite-free skills are open
    return SkillStatus(is_unlocked=False, is_available=not graph.prerequisite_ids(skill.id))


def build_node_views(
    graph: SkillGraph,
    store: Optional[ProgressionStore] = None,
    user_id: Optional[str] = None,
    admin_mode: bool = False,
    mode: EditorMode = EditorMode.SELECT,
    first_selected: Optional[str] = None,
    node_scale: float = 1.0,
    text_scale: float = 1.0,
) -> List[NodeView]:
    learner = store is not None and user_id is not None
    points = store.available_points(user_id) if learner else 0
    fallback = default_constellation_positions(graph.nodes)
    out: List[NodeView] = []
    for s in graph.nodes:
        status = _status(graph, s, store, user_id)
        level = store.level_of(user_id, s.id) if learner else 0
        star = s.star_type
        if not admin_mode and level > 0:
            star = investment_star_type(level, s.max_level)
        out.append(
            NodeView(
                id=s.id,
                position=s.position or fallback[s.id],
                data=NodeDisplay(
                    name=s.name,
                    description=s.description,
                    category=s.category,
                    star_type=star,
                    star_size=star_size(star, node_scale, admin_mode),
                    is_unlocked=status.is_unlocked,
                    is_available=status.is_available,
                    user_level=level,
                    max_level=s.max_level,
                    available_points=points,
                    can_allocate=learner and not admin_mode and store.can_allocate(user_id, s.id),
                    is_first_selected=first_selected == s.id,
                    connection_mode=mode,
                    is_admin_mode=admin_mode,
                    node_scale=node_scale,
                    text_scale=text_scale,
                ),
            )
        )
    return out


def build_edge_views(
    graph: SkillGraph,
    store: Optional[ProgressionStore] = None,
    user_id: Optional[str] = None,
    delete_mode: bool = False,
) -> List[EdgeView]:
    out: List[EdgeView] = []
    for e in graph.edges:
        source = graph.get(e.source)
        status = _status(graph, source, store, user_id)
        out.append(
            EdgeView(
                id=e.id,
                source=e.source,
                target=e.target,
                data=EdgeFlags(
                    is_active=status.is_unlocked,
                    is_available=status.is_available,
                    is_delete_mode=delete_mode,
                    can_edit=e.data.can_edit,
                ),
            )
        )
    return out
