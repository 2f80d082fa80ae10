"""
In-memory skill graph for one constellation (career path).

Skills are kept in insertion order so that default layouts are deterministic.
Edges are the authority for prerequisite relations; every edge change is
mirrored onto the target skill's ``prerequisites`` list so that records handed
to persistence never drift from what the editor shows.
"""

from typing import Any, Dict, Iterable, List, Optional, Tuple

from constellation.core.logging import logger
from constellation.domain.models import (
    DEFAULT_CATEGORY,
    DEFAULT_MAX_LEVEL,
    DEFAULT_POINT_COST,
    DEFAULT_XP_REWARD,
    Edge,
    EdgeData,
    Position,
    Skill,
    StarType,
)
from constellation.services.graph.stars import authored_star_type


def group_by_constellation(skills: Iterable[Skill]) -> Dict[str, List[Skill]]:
    groups: Dict[str, List[Skill]] = {}
    for s in skills:
        groups.setdefault(s.category or DEFAULT_CATEGORY, []).append(s)
    return groups


def _pick(rec: Dict[str, Any], *keys: str, default: Any = None) -> Any:
    for k in keys:
        v = rec.get(k)
        if v is not None:
            return v
    return default


def _position_from(raw: Any) -> Optional[Position]:
    if isinstance(raw, Position):
        return raw
    if isinstance(raw, dict):
        x, y = raw.get("x"), raw.get("y")
        if isinstance(x, (int, float)) and isinstance(y, (int, float)):
            return Position(x=float(x), y=float(y))
    return None


def skill_from_record(rec: Dict[str, Any]) -> Skill:
    level = int(_pick(rec, "level", default=1) or 1)
    level = max(1, min(5, level))
    raw_star = _pick(rec, "star_type", "starType")
    try:
        star = StarType(raw_star) if raw_star else authored_star_type(level)
    except ValueError:
        star = authored_star_type(level)
    return Skill(
        id=str(rec["id"]),
        name=str(_pick(rec, "name", default=rec["id"])),
        description=str(_pick(rec, "description", default="")),
        category=_pick(rec, "category", "constellation", default=DEFAULT_CATEGORY),
        level=level,
        max_level=int(_pick(rec, "max_level", "maxLevel", default=DEFAULT_MAX_LEVEL)),
        point_cost=int(_pick(rec, "point_cost", "pointCost", default=DEFAULT_POINT_COST)),
        xp_reward=int(_pick(rec, "xp_reward", "xpReward", default=DEFAULT_XP_REWARD)),
        prerequisites=[str(p) for p in (rec.get("prerequisites") or [])],
        star_type=star,
        position=_position_from(rec.get("position")),
    )


class SkillGraph:
    def __init__(self, key: str = DEFAULT_CATEGORY, skills: Iterable[Skill] = (), edges: Iterable[Edge] = ()):
        self.key = key
        self._skills: Dict[str, Skill] = {}
        self._edges: Dict[Tuple[str, str], Edge] = {}
        for s in skills:
            self._skills[s.id] = s
        for e in edges:
            if e.source in self._skills and e.target in self._skills:
                self._edges.setdefault(e.key, e)

    @classmethod
    def from_records(cls, records: Iterable[Dict[str, Any]], key: str = DEFAULT_CATEGORY) -> "SkillGraph":
        g = cls(key=key)
        for rec in records:
            skill = skill_from_record(rec)
            if skill.id in g._skills:
                logger.warning("duplicate_skill_record_ignored", skill_id=skill.id, constellation=key)
                continue
            g._skills[skill.id] = skill
        dropped = 0
        self_refs = 0
        for skill in list(g._skills.values()):
            kept = []
            for pid in skill.prerequisites:
                if pid == skill.id:
                    self_refs += 1
                elif pid in g._skills:
                    kept.append(pid)
                    g._edges.setdefault((pid, skill.id), Edge(source=pid, target=skill.id))
                else:
                    dropped += 1
            if len(kept) != len(skill.prerequisites):
                skill.prerequisites = kept
        if dropped:
            logger.warning("dangling_prerequisites_dropped", constellation=key, count=dropped)
        if self_refs:
            logger.warning("self_prerequisites_dropped", constellation=key, count=self_refs)
        return g

    # -- queries

    @property
    def nodes(self) -> List[Skill]:
        return list(self._skills.values())

    @property
    def edges(self) -> List[Edge]:
        return list(self._edges.values())

    def __len__(self) -> int:
        return len(self._skills)

    def __contains__(self, skill_id: object) -> bool:
        return skill_id in self._skills

    def get(self, skill_id: str) -> Optional[Skill]:
        return self._skills.get(skill_id)

    def has_edge(self, source_id: str, target_id: str) -> bool:
        return (source_id, target_id) in self._edges

    def edge_by_id(self, eid: str) -> Optional[Edge]:
        for e in self._edges.values():
            if e.id == eid:
                return e
        return None

    def prerequisite_ids(self, skill_id: str) -> List[str]:
        return [s for (s, t) in self._edges if t == skill_id]

    def prerequisites_of(self, skill_id: str) -> List[Skill]:
        return [self._skills[s] for s in self.prerequisite_ids(skill_id) if s in self._skills]

    def dependents_of(self, skill_id: str) -> List[Skill]:
        return [self._skills[t] for (s, t) in self._edges if s == skill_id and t in self._skills]

    def constellations(self) -> Dict[str, List[Skill]]:
        return group_by_constellation(self._skills.values())

    # -- mutation

    def add_skill(self, skill: Skill) -> None:
        if skill.id in self._skills:
            raise ValueError(f"skill already exists: {skill.id}")
        prereqs = [p for p in skill.prerequisites if p in self._skills and p != skill.id]
        skill.prerequisites = []
        self._skills[skill.id] = skill
        for pid in prereqs:
            self.add_edge(pid, skill.id)

    def remove_skills(self, skill_ids: Iterable[str]) -> List[Edge]:
        ids = {i for i in skill_ids if i in self._skills}
        removed = [e for e in self._edges.values() if e.source in ids or e.target in ids]
        for e in removed:
            self.remove_edge(e.source, e.target)
        for i in ids:
            del self._skills[i]
        return removed

    def add_edge(self, source_id: str, target_id: str, data: EdgeData | None = None) -> Edge:
        if source_id not in self._skills or target_id not in self._skills:
            raise KeyError(f"unknown endpoint for edge {source_id}->{target_id}")
        key = (source_id, target_id)
        if key in self._edges:
            return self._edges[key]
        e = Edge(source=source_id, target=target_id, data=data or EdgeData())
        self._edges[key] = e
        target = self._skills[target_id]
        if source_id not in target.prerequisites:
            target.prerequisites = [*target.prerequisites, source_id]
        return e

    def remove_edge(self, source_id: str, target_id: str) -> Optional[Edge]:
        e = self._edges.pop((source_id, target_id), None)
        if e is not None and target_id in self._skills:
            target = self._skills[target_id]
            target.prerequisites = [p for p in target.prerequisites if p != source_id]
        return e

    def set_position(self, skill_id: str, position: Position) -> None:
        self._skills[skill_id].position = position

    def apply_positions(self, positions: Dict[str, Position]) -> None:
        for sid, pos in positions.items():
            if sid in self._skills:
                self._skills[sid].position = pos

    # -- conversion

    def copy(self) -> "SkillGraph":
        return SkillGraph(
            key=self.key,
            skills=[s.model_copy(deep=True) for s in self._skills.values()],
            edges=list(self._edges.values()),
        )

    def snapshot(self) -> Tuple[Tuple[Skill, ...], Tuple[Edge, ...]]:
        return tuple(s.model_copy(deep=True) for s in self._skills.values()), tuple(self.edges)

    def to_records(self) -> List[Dict[str, Any]]:
        out: List[Dict[str, Any]] = []
        for s in self._skills.values():
            rec = s.model_dump(mode="json", exclude={"prerequisites", "position"})
            rec["prerequisites"] = self.prerequisite_ids(s.id)
            rec["constellation"] = self.key
            if s.position is not None:
                rec["position"] = {"x": s.position.x, "y": s.position.y}
            out.append(rec)
        return out

