"""
Admin editing session over one constellation graph.

Every structural mutation records a copy of the graph in the edit history
*before* it is applied (which also clears redo). Dragging a node and stepping
the connection gesture are not recorded. Policy violations (unknown ids,
duplicate connections, empty selections) are no-ops reported through the
notice publisher.
"""

import uuid
from typing import Any, Dict, Iterable, List, Optional

from constellation.config.settings import Settings, get_settings
from constellation.core.canonical import canonical_hash_from_json
from constellation.core.correlation import new_session_id, set_session_id
from constellation.core.errors import PersistenceError
from constellation.core.logging import logger
from constellation.core.math import snap
from constellation.domain.models import DEFAULT_CATEGORY, DEFAULT_XP_REWARD, Edge, Position, Skill, StarType
from constellation.events.publisher import NoticePublisher
from constellation.services.editor.connection_mode import IDLE, AwaitingTarget, ConnectionState, EditorMode, connection_step
from constellation.services.editor.history import EditHistory
from constellation.services.graph.model import SkillGraph, skill_from_record
from constellation.services.graph.stars import proficiency_star_type
from constellation.services.integrity import integrity_check_graph, would_create_cycle
from constellation.services.layout.engine import compute_layout, compute_layout_async
from constellation.services.layout.placement import default_constellation_positions, import_positions
from constellation.services.layout.settings import LayoutSettings
from constellation.services.persistence.interface import PersistenceAdapter

NEW_SKILL_DEFAULTS: Dict[str, Any] = {
    "name": "New Skill",
    "description": "Description for new skill",
    "level": 1,
    "category": DEFAULT_CATEGORY,
    "xp_reward": DEFAULT_XP_REWARD,
    "star_type": StarType.MAIN_SEQUENCE,
}
NEW_SKILL_POSITION = Position(x=400.0, y=300.0)
EDITABLE_FIELDS = frozenset({"name", "description", "category", "level", "max_level", "point_cost", "xp_reward", "star_type"})


def _new_suffix() -> str:
    return uuid.uuid4().hex[:12]


class GraphEditSession:
    def __init__(
        self,
        graph: Optional[SkillGraph] = None,
        adapter: Optional[PersistenceAdapter] = None,
        notices: Optional[NoticePublisher] = None,
        settings: Optional[Settings] = None,
        session_id: Optional[str] = None,
    ):
        s = settings or get_settings()
        self.graph = graph if graph is not None else SkillGraph()
        self.adapter = adapter
        self.notices = notices or NoticePublisher(maxlen=s.notice_feed_size)
        self.history: EditHistory[SkillGraph] = EditHistory(depth=s.history_depth)
        self.grid_size = s.grid_size
        self.duplicate_offset = s.duplicate_offset
        self.mode = EditorMode.SELECT
        self.connection: ConnectionState = IDLE
        self.has_template = len(self.graph) > 0
        self.session_id = session_id or new_session_id()
        set_session_id(self.session_id)
        self._log = logger.bind(session_id=self.session_id)
        self._saved_checksum = self.checksum()

    # -- state

    @property
    def nodes(self) -> List[Skill]:
        return self.graph.nodes

    @property
    def edges(self) -> List[Edge]:
        return self.graph.edges

    def snapshot(self):
        return self.graph.snapshot()

    def checksum(self) -> str:
        return canonical_hash_from_json(self.graph.to_records())

    @property
    def has_unsaved_changes(self) -> bool:
        return self.checksum() != self._saved_checksum

    @property
    def first_selected(self) -> Optional[str]:
        return self.connection.first_selected if isinstance(self.connection, AwaitingTarget) else None

    def _record(self) -> None:
        self.history.record(self.graph.copy())

    # -- nodes

    def _unique_id(self, prefix: str) -> str:
        nid = f"{prefix}{_new_suffix()}"
        while nid in self.graph:
            nid = f"{prefix}{_new_suffix()}"
        return nid

    def create_node(self, defaults: Optional[Dict[str, Any]] = None, position: Optional[Position] = None) -> str:
        fields = {**NEW_SKILL_DEFAULTS, **(defaults or {})}
        fields.pop("id", None)
        fields.pop("prerequisites", None)
        at = fields.pop("position", None)
        skill = Skill(id=self._unique_id("skill_"), position=position or at or NEW_SKILL_POSITION, **fields)
        self._record()
        self.graph.add_skill(skill)
        self._log.info("node_created", skill_id=skill.id)
        self.notices.success("Skill created", skill_id=skill.id)
        return skill.id

    def duplicate_nodes(self, node_ids: Iterable[str]) -> List[str]:
        originals = [self.graph.get(i) for i in dict.fromkeys(node_ids) if i in self.graph]
        if not originals:
            self.notices.warning("No skills selected to duplicate")
            return []
        self._record()
        new_ids: List[str] = []
        for src in originals:
            base = src.position or NEW_SKILL_POSITION
            dup = src.model_copy(
                deep=True,
                update={
                    "id": self._unique_id(f"{src.id}_copy_"),
                    "name": f"{src.name} (Copy)",
                    "prerequisites": [],
                    "position": base.offset(self.duplicate_offset, self.duplicate_offset),
                },
            )
            self.graph.add_skill(dup)
            new_ids.append(dup.id)
        self._log.info("nodes_duplicated", sources=[s.id for s in originals], created=new_ids)
        self.notices.success(f"Duplicated {len(new_ids)} skill(s)")
        return new_ids

    def delete_nodes(self, node_ids: Iterable[str]) -> List[Edge]:
        ids = [i for i in dict.fromkeys(node_ids) if i in self.graph]
        if not ids:
            self.notices.warning("No skills selected for deletion")
            return []
        self._record()
        removed = self.graph.remove_skills(ids)
        if self.first_selected in ids:
            self.connection = IDLE
        self._log.info("nodes_deleted", skill_ids=ids, edges_removed=len(removed))
        self.notices.success(f"Deleted {len(ids)} skill(s)")
        return removed

    def update_node(self, node_id: str, **fields: Any) -> Optional[Skill]:
        skill = self.graph.get(node_id)
        if skill is None:
            self.notices.warning("Skill not found", skill_id=node_id)
            return None
        unknown = set(fields) - EDITABLE_FIELDS
        if unknown:
            raise ValueError(f"fields cannot be edited: {sorted(unknown)}")
        updated = Skill.model_validate({**skill.model_dump(), **fields})
        self._record()
        for k in fields:
            setattr(skill, k, getattr(updated, k))
        self._log.info("node_updated", skill_id=node_id, fields=sorted(fields))
        self.notices.success("Skill updated successfully", skill_id=node_id)
        return skill

    def move_node(self, node_id: str, position: Position) -> bool:
        if node_id not in self.graph:
            self.notices.warning("Skill not found", skill_id=node_id)
            return False
        self.graph.set_position(node_id, position)
        return True

    # -- edges

    def create_edge(self, source_id: str, target_id: str) -> Optional[Edge]:
        source, target = self.graph.get(source_id), self.graph.get(target_id)
        if source is None or target is None:
            self.notices.warning("Cannot connect: skill not found", source=source_id, target=target_id)
            return None
        if source_id == target_id:
            self.notices.warning("A skill cannot be its own prerequisite", skill_id=source_id)
            return None
        if self.graph.has_edge(source_id, target_id):
            self.notices.warning("Connection already exists between these skills.", source=source_id, target=target_id)
            return None
        closes_cycle = would_create_cycle(self.graph.edges, source_id, target_id)
        self._record()
        edge = self.graph.add_edge(source_id, target_id)
        self._log.info("edge_created", source=source_id, target=target_id, closes_cycle=closes_cycle)
        self.notices.success(f"Connected {source.name} → {target.name}", edge_id=edge.id)
        if closes_cycle:
            self.notices.warning("This connection creates a prerequisite cycle", edge_id=edge.id)
        return edge

    def delete_edge(self, eid: str) -> Optional[Edge]:
        edge = self.graph.edge_by_id(eid)
        if edge is None:
            self.notices.warning("Connection not found", edge_id=eid)
            return None
        self._record()
        self.graph.remove_edge(edge.source, edge.target)
        self._log.info("edge_deleted", source=edge.source, target=edge.target)
        self.notices.success("Removed prerequisite", edge_id=eid)
        return edge

    # -- modes

    def set_mode(self, mode: EditorMode | str) -> EditorMode:
        new_mode = EditorMode(mode)
        if self.mode is EditorMode.CONNECT and new_mode is not EditorMode.CONNECT:
            self.connection = IDLE
        self.mode = new_mode
        self._log.info("editor_mode_changed", mode=new_mode.value)
        return new_mode

    def connection_mode_step(self, node_id: str) -> Optional[Edge]:
        if node_id not in self.graph:
            self.notices.warning("Skill not found", skill_id=node_id)
            return None
        previous = self.connection
        self.connection, pair = connection_step(previous, node_id)
        if pair is not None:
            return self.create_edge(*pair)
        if isinstance(self.connection, AwaitingTarget):
            self.notices.info("Selected prerequisite. Now click the dependent skill.", skill_id=node_id)
        else:
            self.notices.warning("Selection cancelled. Click a skill to start over.")
        return None

    # -- history

    def undo(self) -> bool:
        previous = self.history.undo(self.graph)
        if previous is None:
            return False
        self.graph = previous
        self.connection = IDLE
        self._log.info("undo", undo_depth=self.history.undo_depth, redo_depth=self.history.redo_depth)
        return True

    def redo(self) -> bool:
        following = self.history.redo(self.graph)
        if following is None:
            return False
        self.graph = following
        self.connection = IDLE
        self._log.info("redo", undo_depth=self.history.undo_depth, redo_depth=self.history.redo_depth)
        return True

    # -- geometry

    def align_to_grid(self, node_ids: Iterable[str], grid_size: Optional[int] = None) -> int:
        g = grid_size or self.grid_size
        skills = [self.graph.get(i) for i in dict.fromkeys(node_ids) if i in self.graph]
        if not skills:
            self.notices.warning("No nodes selected for alignment")
            return 0
        if g <= 0:
            raise ValueError("grid_size must be positive")
        self._record()
        for s in skills:
            p = s.position or NEW_SKILL_POSITION
            self.graph.set_position(s.id, Position(x=snap(p.x, g), y=snap(p.y, g)))
        self.notices.success(f"Aligned {len(skills)} node(s) to grid")
        return len(skills)

    def apply_layout(self, settings: Optional[LayoutSettings] = None) -> Dict[str, Position]:
        st = settings or LayoutSettings.from_settings()
        positions = compute_layout(self.graph.nodes, self.graph.edges, st)
        self._record()
        self.graph.apply_positions(positions)
        self.notices.success(f"Applied {st.algorithm.value} layout")
        return positions

    async def apply_layout_async(self, settings: Optional[LayoutSettings] = None) -> Dict[str, Position]:
        st = settings or LayoutSettings.from_settings()
        positions = await compute_layout_async(self.graph.nodes, self.graph.edges, st)
        self._record()
        self.graph.apply_positions(positions)
        self.notices.success(f"Applied {st.algorithm.value} layout")
        return positions

    def import_skills(self, records: Iterable[Dict[str, Any]]) -> List[str]:
        fresh: List[Skill] = []
        links: List[tuple[str, str]] = []
        for rec in records:
            if not rec.get("id"):
                rec = {**rec, "id": self._unique_id("skill_")}
            skill = skill_from_record(rec)
            if skill.id in self.graph or any(s.id == skill.id for s in fresh):
                self._log.warning("import_skill_exists", skill_id=skill.id)
                continue
            if rec.get("proficiency") is not None and not rec.get("star_type") and not rec.get("starType"):
                skill.star_type = proficiency_star_type(rec.get("proficiency"))
            links.extend((p, skill.id) for p in skill.prerequisites if p != skill.id)
            skill.prerequisites = []
            fresh.append(skill)
        if not fresh:
            self.notices.warning("No new skills to import")
            return []
        positions = import_positions([s.id for s in fresh], self.grid_size)
        self._record()
        for s in fresh:
            s.position = positions[s.id]
            self.graph.add_skill(s)
        for src, dst in links:
            if src in self.graph:
                self.graph.add_edge(src, dst)
        self._log.info("skills_imported", count=len(fresh))
        self.notices.success(f"Imported {len(fresh)} skill(s)")
        return [s.id for s in fresh]

    def validate(self) -> Dict[str, Any]:
        report = integrity_check_graph(self.graph.nodes, self.graph.edges)
        if not report["ok"]:
            self._log.warning("graph_integrity_failed", cycles=len(report["prereq_cycles"]), dangling=len(report["dangling_edges"]))
        return report

    # -- persistence

    def _require_adapter(self) -> PersistenceAdapter:
        if self.adapter is None:
            raise PersistenceError("no persistence adapter configured")
        return self.adapter

    async def load(self, key: Optional[str] = None) -> SkillGraph:
        adapter = self._require_adapter()
        graph_key = key or self.graph.key
        try:
            records = await adapter.load_graph(graph_key)
        except Exception as e:
            self.notices.error(f"Error loading constellation: {e}", constellation=graph_key)
            raise
        graph = SkillGraph.from_records(records, key=graph_key)
        graph.apply_positions(default_constellation_positions(graph.nodes))
        self.graph = graph
        self.has_template = bool(records)
        self.history.clear()
        self.connection = IDLE
        self._saved_checksum = self.checksum()
        self._log.info("graph_loaded", constellation=graph_key, skills=len(graph), edges=len(graph.edges))
        if not self.has_template:
            self.notices.info("No constellation template found", constellation=graph_key)
        return graph

    async def save(self) -> int:
        adapter = self._require_adapter()
        records = self.graph.to_records()
        try:
            await adapter.save_graph(self.graph.key, records)
        except Exception as e:
            self.notices.error(f"Error saving changes: {e}", constellation=self.graph.key)
            raise
        self._saved_checksum = canonical_hash_from_json(records)
        self.has_template = bool(records)
        self._log.info("graph_saved", constellation=self.graph.key, skills=len(records))
        self.notices.success(f"Successfully saved {len(records)} skills to constellation")
        return len(records)
