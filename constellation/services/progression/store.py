"""
Per-user progression over one skill graph.

Levels live in ``UserSkillProgress`` records created lazily on first
interaction. Availability is derived from direct prerequisites only. Policy
violations never raise: ``allocate`` returns an ``AllocationResult`` with a
reason and publishes an info notice. Adapter failures are re-raised after an
error notice; the in-memory record keeps its optimistic value.
"""

from typing import Dict, List, Literal, Optional

from pydantic import BaseModel

from constellation.core.logging import logger
from constellation.domain.models import DEFAULT_CATEGORY, Skill, SkillStatus, UserSkillProgress, utcnow
from constellation.events.publisher import NoticePublisher
from constellation.services.graph.model import SkillGraph
from constellation.services.persistence.interface import PersistenceAdapter
from constellation.services.progression.budget import PointBudget

XP_PER_POINT = 100
XP_PER_HOUR = 10

AllocationReason = Literal["unknown_skill", "not_available", "insufficient_points", "at_max_level", "at_zero"]

_REASON_MESSAGES = {
    "unknown_skill": "Skill not found",
    "not_available": "Unlock the prerequisites first",
    "insufficient_points": "Not enough skill points",
    "at_max_level": "Skill is already at max level",
    "at_zero": "No points invested in this skill",
}


class AllocationResult(BaseModel):
    applied: bool
    skill_id: str
    delta: int
    level: int
    available_points: int
    reason: Optional[AllocationReason] = None


class ProgressionStore:
    def __init__(
        self,
        graph: SkillGraph,
        adapter: Optional[PersistenceAdapter] = None,
        notices: Optional[NoticePublisher] = None,
        budget: Optional[PointBudget] = None,
    ):
        self.graph = graph
        self.adapter = adapter
        self.notices = notices or NoticePublisher()
        self.budget = budget or PointBudget.from_settings()
        self._progress: Dict[str, Dict[str, UserSkillProgress]] = {}

    # -- reads

    def _records(self, user_id: str) -> Dict[str, UserSkillProgress]:
        return self._progress.setdefault(user_id, {})

    def progress_for(self, user_id: str, skill_id: str) -> Optional[UserSkillProgress]:
        return self._records(user_id).get(skill_id)

    def level_of(self, user_id: str, skill_id: str) -> int:
        p = self.progress_for(user_id, skill_id)
        return p.current_level if p else 0

    def total_levels(self, user_id: str) -> int:
        return sum(p.current_level for p in self._records(user_id).values())

    def available_points(self, user_id: str) -> int:
        investments = []
        for sid, p in self._records(user_id).items():
            skill = self.graph.get(sid)
            investments.append((p.current_level, skill.point_cost if skill else 1))
        return self.budget.available(investments)

    def status_of(self, user_id: str, skill: Skill | str) -> SkillStatus:
        skill_id = skill if isinstance(skill, str) else skill.id
        unlocked = self.level_of(user_id, skill_id) > 0
        prereqs = self.graph.prerequisite_ids(skill_id)
        available = unlocked or not prereqs or all(self.level_of(user_id, p) > 0 for p in prereqs)
        return SkillStatus(is_unlocked=unlocked, is_available=available)

    def can_allocate(self, user_id: str, skill_id: str) -> bool:
        return self._refusal(user_id, skill_id, 1) is None

    def constellation_summary(self, user_id: str) -> Dict[str, Dict[str, float]]:
        out: Dict[str, Dict[str, float]] = {}
        for name, members in self.graph.constellations().items():
            unlocked = sum(1 for s in members if self.level_of(user_id, s.id) > 0)
            total = len(members)
            out[name] = {
                "unlocked": unlocked,
                "total": total,
                "completion": round(100.0 * unlocked / total, 1) if total else 0.0,
            }
        return out

    # -- writes

    def _refusal(self, user_id: str, skill_id: str, delta: int) -> Optional[AllocationReason]:
        skill = self.graph.get(skill_id)
        if skill is None:
            return "unknown_skill"
        level = self.level_of(user_id, skill_id)
        if delta < 0:
            return "at_zero" if level <= 0 else None
        if level + 1 > skill.max_level:
            return "at_max_level"
        if not self.status_of(user_id, skill_id).is_available:
            return "not_available"
        if self.available_points(user_id) < skill.point_cost:
            return "insufficient_points"
        return None

    def _ensure(self, user_id: str, skill_id: str) -> UserSkillProgress:
        recs = self._records(user_id)
        if skill_id not in recs:
            recs[skill_id] = UserSkillProgress(user_id=user_id, skill_id=skill_id)
        return recs[skill_id]

    async def _persist(self, user_id: str, progress: UserSkillProgress, delta: int) -> None:
        if self.adapter is None:
            return
        try:
            await self.adapter.save_progress(user_id, progress, delta)
        except Exception as e:
            self.notices.error("Failed to save progress", skill_id=progress.skill_id, error=str(e))
            raise

    async def load(self, user_id: str) -> int:
        if self.adapter is None:
            return 0
        records = await self.adapter.load_progress(user_id)
        recs = self._records(user_id)
        recs.clear()
        for p in records:
            if p.skill_id not in self.graph:
                logger.warning("progress_for_unknown_skill", user_id=user_id, skill_id=p.skill_id)
            recs[p.skill_id] = p
        logger.info("progress_loaded", user_id=user_id, records=len(records))
        return len(records)

    async def allocate(self, user_id: str, skill_id: str, delta: int) -> AllocationResult:
        if delta not in (1, -1):
            raise ValueError(f"delta must be +1 or -1, got {delta}")
        reason = self._refusal(user_id, skill_id, delta)
        if reason is not None:
            logger.info("allocation_refused", user_id=user_id, skill_id=skill_id, delta=delta, reason=reason)
            self.notices.info(_REASON_MESSAGES[reason], skill_id=skill_id, reason=reason)
            return AllocationResult(
                applied=False,
                skill_id=skill_id,
                delta=delta,
                level=self.level_of(user_id, skill_id),
                available_points=self.available_points(user_id),
                reason=reason,
            )
        skill = self.graph.get(skill_id)
        p = self._ensure(user_id, skill_id)
        p.current_level += delta
        p.experience_points = max(0, p.experience_points + delta * skill.point_cost * XP_PER_POINT)
        p.verification_source = "self"
        p.last_updated = utcnow()
        logger.info("points_allocated", user_id=user_id, skill_id=skill_id, delta=delta, level=p.current_level)
        await self._persist(user_id, p, delta)
        return AllocationResult(
            applied=True,
            skill_id=skill_id,
            delta=delta,
            level=p.current_level,
            available_points=self.available_points(user_id),
        )

    async def reset_all(self, user_id: str, constellation: Optional[str] = None) -> List[str]:
        """Zero every invested skill in ``constellation`` (whole graph when None or the graph key).

        All levels drop in one step before anything is persisted; the budget is
        derived from levels so the refund is applied exactly once.
        """
        whole = constellation is None or constellation == self.graph.key
        changed: List[tuple[UserSkillProgress, int]] = []
        costs: Dict[str, int] = {}
        for sid, p in self._records(user_id).items():
            skill = self.graph.get(sid)
            if not whole and (skill is None or (skill.category or DEFAULT_CATEGORY) != constellation):
                continue
            if p.current_level > 0:
                changed.append((p, -p.current_level))
                costs[sid] = skill.point_cost if skill else 1
        now = utcnow()
        for p, delta in changed:
            p.current_level = 0
            p.experience_points = max(0, p.experience_points + delta * costs[p.skill_id] * XP_PER_POINT)
            p.last_updated = now
        logger.info("progress_reset", user_id=user_id, constellation=constellation or self.graph.key, skills=len(changed))
        for p, delta in changed:
            await self._persist(user_id, p, delta)
        if changed:
            self.notices.success("Skill points reset", count=len(changed))
        return [p.skill_id for p, _ in changed]

    async def log_activity(self, user_id: str, skill_id: str, hours: float, quest_id: Optional[str] = None) -> Optional[UserSkillProgress]:
        if skill_id not in self.graph:
            self.notices.info(_REASON_MESSAGES["unknown_skill"], skill_id=skill_id, reason="unknown_skill")
            return None
        p = self._ensure(user_id, skill_id)
        p.hours_logged = max(0.0, p.hours_logged + hours)
        p.experience_points = max(0, p.experience_points + round(hours * XP_PER_HOUR))
        if quest_id and quest_id not in p.completed_quests:
            p.completed_quests = [*p.completed_quests, quest_id]
            p.verification_source = "quest"
        p.last_updated = utcnow()
        logger.info("activity_logged", user_id=user_id, skill_id=skill_id, hours=hours, quest_id=quest_id)
        await self._persist(user_id, p, 0)
        return p
