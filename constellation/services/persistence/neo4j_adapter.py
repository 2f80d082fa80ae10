from typing import Any, Dict, List, Optional

from neo4j import AsyncGraphDatabase

from constellation.config.settings import get_settings
from constellation.core.correlation import get_session_id
from constellation.core.errors import PersistenceError
from constellation.core.logging import logger
from constellation.domain.models import UserSkillProgress
from constellation.services.persistence.interface import PersistenceAdapter

LOAD_GRAPH = (
    "MATCH (s:Skill {constellation:$key}) "
    "RETURN properties(s) AS props ORDER BY s.ord"
)
PRUNE_GRAPH = (
    "MATCH (s:Skill {constellation:$key}) WHERE NOT s.id IN $ids "
    "DETACH DELETE s"
)
UPSERT_SKILLS = (
    "UNWIND $rows AS row "
    "MERGE (s:Skill {constellation:$key, id:row.id}) "
    "SET s += row"
)
UNLINK_PREREQS = (
    "MATCH (:Skill {constellation:$key})-[r:PREREQ]->(:Skill {constellation:$key}) DELETE r"
)
LINK_PREREQS = (
    "UNWIND $links AS l "
    "MATCH (a:Skill {constellation:$key, id:l.source}), (b:Skill {constellation:$key, id:l.target}) "
    "MERGE (a)-[:PREREQ]->(b)"
)
LOAD_PROGRESS = (
    "MATCH (p:SkillProgress {user_id:$user_id}) "
    "RETURN properties(p) AS props"
)
UPSERT_PROGRESS = (
    "MERGE (p:SkillProgress {user_id:$user_id, skill_id:$skill_id}) "
    "SET p += $props, p.last_delta = $delta"
)


def get_driver():
    s = get_settings()
    uri = s.neo4j_uri
    user = s.neo4j_user
    password = s.neo4j_password.get_secret_value()
    if not (uri and user and password):
        raise PersistenceError("Missing Neo4j connection environment variables")
    return AsyncGraphDatabase.driver(uri, auth=(user, password))


def _flatten(rec: Dict[str, Any], ordinal: int) -> Dict[str, Any]:
    row = {k: v for k, v in rec.items() if k != "position"}
    pos = rec.get("position")
    if isinstance(pos, dict):
        row["pos_x"] = pos.get("x")
        row["pos_y"] = pos.get("y")
    row["ord"] = ordinal
    return row


def _unflatten(props: Dict[str, Any]) -> Dict[str, Any]:
    rec = {k: v for k, v in props.items() if k not in ("pos_x", "pos_y", "ord")}
    if props.get("pos_x") is not None and props.get("pos_y") is not None:
        rec["position"] = {"x": props["pos_x"], "y": props["pos_y"]}
    return rec


class Neo4jPersistenceAdapter(PersistenceAdapter):
    """Skills as ``:Skill`` nodes keyed by (constellation, id) with ``:PREREQ`` links; progress as ``:SkillProgress``."""

    def __init__(self, driver=None):
        self._driver = driver

    @property
    def driver(self):
        if self._driver is None:
            self._driver = get_driver()
        return self._driver

    async def close(self) -> None:
        if self._driver is not None:
            await self._driver.close()
            self._driver = None

    async def _read(self, query: str, params: Optional[Dict] = None) -> List[Dict]:
        logger.info("neo4j_read", session_id=get_session_id() or "")
        async with self.driver.session() as session:
            async def reader(tx):
                res = await tx.run(query, **(params or {}))
                return [dict(r) async for r in res]
            return await session.execute_read(reader)

    async def _write(self, query: str, params: Optional[Dict] = None) -> None:
        logger.info("neo4j_write", session_id=get_session_id() or "")
        async with self.driver.session() as session:
            async def writer(tx):
                res = await tx.run(query, **(params or {}))
                await res.consume()
            await session.execute_write(writer)

    async def load_graph(self, key: str) -> List[Dict[str, Any]]:
        rows = await self._read(LOAD_GRAPH, {"key": key})
        return [_unflatten(r["props"]) for r in rows]

    async def save_graph(self, key: str, records: List[Dict[str, Any]]) -> None:
        rows = [_flatten(rec, i) for i, rec in enumerate(records)]
        links = [{"source": p, "target": rec["id"]} for rec in records for p in rec.get("prerequisites", [])]
        await self._write(PRUNE_GRAPH, {"key": key, "ids": [r["id"] for r in rows]})
        if rows:
            await self._write(UPSERT_SKILLS, {"key": key, "rows": rows})
        await self._write(UNLINK_PREREQS, {"key": key})
        if links:
            await self._write(LINK_PREREQS, {"key": key, "links": links})
        logger.info("graph_saved", constellation=key, skills=len(rows), links=len(links))

    async def load_progress(self, user_id: str) -> List[UserSkillProgress]:
        rows = await self._read(LOAD_PROGRESS, {"user_id": user_id})
        out: List[UserSkillProgress] = []
        for r in rows:
            props = {k: v for k, v in r["props"].items() if k != "last_delta"}
            out.append(UserSkillProgress.model_validate(props))
        return out

    async def save_progress(self, user_id: str, progress: UserSkillProgress, delta: int) -> None:
        props = progress.model_dump(mode="json")
        await self._write(
            UPSERT_PROGRESS,
            {"user_id": user_id, "skill_id": progress.skill_id, "props": props, "delta": delta},
        )
