from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from constellation.config.settings import get_settings
from constellation.core.errors import PersistenceError
from constellation.domain.models import UserSkillProgress
from constellation.services.persistence import neo4j_adapter
from constellation.services.persistence.neo4j_adapter import Neo4jPersistenceAdapter, get_driver


def test_get_driver_requires_connection_settings():
    with pytest.raises(PersistenceError):
        get_driver()

def test_get_driver_uses_settings(monkeypatch):
    monkeypatch.setenv("NEO4J_URI", "bolt://localhost:7687")
    monkeypatch.setenv("NEO4J_USER", "neo4j")
    monkeypatch.setenv("NEO4J_PASSWORD", "secret")
    get_settings.cache_clear()
    with patch("constellation.services.persistence.neo4j_adapter.AsyncGraphDatabase") as MockDb:
        drv = get_driver()
    MockDb.driver.assert_called_once_with("bolt://localhost:7687", auth=("neo4j", "secret"))
    assert drv is MockDb.driver.return_value

@pytest.mark.asyncio
async def test_save_graph_writes_skills_and_links():
    repo = Neo4jPersistenceAdapter(driver=MagicMock())
    repo._write = AsyncMock()
    records = [
        {"id": "A", "name": "A", "prerequisites": [], "position": {"x": 1.0, "y": 2.0}},
        {"id": "B", "name": "B", "prerequisites": ["A"]},
    ]
    await repo.save_graph("web", records)
    queries = [c.args[0] for c in repo._write.call_args_list]
    assert queries == [
        neo4j_adapter.PRUNE_GRAPH,
        neo4j_adapter.UPSERT_SKILLS,
        neo4j_adapter.UNLINK_PREREQS,
        neo4j_adapter.LINK_PREREQS,
    ]
    rows = repo._write.call_args_list[1].args[1]["rows"]
    assert rows[0]["pos_x"] == 1.0 and "position" not in rows[0]
    assert rows[1]["ord"] == 1
    links = repo._write.call_args_list[3].args[1]["links"]
    assert links == [{"source": "A", "target": "B"}]

@pytest.mark.asyncio
async def test_save_graph_without_links_skips_link_query():
    repo = Neo4jPersistenceAdapter(driver=MagicMock())
    repo._write = AsyncMock()
    await repo.save_graph("web", [{"id": "A", "name": "A", "prerequisites": []}])
    queries = [c.args[0] for c in repo._write.call_args_list]
    assert neo4j_adapter.LINK_PREREQS not in queries

@pytest.mark.asyncio
async def test_load_graph_restores_positions():
    repo = Neo4jPersistenceAdapter(driver=MagicMock())
    repo._read = AsyncMock(return_value=[{"props": {"id": "A", "name": "A", "pos_x": 1.0, "pos_y": 2.0, "ord": 0}}])
    assert await repo.load_graph("web") == [{"id": "A", "name": "A", "position": {"x": 1.0, "y": 2.0}}]

@pytest.mark.asyncio
async def test_progress_round_trip_through_queries():
    repo = Neo4jPersistenceAdapter(driver=MagicMock())
    repo._write = AsyncMock()
    p = UserSkillProgress(user_id="u1", skill_id="A", current_level=2)
    await repo.save_progress("u1", p, 1)
    params = repo._write.call_args.args[1]
    assert params["skill_id"] == "A" and params["delta"] == 1
    assert params["props"]["current_level"] == 2

    repo._read = AsyncMock(return_value=[{"props": {**params["props"], "last_delta": 1}}])
    [loaded] = await repo.load_progress("u1")
    assert loaded.current_level == 2
    assert loaded.last_updated == p.last_updated

@pytest.mark.asyncio
async def test_close_releases_driver():
    drv = MagicMock()
    drv.close = AsyncMock()
    repo = Neo4jPersistenceAdapter(driver=drv)
    await repo.close()
    drv.close.assert_awaited_once()

class _FakeSession:
    def __init__(self, tx):
        self.tx = tx

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False

    async def execute_read(self, fn):
        return await fn(self.tx)

    async def execute_write(self, fn):
        return await fn(self.tx)


def _driver_with(rows):
    result = MagicMock()
    result.__aiter__.return_value = rows
    result.consume = AsyncMock()
    tx = MagicMock()
    tx.run = AsyncMock(return_value=result)
    drv = MagicMock()
    drv.session.return_value = _FakeSession(tx)
    return drv, tx, result

@pytest.mark.asyncio
async def test_load_graph_runs_query_in_read_transaction():
    drv, tx, _ = _driver_with([{"props": {"id": "A", "name": "A", "ord": 0}}])
    repo = Neo4jPersistenceAdapter(driver=drv)
    assert await repo.load_graph("web") == [{"id": "A", "name": "A"}]
    tx.run.assert_awaited_once_with(neo4j_adapter.LOAD_GRAPH, key="web")

@pytest.mark.asyncio
async def test_save_progress_runs_query_in_write_transaction():
    drv, tx, result = _driver_with([])
    repo = Neo4jPersistenceAdapter(driver=drv)
    p = UserSkillProgress(user_id="u1", skill_id="A", current_level=1)
    await repo.save_progress("u1", p, 1)
    tx.run.assert_awaited_once()
    assert tx.run.call_args.args[0] == neo4j_adapter.UPSERT_PROGRESS
    kwargs = tx.run.call_args.kwargs
    assert kwargs["user_id"] == "u1" and kwargs["skill_id"] == "A" and kwargs["delta"] == 1
    assert kwargs["props"]["current_level"] == 1
    result.consume.assert_awaited_once()
