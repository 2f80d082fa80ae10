import pytest

from constellation.config.settings import get_settings
from constellation.domain.models import Skill
from constellation.services.graph.model import SkillGraph


@pytest.fixture(autouse=True)
def test_env(monkeypatch):
    monkeypatch.setenv('APP_ENV', 'dev')
    monkeypatch.setenv('LOG_JSON', 'false')
    monkeypatch.setenv('NEO4J_URI', '')
    monkeypatch.setenv('NEO4J_USER', '')
    monkeypatch.setenv('NEO4J_PASSWORD', '')
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def abc_graph():
    """A -> B -> C, all in one constellation."""
    return SkillGraph.from_records(
        [
            {"id": "A", "name": "Alpha", "category": "web"},
            {"id": "B", "name": "Beta", "category": "web", "prerequisites": ["A"]},
            {"id": "C", "name": "Gamma", "category": "web", "prerequisites": ["B"]},
        ],
        key="web-dev",
    )


@pytest.fixture
def make_skills():
    def _make(n, category="general"):
        return [Skill(id=f"S{i}", name=f"Skill {i}", category=category) for i in range(n)]
    return _make
