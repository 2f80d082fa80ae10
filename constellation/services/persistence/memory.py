import copy
from typing import Any, Dict, List, Tuple

from constellation.domain.models import UserSkillProgress
from constellation.services.persistence.interface import PersistenceAdapter


class MemoryPersistenceAdapter(PersistenceAdapter):
    """Process-local storage. Records are copied on the way in and out."""

    def __init__(self, graphs: Dict[str, List[Dict[str, Any]]] | None = None):
        self._graphs: Dict[str, List[Dict[str, Any]]] = copy.deepcopy(graphs or {})
        self._progress: Dict[Tuple[str, str], UserSkillProgress] = {}
        self.progress_log: List[Tuple[str, str, int]] = []

    async def load_graph(self, key: str) -> List[Dict[str, Any]]:
        return copy.deepcopy(self._graphs.get(key, []))

    async def save_graph(self, key: str, records: List[Dict[str, Any]]) -> None:
        self._graphs[key] = copy.deepcopy(records)

    async def load_progress(self, user_id: str) -> List[UserSkillProgress]:
        return [p.model_copy(deep=True) for (uid, _), p in self._progress.items() if uid == user_id]

    async def save_progress(self, user_id: str, progress: UserSkillProgress, delta: int) -> None:
        self._progress[(user_id, progress.skill_id)] = progress.model_copy(deep=True)
        self.progress_log.append((user_id, progress.skill_id, delta))
