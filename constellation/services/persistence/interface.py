from abc import ABC, abstractmethod
from typing import Any, Dict, List

from constellation.domain.models import UserSkillProgress


class PersistenceAdapter(ABC):
    @abstractmethod
    async def load_graph(self, key: str) -> List[Dict[str, Any]]:
        """
        Load the authored skill records of one constellation graph.

        Args:
            key: Graph key (career path identifier).

        Returns:
            List of skill records; an empty list means no template was authored.
        """
        pass

    @abstractmethod
    async def save_graph(self, key: str, records: List[Dict[str, Any]]) -> None:
        """Replace the stored graph with ``records`` (prerequisites already flattened)."""
        pass

    @abstractmethod
    async def load_progress(self, user_id: str) -> List[UserSkillProgress]:
        pass

    @abstractmethod
    async def save_progress(self, user_id: str, progress: UserSkillProgress, delta: int) -> None:
        """Persist one progress record after a level change of ``delta``."""
        pass
