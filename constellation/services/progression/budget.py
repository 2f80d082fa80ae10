from dataclasses import dataclass
from typing import Iterable, Tuple

from constellation.config.settings import get_settings


@dataclass(frozen=True)
class PointBudget:
    """Points earned from invested levels minus points spent on them.

    Spent points are always recomputed from the current levels, so a refund
    or a full reset can never count a point twice.
    """

    base: int
    bonus: int
    step: int

    @classmethod
    def from_settings(cls) -> "PointBudget":
        s = get_settings()
        return cls(base=s.base_points, bonus=s.bonus_points, step=s.bonus_level_step)

    def earned(self, total_levels: int) -> int:
        return self.base + (max(0, total_levels) // self.step) * self.bonus

    def spent(self, investments: Iterable[Tuple[int, int]]) -> int:
        return sum(level * cost for level, cost in investments)

    def available(self, investments: Iterable[Tuple[int, int]]) -> int:
        pairs = list(investments)
        total = sum(level for level, _ in pairs)
        return max(0, self.earned(total) - self.spent(pairs))
