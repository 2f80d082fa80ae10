from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_CATEGORY = "general"
DEFAULT_MAX_LEVEL = 5
DEFAULT_POINT_COST = 1
DEFAULT_XP_REWARD = 10


class StarType(str, Enum):
    DWARF = "dwarf"
    MAIN_SEQUENCE = "main-sequence"
    GIANT = "giant"
    SUPERGIANT = "supergiant"


class Position(BaseModel):
    model_config = ConfigDict(frozen=True)
    x: float
    y: float

    def offset(self, dx: float, dy: float) -> "Position":
        return Position(x=self.x + dx, y=self.y + dy)


class Skill(BaseModel):
    model_config = ConfigDict(validate_assignment=True)

    id: str
    name: str
    description: str = ""
    category: str = DEFAULT_CATEGORY
    level: int = Field(default=1, ge=1, le=5)
    max_level: int = Field(default=DEFAULT_MAX_LEVEL, ge=1)
    point_cost: int = Field(default=DEFAULT_POINT_COST, ge=1)
    xp_reward: int = Field(default=DEFAULT_XP_REWARD, ge=0)
    prerequisites: List[str] = Field(default_factory=list)
    star_type: StarType = StarType.MAIN_SEQUENCE
    position: Optional[Position] = None

    @field_validator("prerequisites")
    @classmethod
    def _dedupe(cls, v: List[str]) -> List[str]:
        seen: Dict[str, None] = {}
        for pid in v:
            seen.setdefault(str(pid), None)
        return list(seen)

    @field_validator("category", mode="before")
    @classmethod
    def _category_default(cls, v: Any) -> str:
        return str(v) if v else DEFAULT_CATEGORY


class EdgeData(BaseModel):
    is_active: bool = False
    is_available: bool = True
    can_edit: bool = True


class Edge(BaseModel):
    model_config = ConfigDict(frozen=True)

    source: str
    target: str
    data: EdgeData = Field(default_factory=EdgeData)

    @property
    def id(self) -> str:
        return edge_id(self.source, self.target)

    @property
    def key(self) -> tuple[str, str]:
        return (self.source, self.target)


EDGE_ID_SEPARATOR = "-"
EDGE_ID_ESCAPE = "~"


def _escape_edge_part(part: str) -> str:
    return part.replace(EDGE_ID_ESCAPE, EDGE_ID_ESCAPE * 2).replace(EDGE_ID_SEPARATOR, EDGE_ID_ESCAPE + EDGE_ID_SEPARATOR)


def edge_id(source: str, target: str) -> str:
    """``source-target``; ``-`` and ``~`` inside either id are escaped with ``~`` so distinct pairs never share an id."""
    return f"{_escape_edge_part(source)}{EDGE_ID_SEPARATOR}{_escape_edge_part(target)}"


VerificationSource = Literal["self", "quest", "certification", "external"]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UserSkillProgress(BaseModel):
    user_id: str
    skill_id: str
    current_level: int = Field(default=0, ge=0)
    experience_points: int = 0
    hours_logged: float = 0.0
    completed_quests: List[str] = Field(default_factory=list)
    certifications: List[str] = Field(default_factory=list)
    verification_source: VerificationSource = "self"
    last_updated: datetime = Field(default_factory=utcnow)


class SkillStatus(BaseModel):
    model_config = ConfigDict(frozen=True)
    is_unlocked: bool
    is_available: bool
