from typing import Optional

from pydantic import BaseModel, ConfigDict

from constellation.domain.models import Position, StarType
from constellation.services.editor.connection_mode import EditorMode


class NodeDisplay(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    description: str
    category: str
    star_type: StarType
    star_size: int
    is_unlocked: bool
    is_available: bool
    user_level: int
    max_level: int
    available_points: int
    can_allocate: bool
    is_first_selected: bool = False
    connection_mode: EditorMode = EditorMode.SELECT
    is_admin_mode: bool = False
    node_scale: float = 1.0
    text_scale: float = 1.0


class NodeView(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    position: Position
    data: NodeDisplay


class EdgeFlags(BaseModel):
    model_config = ConfigDict(frozen=True)

    is_active: bool
    is_available: bool
    is_delete_mode: bool = False
    can_edit: bool = True


class EdgeView(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    source: str
    target: str
    data: EdgeFlags
    label: Optional[str] = None
