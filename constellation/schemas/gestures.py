from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from constellation.domain.models import Position


class _Gesture(BaseModel):
    model_config = ConfigDict(frozen=True)


class NodeClicked(_Gesture):
    kind: Literal["node_clicked"] = "node_clicked"
    node_id: str


class EdgeClicked(_Gesture):
    kind: Literal["edge_clicked"] = "edge_clicked"
    edge_id: str


class NodeDragged(_Gesture):
    kind: Literal["node_dragged"] = "node_dragged"
    node_id: str
    position: Position


class ConnectionDrawn(_Gesture):
    kind: Literal["connection_drawn"] = "connection_drawn"
    source_id: str
    target_id: str


Gesture = Annotated[Union[NodeClicked, EdgeClicked, NodeDragged, ConnectionDrawn], Field(discriminator="kind")]

gesture_adapter: TypeAdapter[Gesture] = TypeAdapter(Gesture)
