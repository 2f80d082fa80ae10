from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple, Union


class EditorMode(str, Enum):
    SELECT = "select"
    CONNECT = "connect"
    DELETE_EDGES = "delete_edges"


@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class AwaitingTarget:
    first_selected: str


ConnectionState = Union[Idle, AwaitingTarget]

IDLE = Idle()


def connection_step(state: ConnectionState, node_id: str) -> Tuple[ConnectionState, Optional[Tuple[str, str]]]:
    """Advance the two-click connection gesture.

    Returns the next state and, on the second distinct click, the
    ``(prerequisite, dependent)`` pair to connect. Clicking the first node
    again cancels.
    """
    if isinstance(state, Idle):
        return AwaitingTarget(first_selected=node_id), None
    if state.first_selected == node_id:
        return IDLE, None
    return IDLE, (state.first_selected, node_id)
