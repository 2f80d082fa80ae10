from typing import Any, Dict, List, Optional

from constellation.core.logging import logger
from constellation.schemas.gestures import ConnectionDrawn, EdgeClicked, Gesture, NodeClicked, NodeDragged, gesture_adapter
from constellation.schemas.views import EdgeView, NodeView
from constellation.services.editor.connection_mode import EditorMode
from constellation.services.editor.session import GraphEditSession
from constellation.services.presentation.views import build_edge_views, build_node_views


class GestureRouter:
    """Routes rendering-surface gestures into an edit session and tracks the selection."""

    def __init__(self, session: GraphEditSession, node_scale: float = 1.0, text_scale: float = 1.0):
        self.session = session
        self.node_scale = node_scale
        self.text_scale = text_scale
        self.selected_nodes: List[str] = []
        self.selected_edge: Optional[str] = None

    def dispatch(self, gesture: Gesture | Dict[str, Any]) -> Any:
        if isinstance(gesture, dict):
            gesture = gesture_adapter.validate_python(gesture)
        s = self.session
        if isinstance(gesture, NodeClicked):
            if s.mode is EditorMode.CONNECT:
                return s.connection_mode_step(gesture.node_id)
            if gesture.node_id in s.graph:
                self.selected_nodes = [gesture.node_id]
            return None
        if isinstance(gesture, EdgeClicked):
            if s.mode is EditorMode.DELETE_EDGES:
                self.selected_edge = None
                return s.delete_edge(gesture.edge_id)
            self.selected_edge = gesture.edge_id
            return None
        if isinstance(gesture, NodeDragged):
            return s.move_node(gesture.node_id, gesture.position)
        if isinstance(gesture, ConnectionDrawn):
            return s.create_edge(gesture.source_id, gesture.target_id)
        logger.warning("gesture_ignored", gesture=type(gesture).__name__)
        return None

    def prune_selection(self) -> None:
        self.selected_nodes = [i for i in self.selected_nodes if i in self.session.graph]
        if self.selected_edge and self.session.graph.edge_by_id(self.selected_edge) is None:
            self.selected_edge = None

    def node_views(self) -> List[NodeView]:
        s = self.session
        return build_node_views(
            s.graph,
            admin_mode=True,
            mode=s.mode,
            first_selected=s.first_selected,
            node_scale=self.node_scale,
            text_scale=self.text_scale,
        )

    def edge_views(self) -> List[EdgeView]:
        return build_edge_views(self.session.graph, delete_mode=self.session.mode is EditorMode.DELETE_EDGES)
