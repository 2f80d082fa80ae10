from collections import deque
from typing import Deque, Generic, Optional, TypeVar

T = TypeVar("T")


class EditHistory(Generic[T]):
    """Undo and redo stacks of whole-graph snapshots.

    ``record`` must be called with the state as it was *before* a mutation.
    Undo and redo swap the caller's current state with the stored one.
    """

    def __init__(self, depth: int = 10):
        if depth <= 0:
            raise ValueError("history depth must be positive")
        self.depth = depth
        self._undo: Deque[T] = deque(maxlen=depth)
        self._redo: Deque[T] = deque(maxlen=depth)

    def record(self, before: T) -> None:
        self._undo.append(before)
        self._redo.clear()

    def undo(self, current: T) -> Optional[T]:
        if not self._undo:
            return None
        previous = self._undo.pop()
        self._redo.append(current)
        return previous

    def redo(self, current: T) -> Optional[T]:
        if not self._redo:
            return None
        following = self._redo.pop()
        self._undo.append(current)
        return following

    @property
    def can_undo(self) -> bool:
        return bool(self._undo)

    @property
    def can_redo(self) -> bool:
        return bool(self._redo)

    @property
    def undo_depth(self) -> int:
        return len(self._undo)

    @property
    def redo_depth(self) -> int:
        return len(self._redo)

    def clear(self) -> None:
        self._undo.clear()
        self._redo.clear()
