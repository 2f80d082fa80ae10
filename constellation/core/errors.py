from typing import List


class ConstellationError(RuntimeError):
    pass


class CyclicGraphError(ConstellationError, ValueError):
    """Raised when prerequisite levels keep changing after every node could have been ranked."""

    def __init__(self, message: str, cycles: List[List[str]] | None = None):
        super().__init__(message)
        self.cycles = cycles or []


class UnknownLayoutError(ConstellationError, ValueError):
    pass


class PersistenceError(ConstellationError):
    pass
