import pytest

from constellation.services.editor.connection_mode import IDLE, AwaitingTarget, connection_step
from constellation.services.editor.history import EditHistory


def test_undo_redo_swap_states():
    h = EditHistory(depth=10)
    h.record("s0")
    assert h.undo("s1") == "s0"
    assert h.redo("s0") == "s1"
    assert h.undo("s1") == "s0"
    assert h.undo("s0") is None

def test_record_clears_redo():
    h = EditHistory()
    h.record("s0")
    h.undo("s1")
    assert h.can_redo
    h.record("s0")
    assert not h.can_redo

def test_depth_is_bounded():
    h = EditHistory(depth=10)
    for i in range(12):
        h.record(f"s{i}")
    assert h.undo_depth == 10
    states = []
    cur = "now"
    while (prev := h.undo(cur)) is not None:
        states.append(prev)
        cur = prev
    assert states[-1] == "s2"

def test_invalid_depth():
    with pytest.raises(ValueError):
        EditHistory(depth=0)

def test_connection_step_state_machine():
    state, pair = connection_step(IDLE, "A")
    assert state == AwaitingTarget(first_selected="A") and pair is None
    cancelled, pair = connection_step(state, "A")
    assert cancelled == IDLE and pair is None
    done, pair = connection_step(state, "B")
    assert done == IDLE and pair == ("A", "B")
