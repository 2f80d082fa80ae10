from contextvars import ContextVar
import uuid

import structlog

session_id_var: ContextVar[str | None] = ContextVar("session_id", default=None)

def new_session_id() -> str:
    return "sess-" + uuid.uuid4().hex[:16]

def set_session_id(sid: str) -> None:
    session_id_var.set(sid)
    structlog.contextvars.bind_contextvars(session_id=sid)

def get_session_id() -> str | None:
    return session_id_var.get()
