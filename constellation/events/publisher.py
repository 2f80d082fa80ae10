from collections import deque
from typing import Any, Callable, Deque, Dict, List, Literal

from pydantic import BaseModel, Field

from constellation.config.settings import get_settings
from constellation.core.logging import logger
from constellation.domain.models import utcnow

Severity = Literal["success", "info", "warning", "error"]


class Notice(BaseModel):
    severity: Severity
    message: str
    detail: Dict[str, Any] = Field(default_factory=dict)
    created_at: str = Field(default_factory=lambda: utcnow().isoformat())


Subscriber = Callable[[Notice], None]

_LOG_METHOD = {"success": "info", "info": "info", "warning": "warning", "error": "error"}


class NoticePublisher:
    """User-facing notices: a bounded feed, newest last, plus push subscribers."""

    def __init__(self, maxlen: int | None = None):
        self._feed: Deque[Notice] = deque(maxlen=maxlen or get_settings().notice_feed_size)
        self._subscribers: List[Subscriber] = []

    def subscribe(self, fn: Subscriber) -> Callable[[], None]:
        self._subscribers.append(fn)

        def _unsubscribe() -> None:
            if fn in self._subscribers:
                self._subscribers.remove(fn)

        return _unsubscribe

    def publish(self, severity: Severity, message: str, **detail: Any) -> Notice:
        notice = Notice(severity=severity, message=message, detail=detail)
        self._feed.append(notice)
        getattr(logger, _LOG_METHOD[severity])("notice_published", severity=severity, message=message, **detail)
        for fn in list(self._subscribers):
            fn(notice)
        return notice

    def success(self, message: str, **detail: Any) -> Notice:
        return self.publish("success", message, **detail)

    def info(self, message: str, **detail: Any) -> Notice:
        return self.publish("info", message, **detail)

    def warning(self, message: str, **detail: Any) -> Notice:
        return self.publish("warning", message, **detail)

    def error(self, message: str, **detail: Any) -> Notice:
        return self.publish("error", message, **detail)

    @property
    def notices(self) -> List[Notice]:
        return list(self._feed)

    @property
    def last(self) -> Notice | None:
        return self._feed[-1] if self._feed else None

    def clear(self) -> None:
        self._feed.clear()
