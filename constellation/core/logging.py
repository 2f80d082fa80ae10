import logging
import sys

import structlog

from constellation.config.settings import get_settings


def setup_logging(level: str | None = None, json: bool | None = None) -> None:
    settings = get_settings()
    lvl = getattr(logging, (level or settings.log_level).upper(), logging.INFO)
    render_json = settings.log_json if json is None else json
    logging.basicConfig(level=lvl, stream=sys.stdout, format="%(message)s")
    renderer = structlog.processors.JSONRenderer() if render_json else structlog.dev.ConsoleRenderer()
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(lvl),
        cache_logger_on_first_use=True,
    )


logger = structlog.get_logger()
