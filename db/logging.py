from __future__ import annotations

import logging
import os
import sys
import uuid
from collections.abc import Iterator
from contextlib import contextmanager

import structlog


def configure_logging(log_level: str, *, json_logs: bool | None = None) -> None:
    """
    Route structlog through stdout.

    JSON lines by default; an interactive seeding run (stdout is a tty) gets the
    console renderer instead unless `json_logs` says otherwise.
    """
    if json_logs is None:
        json_logs = not sys.stdout.isatty()
    renderer = structlog.processors.JSONRenderer() if json_logs else structlog.dev.ConsoleRenderer()

    level = logging.getLevelName(log_level.upper())
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)
    structlog.configure(
        processors=[
            # Picks up run/request ids bound with the helpers below.
            structlog.contextvars.merge_contextvars,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.add_log_level,
            structlog.processors.dict_tracebacks,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        cache_logger_on_first_use=True,
    )


@contextmanager
def seed_run_context(directory: str | os.PathLike[str]) -> Iterator[str]:
    """Tag every log line of one seeding run (fixture tasks and worker threads included) with its run id."""
    run_id = uuid.uuid4().hex[:12]
    with structlog.contextvars.bound_contextvars(seed_run_id=run_id, seeds_dir=os.path.abspath(directory)):
        yield run_id


logger = structlog.get_logger()
