"""Structured logging via structlog.

Configures structlog once per process. Library modules keep using
`logging.getLogger(__name__)`; the stdlib bridge set up here routes their
records to the same stream.

Renderer selection:
  debug=True  — `ConsoleRenderer` with colours for interactive use.
  debug=False — `JSONRenderer` for machine-parseable logs in CI.

ContextVar injection:
  The `run_id` of the pipeline run currently executing is injected into
  every structlog event, so log lines from the signer stream and the
  per-artifact patch steps can be correlated with a single run.
"""

from __future__ import annotations

import logging
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator

import structlog

_run_id_var: ContextVar[str] = ContextVar("run_id", default="")


def get_run_id() -> str:
    """Return the current run ID, or empty string outside a pipeline run."""
    return _run_id_var.get()


@contextmanager
def bind_run_id(run_id: str) -> Iterator[None]:
    """Set the run ID for the duration of the block."""
    token = _run_id_var.set(run_id)
    try:
        yield
    finally:
        _run_id_var.reset(token)


def _inject_context_vars(
    logger: logging.Logger,
    method: str,
    event_dict: dict,
) -> dict:
    """Structlog processor: inject run_id from its ContextVar."""
    run_id = get_run_id()
    if run_id:
        event_dict["run_id"] = run_id
    return event_dict


def configure_structlog(debug: bool = True) -> None:
    """Configure structlog for the process lifetime.

    Calling multiple times is safe; structlog is idempotent.
    """
    shared_processors: list = [
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        _inject_context_vars,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if debug:
        renderer = structlog.dev.ConsoleRenderer()
    else:
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=shared_processors + [renderer],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.DEBUG if debug else logging.INFO
        ),
        context_class=dict,
        logger_factory=structlog.WriteLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=True,
    )

    # Bridge stdlib logging so module loggers share the output stream.
    logging.basicConfig(
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stdout,
        level=logging.DEBUG if debug else logging.INFO,
    )
