"""Structured logging via structlog.

Configures structlog once at process startup. Library modules keep using
``logging.getLogger(__name__)``; their records are rendered by a
`structlog.stdlib.ProcessorFormatter` on the root handler, so they pass
through the same processors as native structlog events.

Renderer selection:
  debug=True:  `ConsoleRenderer` with colours for interactive use.
  debug=False: `JSONRenderer` for machine-parseable logs on CI/servers.

A ``release_path`` bound with `bind_release` is added to every event,
stdlib or structlog, emitted while a build runs.
"""

from __future__ import annotations

import logging
import sys
from contextvars import ContextVar

import structlog

_release_var: ContextVar[str] = ContextVar("release_path", default="")


def bind_release(release_path: str) -> None:
    """Tag subsequent log events with the release being built."""
    _release_var.set(release_path)


def _inject_release(
    logger: logging.Logger,
    method: str,
    event_dict: dict,
) -> dict:
    """Structlog processor: add release_path from the ContextVar."""
    release = _release_var.get()
    if release:
        event_dict["release_path"] = release
    return event_dict


def _shared_processors() -> list:
    return [
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        _inject_release,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]


def _renderer(debug: bool):
    if debug:
        return structlog.dev.ConsoleRenderer()
    return structlog.processors.JSONRenderer()


def stdlib_formatter(debug: bool = True) -> structlog.stdlib.ProcessorFormatter:
    """Formatter that runs stdlib records through the structlog chain."""
    return structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            _renderer(debug),
        ],
        foreign_pre_chain=[structlog.stdlib.add_logger_name, *_shared_processors()],
    )


class _StackplanHandler(logging.StreamHandler):
    """Root handler installed by `configure_structlog`."""


def configure_structlog(debug: bool = True) -> None:
    """Configure structlog for the process lifetime.

    Calling multiple times is safe; the last call wins.
    """
    structlog.configure(
        processors=_shared_processors() + [_renderer(debug)],
        wrapper_class=structlog.make_filtering_bound_logger(logging.DEBUG),
        context_class=dict,
        logger_factory=structlog.WriteLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )

    # Detection JSON goes to stdout, so logs stay on stderr.
    root = logging.getLogger()
    for handler in [h for h in root.handlers if isinstance(h, _StackplanHandler)]:
        root.removeHandler(handler)
    handler = _StackplanHandler(sys.stderr)
    handler.setFormatter(stdlib_formatter(debug))
    root.addHandler(handler)
    root.setLevel(logging.DEBUG if debug else logging.INFO)
