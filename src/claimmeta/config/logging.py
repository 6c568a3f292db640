"""structlog setup for processes embedding claimmeta.

claimmeta modules log through ``logging.getLogger(__name__)``; this module
routes those records, and any structlog loggers of the host, through one
structlog formatter on stderr:

- console lines by default (colored on a TTY);
- JSON lines when ``log_json`` is set.

Records emitted while a tenant is being served carry a ``tenant_id`` field,
bound with :func:`tenant_context`.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING, TextIO

import structlog

if TYPE_CHECKING:
    from claimmeta.config.settings import ClaimMetaSettings

PACKAGE_LOGGER = "claimmeta"

# Libraries whose DEBUG output drowns ours when verbose.
_QUIET_LOGGERS = ("sqlalchemy", "pluggy")


def _shared_processors() -> list[structlog.types.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def configure_logging(
    *,
    verbose: bool = False,
    log_json: bool = False,
    stream: TextIO | None = None,
) -> None:
    """Install the structlog handler on the root logger.

    Replaces any handler already on the root logger, so repeated calls do
    not duplicate output.

    Args:
        verbose: ``claimmeta`` loggers emit DEBUG; otherwise WARNING and up.
        log_json: Render JSON lines instead of console lines.
        stream: Destination, ``sys.stderr`` by default.
    """
    out = stream or sys.stderr
    shared = _shared_processors()

    final: list[structlog.types.Processor] = [
        structlog.stdlib.ProcessorFormatter.remove_processors_meta
    ]
    if log_json:
        final += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        final.append(structlog.dev.ConsoleRenderer(colors=out.isatty()))

    structlog.configure(
        processors=[*shared, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(out)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(foreign_pre_chain=shared, processors=final)
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(logging.WARNING)

    logging.getLogger(PACKAGE_LOGGER).setLevel(logging.DEBUG if verbose else logging.WARNING)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def configure_from_settings(settings: ClaimMetaSettings) -> None:
    """Shorthand for :func:`configure_logging` with the settings' flags."""
    configure_logging(verbose=settings.verbose, log_json=settings.log_json)


@contextmanager
def tenant_context(tenant_id: int) -> Iterator[None]:
    """Bind ``tenant_id`` to every record logged inside the block."""
    with structlog.contextvars.bound_contextvars(tenant_id=tenant_id):
        yield
