"""
Opt-in diagnostic output for integration debugging.

A diagnostic sink receives an event name and a mapping of fields. Sinks
see computed signatures and the exact material they were computed over,
so they must not be enabled in production.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Mapping

DiagnosticSink = Callable[[str, Mapping[str, Any]], None]

logger = logging.getLogger(__name__)


def noop_sink(event: str, fields: Mapping[str, Any]) -> None:
    """Default sink: discards everything."""


def logging_sink(target: logging.Logger | None = None, level: int = logging.DEBUG) -> DiagnosticSink:
    """
    Build a sink that writes diagnostic events to a stdlib logger.

    Args:
        target: Logger to write to. Default: the `verifly.diagnostics` logger
        level: Log level for the records. Default: DEBUG

    Example:
        >>> import logging
        >>> logging.basicConfig(level=logging.DEBUG)
        >>> client = VeriflyClient("key", "secret", diagnostics=logging_sink())
    """
    log = target or logger

    def sink(event: str, fields: Mapping[str, Any]) -> None:
        log.log(level, "[Verifly SDK] %s: %s", event, dict(fields))

    return sink
