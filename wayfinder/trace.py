"""Optional structured trace events for the routing pipeline."""

from __future__ import annotations

import logging
from typing import Any, Callable

TraceHook = Callable[[str, dict[str, Any]], None]

logger = logging.getLogger(__name__)


def emit(trace: TraceHook | None, event: str, **payload: Any) -> None:
    """Send one event to `trace` if a hook is installed."""
    if trace is not None:
        trace(event, payload)


def log_trace(event: str, payload: dict[str, Any]) -> None:
    """Trace hook that forwards events to the module logger at DEBUG level."""
    logger.debug("%s %s", event, payload)


class TraceRecorder:
    """Trace hook collecting events in memory, mostly useful in tests."""

    def __init__(self) -> None:
        self.events: list[tuple[str, dict[str, Any]]] = []

    def __call__(self, event: str, payload: dict[str, Any]) -> None:
        self.events.append((event, dict(payload)))

    def names(self) -> list[str]:
        return [name for name, _ in self.events]
