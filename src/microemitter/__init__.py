"""
Microemitter
------------

Weighted in-process event emitter with sync and async dispatch.

Features:

- `on(event, handler, context=None, weight=1, repeat=UNLIMITED)`; higher weight runs first,
  ties keep registration order.
- `once()` and bounded `repeat` budgets; spent listeners are removed after the dispatch.
- `emit(event, *args, **kwargs)` is **sync**; `emit_async(...)` awaits each listener in turn.
- Wildcard listeners via `on_any(callback)`, called as `callback(event, *args, **kwargs)`.
- Failing listeners are reported to a diagnostic sink (stdlib `logging` by default)
  and never stop delivery to the others.
- Optional per-event listener cap; duplicate registrations are ignored with a warning.
- Module-level API over a default emitter, plus a `@receiver(event)` decorator.
"""

import logging

from .config import EmitterConfig
from .core import (
    clear,
    emit,
    emit_async,
    event_names,
    get_emitter,
    listener_count,
    listeners,
    off,
    off_any,
    on,
    on_any,
    once,
    receiver,
)
from .diagnostics import DiagnosticSink, LoggingSink
from .emitter import ONCE, UNLIMITED, EventEmitter
from .errors import InvalidArgument

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "EventEmitter",
    "EmitterConfig",
    "DiagnosticSink",
    "LoggingSink",
    "InvalidArgument",
    "UNLIMITED",
    "ONCE",
    "receiver",
    "on",
    "once",
    "off",
    "on_any",
    "off_any",
    "emit",
    "emit_async",
    "clear",
    "listener_count",
    "event_names",
    "listeners",
    "get_emitter",
]
