"""
Prioevents
----------

Prioritized, synchronous in-process events for Python.

Features:

- `EventEmitterMixin` turns any class into an event source; `EventBus` is a standalone one.
- `on()` / `once()` / `off()` / `trigger()` / `listeners()`, with `register`, `one` and `fire` aliases.
- Handler priority: lower runs first; equal priorities keep registration order.
- A handler returning exactly `False` stops the dispatch and makes `trigger()` return `False`.
- Handlers are validated at registration; `(Class, "method")` pairs must name a
  static or class method, otherwise `InvalidHandlerError` is raised. `"module:Class.method"`
  references are resolved the same way; non-integer priorities raise `InvalidPriorityError`.
- Module-level functions and `@receiver(event)` bound to a default bus.
- No dependencies.
"""

from .core import (
    clear,
    fire,
    get_default_bus,
    listeners,
    off,
    on,
    once,
    one,
    receiver,
    register,
    trigger,
)
from .event_bus import DEFAULT_PRIORITY, EventBus, EventEmitterMixin
from .exceptions import EventError, InvalidHandlerError, InvalidPriorityError

__all__ = [
    "on",
    "register",
    "once",
    "one",
    "off",
    "clear",
    "listeners",
    "receiver",
    "trigger",
    "fire",
    "get_default_bus",
    "EventBus",
    "EventEmitterMixin",
    "DEFAULT_PRIORITY",
    "EventError",
    "InvalidHandlerError",
    "InvalidPriorityError",
]
