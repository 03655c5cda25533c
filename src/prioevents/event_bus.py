"""
Event registry implementation.
"""

from __future__ import annotations

import functools
import inspect
import logging
import pkgutil
import threading
import types
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from .exceptions import InvalidHandlerError, InvalidPriorityError

logger = logging.getLogger(__name__)

DEFAULT_PRIORITY = 100

HandlerFunc = Callable[..., Any]
# (class, "static_or_class_method") or (instance, "method")
HandlerRef = Tuple[Any, str]
# "module:Class.static_or_class_method" or "module:function"
Handler = Union[HandlerFunc, HandlerRef, str]


@dataclass(order=True)
class _ListenerEntry:
    # Sorting fields (priority ascending, then sequence ascending)
    priority: int
    sequence: int
    handler: Handler = field(compare=False)
    func: HandlerFunc = field(compare=False, repr=False)

    def matches(self, handler: Handler) -> bool:
        return self.handler is handler or self.handler == handler


@dataclass
class _EventBucket:
    entries: List[_ListenerEntry] = field(default_factory=list)
    sorted: bool = True


@dataclass
class _Registry:
    buckets: Dict[str, _EventBucket] = field(default_factory=dict)
    sequence: int = 0
    lock: threading.RLock = field(default_factory=threading.RLock, repr=False)

    def next_sequence(self) -> int:
        self.sequence += 1
        return self.sequence


def _describe(target: Any) -> str:
    return getattr(target, "__qualname__", type(target).__qualname__)


def _is_instance_method(attr: Any) -> bool:
    return inspect.isfunction(attr) or isinstance(
        attr, (types.MethodDescriptorType, types.WrapperDescriptorType)
    )


def _resolve_attribute(
    event: str, handler: Handler, target: Any, name: str
) -> HandlerFunc:
    if inspect.isclass(target):
        try:
            attr = inspect.getattr_static(target, name)
        except AttributeError:
            raise InvalidHandlerError(
                event, handler, f"{_describe(target)} has no attribute {name!r}"
            ) from None
        if _is_instance_method(attr):
            raise InvalidHandlerError(
                event,
                handler,
                f"{_describe(target)}.{name} requires an instance; "
                "use a staticmethod or classmethod",
            )
    try:
        func = getattr(target, name)
    except AttributeError:
        raise InvalidHandlerError(
            event, handler, f"{_describe(target)} has no attribute {name!r}"
        ) from None
    if not callable(func):
        raise InvalidHandlerError(
            event, handler, f"{_describe(target)}.{name} is not callable"
        )
    return func


def resolve_handler(event: str, handler: Handler) -> HandlerFunc:
    """
    Return the callable that will be invoked for `handler`.

    Plain callables are returned as they are. A `(target, "name")` pair is
    resolved to the named attribute of `target`, and a `"module:Class.name"`
    string to the named attribute of the imported object. When the owner is a
    class the attribute must not be an instance method, since calling it
    without an instance would only fail later, inside dispatch.

    Raises:
        InvalidHandlerError: If the handler cannot be invoked.
    """
    if isinstance(handler, tuple):
        if len(handler) != 2 or not isinstance(handler[1], str):
            raise InvalidHandlerError(
                event, handler, "expected a (target, 'method_name') pair"
            )
        return _resolve_attribute(event, handler, handler[0], handler[1])

    if isinstance(handler, str):
        module, sep, qualname = handler.partition(":")
        owner, _, name = qualname.rpartition(".")
        if not sep or not module or not name:
            raise InvalidHandlerError(
                event, handler, "expected a 'module:Class.method' reference"
            )
        try:
            target = pkgutil.resolve_name(f"{module}:{owner}" if owner else module)
        except (ImportError, AttributeError, ValueError) as exc:
            raise InvalidHandlerError(
                event, handler, f"cannot resolve reference: {exc}"
            ) from None
        return _resolve_attribute(event, handler, target, name)

    if not callable(handler):
        raise InvalidHandlerError(event, handler, "handler must be callable")
    return handler


def validate_priority(event: str, priority: Any) -> int:
    # bool is an int subclass but never a meaningful priority
    if isinstance(priority, bool) or not isinstance(priority, int):
        raise InvalidPriorityError(event, priority)
    return priority


class EventEmitterMixin:
    """
    Adds named, prioritized events to any class.

    Lower priorities run first; equal priorities run in registration order.
    The registry is created on first use, so host classes do not need to call
    ``super().__init__()``.
    """

    default_priority: int = DEFAULT_PRIORITY

    def _event_registry(self) -> _Registry:
        registry = self.__dict__.get("_prioevents_registry")
        if registry is None:
            registry = self.__dict__.setdefault("_prioevents_registry", _Registry())
        return registry

    def _ordered_entries(self, registry: _Registry, event: str) -> List[_ListenerEntry]:
        # caller holds registry.lock
        bucket = registry.buckets.get(event)
        if bucket is None:
            return []
        if not bucket.sorted:
            # A bucket with a single priority is already in registration order
            if len({e.priority for e in bucket.entries}) > 1:
                bucket.entries.sort()
                logger.debug(
                    "Re-sorted %d listeners for event %r", len(bucket.entries), event
                )
            bucket.sorted = True
        return bucket.entries

    # -------------------- registration API --------------------
    def on(
        self, event: str, handler: Handler, priority: Optional[int] = None
    ) -> Handler:
        """
        Register a handler for an event.
        Lower priority handlers run first. For equal priority, registration order is preserved.

        Args:
            event (str): The event to register the handler for.
            handler (Handler): A callable, a `(target, "method_name")` pair
                              or a `"module:Class.method"` reference.
            priority (int, optional): The priority of the handler.
                                      Defaults to `default_priority` (100).

        Returns:
            Handler: The handler, unchanged.

        Raises:
            InvalidHandlerError: If the handler is not invocable.
            InvalidPriorityError: If the priority is not an integer.
        """
        func = resolve_handler(event, handler)
        if priority is None:
            priority = self.default_priority
        priority = validate_priority(event, priority)

        registry = self._event_registry()
        with registry.lock:
            bucket = registry.buckets.get(event)
            if bucket is None:
                bucket = registry.buckets[event] = _EventBucket()
            else:
                bucket.sorted = False
            bucket.entries.append(
                _ListenerEntry(
                    priority=priority,
                    sequence=registry.next_sequence(),
                    handler=handler,
                    func=func,
                )
            )
        logger.debug(
            "Registered listener %r for event %r with priority %d",
            handler,
            event,
            priority,
        )
        return handler

    register = on

    def once(
        self, event: str, handler: Handler, priority: Optional[int] = None
    ) -> Handler:
        """
        Register a handler that runs at most once.

        The handler is wrapped; the wrapper removes itself from `event` before
        calling the handler, so a nested trigger of the same event does not
        reach it again. An outer dispatch that still holds the wrapper after an
        inner one ran it skips it.

        Note that the original handler is returned, not the wrapper, so the
        return value cannot be passed to `off()` to cancel the registration.

        Args:
            event (str): The event to register the handler for.
            handler (Handler): A callable, a `(target, "method_name")` pair
                              or a `"module:Class.method"` reference.
            priority (int, optional): The priority of the handler.

        Returns:
            Handler: The original handler.
        """
        func = resolve_handler(event, handler)

        fired = False

        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            nonlocal fired
            if fired:
                return None
            fired = True
            self.off(event, wrapper)
            return func(*args, **kwargs)

        self.on(event, wrapper, priority)
        return handler

    one = once

    def off(self, event: str, handler: Optional[Handler] = None) -> bool:
        """
        Unregister handlers. If `handler` is None, remove every handler for `event`.

        Args:
            event (str): The event to unregister handlers for.
            handler (Optional[Handler], optional): The handler to unregister.
                                                   Only its first registration is removed.

        Returns:
            bool: True if something was removed.
        """
        registry = self._event_registry()
        with registry.lock:
            if handler is None:
                removed = registry.buckets.pop(event, None)
                if removed is not None:
                    logger.debug(
                        "Removed all %d listeners for event %r",
                        len(removed.entries),
                        event,
                    )
                return removed is not None

            entries = self._ordered_entries(registry, event)
            for index, entry in enumerate(entries):
                if entry.matches(handler):
                    del entries[index]
                    if not entries:
                        del registry.buckets[event]
                    logger.debug("Removed listener %r for event %r", handler, event)
                    return True
        return False

    def clear(self) -> None:
        """Remove all handlers for all events."""
        registry = self._event_registry()
        with registry.lock:
            registry.buckets.clear()

    # -------------------- introspection --------------------
    def listeners(self, event: str) -> List[Handler]:
        """Return the handlers registered for `event`, in dispatch order."""
        registry = self._event_registry()
        with registry.lock:
            return [e.handler for e in self._ordered_entries(registry, event)]

    def has_listeners(self, event: str) -> bool:
        registry = self._event_registry()
        with registry.lock:
            bucket = registry.buckets.get(event)
            return bucket is not None and bool(bucket.entries)

    def events(self) -> List[str]:
        """Return the names of events that have at least one handler."""
        registry = self._event_registry()
        with registry.lock:
            return [name for name, b in registry.buckets.items() if b.entries]

    # -------------------- decorator --------------------
    def receiver(
        self, event: str, *, priority: Optional[int] = None, once: bool = False
    ) -> Callable[[HandlerFunc], HandlerFunc]:
        """
        Decorator to register a function as a handler for `event`.

        Args:
            event (str): The event to register the handler for.
            priority (int, optional): The priority of the handler.
            once (bool, optional): Whether the handler should be called only once.
                                   Defaults to False.

        Returns:
            Callable[[HandlerFunc], HandlerFunc]: The decorator function.
        """

        def decorator(func: HandlerFunc) -> HandlerFunc:
            if once:
                self.once(event, func, priority)
            else:
                self.on(event, func, priority)
            return func

        return decorator

    # -------------------- dispatch --------------------
    def trigger(self, event: str, *args: Any, **kwargs: Any) -> bool:
        """
        Call every handler of `event` in order with the given arguments.

        Dispatch stops as soon as a handler returns exactly `False`.
        Exceptions raised by handlers propagate and skip the remaining handlers.

        Args:
            event (str): The event to dispatch.
            *args: Positional arguments to pass to the handlers.
            **kwargs: Keyword arguments to pass to the handlers.

        Returns:
            bool: False if a handler stopped the dispatch, True otherwise.
        """
        # snapshot handlers to avoid holding the lock during callbacks
        registry = self._event_registry()
        with registry.lock:
            entries = list(self._ordered_entries(registry, event))

        for entry in entries:
            if entry.func(*args, **kwargs) is False:
                logger.debug("Dispatch of event %r stopped by %r", event, entry.handler)
                return False
        return True

    fire = trigger


class EventBus(EventEmitterMixin):
    """
    A standalone event registry, for code that has no host object to mix into.
    """

    def __init__(self, *, default_priority: Optional[int] = None) -> None:
        if default_priority is not None:
            self.default_priority = default_priority
        self._event_registry()
