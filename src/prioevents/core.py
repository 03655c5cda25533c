"""
prioevents.core
---------------

Module-level functions bound to a shared default EventBus.
"""

from typing import Any, Callable, List, Optional

from .event_bus import EventBus, Handler, HandlerFunc

# -------------------- module-level default bus --------------------

_default_bus = EventBus()


def get_default_bus() -> EventBus:
    """Return the bus used by the module-level functions."""
    return _default_bus


def _get_bus(bus: Optional[EventBus] = None) -> EventBus:
    return bus or _default_bus


# Registration
def on(event: str, handler: Handler, priority: Optional[int] = None) -> Handler:
    """
    Register a handler for an event on the default bus.
    Lower priority handlers run first. For equal priority, registration order is preserved.

    Args:
        event (str): The event to register the handler for.
        handler (Handler): A callable, or a `(target, "method_name")` pair.
        priority (int, optional): The priority of the handler. Defaults to 100.

    Returns:
        Handler: The handler, unchanged.
    """
    return _default_bus.on(event, handler, priority)


register = on


def once(event: str, handler: Handler, priority: Optional[int] = None) -> Handler:
    """Register a handler on the default bus that runs at most once."""
    return _default_bus.once(event, handler, priority)


one = once


def off(event: str, handler: Optional[Handler] = None) -> bool:
    """
    Unregister handlers. If `handler` is None, remove all handlers for `event`.

    Returns:
        bool: True if something was removed.
    """
    return _default_bus.off(event, handler)


def clear() -> None:
    """Remove all handlers from the default bus."""
    _default_bus.clear()


def listeners(event: str) -> List[Handler]:
    """Return the handlers registered for `event` on the default bus, in dispatch order."""
    return _default_bus.listeners(event)


# Decorator
def receiver(
    event: str,
    *,
    priority: Optional[int] = None,
    once: bool = False,
    bus: Optional[EventBus] = None,
) -> Callable[[HandlerFunc], HandlerFunc]:
    """
    Decorator to register a function as a handler for `event`.

    Args:
        event (str): The event to register the handler for.
        priority (int, optional): The priority of the handler. Defaults to 100.
        once (bool, optional): Whether the handler should be called only once. Defaults to False.
        bus (EventBus, optional): The event bus to register the handler for.
                                  Defaults to None. If None, the default bus is used.

    Returns:
        Callable[[HandlerFunc], HandlerFunc]: The decorator function.

    Example:
    @receiver("saved", priority=10, once=True)
    def on_saved(path):
        print("saved", path)
    """
    return _get_bus(bus).receiver(event, priority=priority, once=once)


# Dispatch
def trigger(event: str, *args: Any, **kwargs: Any) -> bool:
    """
    Dispatch `event` to the handlers of the default bus, in priority order.
    Returns False if a handler returned exactly False and stopped the dispatch.

    Example:
    trigger("saved", "/tmp/out.txt")
    """
    return _default_bus.trigger(event, *args, **kwargs)


fire = trigger
