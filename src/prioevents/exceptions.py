"""
Exceptions raised by prioevents.
"""


class EventError(Exception):
    """Base class for all prioevents errors."""


class InvalidHandlerError(EventError, TypeError):
    """
    Raised when a handler cannot be registered because it would not be
    invocable at trigger time.
    """

    def __init__(self, event: str, handler: object, reason: str) -> None:
        self.event = event
        self.handler = handler
        self.reason = reason
        super().__init__(f"invalid handler {handler!r} for event {event!r}: {reason}")


class InvalidPriorityError(EventError, TypeError):
    """Raised when a listener priority is not an integer."""

    def __init__(self, event: str, priority: object) -> None:
        self.event = event
        self.priority = priority
        super().__init__(
            f"invalid priority {priority!r} for event {event!r}: expected an int"
        )
