"""Errors raised by the logistics domain on top of Protean's own.

Protean already covers missing records (``ObjectNotFoundError``) and bad
input (``ValidationError``). These two cover what it does not: business keys
that collide, and operations the current state does not allow.
"""


class LogisticsError(Exception):
    """Base error carrying a ``{field: [message, ...]}`` mapping."""

    def __init__(self, messages: dict[str, list[str]] | str):
        if isinstance(messages, str):
            messages = {"_entity": [messages]}
        self.messages = messages
        super().__init__(messages)


class ConflictError(LogisticsError):
    """A unique business key is already taken."""


class InvalidStateError(LogisticsError):
    """The record's current status does not allow the requested operation."""
