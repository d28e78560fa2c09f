"""Errors raised by the index core.

Every error is local to a single command: raising one never leaves a
partially updated view behind.
"""

from __future__ import annotations


class ZkIndexError(Exception):
    """Base class for all index errors."""


class NoMatches(ZkIndexError):
    """A Focus or Search term matched nothing in the current scope."""

    def __init__(self, term: str):
        self.term = term
        super().__init__(f'No matches for "{term}"')


class NotNarrowed(ZkIndexError):
    def __init__(self, message: str = "No query to refresh: the index is not narrowed"):
        super().__init__(message)


class InvalidContext(ZkIndexError):
    """A command was issued while no index view is open."""

    def __init__(self, command: str):
        self.command = command
        super().__init__(f"'{command}' requires an open index view")


class InvalidArgument(ZkIndexError):
    pass


class UnknownCommand(ZkIndexError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown command: {name}")


class NoteNotFound(ZkIndexError):
    def __init__(self, note_id: str):
        self.note_id = note_id
        super().__init__(f"Note not found: {note_id}")


class ConfigError(ZkIndexError):
    pass
