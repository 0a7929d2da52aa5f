"""Error taxonomy for the chat list client."""

from __future__ import annotations


class ChatListError(Exception):
    """Base class for every error raised by this package."""


class SourceFetchError(ChatListError):
    """One or more windowed list requests failed."""

    def __init__(self, message: str, windows: list[str] | None = None) -> None:
        super().__init__(message)
        self.windows = windows or []


class MalformedResponseError(ChatListError):
    """A list endpoint answered with a body that is not a sequence."""


class CreationError(ChatListError):
    """The create-conversation request failed."""
