"""Error kinds raised by the fetch and command layers.

Only the dispatcher's command boundary catches these; everything below it
lets them propagate.
"""

from __future__ import annotations


class StatsBotError(Exception):
    """Base class for statsbot errors."""


class ArgumentError(StatsBotError):
    """A command argument is missing or malformed.

    The message is shown to the channel as-is, so keep it user-facing.
    """

    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class FetchError(StatsBotError):
    """A GitHub API request returned a non-success status."""

    def __init__(self, status_code: int, url: str, message: str | None = None) -> None:
        self.status_code = status_code
        self.url = url
        super().__init__(message or f"Failed to fetch data from {url}. Status: {status_code}")


class ProfileNotFound(FetchError):
    """One or more profile lookups failed."""

    def __init__(self, usernames: list[str], status_code: int, url: str) -> None:
        self.usernames = list(usernames)
        super().__init__(
            status_code,
            url,
            f"Failed to fetch user profile for {', '.join(self.usernames)}. Status: {status_code}",
        )
