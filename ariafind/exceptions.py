"""
Exceptions raised by ariafind.
"""

from typing import Any


class AriaFindError(Exception):
    """Base class for all ariafind errors."""


class AmbiguousMatchError(AriaFindError):
    """
    Raised by `find()` when more than one element matches.

    Silently picking one of several matches would hide an over-broad
    selector, so the caller always gets this error instead.

    Attributes:
        selector: Human-readable description of the matcher
        count: Number of matched elements
        matches: The matched elements, in document order
    """

    def __init__(self, selector: str, matches: list[Any]):
        self.selector = selector
        self.matches = matches
        self.count = len(matches)
        super().__init__(
            f"Found {self.count} elements matching {selector}, expected at most one. "
            "Narrow the selector (e.g. combine it with .and_()) to pick a single element."
        )


class SelectorError(AriaFindError, ValueError):
    """Raised when a selector string is invalid."""


class SnapshotError(AriaFindError):
    """Raised when a page snapshot could not be captured."""

    def __init__(self, message: str, url: str | None = None):
        self.url = url
        if url:
            message = f"{message} (url: {url})"
        super().__init__(message)


class StaleElementError(AriaFindError):
    """Raised when an element from an outdated snapshot is resolved against the live page."""
