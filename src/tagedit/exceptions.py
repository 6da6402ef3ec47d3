"""Errors raised by the content API and surfaced on tag records."""

from __future__ import annotations


class ApiError(Exception):
    """A failed request against the content API.

    ``message`` is the human readable text shown next to the form field the
    error is mapped onto.
    """

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class TagNameConflict(ApiError):
    """Another tag already uses the requested name."""

    def __init__(self, message: str = "Tag already exists") -> None:
        super().__init__(message, status_code=409)


__all__ = ["ApiError", "TagNameConflict"]
