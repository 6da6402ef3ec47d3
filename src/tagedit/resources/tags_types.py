"""Types for the tags resource.

Tag documents carry a single editable field, ``name``, stored as a slug.
"""

from __future__ import annotations

from typing import Literal, TypedDict
from typing_extensions import NotRequired, ReadOnly


class Slug(TypedDict):
    """Persisted shape of a tag name."""
    _type: Literal["slug"]
    current: str


class TagDocument(TypedDict):
    """Readonly tag document returned by the content API."""
    _id: ReadOnly[str]
    _type: ReadOnly[str]
    name: ReadOnly[Slug]
    _updatedAt: ReadOnly[str]
    _createdAt: NotRequired[ReadOnly[str]]
    _rev: NotRequired[ReadOnly[str]]

__all__ = ["Slug", "TagDocument"]
