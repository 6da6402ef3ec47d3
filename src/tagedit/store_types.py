"""Types for the tag store."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional, TypedDict
from typing_extensions import ReadOnly

from .exceptions import ApiError
from .resources.tags_types import Slug, TagDocument


@dataclass(frozen=True)
class TagItem:
    """A tag record plus the status of the last request made for it."""

    tag: Optional[TagDocument]
    updating: bool = False
    error: Optional[ApiError] = None


class TagFormData(TypedDict):
    name: Slug


class UpdateIntent(TypedDict):
    """Request to rename a tag, closing ``closeDialogId`` on success."""
    closeDialogId: ReadOnly[str]
    formData: ReadOnly[TagFormData]
    tag: ReadOnly[TagDocument]


Listener = Callable[[Optional[TagItem]], None]

__all__ = ["Listener", "TagFormData", "TagItem", "UpdateIntent"]
