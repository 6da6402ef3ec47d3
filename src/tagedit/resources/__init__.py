"""Resource module exports."""

from .tags import Tags
from .tags_types import Slug, TagDocument

__all__ = [
    "Slug",
    "TagDocument",
    "Tags",
]
