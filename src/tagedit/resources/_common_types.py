"""Shared types and validation helpers for resources.

This module contains:
- Validation mode type (shared across all resources)
- Document type names used in queries and mutations
- Id normalization (entity ids are opaque strings)
"""

from __future__ import annotations

from typing import Literal

# --- Shared Validation Mode --- #
ValidationMode = Literal["off", "warn", "strict"]

# --- Document Types --- #
TAG_DOCUMENT_TYPE = "media.tag"
SLUG_TYPE = "slug"


# --- Id Normalization --- #
def _normalize_id(value: object) -> str | None:
    """Normalize a document id.

    Parameters
    ----------
    value
        Candidate document id.

    Returns
    -------
    str | None
        The id with surrounding whitespace removed, or None if:
        - Input is not a string (numbers are never coerced)
        - Input is empty or whitespace-only

    Notes
    -----
    Document ids are opaque strings. A numeric id almost always means the
    caller passed a row index or position by mistake, so it is rejected
    instead of being cast.
    """
    if not isinstance(value, str):
        return None
    normalized = value.strip()
    if not normalized:
        return None
    return normalized
