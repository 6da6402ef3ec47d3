"""Shared helpers for the tagedit package."""

from __future__ import annotations

from typing import Any, Mapping


def sanitize_form_data(data: Mapping[str, Any]) -> dict[str, Any]:
    """Return a copy of submitted form values ready to persist.

    Strings are stripped and empty strings become ``None``. Nested mappings
    are sanitized recursively; other values pass through unchanged.
    """
    output: dict[str, Any] = {}
    for key, value in data.items():
        if isinstance(value, str):
            value = value.strip() or None
        elif isinstance(value, Mapping):
            value = sanitize_form_data(value)
        output[key] = value
    return output
