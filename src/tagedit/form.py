"""Field-level form validation.

A :class:`Form` holds current values, the defaults they are compared against
for dirtiness, and one error slot per field. Schema errors and out-of-band
errors (set with :meth:`Form.set_error`) share the same slots.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Literal, Mapping, Optional

_logger = logging.getLogger(__name__)

FormMode = Literal["on_change", "on_submit"]

# A rule returns an error message, or None when the value passes.
Rule = Callable[[Any], Optional[str]]


def required(message: str = "This field is required") -> Rule:
    """Reject missing, empty and whitespace-only values."""

    def _check(value: Any) -> Optional[str]:
        if value is None:
            return message
        if isinstance(value, str) and not value.strip():
            return message
        return None

    return _check


class Schema:
    """Ordered rules per field; the first failing rule wins."""

    def __init__(self, fields: Mapping[str, list[Rule]]) -> None:
        self.fields: dict[str, list[Rule]] = {name: list(rules) for name, rules in fields.items()}

    def validate_field(self, name: str, value: Any) -> Optional[str]:
        for rule in self.fields.get(name, ()):
            message = rule(value)
            if message is not None:
                return message
        return None

    def validate(self, values: Mapping[str, Any]) -> dict[str, str]:
        errors: dict[str, str] = {}
        for name in self.fields:
            message = self.validate_field(name, values.get(name))
            if message is not None:
                errors[name] = message
        return errors


TAG_SCHEMA = Schema({"name": [required("Name cannot be empty")]})


@dataclass(frozen=True)
class FormState:
    """Immutable snapshot of a form."""

    values: dict[str, Any]
    field_errors: dict[str, str] = field(default_factory=dict)
    is_dirty: bool = False
    is_valid: bool = True


class Form:
    """Values, defaults and error slots for one form instance."""

    def __init__(
        self,
        schema: Schema,
        defaults: Optional[Mapping[str, Any]] = None,
        *,
        mode: FormMode = "on_change",
    ) -> None:
        self.schema = schema
        self.mode = mode
        self._defaults: dict[str, Any] = {name: None for name in schema.fields}
        self._values: dict[str, Any] = {}
        self._errors: dict[str, str] = {}
        self._schema_errors: dict[str, str] = {}
        self.reset(defaults)

    @property
    def values(self) -> dict[str, Any]:
        return dict(self._values)

    @property
    def defaults(self) -> dict[str, Any]:
        return dict(self._defaults)

    @property
    def field_errors(self) -> dict[str, str]:
        return dict(self._errors)

    @property
    def is_dirty(self) -> bool:
        return any(self._values.get(name) != self._defaults.get(name) for name in self.schema.fields)

    @property
    def is_valid(self) -> bool:
        # Out-of-band errors are display-only and do not affect validity.
        return not self._schema_errors

    def error(self, name: str) -> Optional[str]:
        return self._errors.get(name)

    def set_value(self, name: str, value: Any) -> FormState:
        """Record a field change, validating it in ``on_change`` mode."""
        self._check_field(name)
        self._values[name] = value
        self._schema_errors = self.schema.validate(self._values)
        if self.mode == "on_change":
            self._sync_field_error(name)
        return self.state()

    def set_error(self, name: str, message: str) -> None:
        """Put ``message`` in the error slot of ``name`` without running the schema."""
        self._check_field(name)
        if self._errors.get(name) != message:
            _logger.debug("Setting error on field %s: %s", name, message)
        self._errors[name] = message

    def clear_errors(self, name: Optional[str] = None) -> None:
        if name is None:
            self._errors.clear()
            return
        self._check_field(name)
        self._errors.pop(name, None)

    def validate(self) -> FormState:
        """Run the schema against every field and refresh all error slots."""
        self._schema_errors = self.schema.validate(self._values)
        for name in self.schema.fields:
            self._sync_field_error(name)
        return self.state()

    def reset(self, defaults: Optional[Mapping[str, Any]] = None) -> FormState:
        """Adopt ``defaults`` as the new baseline and clear every error."""
        if defaults is not None:
            self._defaults = {name: defaults.get(name) for name in self.schema.fields}
        self._values = dict(self._defaults)
        self._errors.clear()
        self._schema_errors = self.schema.validate(self._values)
        return self.state()

    def state(self) -> FormState:
        return FormState(
            values=dict(self._values),
            field_errors=dict(self._errors),
            is_dirty=self.is_dirty,
            is_valid=self.is_valid,
        )

    def _sync_field_error(self, name: str) -> None:
        message = self._schema_errors.get(name)
        if message is None:
            self._errors.pop(name, None)
        else:
            self._errors[name] = message

    def _check_field(self, name: str) -> None:
        if name not in self.schema.fields:
            raise KeyError(f"Unknown form field: {name!r}")
