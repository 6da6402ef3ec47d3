"""Edit-tag dialog controller.

Binds one tag record in the store to one form. The controller only reads the
record and sends intents: renames go to the store, deletes go through a
confirmation dialog. It never closes itself after a submit; the store closes
the dialog when the update succeeds.
"""

from __future__ import annotations

import logging
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Mapping, Optional, TYPE_CHECKING

from .dialogs_types import ConfirmDescriptor, DialogDescriptor
from .form import TAG_SCHEMA, Form, FormState
from .resources._common_types import SLUG_TYPE
from .resources.tags_types import TagDocument
from .store_types import TagItem, UpdateIntent
from .utils import sanitize_form_data

if TYPE_CHECKING:  # pragma: no cover
    from .workspace import Workspace

_logger = logging.getLogger(__name__)


class DialogState(str, Enum):
    LOADING = "loading"
    READY = "ready"
    SUBMITTING = "submitting"
    READY_WITH_SERVER_ERROR = "ready_with_server_error"


class TagEditDialog:
    """Rename or delete a single tag."""

    header = "Edit Tag"

    def __init__(self, workspace: "Workspace", dialog: DialogDescriptor) -> None:
        self._workspace = workspace
        self.dialog = dialog
        self.form = Form(TAG_SCHEMA, mode="on_change")
        self._item: Optional[TagItem] = None
        self._seeded = False
        self._submitting = False
        self._seen_error: Optional[BaseException] = None
        self._unsubscribe: Optional[Callable[[], None]] = None
        self._state = DialogState.LOADING

    @property
    def id(self) -> str:
        return self.dialog.id

    @property
    def tag_id(self) -> str:
        return self.dialog.tag_id

    @property
    def tag(self) -> Optional[TagDocument]:
        return self._item.tag if self._item is not None else None

    @property
    def state(self) -> DialogState:
        item = self._item
        if item is None or item.tag is None:
            return DialogState.LOADING
        if item.updating:
            return DialogState.SUBMITTING if self._submitting else DialogState.LOADING
        if self._server_error_shown:
            return DialogState.READY_WITH_SERVER_ERROR
        return DialogState.READY

    @property
    def _server_error_shown(self) -> bool:
        # The next edit replaces the injected message, and with it this state.
        error = self._seen_error
        return error is not None and self.form.error("name") == _error_message(error)

    @property
    def disabled(self) -> bool:
        """Whether every field and button renders disabled."""
        return self.tag is None or bool(self._item and self._item.updating)

    @property
    def can_submit(self) -> bool:
        return not self.disabled and self.form.is_dirty and self.form.is_valid

    @property
    def can_delete(self) -> bool:
        return not self.disabled

    @property
    def field_error(self) -> Optional[str]:
        return self.form.error("name")

    @property
    def last_updated(self) -> Optional[datetime]:
        tag = self.tag
        value = tag.get("_updatedAt") if tag is not None else None
        if not isinstance(value, str):
            return None
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def initialize(self) -> FormState:
        """Subscribe to the record and seed the form from it."""
        if self._unsubscribe is None:
            self._unsubscribe = self._workspace.tags.subscribe(self.tag_id, self._on_record_change)
        self._on_record_change(self._workspace.tags.select_by_id(self.tag_id))
        return self.form.state()

    def dispose(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------
    def change(self, value: Any, field: str = "name") -> FormState:
        """Handle an edit of ``field``."""
        if self.disabled:
            _logger.debug("Ignoring change on disabled dialog %s", self.id)
            return self.form.state()
        return self.form.set_value(field, value)

    def submit(self) -> bool:
        """Handle the submit control.

        Returns True when an update was dispatched.
        """
        if self.disabled:
            _logger.debug("Submit skipped, dialog %s is disabled", self.id)
            return False
        state = self.form.validate()
        if not (state.is_dirty and state.is_valid):
            _logger.debug("Submit skipped, dialog %s is not dirty and valid", self.id)
            return False
        return self.on_submit(state.values)

    def on_submit(self, form_values: Mapping[str, Any]) -> bool:
        tag = self.tag
        if tag is None:
            _logger.debug("Submit skipped, tag %s is not loaded", self.tag_id)
            return False

        sanitized = sanitize_form_data(form_values)
        name = sanitized.get("name")
        if not isinstance(name, str):
            _logger.debug("Submit skipped, name sanitized to nothing")
            return False

        intent: UpdateIntent = {
            "closeDialogId": tag["_id"],
            "formData": {"name": {"_type": SLUG_TYPE, "current": name}},
            "tag": tag,
        }
        self._submitting = True
        if self._workspace.tags.update(intent) is None:
            self._submitting = False
            return False
        return True

    def on_delete(self) -> None:
        tag = self.tag
        if tag is None:
            _logger.debug("Delete skipped, tag %s is not loaded", self.tag_id)
            return
        self._workspace.dialogs.open_confirm(
            ConfirmDescriptor(close_dialog_id=self.id, document_id=tag["_id"], document_type="tag")
        )

    def on_close(self) -> None:
        self._workspace.dialogs.remove(self.id)

    def on_external_error(self, error: BaseException) -> None:
        self.form.set_error("name", _error_message(error))

    # ------------------------------------------------------------------
    # Store observation
    # ------------------------------------------------------------------
    def _on_record_change(self, item: Optional[TagItem]) -> None:
        self._item = item
        tag = item.tag if item is not None else None

        if tag is not None and not self._seeded and not self.form.is_dirty:
            self.form.reset({"name": _slug_current(tag)})
            self._seeded = True

        if self._submitting and item is not None and not item.updating:
            self._submitting = False
            if item.error is None and tag is not None:
                self.form.reset({"name": _slug_current(tag)})

        error = item.error if item is not None else None
        if error is None:
            self._seen_error = None
        elif error is not self._seen_error:
            self._seen_error = error
            self.on_external_error(error)

        state = self.state
        if state != self._state:
            _logger.debug("Dialog %s: %s -> %s", self.id, self._state.value, state.value)
            self._state = state


def _error_message(error: BaseException) -> str:
    return getattr(error, "message", None) or str(error)


def _slug_current(tag: TagDocument) -> Optional[str]:
    name = tag.get("name")
    if isinstance(name, dict):
        current = name.get("current")
        if isinstance(current, str):
            return current
    return None
