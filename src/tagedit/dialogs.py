"""Stack of open dialogs, keyed by dialog id."""

from __future__ import annotations

from concurrent.futures import Future
from typing import Any, Mapping, Optional, TYPE_CHECKING, Union

from .controller import TagEditDialog
from .dialogs_types import ConfirmDescriptor, DialogDescriptor
from .resources._common_types import _normalize_id

if TYPE_CHECKING:  # pragma: no cover
    from .workspace import Workspace


class DeleteConfirmDialog:
    """Asks before deleting a document, then hands the delete to the store."""

    tone = "critical"

    def __init__(self, workspace: "Workspace", dialog_id: str, descriptor: ConfirmDescriptor) -> None:
        self._workspace = workspace
        self.id = dialog_id
        self.descriptor = descriptor

    @property
    def title(self) -> str:
        return f"Permanently delete 1 {self.descriptor.document_type}?"

    def confirm(self) -> Future | None:
        """Close this dialog and delete the document.

        The store closes ``descriptor.close_dialog_id`` once the delete succeeds.
        """
        self._workspace.dialogs.remove(self.id)
        return self._workspace.tags.delete(
            self.descriptor.document_id,
            close_dialog_id=self.descriptor.close_dialog_id,
        )

    def cancel(self) -> None:
        self._workspace.dialogs.remove(self.id)

    def dispose(self) -> None:
        return None


AnyDialog = Union[TagEditDialog, DeleteConfirmDialog]


class DialogManager:
    """Open, look up and remove dialogs.

    Dialogs are kept in the order they were opened; the last one is on top.
    """

    def __init__(self, workspace: "Workspace") -> None:
        self._workspace = workspace
        self._dialogs: dict[str, AnyDialog] = {}

    @property
    def _logger(self):
        return self._workspace._logger

    @property
    def ids(self) -> list[str]:
        return list(self._dialogs)

    @property
    def top(self) -> Optional[AnyDialog]:
        if not self._dialogs:
            return None
        return self._dialogs[next(reversed(self._dialogs))]

    def __contains__(self, dialog_id: object) -> bool:
        return dialog_id in self._dialogs

    def __len__(self) -> int:
        return len(self._dialogs)

    def get(self, dialog_id: str) -> Optional[AnyDialog]:
        return self._dialogs.get(dialog_id)

    def open_tag_edit(self, tag_id: str) -> TagEditDialog:
        """Open (or return the already open) edit dialog for ``tag_id``.

        The dialog id is the tag id.

        Raises
        ------
        ValueError
            If ``tag_id`` is not a non-empty string.
        """
        normalized = _normalize_id(tag_id)
        if normalized is None:
            raise ValueError(f"Invalid tag_id: {tag_id!r}")
        existing = self._dialogs.get(normalized)
        if isinstance(existing, TagEditDialog):
            return existing

        dialog = TagEditDialog(self._workspace, DialogDescriptor(id=normalized, tag_id=normalized))
        self._dialogs[dialog.id] = dialog
        dialog.initialize()
        self._logger.debug("Opened edit dialog %s", dialog.id)
        return dialog

    def open_confirm(self, descriptor: ConfirmDescriptor | Mapping[str, Any]) -> DeleteConfirmDialog:
        """Open a delete confirmation dialog on top of the stack."""
        if not isinstance(descriptor, ConfirmDescriptor):
            descriptor = ConfirmDescriptor.from_intent(descriptor)
        dialog_id = f"confirm-{descriptor.document_id}"
        self.remove(dialog_id)
        dialog = DeleteConfirmDialog(self._workspace, dialog_id, descriptor)
        self._dialogs[dialog_id] = dialog
        self._logger.debug("Opened confirm dialog %s for %s", dialog_id, descriptor.close_dialog_id)
        return dialog

    def remove(self, dialog_id: str) -> bool:
        """Remove a dialog; unknown ids are ignored."""
        dialog = self._dialogs.pop(dialog_id, None)
        if dialog is None:
            self._logger.debug("No open dialog with id %r", dialog_id)
            return False
        dialog.dispose()
        self._logger.debug("Removed dialog %s", dialog_id)
        return True
