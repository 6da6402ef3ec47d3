"""Public package surface for the tagedit library."""

from .client import CONTENT_PORT, DEFAULT_HOST, ContentClient
from .controller import DialogState, TagEditDialog
from .dialogs import DeleteConfirmDialog, DialogManager
from .dialogs_types import ConfirmDescriptor, DialogDescriptor
from .exceptions import ApiError, TagNameConflict
from .form import FormState
from .store import TagStore
from .store_types import TagItem, UpdateIntent
from .workspace import Workspace

__all__ = [
    "ApiError",
    "CONTENT_PORT",
    "ConfirmDescriptor",
    "ContentClient",
    "DEFAULT_HOST",
    "DeleteConfirmDialog",
    "DialogDescriptor",
    "DialogManager",
    "DialogState",
    "FormState",
    "TagEditDialog",
    "TagItem",
    "TagNameConflict",
    "TagStore",
    "UpdateIntent",
    "Workspace",
]
