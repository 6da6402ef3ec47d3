"""Application state shared by open dialogs."""

from __future__ import annotations

import logging
from concurrent.futures import Executor, ThreadPoolExecutor
from typing import Any, Optional

from .client import ContentClient
from .controller import TagEditDialog
from .dialogs import DialogManager
from .store import TagStore


class Workspace:
    """One content client, one tag store and one dialog stack."""

    client: Any
    tags: TagStore
    dialogs: DialogManager

    def __init__(
        self,
        *,
        client: Optional[Any] = None,
        executor: Optional[Executor] = None,
        max_workers: int = 2,
    ) -> None:
        """Create a workspace.

        Parameters
        ----------
        client
            Object exposing a ``tags`` resource. Defaults to a
            :class:`~tagedit.client.ContentClient` that raises on request errors,
            so failures reach the store as :class:`~tagedit.exceptions.ApiError`.
        executor
            Executor that runs API requests. Defaults to a private thread pool.
        max_workers
            Worker count for the default thread pool.
        """
        self.client = client if client is not None else ContentClient(raise_on_error=True)
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(
            max_workers=max_workers,
            thread_name_prefix="tagedit",
        )
        self._logger = logging.getLogger(__name__)

        self.tags: TagStore = TagStore(self)
        self.dialogs: DialogManager = DialogManager(self)

    @property
    def executor(self) -> Executor:
        return self._executor

    def open_tag_edit(self, tag_id: str) -> TagEditDialog:
        return self.dialogs.open_tag_edit(tag_id)

    def close(self) -> None:
        """Close every dialog and shut down the default executor."""
        for dialog_id in reversed(self.dialogs.ids):
            self.dialogs.remove(dialog_id)
        if self._owns_executor:
            self._executor.shutdown(wait=True)

    def __enter__(self) -> "Workspace":
        return self

    def __exit__(self, *_exc: object) -> None:
        self.close()
