"""In-process store of tag records.

The store is the single writer of tag records. Requests run on the
workspace executor; their results are applied by :meth:`TagStore.process_pending`
on the calling thread so listeners never run concurrently with dialog code.
"""

from __future__ import annotations

from concurrent.futures import Future, wait as wait_futures
from dataclasses import dataclass, replace
from typing import Any, Callable, Iterable, Literal, Optional, TYPE_CHECKING

from .exceptions import ApiError, TagNameConflict
from .resources.tags_types import TagDocument
from .resources._common_types import _normalize_id
from .store_types import Listener, TagItem, UpdateIntent

if TYPE_CHECKING:  # pragma: no cover
    from .workspace import Workspace

RequestKind = Literal["fetch", "fetch_all", "update", "delete"]


@dataclass(eq=False)
class _Pending:
    future: Future
    kind: RequestKind
    tag_id: Optional[str] = None
    close_dialog_id: Optional[str] = None


class TagStore:
    """Tag records keyed by document id, with per-record request status."""

    def __init__(self, workspace: "Workspace") -> None:
        self._workspace = workspace
        self._items: dict[str, TagItem] = {}
        self._listeners: dict[str, list[Listener]] = {}
        self._pending: list[_Pending] = []

    @property
    def _logger(self):
        return self._workspace._logger

    @property
    def _api(self):
        return self._workspace.client.tags

    @property
    def ids(self) -> list[str]:
        return list(self._items)

    @property
    def pending(self) -> int:
        """Number of requests whose results have not been applied yet."""
        return len(self._pending)

    # ------------------------------------------------------------------
    # Reads and subscriptions
    # ------------------------------------------------------------------
    def select_by_id(self, tag_id: str) -> TagItem | None:
        if not isinstance(tag_id, str):
            return None
        return self._items.get(tag_id)

    def subscribe(self, tag_id: str, listener: Listener) -> Callable[[], None]:
        """Call ``listener`` with the new item whenever record ``tag_id`` changes.

        Returns a callable that removes the listener.
        """
        listeners = self._listeners.setdefault(tag_id, [])
        listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in listeners:
                listeners.remove(listener)
            if not listeners:
                self._listeners.pop(tag_id, None)

        return _unsubscribe

    def receive(self, documents: Iterable[TagDocument]) -> None:
        """Insert or replace records with freshly loaded documents."""
        for document in documents:
            tag_id = _normalize_id(document.get("_id")) if isinstance(document, dict) else None
            if tag_id is None:
                self._logger.warning("Skipping tag document without a valid _id: %r", document)
                continue
            self._set(tag_id, TagItem(tag=document))

    # ------------------------------------------------------------------
    # Requests
    # ------------------------------------------------------------------
    def fetch(self, tag_id: str) -> Future | None:
        normalized = _normalize_id(tag_id)
        if normalized is None:
            self._logger.warning("Invalid tag_id for fetch: %r", tag_id)
            return None
        return self._submit("fetch", self._api.get, normalized, tag_id=normalized)

    def fetch_all(self) -> Future:
        return self._submit("fetch_all", self._api.list)

    def update(self, intent: UpdateIntent) -> Future | None:
        """Start renaming the tag described by ``intent``.

        The record is marked ``updating`` and its error cleared straight away;
        the outcome lands on the record once :meth:`process_pending` applies it.
        """
        tag = intent.get("tag")
        tag_id = _normalize_id(tag.get("_id")) if isinstance(tag, dict) else None
        item = self._items.get(tag_id) if tag_id is not None else None
        if item is None or item.tag is None:
            self._logger.warning("Cannot update unknown tag %r", tag_id)
            return None
        if item.updating:
            self._logger.debug("Tag %s is already updating, ignoring update", tag_id)
            return None

        fields = dict(intent.get("formData") or {})
        slug = fields.get("name")
        name = slug.get("current") if isinstance(slug, dict) else None

        self._set(tag_id, replace(item, updating=True, error=None))
        return self._submit(
            "update",
            self._run_update,
            tag_id,
            fields,
            name,
            tag_id=tag_id,
            close_dialog_id=intent.get("closeDialogId"),
        )

    def delete(self, tag_id: str, *, close_dialog_id: Optional[str] = None) -> Future | None:
        """Start deleting ``tag_id``, closing ``close_dialog_id`` on success."""
        item = self.select_by_id(tag_id)
        if item is None or item.tag is None:
            self._logger.warning("Cannot delete unknown tag %r", tag_id)
            return None
        if item.updating:
            self._logger.debug("Tag %s is already updating, ignoring delete", tag_id)
            return None

        self._set(tag_id, replace(item, updating=True, error=None))
        return self._submit(
            "delete",
            self._run_delete,
            tag_id,
            tag_id=tag_id,
            close_dialog_id=close_dialog_id,
        )

    def process_pending(self, *, wait: bool = False, timeout: Optional[float] = None) -> int:
        """Apply the results of finished requests.

        Parameters
        ----------
        wait
            Block until every outstanding request has finished (or ``timeout``
            elapses) before applying results.
        timeout
            Maximum seconds to wait when ``wait`` is set.

        Returns
        -------
        int
            Number of results applied.
        """
        if wait and self._pending:
            wait_futures([entry.future for entry in self._pending], timeout=timeout)

        done = [entry for entry in self._pending if entry.future.done()]
        for entry in done:
            self._pending.remove(entry)
            self._apply(entry)
        return len(done)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    def _submit(
        self,
        kind: RequestKind,
        fn: Callable[..., Any],
        *args: Any,
        tag_id: Optional[str] = None,
        close_dialog_id: Optional[str] = None,
    ) -> Future:
        future = self._workspace.executor.submit(fn, *args)
        self._pending.append(_Pending(future, kind, tag_id, close_dialog_id))
        return future

    def _run_update(self, tag_id: str, fields: dict[str, Any], name: Optional[str]) -> TagDocument:
        if name is not None:
            existing = self._api.find_by_name(name, exclude_id=tag_id)
            if existing is None:
                raise ApiError(f"Unable to check name for tag {tag_id}")
            if existing:
                raise TagNameConflict()
        document = self._api.update(tag_id, fields)
        if document is None:
            raise ApiError(f"Unable to update tag {tag_id}")
        return document

    def _run_delete(self, tag_id: str) -> None:
        if not self._api.delete(tag_id):
            raise ApiError(f"Unable to delete tag {tag_id}")

    def _apply(self, entry: _Pending) -> None:
        try:
            result = entry.future.result()
        except ApiError as exc:
            self._logger.warning("Tag %s %s failed: %s", entry.tag_id, entry.kind, exc.message)
            self._fail(entry.tag_id, exc)
            return
        except Exception as exc:
            # Unlock the record before propagating.
            self._fail(entry.tag_id, ApiError(str(exc)))
            raise

        if entry.kind == "fetch":
            if result is None:
                self._logger.warning("Tag %s could not be loaded", entry.tag_id)
                return
            self.receive([result])
        elif entry.kind == "fetch_all":
            self.receive(result or [])
        elif entry.kind == "update":
            self._logger.debug("Tag %s updated", entry.tag_id)
            self._set(entry.tag_id, TagItem(tag=result))
            self._close_dialog(entry.close_dialog_id)
        elif entry.kind == "delete":
            self._logger.debug("Tag %s deleted", entry.tag_id)
            self._items.pop(entry.tag_id, None)
            self._notify(entry.tag_id, None)
            self._close_dialog(entry.close_dialog_id)

    def _fail(self, tag_id: Optional[str], error: ApiError) -> None:
        item = self._items.get(tag_id) if tag_id is not None else None
        if item is not None:
            self._set(tag_id, replace(item, updating=False, error=error))

    def _close_dialog(self, dialog_id: Optional[str]) -> None:
        if dialog_id:
            self._workspace.dialogs.remove(dialog_id)

    def _set(self, tag_id: str, item: TagItem) -> None:
        self._items[tag_id] = item
        self._notify(tag_id, item)

    def _notify(self, tag_id: str, item: TagItem | None) -> None:
        for listener in list(self._listeners.get(tag_id, ())):
            listener(item)
