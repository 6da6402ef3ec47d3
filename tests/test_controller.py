import logging
import sys
import threading
import unittest
from datetime import datetime, timezone
from pathlib import Path
from unittest.mock import patch

# Ensure src/ is on sys.path so we can import the package without installation
PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_DIR = PROJECT_ROOT / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from tagedit.controller import DialogState, TagEditDialog  # noqa: E402
from tagedit.dialogs import DeleteConfirmDialog  # noqa: E402
from tagedit.dialogs_types import ConfirmDescriptor, DialogDescriptor  # noqa: E402
from tagedit.exceptions import ApiError  # noqa: E402
from tagedit.store_types import TagItem  # noqa: E402
from tagedit.workspace import Workspace  # noqa: E402


logging.basicConfig(
    level=logging.WARNING,
    format="%(levelname)s:%(name)s:%(message)s",
    stream=sys.stdout,
    force=True,
)

T1 = {
    "_id": "t1",
    "_type": "media.tag",
    "name": {"_type": "slug", "current": "draft"},
    "_updatedAt": "2024-01-02T03:04:05Z",
}


class FakeTagsAPI:
    def __init__(self) -> None:
        self.documents = {"t1": dict(T1)}
        self.update_error: Exception | None = None
        self.updates: list[tuple[str, dict]] = []
        self.release = threading.Event()
        self.release.set()

    def get(self, tag_id):
        return self.documents.get(tag_id)

    def find_by_name(self, name, *, exclude_id=None):
        return []

    def update(self, tag_id, fields):
        self.release.wait(5)
        self.updates.append((tag_id, fields))
        if self.update_error is not None:
            raise self.update_error
        document = dict(self.documents[tag_id], **fields, _updatedAt="2024-02-01T00:00:00Z")
        self.documents[tag_id] = document
        return document

    def delete(self, tag_id):
        return True


class FakeClient:
    def __init__(self) -> None:
        self.tags = FakeTagsAPI()


class TagEditDialogTests(unittest.TestCase):
    def setUp(self) -> None:
        self.client = FakeClient()
        self.api = self.client.tags
        self.workspace = Workspace(client=self.client)
        self.store = self.workspace.tags
        self.store.receive([T1])

    def tearDown(self) -> None:
        self.api.release.set()
        self.workspace.close()

    def _open(self, tag_id="t1") -> TagEditDialog:
        return self.workspace.open_tag_edit(tag_id)

    # --- initialize --- #
    def test_initialize_seeds_form(self):
        dialog = TagEditDialog(self.workspace, DialogDescriptor(id="t1", tag_id="t1"))
        state = dialog.initialize()
        self.assertEqual(state.values, {"name": "draft"})
        self.assertFalse(state.is_dirty)
        self.assertTrue(state.is_valid)
        self.assertEqual(dialog.state, DialogState.READY)
        self.assertFalse(dialog.disabled)
        self.assertFalse(dialog.can_submit)
        self.assertTrue(dialog.can_delete)
        dialog.dispose()

    def test_missing_record_disables_everything(self):
        dialog = self._open("nope")
        self.assertEqual(dialog.state, DialogState.LOADING)
        self.assertTrue(dialog.disabled)
        self.assertFalse(dialog.can_submit)
        self.assertFalse(dialog.can_delete)
        dialog.change("something")
        self.assertFalse(dialog.submit())
        dialog.on_delete()
        self.assertEqual(self.workspace.dialogs.ids, ["nope"])
        self.assertEqual(self.store.pending, 0)

    def test_record_updating_at_mount_disables_form(self):
        self.store._set("t1", TagItem(tag=T1, updating=True))
        dialog = self._open()
        self.assertEqual(dialog.state, DialogState.LOADING)
        self.assertTrue(dialog.disabled)
        self.assertFalse(dialog.can_submit)
        self.assertEqual(dialog.form.values, {"name": "draft"})

    def test_late_record_seeds_defaults(self):
        dialog = self._open("t2")
        self.assertEqual(dialog.form.values, {"name": None})
        self.store.receive([dict(T1, _id="t2", name={"_type": "slug", "current": "later"})])
        self.assertEqual(dialog.form.values, {"name": "later"})
        self.assertEqual(dialog.state, DialogState.READY)

    # --- validation and gating --- #
    def test_blank_names_are_invalid(self):
        dialog = self._open()
        for value in ("", "   ", "\t"):
            state = dialog.change(value)
            self.assertFalse(state.is_valid)
            self.assertFalse(dialog.can_submit)
            self.assertEqual(dialog.field_error, "Name cannot be empty")
            self.assertFalse(dialog.submit())
        self.assertEqual(self.store.pending, 0)

    def test_new_name_enables_submit(self):
        dialog = self._open()
        state = dialog.change("Draft ")
        self.assertTrue(state.is_dirty)
        self.assertTrue(state.is_valid)
        self.assertTrue(dialog.can_submit)

    def test_unchanged_name_is_not_submitted(self):
        dialog = self._open()
        dialog.change("x")
        dialog.change("draft")
        self.assertFalse(dialog.can_submit)
        with patch.object(self.store, "update") as mocked_update:
            self.assertFalse(dialog.submit())
        mocked_update.assert_not_called()

    # --- submit --- #
    def test_submit_dispatches_sanitized_slug(self):
        dialog = self._open()
        dialog.change("Draft ")
        with patch.object(self.store, "update", return_value=object()) as mocked_update:
            self.assertTrue(dialog.submit())
        mocked_update.assert_called_once_with(
            {
                "closeDialogId": "t1",
                "formData": {"name": {"_type": "slug", "current": "Draft"}},
                "tag": T1,
            }
        )

    def test_on_submit_without_record_is_noop(self):
        dialog = self._open("nope")
        with patch.object(self.store, "update") as mocked_update:
            self.assertFalse(dialog.on_submit({"name": "x"}))
        mocked_update.assert_not_called()

    def test_submitting_disables_form_until_success(self):
        self.api.release.clear()
        dialog = self._open()
        dialog.change("Draft")
        self.assertTrue(dialog.submit())
        self.assertEqual(dialog.state, DialogState.SUBMITTING)
        self.assertTrue(dialog.disabled)
        self.assertFalse(dialog.can_submit)
        self.assertFalse(dialog.submit())
        self.assertIn("t1", self.workspace.dialogs)

        self.api.release.set()
        self.store.process_pending(wait=True)
        self.assertEqual(dialog.state, DialogState.READY)
        self.assertFalse(dialog.form.is_dirty)
        self.assertEqual(dialog.form.values, {"name": "Draft"})
        self.assertNotIn("t1", self.workspace.dialogs)
        self.assertEqual(len(self.api.updates), 1)

    def test_server_error_is_shown_and_form_reenabled(self):
        self.api.update_error = ApiError("duplicate name")
        dialog = self._open()
        dialog.change("Draft")
        dialog.submit()
        self.store.process_pending(wait=True)
        self.assertEqual(dialog.state, DialogState.READY_WITH_SERVER_ERROR)
        self.assertEqual(dialog.field_error, "duplicate name")
        self.assertFalse(dialog.disabled)
        self.assertIn("t1", self.workspace.dialogs)
        # Not retried.
        self.assertEqual(len(self.api.updates), 1)

        state = dialog.change("Draft 2")
        self.assertIsNone(dialog.field_error)
        self.assertEqual(dialog.state, DialogState.READY)
        self.assertTrue(state.is_dirty)
        self.assertTrue(dialog.can_submit)

    def test_unexpected_failure_reenables_dialog(self):
        self.api.update_error = RuntimeError("connection reset")
        dialog = self._open()
        dialog.change("Draft")
        dialog.submit()
        with self.assertRaises(RuntimeError):
            self.store.process_pending(wait=True)
        self.assertFalse(dialog.disabled)
        self.assertEqual(dialog.field_error, "connection reset")
        self.assertEqual(dialog.state, DialogState.READY_WITH_SERVER_ERROR)

    # --- external errors --- #
    def test_external_error_injected_without_user_action(self):
        self.store._set("t1", TagItem(tag=T1, error=ApiError("duplicate name")))
        dialog = self._open()
        self.assertEqual(dialog.field_error, "duplicate name")
        self.assertEqual(dialog.state, DialogState.READY_WITH_SERVER_ERROR)

    def test_external_error_injected_once_per_transition(self):
        dialog = self._open()
        error = ApiError("duplicate name")
        with patch.object(dialog, "on_external_error", wraps=dialog.on_external_error) as injected:
            self.store._set("t1", TagItem(tag=T1, error=error))
            self.store._set("t1", TagItem(tag=T1, error=error))
            self.assertEqual(injected.call_count, 1)
            self.assertEqual(dialog.field_error, "duplicate name")

            self.store._set("t1", TagItem(tag=T1))
            self.store._set("t1", TagItem(tag=T1, error=error))
            self.assertEqual(injected.call_count, 2)

    def test_new_error_reference_reinjects(self):
        dialog = self._open()
        self.store._set("t1", TagItem(tag=T1, error=ApiError("first")))
        dialog.change("edited")
        self.assertIsNone(dialog.field_error)
        self.store._set("t1", TagItem(tag=T1, error=ApiError("second")))
        self.assertEqual(dialog.field_error, "second")

    def test_on_external_error_uses_str_fallback(self):
        dialog = self._open()
        dialog.on_external_error(RuntimeError("plain"))
        self.assertEqual(dialog.field_error, "plain")

    # --- delete and close --- #
    def test_delete_opens_one_confirm_dialog(self):
        dialog = self._open()
        with patch.object(self.workspace.dialogs, "open_confirm") as mocked_open:
            dialog.on_delete()
        mocked_open.assert_called_once_with(
            ConfirmDescriptor(close_dialog_id="t1", document_id="t1", document_type="tag")
        )

    def test_delete_does_not_delete_or_close(self):
        dialog = self._open()
        dialog.on_delete()
        top = self.workspace.dialogs.top
        self.assertIsInstance(top, DeleteConfirmDialog)
        self.assertEqual(
            top.descriptor.as_intent(),
            {"closeDialogId": dialog.id, "documentId": "t1", "documentType": "tag"},
        )
        self.assertIn("t1", self.workspace.dialogs)
        self.assertIsNotNone(self.store.select_by_id("t1"))
        self.assertEqual(self.store.pending, 0)

    def test_close_removes_dialog(self):
        dialog = self._open()
        dialog.on_close()
        self.assertNotIn("t1", self.workspace.dialogs)

    def test_close_while_updating_does_not_cancel(self):
        self.api.release.clear()
        dialog = self._open()
        dialog.change("Draft")
        dialog.submit()
        dialog.on_close()
        self.api.release.set()
        self.store.process_pending(wait=True)
        self.assertEqual(self.store.select_by_id("t1").tag["name"]["current"], "Draft")

    # --- presentation flags --- #
    def test_last_updated(self):
        dialog = self._open()
        self.assertEqual(dialog.last_updated, datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc))

    def test_last_updated_unparseable(self):
        self.store.receive([dict(T1, _updatedAt="yesterday")])
        dialog = self._open()
        self.assertIsNone(dialog.last_updated)
        self.assertIsNone(self._open("nope").last_updated)


if __name__ == "__main__":
    unittest.main()
