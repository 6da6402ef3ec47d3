"""Interactive tag helper tools."""

from __future__ import annotations

from typing import Any, Callable, Literal, Optional, Sequence, TYPE_CHECKING

from tagedit.dialogs import DeleteConfirmDialog
from tagedit.resources.tags_types import TagDocument

if TYPE_CHECKING:  # pragma: no cover
    from tagedit.workspace import Workspace

EditOutcome = Literal["renamed", "deleted", "cancelled", "missing"]


def _load_prompt() -> Callable[[list[dict[str, Any]]], Any]:
    try:
        from InquirerPy.resolver import prompt
    except ImportError as exc:  # pragma: no cover - optional dependency
        raise RuntimeError("InquirerPy is required for interactive tag tools.") from exc
    return prompt


def _tag_name(tag: Optional[TagDocument]) -> str:
    name = tag.get("name") if isinstance(tag, dict) else None
    current = name.get("current") if isinstance(name, dict) else None
    return current if isinstance(current, str) else "(unnamed)"


def choose_tag(tags: Sequence[TagDocument]) -> TagDocument | None:
    """Interactively choose a tag using a fuzzy InquirerPy prompt.

    Parameters
    ----------
    tags
        Tag documents to choose from.

    Returns
    -------
    TagDocument | None
        Selected tag, or None if the user cancels or there is nothing to choose.
    """
    if not tags:
        return None
    prompt = _load_prompt()

    choices: list[dict[str, Any]] = [{"name": " X Cancel", "value": None}]
    for tag in tags:
        if isinstance(tag, dict):
            choices.append({"name": _tag_name(tag), "value": tag})

    result = prompt(
        [
            {
                "type": "fuzzy",
                "name": "selection",
                "message": "Select a tag",
                "choices": choices,
            }
        ],
    )
    selection = result.get("selection") if isinstance(result, dict) else None
    if isinstance(selection, dict):
        return selection
    return None


def edit_tag(
    workspace: "Workspace",
    tag_id: str,
    *,
    timeout: Optional[float] = 30,
    echo: Callable[[str], None] = print,
) -> EditOutcome:
    """Open the edit dialog for ``tag_id`` and drive it from prompts.

    The loop keeps the dialog open until the tag is renamed, deleted or the
    user cancels. Server errors are printed and the user may try again.
    """
    prompt = _load_prompt()
    dialog = workspace.open_tag_edit(tag_id)
    if dialog.tag is None:
        workspace.tags.fetch(tag_id)
        workspace.tags.process_pending(wait=True, timeout=timeout)
    if dialog.tag is None:
        echo(f"Tag {tag_id} not found.")
        dialog.on_close()
        return "missing"

    while dialog.id in workspace.dialogs:
        result = prompt(
            [
                {
                    "type": "list",
                    "name": "action",
                    "message": f"{dialog.header}: {_tag_name(dialog.tag)}",
                    "choices": [
                        {"name": "Rename", "value": "rename"},
                        {"name": "Delete", "value": "delete"},
                        {"name": "Cancel", "value": "cancel"},
                    ],
                }
            ],
        )
        action = result.get("action") if isinstance(result, dict) else None

        if action == "rename":
            answer = prompt(
                [
                    {
                        "type": "input",
                        "name": "name",
                        "message": "Name",
                        "default": _tag_name(dialog.tag),
                    }
                ],
            )
            value = answer.get("name") if isinstance(answer, dict) else None
            dialog.change(value if isinstance(value, str) else "")
            if not dialog.submit():
                echo(dialog.field_error or "Nothing to save.")
                continue
            workspace.tags.process_pending(wait=True, timeout=timeout)
            if dialog.id not in workspace.dialogs:
                item = workspace.tags.select_by_id(tag_id)
                echo(f"Renamed tag to {_tag_name(item.tag if item else None)}.")
                return "renamed"
            echo(dialog.field_error or "Update failed.")
        elif action == "delete":
            dialog.on_delete()
            confirm = workspace.dialogs.top
            if not isinstance(confirm, DeleteConfirmDialog):
                continue
            answer = prompt(
                [
                    {
                        "type": "confirm",
                        "name": "confirm",
                        "message": confirm.title,
                        "default": False,
                    }
                ],
            )
            if not (isinstance(answer, dict) and answer.get("confirm")):
                confirm.cancel()
                continue
            confirm.confirm()
            workspace.tags.process_pending(wait=True, timeout=timeout)
            if dialog.id not in workspace.dialogs:
                echo("Tag deleted.")
                return "deleted"
            echo(dialog.field_error or "Delete failed.")
        else:
            dialog.on_close()
            return "cancelled"

    return "cancelled"  # pragma: no cover - dialog closed by another actor
