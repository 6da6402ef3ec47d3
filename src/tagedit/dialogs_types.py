"""Types for the dialog stack."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal, Mapping, TypedDict
from typing_extensions import ReadOnly

from .resources._common_types import _normalize_id

DocumentType = Literal["tag"]


class ConfirmIntent(TypedDict):
    """Wire shape of a delete confirmation request."""
    closeDialogId: ReadOnly[str]
    documentId: ReadOnly[str]
    documentType: ReadOnly[DocumentType]


@dataclass(frozen=True)
class DialogDescriptor:
    """Which dialog instance is open and which tag it edits."""

    id: str
    tag_id: str


@dataclass(frozen=True)
class ConfirmDescriptor:
    """What a confirmation dialog deletes and which dialog it closes afterwards."""

    close_dialog_id: str
    document_id: str
    document_type: DocumentType = "tag"

    def as_intent(self) -> ConfirmIntent:
        return {
            "closeDialogId": self.close_dialog_id,
            "documentId": self.document_id,
            "documentType": self.document_type,
        }

    @classmethod
    def from_intent(cls, intent: Mapping[str, Any]) -> "ConfirmDescriptor":
        """Build a descriptor from its wire shape.

        Raises
        ------
        ValueError
            If an id is not a non-empty string or the document type is not ``"tag"``.
        """
        close_dialog_id = _normalize_id(intent.get("closeDialogId"))
        document_id = _normalize_id(intent.get("documentId"))
        document_type = intent.get("documentType")
        if close_dialog_id is None or document_id is None:
            raise ValueError(f"Invalid confirm intent ids: {dict(intent)!r}")
        if document_type != "tag":
            raise ValueError(f"Unsupported document type: {document_type!r}")
        return cls(close_dialog_id=close_dialog_id, document_id=document_id, document_type="tag")


__all__ = ["ConfirmDescriptor", "ConfirmIntent", "DialogDescriptor", "DocumentType"]
