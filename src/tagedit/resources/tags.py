"""Tag document resource wrapper."""

from __future__ import annotations

from typing import Any, Mapping, Optional, cast

from .base import Resource
from .tags_types import TagDocument
from ._common_types import TAG_DOCUMENT_TYPE, ValidationMode, _normalize_id

TAG_PROJECTION = "{_id, _type, _createdAt, _updatedAt, _rev, name}"


class Tags(Resource):
    """Tag document operations."""

    def get(
        self,
        tag_id: str,
        *,
        validation: ValidationMode = "warn",
        timeout: Optional[int] = None,
    ) -> TagDocument | None:
        """Fetch a single tag document by ID.

        Parameters
        ----------
        tag_id
            Tag document identifier.
        validation
            Validation mode: ``"off"`` sends inputs as-is, ``"warn"`` drops invalid
            inputs with warnings, and ``"strict"`` raises on invalid inputs.
        timeout
            Request timeout in seconds.

        Returns
        -------
        TagDocument or None
            Tag document, or ``None`` when missing or on error.
        """
        if validation != "off":
            normalized = _normalize_id(tag_id)
            if normalized is None:
                if validation == "strict":
                    raise ValueError(f"Invalid tag_id: {tag_id!r}")
                self._logger.warning("Invalid tag_id for get: %r", tag_id)
                return None
            tag_id = normalized

        response = self._get(f"/data/doc/{self._dataset}/{tag_id}", timeout=timeout)
        if not isinstance(response, dict):
            return None
        documents = response.get("documents")
        if isinstance(documents, list) and documents and isinstance(documents[0], dict):
            return cast(TagDocument, documents[0])
        self._logger.warning("Tag %s not found in response", tag_id)
        return None

    def list(self, *, timeout: Optional[int] = None) -> list[TagDocument] | None:
        """Fetch all tags ordered by name.

        Returns
        -------
        list[TagDocument] or None
            List of tag documents, or ``None`` on error.
        """
        query = f'*[_type == "{TAG_DOCUMENT_TYPE}"] | order(name.current asc) {TAG_PROJECTION}'
        result = self._query(query, timeout=timeout)
        if isinstance(result, list):
            return [cast(TagDocument, item) for item in result if isinstance(item, dict)]
        self._logger.warning("Tags response missing expected result list.")
        return None

    def find_by_name(
        self,
        name: str,
        *,
        exclude_id: Optional[str] = None,
        timeout: Optional[int] = None,
    ) -> list[TagDocument] | None:
        """Find tags whose slug equals ``name``.

        Parameters
        ----------
        name
            Slug value to look for.
        exclude_id
            Tag to leave out of the result, typically the tag being renamed.
        timeout
            Request timeout in seconds.

        Returns
        -------
        list[TagDocument] or None
            Matching tags, or ``None`` on error.
        """
        filters = [f'_type == "{TAG_DOCUMENT_TYPE}"', "name.current == $name"]
        variables: dict[str, Any] = {"name": name}
        if exclude_id is not None:
            filters.append("_id != $excludeId")
            variables["excludeId"] = exclude_id
        query = f"*[{' && '.join(filters)}] {TAG_PROJECTION}"
        result = self._query(query, variables, timeout=timeout)
        if isinstance(result, list):
            return [cast(TagDocument, item) for item in result if isinstance(item, dict)]
        self._logger.warning("Tag name lookup response missing expected result list.")
        return None

    def update(
        self,
        tag_id: str,
        fields: Mapping[str, object],
        *,
        validation: ValidationMode = "warn",
        timeout: Optional[int] = None,
    ) -> TagDocument | None:
        """Patch fields on an existing tag.

        Parameters
        ----------
        tag_id
            Tag document identifier.
        fields
            Field values to set, e.g. ``{"name": {"_type": "slug", "current": "x"}}``.
        validation
            Validation mode: ``"off"`` sends inputs as-is, ``"warn"`` drops invalid
            inputs with warnings, and ``"strict"`` raises on invalid inputs.
        timeout
            Request timeout in seconds.

        Returns
        -------
        TagDocument or None
            Updated tag document, or ``None`` on error.
        """
        if validation != "off":
            normalized = _normalize_id(tag_id)
            if normalized is None:
                if validation == "strict":
                    raise ValueError(f"Invalid tag_id: {tag_id!r}")
                self._logger.warning("Invalid tag_id for update: %r", tag_id)
                return None
            tag_id = normalized

            if not isinstance(fields, Mapping) or not fields:
                if validation == "strict":
                    raise ValueError(f"Invalid fields: {fields!r}")
                self._logger.warning("No updates provided for tag %s", tag_id)
                return None

        response = self._mutate(
            [{"patch": {"id": tag_id, "set": dict(fields)}}],
            return_documents=True,
            timeout=timeout,
        )
        if not isinstance(response, dict):
            return None

        results = response.get("results")
        if isinstance(results, list):
            for result in results:
                document = result.get("document") if isinstance(result, dict) else None
                if isinstance(document, dict) and document.get("_id") == tag_id:
                    return cast(TagDocument, document)
        self._logger.warning("Update tag response missing expected document.")
        return None

    def delete(
        self,
        tag_id: str,
        *,
        validation: ValidationMode = "warn",
        timeout: Optional[int] = None,
    ) -> bool:
        """Delete a tag by ID.

        Returns
        -------
        bool
            ``True`` when the delete request succeeds.
        """
        if validation != "off":
            normalized = _normalize_id(tag_id)
            if normalized is None:
                if validation == "strict":
                    raise ValueError(f"Invalid tag_id: {tag_id!r}")
                self._logger.warning("Invalid tag_id for delete: %r", tag_id)
                return False
            tag_id = normalized

        response = self._mutate([{"delete": {"id": tag_id}}], timeout=timeout)
        return response is not None
