"""Base resource helpers."""

from __future__ import annotations

import json as _json
from typing import Any, Optional, TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover
    from ..client import ContentClient


class Resource:
    """Shared helpers for resource classes."""

    def __init__(self, client: "ContentClient") -> None:
        self._client = client

    @property
    def _logger(self):
        return self._client._logger

    @property
    def _dataset(self) -> str:
        return self._client.dataset

    def _request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[dict[str, Any] | list[tuple[str, Any]]] = None,
        json: Optional[dict[str, Any]] = None,
        timeout: Optional[int] = None,
    ) -> Optional[dict[str, Any] | list[Any]]:
        return self._client.request(method, path, params=params, json=json, timeout=timeout)

    def _get(
        self,
        path: str,
        *,
        params: Optional[dict[str, Any] | list[tuple[str, Any]]] = None,
        timeout: Optional[int] = None,
    ) -> Optional[dict[str, Any] | list[Any]]:
        return self._request("GET", path, params=params, timeout=timeout)

    def _post(
        self,
        path: str,
        *,
        params: Optional[dict[str, Any] | list[tuple[str, Any]]] = None,
        json: Optional[dict[str, Any]] = None,
        timeout: Optional[int] = None,
    ) -> Optional[dict[str, Any] | list[Any]]:
        return self._request("POST", path, params=params, json=json, timeout=timeout)

    def _query(
        self,
        query: str,
        variables: Optional[dict[str, Any]] = None,
        *,
        timeout: Optional[int] = None,
    ) -> Any:
        """Run a GROQ query and return its ``result`` member."""
        params: dict[str, Any] = {"query": query}
        for key, value in (variables or {}).items():
            params[f"${key}"] = _json_param(value)
        response = self._get(f"/data/query/{self._dataset}", params=params, timeout=timeout)
        if not isinstance(response, dict):
            return None
        return response.get("result")

    def _mutate(
        self,
        mutations: list[dict[str, Any]],
        *,
        return_documents: bool = False,
        timeout: Optional[int] = None,
    ) -> Optional[dict[str, Any] | list[Any]]:
        params = {"returnDocuments": "true"} if return_documents else None
        return self._post(
            f"/data/mutate/{self._dataset}",
            params=params,
            json={"mutations": mutations},
            timeout=timeout,
        )


def _json_param(value: Any) -> str:
    # Query parameters are sent JSON encoded.
    return _json.dumps(value)
