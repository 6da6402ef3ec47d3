"""Content API client with a raw-request escape hatch."""

from __future__ import annotations

import logging
import os
from typing import Any, Optional

import requests

from .exceptions import ApiError
from .resources.tags import Tags

DEFAULT_HOST = os.environ.get("CONTENT_HOST", "localhost")
CONTENT_PORT = int(os.environ.get("CONTENT_PORT", "3333"))
DEFAULT_DATASET = os.environ.get("CONTENT_DATASET", "production")
DEFAULT_API_VERSION = os.environ.get("CONTENT_API_VERSION", "2021-06-07")
DEFAULT_TOKEN = os.environ.get("CONTENT_TOKEN")


class ContentClient:
    """Resource-grouped client for the content HTTP API."""

    tags: Tags

    def __init__(
        self,
        *,
        host: Optional[str] = None,
        port: Optional[int | str] = None,
        dataset: Optional[str] = None,
        api_version: Optional[str] = None,
        token: Optional[str] = None,
        default_timeout: int = 20,
        session: Optional[requests.Session] = None,
        raise_on_error: bool = False,
    ) -> None:
        """Create a client bound to one dataset of a content API instance.

        Parameters
        ----------
        host
            Hostname or IP for the content API.
        port
            API port number.
        dataset
            Dataset holding the tag documents.
        api_version
            Dated API version, sent as the ``/v<version>`` path prefix.
        token
            Optional bearer token for authenticated datasets.
        default_timeout
            Default request timeout in seconds.
        session
            Optional requests session to reuse connections.
        raise_on_error
            If True, raise :class:`~tagedit.exceptions.ApiError` instead of
            returning None.
        """
        self.host = host or DEFAULT_HOST
        self.port = int(port or CONTENT_PORT)
        self.dataset = dataset or DEFAULT_DATASET
        self.api_version = api_version or DEFAULT_API_VERSION
        self.token = token if token is not None else DEFAULT_TOKEN
        self.default_timeout = default_timeout
        self.raise_on_error = raise_on_error
        self._logger = logging.getLogger(__name__)
        self._session = session

        self.tags: Tags = Tags(self)

    def request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[dict[str, Any] | list[tuple[str, Any]]] = None,
        json: Optional[dict[str, Any]] = None,
        timeout: Optional[int] = None,
    ) -> Optional[dict[str, Any] | list[Any]]:
        """Send a raw request to the content API.

        Parameters
        ----------
        method
            HTTP method (GET, POST, PATCH, DELETE).
        path
            Endpoint path, with or without the ``/v<api_version>`` prefix.
        params
            Query parameters for the request.
        json
            JSON payload for the request.
        timeout
            Timeout in seconds for this request.

        Returns
        -------
        dict | list | None
            Parsed JSON payload, or None if the response is empty or non-JSON.

        Raises
        ------
        ApiError
            When the request fails and ``raise_on_error`` is set.
        """
        prefix = f"/v{self.api_version}"
        if not path.startswith("/"):
            path = "/" + path
        if not path.startswith(prefix + "/"):
            path = prefix + path
        url = f"http://{self.host}:{self.port}{path}"

        headers = {"Authorization": f"Bearer {self.token}"} if self.token else None
        requester = self._session or requests
        response = None
        try:
            response = requester.request(
                method,
                url,
                params=params,
                json=json,
                headers=headers,
                timeout=timeout or self.default_timeout,
            )
            response.raise_for_status()
        except requests.HTTPError as exc:
            # Extract error message from response body if available
            server_msg = None
            try:
                error_body = response.json()
                if isinstance(error_body, dict):
                    # Try common error message fields
                    error = error_body.get("error")
                    if isinstance(error, dict):
                        error = error.get("description") or error.get("message")
                    server_msg = error_body.get("message") or error or error_body.get("detail")
            except (ValueError, AttributeError):
                pass  # Response wasn't JSON or didn't have expected fields
            self._logger.warning(
                "Request failed for %s %s: %s%s",
                method,
                url,
                exc,
                f"\nServer message: {server_msg}" if server_msg else "",
            )
            if self.raise_on_error:
                status_code = getattr(response, "status_code", None)
                raise ApiError(str(server_msg or exc), status_code=status_code) from exc
            return None
        except requests.RequestException as exc:
            self._logger.warning("Request failed for %s %s: %s", method, url, exc)
            if self.raise_on_error:
                raise ApiError(str(exc)) from exc
            return None

        if not response.content:
            return None
        try:
            payload = response.json()
        except ValueError:
            self._logger.warning("Response from %s %s was not JSON", method, url)
            return None
        if isinstance(payload, (dict, list)):
            return payload
        return None
