"""HTTP client for the remote portfolio REST API.

Every request carries the owner's bearer token (supplied by an injected
provider, never inspected here) and an ``X-Request-ID`` header. Successful
responses are unwrapped from the optional ``{"data": ...}`` envelope the API
uses; anything else is raised as :class:`ApiError`.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import Any

import requests

logger = logging.getLogger(__name__)

TokenProvider = Callable[[], str | None]


class ApiError(Exception):
    """A failed call to the remote API, carrying a human-readable message."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    @property
    def is_auth_error(self) -> bool:
        return self.status_code in (401, 403)


def unwrap(payload: Any) -> Any:
    """Strip the ``{"data": ...}`` envelope if present."""
    if isinstance(payload, dict) and "data" in payload:
        return payload["data"]
    return payload


def first_record(payload: Any) -> Any:
    """Some endpoints answer with a one-element list instead of the record."""
    payload = unwrap(payload)
    if isinstance(payload, list):
        return payload[0] if payload else None
    return payload


class PortfolioApiClient:
    """Thin wrapper around a ``requests.Session`` bound to one API base URL."""

    def __init__(
        self,
        base_url: str,
        token_provider: TokenProvider | None = None,
        timeout: float = 10.0,
        session: requests.Session | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.token_provider = token_provider
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.setdefault("Content-Type", "application/json")

    def _headers(self, method: str, path: str) -> dict[str, str]:
        headers = {"X-Request-ID": f"{method.lower()}-{path}-{int(time.time() * 1000)}"}
        token = self.token_provider() if self.token_provider else None
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    def request(
        self,
        method: str,
        path: str,
        json: Any = None,
        files: dict | None = None,
        raw: bool = False,
    ) -> Any:
        """
        Make an authenticated request.

        Args:
            method: HTTP method
            path: API path, e.g. ``/api/projects``
            json: JSON body
            files: Multipart files (``Content-Type`` is then left to requests)
            raw: Return the response body as bytes instead of decoded JSON

        Returns:
            The unwrapped JSON payload, bytes when ``raw``, or None for empty bodies

        Raises:
            ApiError: On transport failure or a non-2xx status
        """
        url = f"{self.base_url}{path}"
        headers = self._headers(method, path)
        if files is not None:
            # Let requests compute the multipart boundary.
            headers["Content-Type"] = None  # type: ignore[assignment]

        logger.debug("%s %s", method, url)
        try:
            response = self.session.request(
                method, url, json=json, files=files, headers=headers, timeout=self.timeout
            )
        except requests.RequestException as exc:
            raise ApiError(f"Could not reach portfolio API: {exc}") from exc

        if not 200 <= response.status_code < 300:
            raise ApiError(self._error_message(response), status_code=response.status_code)

        if raw:
            return response.content
        if not response.content:
            return None
        try:
            return unwrap(response.json())
        except ValueError as exc:
            raise ApiError(f"Invalid JSON from {method} {path}", response.status_code) from exc

    @staticmethod
    def _error_message(response: requests.Response) -> str:
        if response.status_code in (401, 403):
            return "Authentication failed. Please log in again."
        detail = None
        try:
            body = response.json()
            if isinstance(body, dict):
                detail = body.get("message") or body.get("error") or body.get("detail")
        except ValueError:
            pass
        return f"Request failed ({response.status_code}): {detail or response.reason}"

    def get(self, path: str, **kwargs: Any) -> Any:
        return self.request("GET", path, **kwargs)

    def post(self, path: str, **kwargs: Any) -> Any:
        return self.request("POST", path, **kwargs)

    def put(self, path: str, **kwargs: Any) -> Any:
        return self.request("PUT", path, **kwargs)

    def delete(self, path: str, **kwargs: Any) -> Any:
        return self.request("DELETE", path, **kwargs)

    def close(self) -> None:
        self.session.close()
