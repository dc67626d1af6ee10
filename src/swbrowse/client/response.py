"""Request URL construction and response decoding shared by both clients.

The absolute URL built by :func:`build_url` doubles as the cache key, so
the same path and parameters always produce the same string. Responses are
turned into decoded JSON by :func:`decode_json` after
:func:`map_response_error` has rejected error statuses.
"""

from __future__ import annotations

from typing import Any, Optional

import httpx

from swbrowse.exceptions import InvalidResponseError, NotFoundError, ServerError


def build_url(base_url: str, path: str, params: Optional[dict[str, Any]] = None) -> str:
    """Join *path* onto *base_url* and merge *params* into the query string.

    Absolute ``http(s)`` paths (e.g. reference URLs taken from an entity)
    are used as-is. ``None`` parameter values are dropped.

    Example::

        >>> build_url("http://localhost:3001/api", "/people", {"page": 2})
        'http://localhost:3001/api/people?page=2'
    """
    if path.startswith(("http://", "https://")):
        url = httpx.URL(path)
    else:
        url = httpx.URL(f"{base_url.rstrip('/')}/{path.lstrip('/')}")
    if params:
        clean = {k: v for k, v in params.items() if v is not None}
        if clean:
            url = url.copy_merge_params(clean)
    return str(url)


def map_response_error(response: httpx.Response, url: str) -> None:
    """Raise a typed exception for error HTTP status codes."""
    status = response.status_code
    if status < 400:
        return

    # Try to extract an error message from the response body.
    try:
        detail = response.json()
        if isinstance(detail, dict):
            msg = detail.get("detail") or detail.get("message") or detail.get("error") or ""
        else:
            msg = str(detail)
    except ValueError:
        msg = response.text[:200] if response.text else ""

    prefix = f"HTTP {status}"
    full_msg = f"{prefix}: {msg}" if msg else prefix

    if status == 404:
        raise NotFoundError(full_msg, url=url)
    raise ServerError(full_msg, url=url)


def decode_json(response: httpx.Response, url: str) -> Any:
    """Return the JSON body of a successful *response*.

    Raises:
        InvalidResponseError: If the body is empty or not JSON.
    """
    if not response.content:
        raise InvalidResponseError(f"Empty response body from {url}", url=url)
    try:
        return response.json()
    except ValueError as exc:
        raise InvalidResponseError(f"Response from {url} is not JSON: {exc}", url=url) from exc
