from __future__ import annotations

import base64
from typing import Any, Dict, Mapping, Optional

import httpx

from .constants import API_VERSION, CONTENT_TYPE_VALUE
from .models import ClientConfig


# operation -> (HTTP method, path suffix after the container, needs key)
OPERATIONS: Dict[str, tuple] = {
    "get": ("GET", "/data/{key}", True),
    "put": ("PUT", "/data/{key}", True),
    "delete": ("DELETE", "/data/{key}", True),
    "delete_all": ("DELETE", "", False),
    "any": ("HEAD", "", False),
    "stats": ("GET", "", False),
    "list": ("GET", "/data", False),
}


def basic_auth_header(apikey: str) -> str:
    return "Basic " + base64.b64encode(apikey.encode("utf-8")).decode("ascii")


class RequestBuilder:
    """
    Build authenticated `httpx.Request`s for each state operation.

    The Authorization header is computed once per builder. Query params with
    a None value are dropped, so optional params (ttl, match, countHint) can
    be passed through unconditionally.
    """

    def __init__(self, config: ClientConfig) -> None:
        self._base = f"{config.endpoint.rstrip('/')}/{API_VERSION}/containers/{config.namespace}"
        self._auth = {"Authorization": basic_auth_header(config.apikey)}

    @property
    def container_url(self) -> str:
        return self._base

    def build(
        self,
        operation: str,
        key: Optional[str] = None,
        value: Optional[str] = None,
        params: Optional[Mapping[str, Any]] = None,
    ) -> httpx.Request:
        try:
            method, suffix, needs_key = OPERATIONS[operation]
        except KeyError:
            raise ValueError(f"unknown operation: {operation}") from None
        if needs_key and not key:
            raise ValueError(f"operation '{operation}' requires a key")
        if operation == "delete_all" and not (params or {}).get("matchData"):
            # No zero-argument 'delete everything' request
            raise ValueError("operation 'delete_all' requires a matchData param")

        url = self._base + suffix.format(key=key)
        query = {k: str(v) for k, v in (params or {}).items() if v is not None}
        headers = dict(self._auth)
        content = None
        if operation == "put":
            headers["Content-Type"] = CONTENT_TYPE_VALUE
            content = (value or "").encode("utf-8")
        return httpx.Request(method, url, params=query or None, headers=headers, content=content)


__all__ = ["RequestBuilder", "basic_auth_header", "OPERATIONS"]
