from __future__ import annotations

from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from .constants import DEFAULT_ENV, DEFAULT_LOG_RETRY_AFTER_SECONDS, LIST_CURSOR_START


class Credentials(BaseModel):
    """
    Credentials bound to one client instance.

    Fields
    - namespace: the state container namespace (usually the Runtime namespace).
    - apikey: the Runtime api key; sent Basic-encoded, never logged.
    - region: optional region, validated against the allow-list at init.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    namespace: str
    apikey: str = Field(..., repr=False)
    region: Optional[str] = None


class ClientConfig(BaseModel):
    """Resolved, immutable configuration owned by one `AdobeStateClient`."""

    model_config = ConfigDict(frozen=True)

    endpoint: str
    namespace: str
    apikey: str = Field(..., repr=False)
    region: str
    env: str = DEFAULT_ENV
    log_retry_after_seconds: float = DEFAULT_LOG_RETRY_AFTER_SECONDS


class GetResult(BaseModel):
    value: str
    expiration: Optional[str] = Field(
        default=None,
        description="ISO 8601 UTC expiration time, None when the server sent no expiry",
    )


class StateStats(BaseModel):
    """Aggregate sizes maintained server-side for the container."""

    model_config = ConfigDict(populate_by_name=True)

    bytes_keys: int = Field(0, alias="bytesKeys")
    bytes_values: int = Field(0, alias="bytesValues")
    keys: int = 0

    @classmethod
    def empty(cls) -> "StateStats":
        return cls()


class DeleteAllResult(BaseModel):
    keys: int = Field(0, description="Number of deleted keys")


class ListPage(BaseModel):
    keys: List[str] = Field(default_factory=list)
    cursor: Union[int, str, None] = LIST_CURSOR_START


__all__ = [
    "Credentials",
    "ClientConfig",
    "GetResult",
    "StateStats",
    "DeleteAllResult",
    "ListPage",
]
