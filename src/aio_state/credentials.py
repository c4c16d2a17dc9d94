from __future__ import annotations

import os
from typing import Any, Dict, Mapping, Optional, Protocol, Sequence, runtime_checkable

from .constants import ENV_API_KEY, ENV_NAMESPACE


class CredentialProviderError(RuntimeError):
    """Raised by a provider that could not produce credentials.

    `status` carries the HTTP status of a failed credential exchange, if any.
    """

    def __init__(self, message: str, *, status: Optional[int] = None) -> None:
        super().__init__(message)
        self.status = status


@runtime_checkable
class CredentialProvider(Protocol):
    """Returns raw credential fields: namespace, apikey and optionally region."""

    def get_credentials(self) -> Dict[str, Any]:
        ...


class EnvCredentialProvider:
    """
    Read OpenWhisk credentials from the process environment.

    Environment variables
    - `__OW_NAMESPACE`: state container namespace
    - `__OW_API_KEY`:   Runtime api key
    """

    def __init__(self, environ: Optional[Dict[str, str]] = None) -> None:
        self._environ = environ

    def get_credentials(self) -> Dict[str, Any]:
        env = self._environ if self._environ is not None else os.environ
        return {
            "namespace": env.get(ENV_NAMESPACE) or None,
            "apikey": env.get(ENV_API_KEY) or None,
        }


class StaticCredentialProvider:
    """Hands back credentials given at construction, e.g. `init({...})` input."""

    def __init__(self, credentials: Mapping[str, Any]) -> None:
        self._credentials = dict(credentials)

    def get_credentials(self) -> Dict[str, Any]:
        return dict(self._credentials)


class ChainCredentialProvider:
    """
    Ask several providers in order; the first one that yields both a
    namespace and an api key wins.

    Errors raised by a provider propagate, they do not fall through to the
    next one. When no provider is complete, empty credentials are returned
    and validation reports the missing fields.
    """

    def __init__(self, providers: Sequence[CredentialProvider]) -> None:
        self._providers = list(providers)

    def get_credentials(self) -> Dict[str, Any]:
        for provider in self._providers:
            creds = provider.get_credentials()
            if creds.get("namespace") and creds.get("apikey"):
                return creds
        return {"namespace": None, "apikey": None}


__all__ = [
    "ChainCredentialProvider",
    "CredentialProvider",
    "CredentialProviderError",
    "EnvCredentialProvider",
    "StaticCredentialProvider",
]
