"""
Key-value state client for the App Builder state service.

    import aio_state

    state = aio_state.init({"namespace": "...", "apikey": "..."})
    state.put("greeting", "hello", ttl=3600)
    state.get("greeting").value

Credentials fall back to `__OW_NAMESPACE` / `__OW_API_KEY` when not given.
"""

from .client import AdobeStateClient, configure_logging, init, init_cached
from .credentials import (
    ChainCredentialProvider,
    CredentialProvider,
    CredentialProviderError,
    EnvCredentialProvider,
    StaticCredentialProvider,
)
from .errors import (
    AdobeStateLibError,
    BadArgumentError,
    BadCredentialsError,
    BadRequestError,
    InternalError,
    PayloadTooLargeError,
    RequestRateTooHighError,
    UnauthorizedError,
)
from .models import Credentials, DeleteAllResult, GetResult, ListPage, StateStats
from .pagination import ListPaginator

__all__ = [
    "AdobeStateClient",
    "AdobeStateLibError",
    "BadArgumentError",
    "BadCredentialsError",
    "BadRequestError",
    "ChainCredentialProvider",
    "CredentialProvider",
    "CredentialProviderError",
    "Credentials",
    "DeleteAllResult",
    "EnvCredentialProvider",
    "GetResult",
    "InternalError",
    "ListPage",
    "ListPaginator",
    "PayloadTooLargeError",
    "RequestRateTooHighError",
    "StateStats",
    "StaticCredentialProvider",
    "UnauthorizedError",
    "configure_logging",
    "init",
    "init_cached",
]
