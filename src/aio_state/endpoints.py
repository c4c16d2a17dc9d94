from __future__ import annotations

import os
from typing import Optional
from urllib.parse import urlsplit

from .constants import (
    ALLOWED_REGIONS,
    DEFAULT_ENV,
    ENDPOINTS,
    ENDPOINTS_INTERNAL,
    ENV_ACTIVATION_ID,
    ENV_API_HOST,
    ENV_CLI_ENV,
    ENV_ENDPOINT,
    ENV_NAMESPACE,
)
from .errors import BadArgumentError, log_and_raise


_LOCAL_HOSTS = ("localhost", "127.0.0.1")


def _getenv(name: str, default: Optional[str] = None) -> Optional[str]:
    val = os.environ.get(name)
    return val if val not in (None, "") else default


def current_env() -> str:
    """Environment selected by AIO_CLI_ENV, 'prod' unless set."""
    return (_getenv(ENV_CLI_ENV, DEFAULT_ENV) or DEFAULT_ENV).lower()


def is_internal_to_runtime() -> bool:
    """True when running inside an Adobe I/O Runtime action."""
    return all(_getenv(n) for n in (ENV_NAMESPACE, ENV_API_HOST, ENV_ACTIVATION_ID))


def custom_endpoint() -> Optional[str]:
    return _getenv(ENV_ENDPOINT)


def _with_scheme(endpoint: str) -> str:
    endpoint = endpoint.rstrip("/")
    if "://" in endpoint:
        return endpoint
    host = urlsplit(f"//{endpoint}").hostname or ""
    scheme = "http" if host in _LOCAL_HOSTS else "https"
    return f"{scheme}://{endpoint}"


def resolve_region(region: Optional[str]) -> str:
    if region is None:
        return ALLOWED_REGIONS[0]
    if region not in ALLOWED_REGIONS:
        log_and_raise(
            BadArgumentError(
                f"/region must be equal to one of the allowed values: {', '.join(ALLOWED_REGIONS)}",
                sdk_details={"region": region},
            )
        )
    return region


def resolve_endpoint(
    env: Optional[str] = None,
    region: Optional[str] = None,
    *,
    override: Optional[str] = None,
    internal: Optional[bool] = None,
) -> str:
    """
    Map {env, region} to the service base URL.

    - An override (argument, else AIO_STATE_ENDPOINT) wins unconditionally.
    - Otherwise the env template is used with '<region>' substituted; inside
      Runtime the internal templates apply unless `internal` says otherwise.
    - The region is still validated when an override is set.
    """
    region = resolve_region(region)
    override = override or custom_endpoint()
    if override:
        return _with_scheme(override)

    env = (env or current_env()).lower()
    if internal is None:
        internal = is_internal_to_runtime()
    templates = ENDPOINTS_INTERNAL if internal else ENDPOINTS
    template = templates.get(env)
    if template is None:
        log_and_raise(
            BadArgumentError(
                f"/env must be equal to one of the allowed values: {', '.join(sorted(templates))}",
                sdk_details={"env": env},
            )
        )
    return template.replace("<region>", region)


__all__ = [
    "current_env",
    "custom_endpoint",
    "is_internal_to_runtime",
    "resolve_endpoint",
    "resolve_region",
]
