from __future__ import annotations

import logging
import os
from datetime import UTC, datetime
from typing import Any, Dict, Mapping, Optional, Union

import httpx
from pydantic import ValidationError

from common.cache import ClientCache, credential_fingerprint
from common.http import HttpExecutor, RetryingHttpExecutor
from common.redact import with_hidden_fields

from . import classifier
from .constants import (
    DEFAULT_LOG_RETRY_AFTER_SECONDS,
    ENV_LOG_LEVEL,
    ENV_LOG_RETRY_AFTER_SECONDS,
    HEADER_KEY_EXPIRES,
)
from .credentials import (
    CredentialProvider,
    CredentialProviderError,
    EnvCredentialProvider,
    StaticCredentialProvider,
)
from .endpoints import current_env, resolve_endpoint, resolve_region
from .errors import BadArgumentError, BadCredentialsError, InternalError, log_and_raise
from .models import ClientConfig, Credentials, DeleteAllResult, GetResult, ListPage, StateStats
from .pagination import ListPaginator
from .request_builder import RequestBuilder
from .validation import (
    validate_count_hint,
    validate_credentials,
    validate_key,
    validate_match,
    validate_ttl,
    validate_value,
)


logger = logging.getLogger(__name__)

LIBRARY_LOGGERS = ("aio_state", "common")


def _getenv(name: str, default: Optional[str] = None) -> Optional[str]:
    val = os.environ.get(name)
    return val if val not in (None, "") else default


def expiration_iso(header_value: Optional[str]) -> Optional[str]:
    """Convert an epoch-milliseconds header into an ISO 8601 UTC string.

    The format mirrors what the service documents, e.g. '2024-02-09T02:22:30.000Z'.
    """
    if not header_value:
        return None
    try:
        dt = datetime.fromtimestamp(int(header_value) / 1000, UTC)
    except (ValueError, OverflowError, OSError):
        # Not a number, or outside the range datetime can represent
        logger.debug("ignoring malformed %s header: %r", HEADER_KEY_EXPIRES, header_value)
        return None
    return dt.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class AdobeStateClient:
    """
    Key-value state client for the App Builder state service.

    Notes
    - Inputs are validated before any request is sent; bad input raises
      `BadArgumentError` and never reaches the network.
    - A missing key/container (HTTP 404) is a value: `get` -> None,
      `delete` -> None, `any` -> False, `stats` -> zeros, `delete_all` -> 0,
      `list` -> one empty page.
    - Retries happen inside the executor; this class never retries.
    - Holds no mutable state besides the executor. Use `init()` to build one.
    """

    def __init__(self, config: ClientConfig, *, executor: Optional[HttpExecutor] = None) -> None:
        self._config = config
        self._builder = RequestBuilder(config)
        self._owns_executor = executor is None
        self._executor = executor or RetryingHttpExecutor(
            log_retry_after_seconds=config.log_retry_after_seconds
        )

    def close(self) -> None:
        if self._owns_executor:
            self._executor.close()

    def __enter__(self) -> "AdobeStateClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __repr__(self) -> str:
        return (
            f"AdobeStateClient(namespace={self.namespace!r}, region={self.region!r}, "
            f"endpoint={self.endpoint!r})"
        )

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def namespace(self) -> str:
        return self._config.namespace

    @property
    def region(self) -> str:
        return self._config.region

    @property
    def endpoint(self) -> str:
        return self._config.endpoint

    # --------------- Public API ---------------
    def get(self, key: str) -> Optional[GetResult]:
        """
        Retrieve the value stored under `key`.

        Returns None if the key does not exist or has expired.
        """
        logger.debug("get '%s'", key)
        validate_key(key)
        resp = self._send("get", {"key": key}, key=key)
        if resp is None:
            return None
        return GetResult(value=resp.text, expiration=expiration_iso(resp.headers.get(HEADER_KEY_EXPIRES)))

    def put(self, key: str, value: str, *, ttl: Optional[int] = None) -> str:
        """
        Create or update `key`.

        - `ttl` is in seconds, at most 365 days. None or 0 keeps the server
          default of 24 hours and is not sent. Infinite TTLs are not supported.

        Returns the key.
        """
        logger.debug("put '%s' with ttl %s", key, ttl)
        validate_key(key)
        validate_value(value, key=key)
        ttl_param = validate_ttl(ttl, key=key)
        params = {"key": key, "valueLength": len(value), "ttl": ttl}
        self._send("put", params, key=key, value=value, query={"ttl": ttl_param}, absent_ok=False)
        return key

    def delete(self, key: str) -> Optional[str]:
        """Delete `key`; returns the key, or None if it did not exist."""
        logger.debug("delete '%s'", key)
        validate_key(key)
        resp = self._send("delete", {"key": key}, key=key)
        return key if resp is not None else None

    def delete_all(self, *, match: Optional[str] = None) -> DeleteAllResult:
        """
        Delete every key matching the glob pattern `match`, e.g. "*" or "user_*".

        `match` is required; there is no way to wipe a container without one.
        """
        logger.debug("delete_all matching '%s'", match)
        if match is None:
            log_and_raise(BadArgumentError("must have required properties: match", sdk_details={"match": None}))
        validate_match(match)
        params = {"match": match}
        resp = self._send("delete_all", params, query={"matchData": match})
        if resp is None or not resp.content:
            return DeleteAllResult(keys=0)
        return self._model(DeleteAllResult, classifier.parse_json(resp, params), params)

    def any(self) -> bool:
        """True if the container holds at least one live key."""
        logger.debug("any")
        return self._send("any", {}) is not None

    def stats(self) -> StateStats:
        """Key count and key/value byte sizes of the container."""
        logger.debug("stats")
        resp = self._send("stats", {})
        if resp is None:
            return StateStats.empty()
        return self._model(StateStats, classifier.parse_json(resp), {})

    def list(self, *, match: Optional[str] = None, count_hint: Optional[int] = None) -> ListPaginator:
        """
        Iterate over keys, page by page.

            for page in client.list(match="user_*"):
                print(page.keys)

        - `match` is a glob pattern evaluated server-side.
        - `count_hint` (100-1000) is the approximate page size, not a contract.
        """
        logger.debug("list match=%s countHint=%s", match, count_hint)
        if match is not None:
            validate_match(match)
        if count_hint is not None:
            validate_count_hint(count_hint)
        return ListPaginator(self._fetch_page, {"match": match, "countHint": count_hint})

    # --------------- Internal ---------------
    def _fetch_page(self, query: Dict[str, Any]) -> Optional[ListPage]:
        resp = self._send("list", dict(query), query=query)
        if resp is None:
            return None
        return self._model(ListPage, classifier.parse_json(resp, query), query)

    def _send(
        self,
        operation: str,
        params: Mapping[str, Any],
        *,
        key: Optional[str] = None,
        value: Optional[str] = None,
        query: Optional[Mapping[str, Any]] = None,
        absent_ok: bool = True,
    ) -> Optional[httpx.Response]:
        request = self._builder.build(operation, key=key, value=value, params=query)
        logger.debug("%s %s", request.method, request.url)
        return classifier.execute(self._executor, request, params, absent_ok=absent_ok)

    @staticmethod
    def _model(model, payload: Any, params: Mapping[str, Any]):
        try:
            return model.model_validate(payload)
        except ValidationError as ve:
            log_and_raise(
                InternalError(
                    f"unexpected {model.__name__} payload from provider",
                    sdk_details={**params, "_internal": ve},
                ),
                ve,
            )


# --------------- Construction ---------------
def configure_logging(level: Union[str, int, None] = None) -> None:
    """Apply `level` (or AIO_STATE_LOG_LEVEL) to the library loggers.

    Handlers and formatting stay with the application.
    """
    level = level if level is not None else _getenv(ENV_LOG_LEVEL)
    if level is None:
        return
    if isinstance(level, str):
        level = level.upper()
    try:
        for name in LIBRARY_LOGGERS:
            logging.getLogger(name).setLevel(level)
    except (TypeError, ValueError) as ex:
        log_and_raise(BadArgumentError(f"invalid log level: {level}", sdk_details={"logLevel": level}), ex)


def _log_retry_after_seconds(value: Optional[float]) -> float:
    if value is not None:
        return float(value)
    raw = _getenv(ENV_LOG_RETRY_AFTER_SECONDS)
    if raw is None:
        return DEFAULT_LOG_RETRY_AFTER_SECONDS
    try:
        return float(raw)
    except ValueError as ex:
        log_and_raise(
            BadArgumentError(
                f"{ENV_LOG_RETRY_AFTER_SECONDS} must be a number", sdk_details={ENV_LOG_RETRY_AFTER_SECONDS: raw}
            ),
            ex,
        )


def _raw_credentials(
    credentials: Union[Credentials, Mapping[str, Any], None],
    provider: Optional[CredentialProvider],
) -> Dict[str, Any]:
    if isinstance(credentials, Credentials):
        credentials = credentials.model_dump()
    raw = dict(credentials or {})
    if raw.get("namespace") or raw.get("apikey"):
        # Explicit fields win, even when incomplete; validation reports the gap
        provider = StaticCredentialProvider(raw)
    else:
        provider = provider or EnvCredentialProvider()
    try:
        fetched = provider.get_credentials()
    except CredentialProviderError as ex:
        if ex.status in (401, 403):
            log_and_raise(
                BadCredentialsError("credential provider", sdk_details={"status": ex.status}),
                ex,
            )
        raise
    return {**raw, **{k: v for k, v in fetched.items() if v not in (None, "")}}


def resolve_config(
    credentials: Union[Credentials, Mapping[str, Any], None] = None,
    *,
    region: Optional[str] = None,
    endpoint: Optional[str] = None,
    env: Optional[str] = None,
    provider: Optional[CredentialProvider] = None,
    log_retry_after_seconds: Optional[float] = None,
) -> ClientConfig:
    """Resolve and validate everything a client needs, without building one."""
    raw = _raw_credentials(credentials, provider)
    if region is not None:
        raw["region"] = region
    redacted = with_hidden_fields(raw, ["apikey"])
    logger.debug("init AdobeStateClient with %s", redacted)

    creds = validate_credentials(raw, redacted=redacted)
    resolved_region = resolve_region(creds.region)
    resolved_env = (env or current_env()).lower()
    return ClientConfig(
        endpoint=resolve_endpoint(resolved_env, resolved_region, override=endpoint),
        namespace=creds.namespace,
        apikey=creds.apikey,
        region=resolved_region,
        env=resolved_env,
        log_retry_after_seconds=_log_retry_after_seconds(log_retry_after_seconds),
    )


def init(
    credentials: Union[Credentials, Mapping[str, Any], None] = None,
    *,
    region: Optional[str] = None,
    endpoint: Optional[str] = None,
    env: Optional[str] = None,
    provider: Optional[CredentialProvider] = None,
    executor: Optional[HttpExecutor] = None,
    log_retry_after_seconds: Optional[float] = None,
    log_level: Union[str, int, None] = None,
) -> AdobeStateClient:
    """
    Build a new `AdobeStateClient`.

    - `credentials`: {namespace, apikey, region?}. When neither namespace nor
      apikey is given, `provider` is asked (default: `__OW_NAMESPACE` and
      `__OW_API_KEY` from the environment).
    - `endpoint`: override URL; AIO_STATE_ENDPOINT is used when not given.
    - `env`: 'prod' or 'stage'; AIO_CLI_ENV is used when not given.
    - `executor`: HTTP executor to send requests with (default: retrying httpx).

    Every call returns a fresh client; nothing is cached across calls. Use
    `init_cached` with a caller-owned `ClientCache` to reuse handles.
    """
    configure_logging(log_level)
    config = resolve_config(
        credentials,
        region=region,
        endpoint=endpoint,
        env=env,
        provider=provider,
        log_retry_after_seconds=log_retry_after_seconds,
    )
    return AdobeStateClient(config, executor=executor)


def config_fingerprint(config: ClientConfig) -> str:
    return credential_fingerprint(config.namespace, config.apikey, config.region, config.endpoint)


def init_cached(
    cache: ClientCache[AdobeStateClient],
    credentials: Union[Credentials, Mapping[str, Any], None] = None,
    *,
    executor: Optional[HttpExecutor] = None,
    **kwargs: Any,
) -> AdobeStateClient:
    """Like `init`, but returns the client already in `cache` for the same credentials."""
    config = resolve_config(credentials, **kwargs)
    return cache.get_or_init(
        config_fingerprint(config),
        lambda: AdobeStateClient(config, executor=executor),
    )


__all__ = [
    "AdobeStateClient",
    "configure_logging",
    "config_fingerprint",
    "expiration_iso",
    "init",
    "init_cached",
    "resolve_config",
]
