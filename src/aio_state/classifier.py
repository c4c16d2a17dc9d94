from __future__ import annotations

import copy
import logging
from typing import Any, Dict, Mapping, Optional, Union

import httpx

from common.http import HttpExecutor

from .constants import REQUEST_ID_HEADER
from .errors import (
    AdobeStateLibError,
    BadCredentialsError,
    BadRequestError,
    InternalError,
    PayloadTooLargeError,
    RequestRateTooHighError,
    UnauthorizedError,
    log_and_raise,
)


logger = logging.getLogger(__name__)

PROVIDER = "underlying DB provider"

_BY_STATUS = {
    401: UnauthorizedError,
    403: BadCredentialsError,
    413: PayloadTooLargeError,
    429: RequestRateTooHighError,
}


def _details(params: Optional[Mapping[str, Any]], resp: Optional[httpx.Response] = None) -> Dict[str, Any]:
    details = copy.deepcopy(dict(params or {}))
    if resp is not None:
        request_id = resp.headers.get(REQUEST_ID_HEADER)
        if request_id:
            details["requestId"] = request_id
    return details


def classify(
    outcome: Union[httpx.Response, BaseException],
    params: Optional[Mapping[str, Any]] = None,
    *,
    absent_ok: bool = True,
) -> Optional[httpx.Response]:
    """
    Turn an executor outcome into a response, None, or a raised error.

    - exception -> InternalError, chained to the original failure
    - 2xx -> the response
    - 404 -> None; absence is a value, not a failure (unless `absent_ok` is False)
    - 400 -> BadRequestError with the response body
    - 401/403/413/429 -> the matching error
    - anything else -> InternalError with status and body text
    """
    if isinstance(outcome, BaseException):
        details = _details(params)
        details["_internal"] = outcome
        log_and_raise(InternalError(f"unexpected error: {outcome}", sdk_details=details), outcome)

    resp = outcome
    logger.debug("response status %s", resp.status_code)
    if resp.is_success:
        return resp
    if resp.status_code == 404 and absent_ok:
        return None

    details = _details(params, resp)
    if resp.status_code == 400:
        log_and_raise(BadRequestError(f"request rejected by provider: {resp.text}", sdk_details=details))
    err_cls = _BY_STATUS.get(resp.status_code)
    if err_cls is RequestRateTooHighError:
        log_and_raise(err_cls(sdk_details=details))
    if err_cls is not None:
        log_and_raise(err_cls(PROVIDER, sdk_details=details))

    details["_internal"] = {"status": resp.status_code, "body": resp.text}
    log_and_raise(
        InternalError(
            f"unexpected response from provider with status: {resp.status_code} body: {resp.text}",
            sdk_details=details,
        )
    )


def execute(
    executor: HttpExecutor,
    request: httpx.Request,
    params: Optional[Mapping[str, Any]] = None,
    *,
    absent_ok: bool = True,
) -> Optional[httpx.Response]:
    """Send `request` through `executor` and classify whatever comes back."""
    try:
        resp = executor.execute(request)
    except AdobeStateLibError:
        raise
    except Exception as exc:
        return classify(exc, params)
    return classify(resp, params, absent_ok=absent_ok)


def parse_json(resp: httpx.Response, params: Optional[Mapping[str, Any]] = None) -> Any:
    try:
        return resp.json()
    except ValueError as exc:
        details = _details(params, resp)
        details["_internal"] = exc
        log_and_raise(InternalError(f"could not parse JSON response: {exc}", sdk_details=details), exc)


__all__ = ["classify", "execute", "parse_json", "PROVIDER"]
