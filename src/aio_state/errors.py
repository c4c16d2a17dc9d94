from __future__ import annotations

import logging
from typing import Any, Dict, NoReturn, Optional

from .constants import SDK_NAME


logger = logging.getLogger(__name__)


class AdobeStateLibError(RuntimeError):
    """Base error for the state client.

    Attributes
    - code: one of the ERROR_* codes below.
    - sdk: always "AdobeStateLib".
    - sdk_details: request parameters (never the api key), plus `requestId`
      when the server sent one and `_internal` for the underlying failure.
    """

    code = "ERROR_INTERNAL"
    template = "%s"

    def __init__(self, *message_values: str, sdk_details: Optional[Dict[str, Any]] = None) -> None:
        self.message = _format(self.template, message_values)
        self.sdk = SDK_NAME
        self.sdk_details: Dict[str, Any] = dict(sdk_details or {})
        super().__init__(f"[{self.sdk}:{self.code}] {self.message}")

    @property
    def request_id(self) -> Optional[str]:
        return self.sdk_details.get("requestId")

    def to_dict(self) -> Dict[str, Any]:
        details = {k: v for k, v in self.sdk_details.items() if k != "_internal"}
        return {"code": self.code, "message": self.message, "sdk": self.sdk, "sdkDetails": details}


class BadArgumentError(AdobeStateLibError):
    """An argument is missing, has an invalid type, or includes invalid characters."""

    code = "ERROR_BAD_ARGUMENT"


class BadRequestError(AdobeStateLibError):
    """The server rejected an argument value that passed client-side validation."""

    code = "ERROR_BAD_REQUEST"


class UnauthorizedError(AdobeStateLibError):
    code = "ERROR_UNAUTHORIZED"
    template = "you are not authorized to access %s"


class BadCredentialsError(AdobeStateLibError):
    code = "ERROR_BAD_CREDENTIALS"
    template = "cannot access %s, make sure your credentials are valid"


class PayloadTooLargeError(AdobeStateLibError):
    code = "ERROR_PAYLOAD_TOO_LARGE"
    template = "key, value or request payload is too large"


class RequestRateTooHighError(AdobeStateLibError):
    """Raised on HTTP 429 once the executor has given up retrying."""

    code = "ERROR_REQUEST_RATE_TOO_HIGH"
    template = "Request rate too high. Please retry after sometime."


class InternalError(AdobeStateLibError):
    """Unknown provider status or transport failure; see `sdk_details['_internal']`."""

    code = "ERROR_INTERNAL"


ERRORS_BY_CODE = {
    cls.code: cls
    for cls in (
        BadArgumentError,
        BadRequestError,
        UnauthorizedError,
        BadCredentialsError,
        PayloadTooLargeError,
        RequestRateTooHighError,
        InternalError,
    )
}


def _format(template: str, values: tuple) -> str:
    n = template.count("%s")
    if n == 0:
        # Extra values are appended, e.g. the provider name after a fixed message
        return " ".join([template, *values]) if values else template
    padded = list(values[:n]) + [""] * (n - len(values))
    head = template % tuple(padded)
    rest = values[n:]
    return " ".join([head, *rest]) if rest else head


def log_and_raise(err: AdobeStateLibError, cause: Optional[BaseException] = None) -> NoReturn:
    logger.error("%s %s", err, err.to_dict()["sdkDetails"])
    if cause is not None:
        raise err from cause
    raise err


__all__ = [
    "AdobeStateLibError",
    "BadArgumentError",
    "BadRequestError",
    "UnauthorizedError",
    "BadCredentialsError",
    "PayloadTooLargeError",
    "RequestRateTooHighError",
    "InternalError",
    "ERRORS_BY_CODE",
    "log_and_raise",
]
