from __future__ import annotations

import httpx
import pytest

from aio_state import classifier
from aio_state.errors import (
    ERRORS_BY_CODE,
    BadArgumentError,
    BadCredentialsError,
    BadRequestError,
    InternalError,
    PayloadTooLargeError,
    RequestRateTooHighError,
    UnauthorizedError,
)


class _StubExecutor:
    def __init__(self, outcome):
        self.outcome = outcome
        self.calls = 0

    def execute(self, request):
        self.calls += 1
        if isinstance(self.outcome, BaseException):
            raise self.outcome
        return self.outcome

    def close(self):
        pass


@pytest.mark.parametrize("status", [200, 204])
def test_success_returns_response(status):
    resp = httpx.Response(status)
    assert classifier.classify(resp, {"key": "k"}) is resp


def test_not_found_is_absent():
    assert classifier.classify(httpx.Response(404), {"key": "k"}) is None


def test_not_found_can_be_an_error():
    with pytest.raises(InternalError) as ei:
        classifier.classify(httpx.Response(404), {"key": "k"}, absent_ok=False)
    assert "status: 404" in str(ei.value)


@pytest.mark.parametrize(
    "status,exc_type,code",
    [
        (400, BadRequestError, "ERROR_BAD_REQUEST"),
        (401, UnauthorizedError, "ERROR_UNAUTHORIZED"),
        (403, BadCredentialsError, "ERROR_BAD_CREDENTIALS"),
        (413, PayloadTooLargeError, "ERROR_PAYLOAD_TOO_LARGE"),
        (429, RequestRateTooHighError, "ERROR_REQUEST_RATE_TOO_HIGH"),
        (500, InternalError, "ERROR_INTERNAL"),
        (503, InternalError, "ERROR_INTERNAL"),
        (418, InternalError, "ERROR_INTERNAL"),
    ],
)
def test_status_taxonomy(status, exc_type, code):
    with pytest.raises(exc_type) as ei:
        classifier.classify(httpx.Response(status, text="nope"), {"key": "k"})
    assert ei.value.code == code
    assert ei.value.sdk == "AdobeStateLib"
    assert ei.value.sdk_details["key"] == "k"
    assert ERRORS_BY_CODE[ei.value.to_dict()["code"]] is exc_type


def test_request_id_surfaced_in_details():
    resp = httpx.Response(500, text="boom", headers={"x-request-id": "req-123"})
    with pytest.raises(InternalError) as ei:
        classifier.classify(resp, {})
    assert ei.value.request_id == "req-123"
    assert ei.value.to_dict()["sdkDetails"] == {"requestId": "req-123"}


def test_params_are_copied():
    params = {"key": "k", "options": {"ttl": 10}}
    with pytest.raises(UnauthorizedError) as ei:
        classifier.classify(httpx.Response(401), params)
    params["options"]["ttl"] = 99
    assert ei.value.sdk_details["options"] == {"ttl": 10}


def test_exception_outcome_is_internal_error():
    cause = OSError("socket closed")
    with pytest.raises(InternalError) as ei:
        classifier.classify(cause, {"key": "k"})
    assert ei.value.__cause__ is cause
    assert ei.value.sdk_details["_internal"] is cause
    assert "_internal" not in ei.value.to_dict()["sdkDetails"]


def test_execute_wraps_executor_failures():
    ex = _StubExecutor(RuntimeError("executor gave up"))
    with pytest.raises(InternalError) as ei:
        classifier.execute(ex, httpx.Request("GET", "https://x.example"), {})
    assert "executor gave up" in str(ei.value)
    assert ex.calls == 1


def test_execute_passes_library_errors_through():
    err = BadArgumentError("already classified")
    ex = _StubExecutor(err)
    with pytest.raises(BadArgumentError) as ei:
        classifier.execute(ex, httpx.Request("GET", "https://x.example"), {})
    assert ei.value is err


def test_parse_json_failure():
    with pytest.raises(InternalError):
        classifier.parse_json(httpx.Response(200, text="<html>"), {})
