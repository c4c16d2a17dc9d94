from __future__ import annotations

import re
from typing import Any, Dict, List, Mapping, Optional

from pydantic import ValidationError

from .constants import (
    MAX_LIST_COUNT_HINT,
    MAX_TTL_SECONDS,
    MIN_LIST_COUNT_HINT,
    REGEX_PATTERN_MATCH_KEY,
    REGEX_PATTERN_STORE_KEY,
)
from .errors import BadArgumentError, log_and_raise
from .models import Credentials


_KEY_RE = re.compile(REGEX_PATTERN_STORE_KEY)
_MATCH_RE = re.compile(REGEX_PATTERN_MATCH_KEY)


def _fail(message: str, details: Dict[str, Any]) -> None:
    log_and_raise(BadArgumentError(message, sdk_details=details))


def _is_int(v: Any) -> bool:
    # bool is an int subclass; True is not a valid TTL or count hint
    return isinstance(v, int) and not isinstance(v, bool)


def validate_key(key: Any) -> str:
    if not isinstance(key, str):
        _fail("/key must be string", {"key": key})
    if not _KEY_RE.fullmatch(key):
        _fail(f'/key must match pattern "{REGEX_PATTERN_STORE_KEY}"', {"key": key})
    return key


def validate_value(value: Any, *, key: Optional[str] = None) -> str:
    # Binary payloads are intentionally not supported
    if not isinstance(value, str):
        _fail("/value must be string", {"key": key, "valueType": type(value).__name__})
    return value


def validate_ttl(ttl: Any, *, key: Optional[str] = None) -> Optional[int]:
    """
    Validate a put TTL in seconds.

    Returns the TTL to send, or None when the server default (24h) applies,
    i.e. for `None` and `0`.
    """
    if ttl is None:
        return None
    details = {"key": key, "ttl": ttl}
    if not _is_int(ttl):
        _fail("/ttl must be integer", details)
    if ttl < 0:
        _fail("/ttl must be >= 0, infinite TTL is not supported", details)
    if ttl > MAX_TTL_SECONDS:
        _fail(f"/ttl must be <= {MAX_TTL_SECONDS} (365 days)", details)
    return ttl or None


def validate_match(match: Any) -> str:
    if not isinstance(match, str):
        _fail("/match must be string", {"match": match})
    if not _MATCH_RE.fullmatch(match):
        _fail(f'/match must match pattern "{REGEX_PATTERN_MATCH_KEY}"', {"match": match})
    return match


def validate_count_hint(count_hint: Any) -> int:
    if not _is_int(count_hint) or not (MIN_LIST_COUNT_HINT <= count_hint <= MAX_LIST_COUNT_HINT):
        _fail(
            f"/countHint must be in the [{MIN_LIST_COUNT_HINT},{MAX_LIST_COUNT_HINT}] range",
            {"countHint": count_hint},
        )
    return count_hint


def format_validation_errors(err: ValidationError) -> List[str]:
    """Turn pydantic errors into short, human readable strings.

    All missing fields are collected into one 'must have required properties'
    message; every other error becomes '/<field> <message>'.
    """
    out: List[str] = []
    missing = sorted(
        str(e["loc"][-1]) for e in err.errors() if e.get("type") == "missing" and e.get("loc")
    )
    if missing:
        out.append(f"must have required properties: {', '.join(missing)}")
    for e in err.errors():
        if e.get("type") == "missing":
            continue
        path = "/" + "/".join(str(p) for p in e.get("loc", ()))
        out.append(f"{path} {e.get('msg', 'is invalid')}")
    return out


def validate_credentials(raw: Mapping[str, Any], *, redacted: Optional[Dict[str, Any]] = None) -> Credentials:
    # Empty strings count as missing, like unset environment variables
    cleaned = {k: v for k, v in raw.items() if v not in (None, "")}
    try:
        return Credentials.model_validate(cleaned)
    except ValidationError as ve:
        messages = format_validation_errors(ve)
    # Raised outside the except block: pydantic errors echo input values, the api key included
    log_and_raise(BadArgumentError(", ".join(messages), sdk_details=redacted or {}))


__all__ = [
    "validate_key",
    "validate_value",
    "validate_ttl",
    "validate_match",
    "validate_count_hint",
    "validate_credentials",
    "format_validation_errors",
]
