"""
Common utilities for aio-state.

Modules:
- http: HTTP executor protocol and the default retrying httpx executor
- cache: caller-owned cache of client handles keyed by credential fingerprint
- redact: hide secrets in structures before they are logged
"""

__all__ = [
    "cache",
    "http",
    "redact",
]
