import os
import sys

import pytest


def pytest_configure():
    # Ensure `src/` is importable as top-level for `aio_state.*` / `common.*` imports
    root = os.path.abspath(os.path.dirname(os.path.dirname(__file__)))
    src_path = os.path.join(root, "src")
    if src_path not in sys.path:
        sys.path.insert(0, src_path)


_ENV_VARS = (
    "__OW_NAMESPACE",
    "__OW_API_KEY",
    "__OW_API_HOST",
    "__OW_ACTIVATION_ID",
    "AIO_STATE_ENDPOINT",
    "AIO_CLI_ENV",
    "AIO_STATE_LOG_LEVEL",
    "AIO_STATE_LOG_RETRY_AFTER_SECONDS",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    # Tests must not pick up credentials or endpoints from the developer's shell
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
