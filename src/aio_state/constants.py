from __future__ import annotations


API_VERSION = "v1"

PROD_ENV = "prod"
STAGE_ENV = "stage"
DEFAULT_ENV = PROD_ENV

# Endpoint templates carry the region as '<region>'
ENDPOINT_PROD = "https://storage-state-<region>.app-builder.adp.adobe.io"
ENDPOINT_PROD_INTERNAL = "https://storage-state-<region>.app-builder.int.adp.adobe.io"
# Runtime prod cannot reach the internal stage endpoint, so stage is always public
ENDPOINT_STAGE = "https://storage-state-<region>.stg.app-builder.adp.adobe.io"
ENDPOINT_STAGE_INTERNAL = "https://storage-state-<region>.stg.app-builder.adp.adobe.io"

ENDPOINTS = {
    PROD_ENV: ENDPOINT_PROD,
    STAGE_ENV: ENDPOINT_STAGE,
}
ENDPOINTS_INTERNAL = {
    PROD_ENV: ENDPOINT_PROD_INTERNAL,
    STAGE_ENV: ENDPOINT_STAGE_INTERNAL,
}

# First region is the default
ALLOWED_REGIONS = ("amer", "apac", "emea")

MAX_KEY_SIZE = 1024
MAX_TTL_SECONDS = 60 * 60 * 24 * 365
DEFAULT_TTL_SECONDS = 60 * 60 * 24
MIN_LIST_COUNT_HINT = 100
MAX_LIST_COUNT_HINT = 1000

# Cursor value meaning "no more pages"
LIST_CURSOR_START = 0

REGEX_PATTERN_STORE_KEY = f"^[a-zA-Z0-9-_.]{{1,{MAX_KEY_SIZE}}}$"
# Same as the key pattern plus '*' for glob-style matching
REGEX_PATTERN_MATCH_KEY = f"^[a-zA-Z0-9-_.*]{{1,{MAX_KEY_SIZE}}}$"

HEADER_KEY_EXPIRES = "x-key-expires-ms"
REQUEST_ID_HEADER = "x-request-id"
CONTENT_TYPE_VALUE = "application/octet-stream"

SDK_NAME = "AdobeStateLib"

# Environment variable names
ENV_NAMESPACE = "__OW_NAMESPACE"
ENV_API_KEY = "__OW_API_KEY"
ENV_API_HOST = "__OW_API_HOST"
ENV_ACTIVATION_ID = "__OW_ACTIVATION_ID"
ENV_ENDPOINT = "AIO_STATE_ENDPOINT"
ENV_CLI_ENV = "AIO_CLI_ENV"
ENV_LOG_LEVEL = "AIO_STATE_LOG_LEVEL"
ENV_LOG_RETRY_AFTER_SECONDS = "AIO_STATE_LOG_RETRY_AFTER_SECONDS"

DEFAULT_LOG_RETRY_AFTER_SECONDS = 10.0
