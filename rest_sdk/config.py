import os

from rest_sdk.utils.environment import get_bool_env, get_float_env, get_int_env
from rest_sdk.version import __version__

DEFAULT_REQUEST_FORMAT = os.getenv("REST_SDK_DEFAULT_REQUEST_FORMAT", "xml").lower()

REQUEST_RETRIES_ENABLED = get_bool_env("REST_SDK_REQUEST_RETRIES_ENABLED", True)
REQUEST_MAX_TRIES = get_int_env("REST_SDK_REQUEST_MAX_TRIES", 3, min_value=1)
REQUEST_RETRY_INTERVAL = get_float_env("REST_SDK_REQUEST_RETRY_INTERVAL", 1.0)

USER_AGENT = os.getenv("REST_SDK_USER_AGENT", f"rest-sdk/{__version__}")

# Content types used when nothing more specific is known
DEFAULT_FILE_CONTENT_TYPE = "application/octet-stream"
GZIP_CONTENT_TYPE = "application/x-gzip"
