"""Centralized logging configuration for the REST SDK."""

import logging
import sys

# SDK-wide logger name
SDK_LOGGER_NAME = "rest_sdk"

# Track if we've already configured
_configured = False


def get_logger(module_name: str) -> logging.Logger:
    """Get a logger for the specified module.

    Attaches a stderr handler to the SDK logger on first use, unless the
    application has already configured one.

    Args:
        module_name: Name of the module requesting the logger, e.g. `http.request`.

    Returns:
        logging.Logger: Logger named `rest_sdk.<module_name>`.
    """
    global _configured

    sdk_logger = logging.getLogger(SDK_LOGGER_NAME)

    if not _configured and not sdk_logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter("%(levelname)s [%(name)s] %(message)s"))
        sdk_logger.addHandler(handler)
        sdk_logger.setLevel(logging.INFO)
        sdk_logger.propagate = False
        _configured = True

    return logging.getLogger(f"{SDK_LOGGER_NAME}.{module_name}")
