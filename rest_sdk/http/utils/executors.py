import logging
from contextlib import ExitStack
from typing import Dict, Optional, Union

import backoff
import requests
from requests import Response

from rest_sdk import config
from rest_sdk.http.request import RestRequest
from rest_sdk.http.utils.files import open_multipart_files
from rest_sdk.http.utils.request_building import RequestData, assembly_request_data
from rest_sdk.utils.logging import get_logger

RETRYABLE_STATUS_CODES = {429, 503}

logger = get_logger("http.executors")

Timeout = Union[None, float, tuple]


def get_max_tries() -> int:
    if not config.REQUEST_RETRIES_ENABLED:
        return 1
    return config.REQUEST_MAX_TRIES


def get_retry_interval() -> float:
    return config.REQUEST_RETRY_INTERVAL


@backoff.on_predicate(
    backoff.constant,
    predicate=lambda r: r.status_code in RETRYABLE_STATUS_CODES,
    max_tries=get_max_tries,
    interval=get_retry_interval,
    logger=logger,
    backoff_log_level=logging.DEBUG,
    giveup_log_level=logging.DEBUG,
)
@backoff.on_exception(
    backoff.constant,
    exception=requests.exceptions.ConnectionError,
    max_tries=get_max_tries,
    interval=get_retry_interval,
    logger=logger,
    backoff_log_level=logging.DEBUG,
    giveup_log_level=logging.DEBUG,
)
def make_request(
    request: RestRequest,
    base_url: str,
    default_headers: Optional[Dict[str, str]] = None,
    timeout: Timeout = None,
) -> Response:
    """Send the request, retrying on connection errors and retryable statuses.

    Every try counts as an attempt on the request. The request is assembled
    again for each try, so file stream providers are invoked once per attempt.

    Args:
        request: The request to send.
        base_url: The base URL the resource is relative to.
        default_headers: Headers used unless the request sets the same name.
        timeout: Timeout passed to `requests`.

    Returns:
        The response of the last try.
    """
    request_data = assembly_request_data(
        request=request,
        base_url=base_url,
        default_headers=default_headers,
    )
    request.increase_attempts()
    logger.debug(
        f"Sending {request_data.method.value} {request_data.url} "
        f"(attempt {request.attempts})"
    )
    return send_request_data(request_data=request_data, timeout=timeout)


def send_request_data(request_data: RequestData, timeout: Timeout = None) -> Response:
    with ExitStack() as exit_stack:
        files = open_multipart_files(files=request_data.files, exit_stack=exit_stack)
        data = request_data.data
        if data is None and request_data.form:
            data = request_data.form
        return requests.request(
            request_data.method.value,
            request_data.url,
            headers=request_data.headers,
            cookies=request_data.cookies or None,
            data=data,
            files=files or None,
            timeout=timeout,
        )
