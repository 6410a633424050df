from typing import Any, Callable, Dict, Optional

import requests
from requests import HTTPError, Response

from rest_sdk.http.errors import HTTPCallErrorError, RestClientError
from rest_sdk.http.request import RestRequest
from rest_sdk.http.utils.executors import Timeout, make_request
from rest_sdk.http.utils.request_building import build_url


def wrap_errors(function: Callable) -> Callable:
    def decorate(*args, **kwargs) -> Any:
        try:
            return function(*args, **kwargs)
        except HTTPError as error:
            raise HTTPCallErrorError(
                description=str(error),
                status_code=error.response.status_code,
                api_message=get_api_message(response=error.response),
            ) from error
        except requests.exceptions.ConnectionError as error:
            raise RestClientError(f"Error with server connection: {error}") from error

    return decorate


def get_api_message(response: Response) -> str:
    if "application/json" not in response.headers.get("Content-Type", ""):
        return response.text
    try:
        error_data = response.json()
    except ValueError:
        return response.text
    if not isinstance(error_data, dict):
        return response.text
    api_message = error_data.get("message", "N/A")
    if "detail" in error_data:
        api_message = f"{api_message}. More details: {error_data['detail']}"
    return api_message


class RestClient:
    @classmethod
    def init(
        cls,
        base_url: str,
        default_headers: Optional[Dict[str, str]] = None,
    ) -> "RestClient":
        return cls(base_url=base_url, default_headers=default_headers)

    def __init__(
        self,
        base_url: str,
        default_headers: Optional[Dict[str, str]] = None,
        timeout: Timeout = None,
    ):
        self.__base_url = base_url
        self.__default_headers = dict(default_headers or {})
        self.__timeout = timeout

    @property
    def base_url(self) -> str:
        return self.__base_url

    @property
    def default_headers(self) -> Dict[str, str]:
        return dict(self.__default_headers)

    def add_default_header(self, name: str, value: str) -> "RestClient":
        self.__default_headers[name] = value
        return self

    def build_url(self, request: RestRequest) -> str:
        return build_url(request=request, base_url=self.__base_url)

    @wrap_errors
    def execute(self, request: RestRequest) -> Response:
        response = make_request(
            request=request,
            base_url=self.__base_url,
            default_headers=self.__default_headers,
            timeout=self.__timeout,
        )
        response.raise_for_status()
        return response

    def execute_json(self, request: RestRequest) -> Any:
        return self.execute(request=request).json()
