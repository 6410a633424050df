from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple
from urllib.parse import quote

from rest_sdk.config import USER_AGENT
from rest_sdk.http.entities import FileParameter, Method, Parameter, ParameterType
from rest_sdk.http.errors import InvalidRequestError
from rest_sdk.http.request import RestRequest
from rest_sdk.http.utils.conversion import to_invariant_string
from rest_sdk.http.utils.url_segments import join_url, resolve_url_template

CONTENT_TYPE_HEADER = "Content-Type"
USER_AGENT_HEADER = "User-Agent"
HEADER_VALUES_SEPARATOR = ", "


@dataclass(frozen=True)
class RequestData:
    """Data class for a request ready to be sent.

    Attributes:
        url: The URL with segments substituted and query string appended.
        method: The HTTP method.
        headers: The headers, repeated names joined into one value.
        cookies: The cookies of the request.
        form: Form fields, url-encoded or sent as multipart fields next to files.
        data: The serialized body encoded as UTF-8.
        files: The file parameters, opened by the transport on each attempt.
    """

    url: str
    method: Method
    headers: Dict[str, str]
    cookies: Dict[str, str]
    form: List[Tuple[str, str]]
    data: Optional[bytes]
    files: List[FileParameter]


def assembly_request_data(
    request: RestRequest,
    base_url: str,
    default_headers: Optional[Dict[str, str]] = None,
) -> RequestData:
    """Assemble a snapshot of the request for the transport.

    GET_OR_POST parameters go to the query string for methods without a body
    or when the request already has a serialized body; otherwise they are
    sent as form fields.

    Args:
        request: The request to assemble.
        base_url: The base URL the resource is relative to.
        default_headers: Headers used unless the request sets the same name.

    Returns:
        The request data.

    Raises:
        InvalidRequestError: When the method does not allow a body but the
            request carries one or has files attached, or when a serialized
            body is combined with files.
    """
    body = request.body
    files = list(request.files)
    _ensure_body_allowed(request=request, has_body=body is not None, has_files=bool(files))
    parameters_in_query = not request.method.allows_body or body is not None
    query, form = [], []
    for parameter in request.parameters:
        if parameter.type is ParameterType.QUERY_STRING:
            query.append(parameter)
        elif parameter.type is ParameterType.GET_OR_POST:
            if parameters_in_query:
                query.append(parameter)
            else:
                form.append((parameter.name, _to_string(parameter.value)))
    headers = assembly_headers(
        parameters=request.get_parameters(ParameterType.HTTP_HEADER),
        default_headers=default_headers,
        body=body,
    )
    cookies = {
        p.name: to_invariant_string(p.value)
        for p in request.get_parameters(ParameterType.COOKIE)
    }
    return RequestData(
        url=build_url(request=request, base_url=base_url, query=query),
        method=request.method,
        headers=headers,
        cookies=cookies,
        form=form,
        data=_encode_body(body=body),
        files=files,
    )


def build_url(
    request: RestRequest,
    base_url: str,
    query: Optional[Iterable[Parameter]] = None,
) -> str:
    url = resolve_url_template(
        template=join_url(base_url=base_url, resource=request.resource),
        parameters=request.parameters,
    )
    if query is None:
        query = request.get_parameters(ParameterType.QUERY_STRING)
    query_string = build_query_string(parameters=query)
    if not query_string:
        return url
    separator = "&" if "?" in url else "?"
    return f"{url}{separator}{query_string}"


def build_query_string(parameters: Iterable[Parameter]) -> str:
    chunks = []
    for parameter in parameters:
        value = _to_string(parameter.value)
        if parameter.encode:
            chunks.append(f"{quote(parameter.name, safe='')}={quote(value, safe='')}")
        else:
            chunks.append(f"{parameter.name}={value}")
    return "&".join(chunks)


def assembly_headers(
    parameters: Iterable[Parameter],
    default_headers: Optional[Dict[str, str]],
    body: Optional[Parameter],
) -> Dict[str, str]:
    """Merge header parameters with defaults.

    Header names are case-insensitive: a request header replaces a default of
    the same name, and repeated request headers are joined with `, `. The
    body content type replaces a default `Content-Type`, but not one set on
    the request.
    """
    request_headers: Dict[str, Tuple[str, str]] = {}
    for parameter in parameters:
        key = parameter.name.lower()
        value = to_invariant_string(parameter.value)
        if key in request_headers:
            name, previous_value = request_headers[key]
            request_headers[key] = (
                name,
                f"{previous_value}{HEADER_VALUES_SEPARATOR}{value}",
            )
        else:
            request_headers[key] = (parameter.name, value)
    headers = {USER_AGENT_HEADER: USER_AGENT}
    for name, value in (default_headers or {}).items():
        _set_header(headers=headers, name=name, value=value)
    for name, value in request_headers.values():
        _set_header(headers=headers, name=name, value=value)
    if body is not None and CONTENT_TYPE_HEADER.lower() not in request_headers:
        _set_header(
            headers=headers,
            name=CONTENT_TYPE_HEADER,
            value=body.content_type or body.name,
        )
    return headers


def _set_header(headers: Dict[str, str], name: str, value: str) -> None:
    for existing_name in [h for h in headers if h.lower() == name.lower()]:
        del headers[existing_name]
    headers[name] = value


def _ensure_body_allowed(request: RestRequest, has_body: bool, has_files: bool) -> None:
    if (has_body or has_files) and not request.method.allows_body:
        raise InvalidRequestError(
            f"{request.method.value} request cannot carry a body or files"
        )
    if has_body and has_files:
        raise InvalidRequestError(
            "Request cannot carry both a serialized body and files"
        )


def _encode_body(body: Optional[Parameter]) -> Optional[bytes]:
    if body is None:
        return None
    if isinstance(body.value, (bytes, bytearray)):
        return bytes(body.value)
    return to_invariant_string(body.value).encode("utf-8")


def _to_string(value: object) -> str:
    if value is None:
        return ""
    return to_invariant_string(value)
