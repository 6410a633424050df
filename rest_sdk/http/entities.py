import io
import os
from dataclasses import dataclass
from enum import Enum
from typing import Any, BinaryIO, Callable, Optional

from rest_sdk.http.errors import InvalidArgumentError

StreamProvider = Callable[[], BinaryIO]


class ParameterType(str, Enum):
    """Enum for the parameter types a request can carry.

    Attributes:
        GET_OR_POST: Query string for body-less methods, form field otherwise.
        QUERY_STRING: Always sent in the query string.
        HTTP_HEADER: Request header.
        URL_SEGMENT: Token substituted into the resource template, e.g. `{id}`.
        COOKIE: Request cookie.
        REQUEST_BODY: The serialized request body. A request holds at most one.
    """

    GET_OR_POST = "get_or_post"
    QUERY_STRING = "query_string"
    HTTP_HEADER = "http_header"
    URL_SEGMENT = "url_segment"
    COOKIE = "cookie"
    REQUEST_BODY = "request_body"


VALUE_REQUIRED_FOR = {
    ParameterType.HTTP_HEADER,
    ParameterType.URL_SEGMENT,
    ParameterType.COOKIE,
    ParameterType.REQUEST_BODY,
}


class DataFormat(str, Enum):
    XML = "xml"
    JSON = "json"
    CUSTOM = "custom"


class Method(str, Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"

    @property
    def allows_body(self) -> bool:
        return self in {Method.POST, Method.PUT, Method.PATCH}


@dataclass(frozen=True)
class Parameter:
    """Dataclass for a single request parameter.

    Attributes:
        name: The name of the parameter. For a body parameter this is its content type.
        value: The value of the parameter.
        type: Where the parameter is placed in the outgoing request.
        content_type: Optional content type override.
        encode: Whether URL segment and query values get percent-encoded.
    """

    name: str
    value: Any
    type: ParameterType = ParameterType.GET_OR_POST
    content_type: Optional[str] = None
    encode: bool = True

    def validate(self) -> None:
        if not isinstance(self.name, str) or not self.name.strip():
            raise InvalidArgumentError(
                f"Parameter of type {self.type.value} must have non-empty name, "
                f"got {self.name!r}"
            )
        if self.value is None and self.type in VALUE_REQUIRED_FOR:
            raise InvalidArgumentError(
                f"Parameter `{self.name}` of type {self.type.value} requires a value"
            )

    def matches(self, other: "Parameter") -> bool:
        return self.type is other.type and self.name.lower() == other.name.lower()


class FileSource(str, Enum):
    PATH = "path"
    BYTES = "bytes"
    STREAM_PROVIDER = "stream_provider"


@dataclass(frozen=True)
class FileParameter:
    """Dataclass for a file attached to a multipart request.

    Exactly one of `path`, `data` and `get_file` is set, according to `source`.
    `get_file` is invoked by the transport once per send attempt and must return
    a fresh, unconsumed stream. Streams it returns are never closed by this
    package; closing them remains the caller's responsibility.

    Attributes:
        name: The form field name. May repeat to send several files in one field.
        file_name: The file name reported to the server.
        source: How the content is obtained.
        content_type: MIME type, or None to let the transport infer it.
        path: Path of the file for `FileSource.PATH`.
        data: File content for `FileSource.BYTES`.
        get_file: Stream factory for `FileSource.STREAM_PROVIDER`.
        declared_length: Length announced by the caller for `FileSource.STREAM_PROVIDER`.
    """

    name: str
    file_name: str
    source: FileSource
    content_type: Optional[str] = None
    path: Optional[str] = None
    data: Optional[bytes] = None
    get_file: Optional[StreamProvider] = None
    declared_length: Optional[int] = None

    @property
    def content_length(self) -> int:
        if self.source is FileSource.PATH:
            return os.path.getsize(self.path)
        if self.source is FileSource.BYTES:
            return len(self.data)
        return self.declared_length

    @property
    def owns_stream(self) -> bool:
        return self.source is not FileSource.STREAM_PROVIDER

    def open(self) -> BinaryIO:
        if self.source is FileSource.PATH:
            return open(self.path, "rb")
        if self.source is FileSource.BYTES:
            return io.BytesIO(self.data)
        return self.get_file()
