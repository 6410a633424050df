from collections.abc import Mapping
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from rest_sdk.config import DEFAULT_REQUEST_FORMAT, GZIP_CONTENT_TYPE
from rest_sdk.http.entities import (
    DataFormat,
    FileParameter,
    Method,
    Parameter,
    ParameterType,
    StreamProvider,
)
from rest_sdk.http.errors import (
    EncodingError,
    InvalidArgumentError,
    UnsupportedFormatError,
)
from rest_sdk.http.utils.conversion import to_invariant_string, to_parameter_string
from rest_sdk.http.utils.files import (
    file_from_bytes,
    file_from_path,
    file_from_stream_provider,
)
from rest_sdk.http.utils.reflection import get_non_empty_attributes
from rest_sdk.http.utils.serializers import (
    Serializer,
    XmlSerializer,
    default_serializers,
)
from rest_sdk.utils.logging import get_logger

logger = get_logger("http.request")

HeaderPairs = Union[Mapping, Iterable[Tuple[str, Any]]]


class RestRequest:
    """Mutable builder accumulating everything needed to send one HTTP request.

    Every builder method mutates the request in place and returns the same
    instance, so calls can be chained. A request is meant to be configured by
    a single owner before it is handed to the transport; it is not thread-safe.
    Methods raising an error leave the request unchanged.
    """

    def __init__(
        self,
        resource: str = "",
        method: Union[Method, str] = Method.GET,
        request_format: Optional[Union[DataFormat, str]] = None,
        xml_namespace: Optional[str] = None,
        root_element: Optional[str] = None,
    ):
        self.__resource = resource
        self.__method = _parse_method(method=method)
        self.__request_format = _parse_data_format(
            data_format=request_format or DEFAULT_REQUEST_FORMAT
        )
        self.__xml_namespace = xml_namespace
        self.__root_element = root_element
        self.__serializers: Dict[DataFormat, Serializer] = default_serializers()
        self.__parameters: List[Parameter] = []
        self.__files: List[FileParameter] = []
        self.__attempts = 0

    @property
    def resource(self) -> str:
        return self.__resource

    @property
    def method(self) -> Method:
        return self.__method

    @property
    def request_format(self) -> DataFormat:
        return self.__request_format

    @property
    def xml_namespace(self) -> Optional[str]:
        return self.__xml_namespace

    @property
    def root_element(self) -> Optional[str]:
        return self.__root_element

    @property
    def parameters(self) -> Tuple[Parameter, ...]:
        return tuple(self.__parameters)

    @property
    def files(self) -> Tuple[FileParameter, ...]:
        return tuple(self.__files)

    @property
    def body(self) -> Optional[Parameter]:
        for parameter in self.__parameters:
            if parameter.type is ParameterType.REQUEST_BODY:
                return parameter
        return None

    @property
    def attempts(self) -> int:
        return self.__attempts

    def select_request_format(self, data_format: Union[DataFormat, str]) -> "RestRequest":
        self.__request_format = _parse_data_format(data_format=data_format)
        return self

    def use_serializer(
        self, data_format: Union[DataFormat, str], serializer: Serializer
    ) -> "RestRequest":
        """Register the serializer used for a data format.

        Replacing the XML serializer with anything but an `XmlSerializer`
        makes body calls ignore XML namespace hints.
        """
        data_format = _parse_data_format(data_format=data_format)
        if not callable(getattr(serializer, "serialize", None)) or not getattr(
            serializer, "content_type", None
        ):
            raise InvalidArgumentError(
                "Serializer must define `serialize(obj)` and a non-empty `content_type`"
            )
        self.__serializers[data_format] = serializer
        return self

    def get_parameters(self, parameter_type: ParameterType) -> List[Parameter]:
        return [p for p in self.__parameters if p.type is parameter_type]

    def add_parameter(
        self,
        parameter: Union[Parameter, str],
        value: Any = None,
        parameter_type: ParameterType = ParameterType.GET_OR_POST,
        content_type: Optional[str] = None,
        encode: bool = True,
    ) -> "RestRequest":
        """Add a parameter, keeping any existing parameter with the same name.

        A `REQUEST_BODY` parameter takes the place of the current body instead.

        Args:
            parameter: A ready parameter, or the name of the parameter to create.
            value: Value of the created parameter.
            parameter_type: Type of the created parameter.
            content_type: Content type of the created parameter.
            encode: Whether the created parameter is percent-encoded.

        Returns:
            This request.

        Raises:
            InvalidArgumentError: When the name is empty or a required value is missing.
        """
        parameter = _ensure_parameter(
            parameter=parameter,
            value=value,
            parameter_type=parameter_type,
            content_type=content_type,
            encode=encode,
        )
        parameter.validate()
        self.__append(parameter=parameter)
        return self

    def add_or_update_parameter(
        self,
        parameter: Union[Parameter, str],
        value: Any = None,
        parameter_type: ParameterType = ParameterType.GET_OR_POST,
        content_type: Optional[str] = None,
        encode: bool = True,
    ) -> "RestRequest":
        """Add a parameter or replace the parameters of the same type and name.

        Names are compared case-insensitively. The first matching parameter is
        replaced where it stands and all later matches are removed, so exactly
        one parameter with that type and name remains.

        Returns:
            This request.

        Raises:
            InvalidArgumentError: When the name is empty or a required value is missing.
        """
        parameter = _ensure_parameter(
            parameter=parameter,
            value=value,
            parameter_type=parameter_type,
            content_type=content_type,
            encode=encode,
        )
        parameter.validate()
        self.__add_or_update(parameter=parameter)
        return self

    def add_or_update_parameters(self, parameters: Iterable[Parameter]) -> "RestRequest":
        parameters = [_ensure_parameter(parameter=p) for p in parameters]
        for parameter in parameters:
            parameter.validate()
        for parameter in parameters:
            self.__add_or_update(parameter=parameter)
        return self

    def add_query_parameter(
        self, name: str, value: Any, encode: bool = True
    ) -> "RestRequest":
        return self.add_parameter(
            name, value, parameter_type=ParameterType.QUERY_STRING, encode=encode
        )

    def add_cookie(self, name: str, value: Any) -> "RestRequest":
        return self.add_parameter(name, value, parameter_type=ParameterType.COOKIE)

    def add_header(self, name: str, value: Any) -> "RestRequest":
        return self.add_parameter(name, value, parameter_type=ParameterType.HTTP_HEADER)

    def add_or_update_header(self, name: str, value: Any) -> "RestRequest":
        return self.add_or_update_parameter(
            name, value, parameter_type=ParameterType.HTTP_HEADER
        )

    def add_headers(self, headers: HeaderPairs) -> "RestRequest":
        for header in _prepare_headers(headers=headers):
            self.__append(parameter=header)
        return self

    def add_or_update_headers(self, headers: HeaderPairs) -> "RestRequest":
        for header in _prepare_headers(headers=headers):
            self.__add_or_update(parameter=header)
        return self

    def add_url_segment(self, name: str, value: Any, encode: bool = True) -> "RestRequest":
        """Add a value for the `{name}` token of the resource template.

        Non-string values are converted with a locale-independent conversion.
        Pass `encode=False` for values that are already encoded or must keep
        characters such as `/` literal.
        """
        if value is not None:
            value = to_invariant_string(value)
        return self.add_parameter(
            name, value, parameter_type=ParameterType.URL_SEGMENT, encode=encode
        )

    def add_body(self, obj: Any, xml_namespace: Optional[str] = None) -> "RestRequest":
        """Serialize `obj` with the serializer of the current request format.

        The namespace hint only applies when that serializer is the built-in
        `XmlSerializer`; other serializers ignore it.
        """
        return self.__add_serialized_body(
            obj=obj,
            data_format=self.__request_format,
            xml_namespace=xml_namespace,
        )

    def add_json_body(self, obj: Any, content_type: Optional[str] = None) -> "RestRequest":
        """Serialize `obj` as JSON and switch the request format to JSON.

        Args:
            obj: The object to serialize.
            content_type: Replaces `application/json`, e.g. for
                `application/json-patch+json` documents.

        Returns:
            This request.
        """
        return self.__add_serialized_body(
            obj=obj,
            data_format=DataFormat.JSON,
            content_type=content_type,
        )

    def add_xml_body(self, obj: Any, xml_namespace: Optional[str] = None) -> "RestRequest":
        return self.__add_serialized_body(
            obj=obj,
            data_format=DataFormat.XML,
            xml_namespace=xml_namespace,
        )

    def add_object(self, obj: Any, *included_properties: str) -> "RestRequest":
        """Add a GET_OR_POST parameter for each public attribute of `obj`.

        Attributes holding None are skipped. When property names are given,
        only those are added, still in declaration order.

        Returns:
            This request.
        """
        if obj is None:
            raise InvalidArgumentError("Object to add as parameters must not be None")
        parameters = [
            Parameter(name=name, value=to_parameter_string(value))
            for name, value in get_non_empty_attributes(
                source_object=obj,
                included_properties=included_properties,
            )
        ]
        for parameter in parameters:
            parameter.validate()
        self.__parameters.extend(parameters)
        return self

    def add_file(
        self, name: str, path: str, content_type: Optional[str] = None
    ) -> "RestRequest":
        return self.__attach(
            file_parameter=file_from_path(name=name, path=path, content_type=content_type)
        )

    def add_file_from_bytes(
        self,
        name: str,
        data: bytes,
        file_name: str,
        content_type: Optional[str] = None,
    ) -> "RestRequest":
        return self.__attach(
            file_parameter=file_from_bytes(
                name=name, data=data, file_name=file_name, content_type=content_type
            )
        )

    def add_file_from_stream(
        self,
        name: str,
        get_file: StreamProvider,
        file_name: str,
        content_length: int,
        content_type: Optional[str] = None,
    ) -> "RestRequest":
        """Attach a file whose content is produced by `get_file` at send time.

        `get_file` is called once per send attempt, including retries, and must
        return a fresh stream each time. Returned streams are read but never
        closed by the SDK; closing them stays with the caller.
        """
        return self.__attach(
            file_parameter=file_from_stream_provider(
                name=name,
                get_file=get_file,
                file_name=file_name,
                content_length=content_length,
                content_type=content_type,
            )
        )

    def add_file_bytes(
        self,
        name: str,
        data: bytes,
        file_name: str,
        content_type: str = GZIP_CONTENT_TYPE,
    ) -> "RestRequest":
        return self.add_file_from_bytes(
            name=name, data=data, file_name=file_name, content_type=content_type
        )

    def increase_attempts(self) -> "RestRequest":
        self.__attempts += 1
        return self

    def __add_serialized_body(
        self,
        obj: Any,
        data_format: DataFormat,
        xml_namespace: Optional[str] = None,
        content_type: Optional[str] = None,
    ) -> "RestRequest":
        if obj is None:
            raise InvalidArgumentError("Request body object must not be None")
        serializer = self.__serializers.get(data_format)
        if serializer is None:
            raise UnsupportedFormatError(
                f"No serializer registered for data format `{data_format.value}`"
            )
        if isinstance(serializer, XmlSerializer):
            serializer = serializer.with_root_element(
                self.__root_element
            ).with_namespace(xml_namespace or self.__xml_namespace)
        elif xml_namespace:
            logger.debug(
                f"Ignoring XML namespace `{xml_namespace}` - serializer for "
                f"`{data_format.value}` does not support it"
            )
        try:
            payload = serializer.serialize(obj)
        except (TypeError, ValueError) as error:
            raise EncodingError(
                f"Could not serialize {type(obj).__name__} as {data_format.value}: {error}"
            ) from error
        content_type = content_type or serializer.content_type
        if not self.__method.allows_body:
            logger.debug(
                f"Body added to {self.__method.value} request - the transport will reject it"
            )
        self.__request_format = data_format
        self.__append(
            parameter=Parameter(
                name=content_type,
                value=payload,
                type=ParameterType.REQUEST_BODY,
                content_type=content_type,
            )
        )
        return self

    def __attach(self, file_parameter: FileParameter) -> "RestRequest":
        if not self.__method.allows_body:
            logger.debug(
                f"File `{file_parameter.file_name}` attached to {self.__method.value} "
                f"request - the transport will reject it"
            )
        self.__files.append(file_parameter)
        return self

    def __append(self, parameter: Parameter) -> None:
        if parameter.type is ParameterType.REQUEST_BODY:
            self.__replace_body(body=parameter)
            return None
        self.__parameters.append(parameter)

    def __add_or_update(self, parameter: Parameter) -> None:
        if parameter.type is ParameterType.REQUEST_BODY:
            self.__replace_body(body=parameter)
            return None
        matching_indices = [
            index
            for index, existing in enumerate(self.__parameters)
            if existing.matches(parameter)
        ]
        if not matching_indices:
            self.__parameters.append(parameter)
            return None
        self.__parameters[matching_indices[0]] = parameter
        for index in reversed(matching_indices[1:]):
            del self.__parameters[index]

    def __replace_body(self, body: Parameter) -> None:
        for index, existing in enumerate(self.__parameters):
            if existing.type is ParameterType.REQUEST_BODY:
                self.__parameters[index] = body
                return None
        self.__parameters.append(body)

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(method={self.__method.value}, "
            f"resource='{self.__resource}', parameters={len(self.__parameters)}, "
            f"files={len(self.__files)}, attempts={self.__attempts})"
        )


def _ensure_parameter(
    parameter: Union[Parameter, str],
    value: Any = None,
    parameter_type: ParameterType = ParameterType.GET_OR_POST,
    content_type: Optional[str] = None,
    encode: bool = True,
) -> Parameter:
    if isinstance(parameter, Parameter):
        return parameter
    if not isinstance(parameter, str):
        raise InvalidArgumentError(
            f"Expected Parameter or parameter name, got {type(parameter).__name__}"
        )
    return Parameter(
        name=parameter,
        value=value,
        type=parameter_type,
        content_type=content_type,
        encode=encode,
    )


def _prepare_headers(headers: HeaderPairs) -> List[Parameter]:
    pairs = headers.items() if isinstance(headers, Mapping) else headers
    result = []
    try:
        for name, value in pairs:
            result.append(
                Parameter(name=name, value=value, type=ParameterType.HTTP_HEADER)
            )
    except (TypeError, ValueError) as error:
        raise InvalidArgumentError(
            f"Headers must be a mapping or (name, value) pairs: {error}"
        ) from error
    for header in result:
        header.validate()
    return result


def _parse_method(method: Union[Method, str]) -> Method:
    if isinstance(method, Method):
        return method
    try:
        return Method(str(method).upper())
    except ValueError as error:
        raise InvalidArgumentError(f"Unsupported HTTP method: {method}") from error


def _parse_data_format(data_format: Union[DataFormat, str]) -> DataFormat:
    if isinstance(data_format, DataFormat):
        return data_format
    try:
        return DataFormat(str(data_format).lower())
    except ValueError as error:
        raise UnsupportedFormatError(
            f"Unknown data format `{data_format}`"
        ) from error
