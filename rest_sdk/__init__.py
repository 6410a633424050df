from rest_sdk.http.client import RestClient
from rest_sdk.http.entities import (
    DataFormat,
    FileParameter,
    FileSource,
    Method,
    Parameter,
    ParameterType,
)
from rest_sdk.http.errors import (
    EncodingError,
    HTTPCallErrorError,
    InvalidArgumentError,
    InvalidRequestError,
    RestClientError,
    UnsupportedFormatError,
)
from rest_sdk.http.request import RestRequest
from rest_sdk.http.utils.serializers import JsonSerializer, XmlSerializer
from rest_sdk.version import __version__
