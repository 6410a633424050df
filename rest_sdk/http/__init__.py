"""REST SDK HTTP module.

Provides the request builder and a thin transport around `requests`:
- Accumulating query, form, header, cookie and URL segment parameters
- Serializing request bodies as XML or JSON
- Attaching files from paths, bytes or stream factories
- Assembling and sending requests with retries
"""

from rest_sdk.http.client import RestClient
from rest_sdk.http.entities import (
    DataFormat,
    FileParameter,
    FileSource,
    Method,
    Parameter,
    ParameterType,
)
from rest_sdk.http.request import RestRequest
