import json

import pytest

from rest_sdk.http.entities import Method, ParameterType
from rest_sdk.http.errors import InvalidRequestError
from rest_sdk.http.request import RestRequest
from rest_sdk.http.utils import request_building
from rest_sdk.http.utils.request_building import (
    assembly_headers,
    assembly_request_data,
    build_url,
)


def test_build_url_substitutes_url_segment() -> None:
    # given
    request = RestRequest("/accounts/{id}").add_url_segment("id", 42)

    # when
    result = build_url(request=request, base_url="https://api.some.com/")

    # then
    assert result == "https://api.some.com/accounts/42"


def test_build_url_appends_query_string_parameters() -> None:
    # given
    request = (
        RestRequest("/search?lang=en", method=Method.POST)
        .add_query_parameter("q", "a b&c")
        .add_query_parameter("path", "x/y", encode=False)
    )

    # when
    result = build_url(request=request, base_url="https://api.some.com")

    # then
    assert result == "https://api.some.com/search?lang=en&q=a%20b%26c&path=x/y"


def test_assembly_request_data_for_get_request_puts_parameters_in_query() -> None:
    # given
    request = (
        RestRequest("/items/{id}")
        .add_url_segment("id", "a/b")
        .add_parameter("page", 2)
        .add_parameter("tag", "x")
        .add_parameter("tag", "y")
        .add_cookie("session", "abc")
    )

    # when
    result = assembly_request_data(request=request, base_url="https://some.com")

    # then
    assert result.url == "https://some.com/items/a%2Fb?page=2&tag=x&tag=y"
    assert result.method is Method.GET
    assert result.cookies == {"session": "abc"}
    assert result.form == []
    assert result.data is None
    assert result.files == []


def test_assembly_request_data_for_post_request_puts_parameters_in_form() -> None:
    # given
    request = (
        RestRequest("/items", method=Method.POST)
        .add_parameter("name", "Pen")
        .add_parameter("active", True)
        .add_query_parameter("dry_run", "1")
    )

    # when
    result = assembly_request_data(request=request, base_url="https://some.com")

    # then
    assert result.url == "https://some.com/items?dry_run=1"
    assert result.form == [("name", "Pen"), ("active", "true")]
    assert result.data is None


def test_assembly_request_data_when_body_present_puts_parameters_in_query() -> None:
    # given
    request = (
        RestRequest("/items", method=Method.PUT)
        .add_parameter("version", 3)
        .add_json_body({"name": "Pen"})
    )

    # when
    result = assembly_request_data(request=request, base_url="https://some.com")

    # then
    assert result.url == "https://some.com/items?version=3"
    assert result.form == []
    assert json.loads(result.data.decode("utf-8")) == {"name": "Pen"}
    assert result.headers["Content-Type"] == "application/json"


def test_assembly_request_data_when_body_on_get_request() -> None:
    # given
    request = RestRequest("/items").add_json_body({"name": "Pen"})

    # when
    with pytest.raises(InvalidRequestError):
        _ = assembly_request_data(request=request, base_url="https://some.com")


def test_assembly_request_data_when_files_on_get_request() -> None:
    # given
    request = RestRequest("/items").add_file_bytes("f", b"1", "1.gz")

    # when
    with pytest.raises(InvalidRequestError):
        _ = assembly_request_data(request=request, base_url="https://some.com")


def test_assembly_request_data_when_body_and_files_combined() -> None:
    # given
    request = (
        RestRequest("/items", method=Method.POST)
        .add_json_body({"name": "Pen"})
        .add_file_bytes("f", b"1", "1.gz")
    )

    # when
    with pytest.raises(InvalidRequestError):
        _ = assembly_request_data(request=request, base_url="https://some.com")


def test_assembly_headers_joins_repeated_headers_and_overrides_defaults() -> None:
    # given
    request = (
        RestRequest("/items")
        .add_header("Accept", "application/xml")
        .add_header("X-A", "1")
        .add_header("x-a", "2")
    )

    # when
    result = assembly_headers(
        parameters=request.parameters,
        default_headers={"accept": "application/json", "X-Default": "d"},
        body=None,
    )

    # then
    assert result == {
        "User-Agent": request_building.USER_AGENT,
        "X-Default": "d",
        "Accept": "application/xml",
        "X-A": "1, 2",
    }


def test_assembly_headers_keeps_explicit_content_type() -> None:
    # given
    request = (
        RestRequest("/items", method=Method.POST)
        .add_header("content-type", "text/xml; charset=utf-8")
        .add_xml_body({"a": 1})
    )

    # when
    result = assembly_headers(
        parameters=request.get_parameters(ParameterType.HTTP_HEADER),
        default_headers={"Content-Type": "application/json"},
        body=request.body,
    )

    # then
    assert result["content-type"] == "text/xml; charset=utf-8"
    assert "Content-Type" not in result


def test_assembly_headers_replaces_default_content_type_with_body_content_type() -> None:
    # given
    request = RestRequest("/items", method=Method.POST).add_xml_body({"a": 1})

    # when
    result = assembly_headers(
        parameters=[],
        default_headers={"content-type": "application/json"},
        body=request.body,
    )

    # then
    assert result["Content-Type"] == "application/xml"
    assert "content-type" not in result
