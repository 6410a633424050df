import re
from typing import Iterable
from urllib.parse import quote

from rest_sdk.http.entities import Parameter, ParameterType
from rest_sdk.http.utils.conversion import to_invariant_string

URL_TOKEN_PATTERN = re.compile(r"\{([^{}/]+)\}")
TOKEN_NAME_GROUP = 1


def resolve_url_template(template: str, parameters: Iterable[Parameter]) -> str:
    """Substitute URL segment parameters into `{token}` placeholders.

    Token names are matched case-insensitively; when several segments share a
    name, the first one added wins. Tokens without a segment are left in
    place, and segments with no token in the template are ignored.

    Args:
        template: The resource template, e.g. `/accounts/{id}`.
        parameters: Request parameters; only URL segments are considered.

    Returns:
        The template with known tokens replaced.
    """
    segments = {}
    for parameter in parameters:
        if parameter.type is ParameterType.URL_SEGMENT:
            segments.setdefault(parameter.name.lower(), parameter)
    if not segments:
        return template

    def substitute(match: re.Match) -> str:
        segment = segments.get(match.group(TOKEN_NAME_GROUP).lower())
        if segment is None:
            return match.group(0)
        return encode_segment_value(segment=segment)

    return URL_TOKEN_PATTERN.sub(substitute, template)


def encode_segment_value(segment: Parameter) -> str:
    value = to_invariant_string(segment.value)
    if not segment.encode:
        return value
    return quote(value, safe="")


def join_url(base_url: str, resource: str) -> str:
    if not resource:
        return base_url
    if resource.startswith(("http://", "https://")) or not base_url:
        return resource
    return f"{base_url.rstrip('/')}/{resource.lstrip('/')}"
