import base64
import dataclasses
import json
import re
import xml.etree.ElementTree as ET
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional, Protocol, Tuple

from dataclasses_json import DataClassJsonMixin

from rest_sdk.http.entities import DataFormat
from rest_sdk.http.utils.conversion import to_invariant_string
from rest_sdk.http.utils.reflection import (
    get_public_attributes,
    has_slots,
    is_named_tuple,
)

JSON_CONTENT_TYPE = "application/json"
XML_CONTENT_TYPE = "application/xml"
XML_LIST_ITEM_ELEMENT = "item"
XML_MAPPING_ROOT_ELEMENT = "root"
XML_NAME_PATTERN = re.compile(r"^[A-Za-z_][\w.\-]*$")

SCALAR_TYPES = (str, int, float, bool, Enum, date, datetime, time, Decimal)


class Serializer(Protocol):
    """Turns a request body object into text of the serializer's content type."""

    content_type: str

    def serialize(self, obj: Any) -> str: ...


@dataclass(frozen=True)
class JsonSerializer:
    content_type: str = JSON_CONTENT_TYPE

    def serialize(self, obj: Any) -> str:
        if isinstance(obj, DataClassJsonMixin):
            return obj.to_json()
        return json.dumps(obj, default=_json_default)


@dataclass(frozen=True)
class XmlSerializer:
    """Serializer producing an XML document from an object.

    Attributes:
        namespace: Default namespace declared on the root element.
        root_element: Name of the root element. Defaults to the class name of
            the serialized object, or `root` for mappings.
        content_type: The content type of produced documents.
    """

    namespace: Optional[str] = None
    root_element: Optional[str] = None
    content_type: str = XML_CONTENT_TYPE

    def with_namespace(self, namespace: Optional[str]) -> "XmlSerializer":
        if not namespace:
            return self
        return dataclasses.replace(self, namespace=namespace)

    def with_root_element(self, root_element: Optional[str]) -> "XmlSerializer":
        if not root_element:
            return self
        return dataclasses.replace(self, root_element=root_element)

    def serialize(self, obj: Any) -> str:
        root = _create_xml_element(name=self.root_element or _xml_element_name(obj))
        if self.namespace:
            root.set("xmlns", self.namespace)
        _populate_xml_element(element=root, value=obj)
        return ET.tostring(root, encoding="unicode")


def default_serializers() -> Dict[DataFormat, Serializer]:
    return {
        DataFormat.XML: XmlSerializer(),
        DataFormat.JSON: JsonSerializer(),
    }


def _json_default(value: Any) -> Any:
    if isinstance(value, DataClassJsonMixin):
        return value.to_dict(encode_json=True)
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, (set, frozenset)):
        return list(value)
    if isinstance(value, (bytes, bytearray)):
        return base64.b64encode(value).decode("ascii")
    if has_slots(value) or hasattr(value, "__dict__"):
        return dict(get_public_attributes(source_object=value))
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def _xml_element_name(value: Any) -> str:
    if isinstance(value, Mapping):
        return XML_MAPPING_ROOT_ELEMENT
    if isinstance(value, SCALAR_TYPES + (bytes, bytearray)):
        return XML_LIST_ITEM_ELEMENT
    return type(value).__name__


def _create_xml_element(name: Any, parent: Optional[ET.Element] = None) -> ET.Element:
    tag = to_invariant_string(name)
    if not XML_NAME_PATTERN.fullmatch(tag):
        raise ValueError(f"`{tag}` is not a valid XML element name")
    if parent is None:
        return ET.Element(tag)
    return ET.SubElement(parent, tag)


def _get_xml_children(value: Any) -> List[Tuple[Any, Any]]:
    if isinstance(value, Mapping):
        return list(value.items())
    if (
        dataclasses.is_dataclass(value)
        or is_named_tuple(value)
        or has_slots(value)
        or hasattr(value, "__dict__")
    ):
        return get_public_attributes(source_object=value)
    raise TypeError(f"Object of type {type(value).__name__} is not XML serializable")


def _populate_xml_element(element: ET.Element, value: Any) -> None:
    if value is None:
        return None
    if isinstance(value, (bytes, bytearray)):
        element.text = base64.b64encode(value).decode("ascii")
        return None
    if isinstance(value, SCALAR_TYPES):
        element.text = to_invariant_string(value)
        return None
    if isinstance(value, (list, tuple, set, frozenset)) and not is_named_tuple(value):
        for item in value:
            child = _create_xml_element(name=_xml_element_name(item), parent=element)
            _populate_xml_element(element=child, value=item)
        return None
    for name, child_value in _get_xml_children(value):
        if child_value is None:
            continue
        child = _create_xml_element(name=name, parent=element)
        _populate_xml_element(element=child, value=child_value)
