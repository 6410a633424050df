import dataclasses
from collections.abc import Mapping
from typing import Any, Iterable, List, Optional, Sequence, Tuple

Attribute = Tuple[str, Any]

EXCLUDED_SLOTS = {"__dict__", "__weakref__"}


def get_public_attributes(source_object: object) -> List[Attribute]:
    """List the externally visible attributes of an object in declaration order.

    Dataclasses contribute their fields, named tuples their `_fields`, mappings
    their string keys, any other object its assigned `__slots__` (base classes
    first) and then its public instance attributes. Properties defined on the
    class (base classes first) follow, in the order they are defined.

    Args:
        source_object: The object to inspect.

    Returns:
        List of (name, value) pairs.
    """
    if isinstance(source_object, Mapping):
        return [
            (key, value)
            for key, value in source_object.items()
            if isinstance(key, str) and not key.startswith("_")
        ]
    if dataclasses.is_dataclass(source_object) and not isinstance(source_object, type):
        names = [f.name for f in dataclasses.fields(source_object)]
    elif is_named_tuple(source_object):
        names = list(source_object._fields)
    else:
        names = [
            name
            for name in _get_slot_names(type(source_object))
            if hasattr(source_object, name)
        ]
        for name in getattr(source_object, "__dict__", {}).keys():
            if name not in names:
                names.append(name)
    names = [name for name in names if not name.startswith("_")]
    for property_name in _get_property_names(type(source_object)):
        if property_name not in names:
            names.append(property_name)
    return [(name, getattr(source_object, name)) for name in names]


def is_named_tuple(value: object) -> bool:
    return isinstance(value, tuple) and isinstance(getattr(value, "_fields", None), tuple)


def has_slots(value: object) -> bool:
    return bool(_get_slot_names(type(value)))


def get_non_empty_attributes(
    source_object: object,
    included_properties: Optional[Sequence[str]] = None,
) -> List[Attribute]:
    """Get public attributes with a value, optionally restricted to given names.

    The filter never changes the order, which always follows declaration order.

    Args:
        source_object: The object to inspect.
        included_properties: Names to keep. None or empty keeps every attribute.

    Returns:
        List of (name, value) pairs with None values dropped.
    """
    attributes = get_public_attributes(source_object=source_object)
    if included_properties:
        included = set(included_properties)
        attributes = [(name, value) for name, value in attributes if name in included]
    return remove_empty_values(attributes=attributes)


def remove_empty_values(attributes: Iterable[Attribute]) -> List[Attribute]:
    return [(name, value) for name, value in attributes if value is not None]


def _get_property_names(cls: type) -> List[str]:
    result = []
    for klass in reversed(cls.__mro__):
        for name, member in vars(klass).items():
            if (
                isinstance(member, property)
                and member.fget is not None
                and not name.startswith("_")
                and name not in result
            ):
                result.append(name)
    return result


def _get_slot_names(cls: type) -> List[str]:
    result = []
    for klass in reversed(cls.__mro__):
        slots = vars(klass).get("__slots__", ())
        if isinstance(slots, str):
            slots = (slots,)
        for name in slots:
            if name not in EXCLUDED_SLOTS and name not in result:
                result.append(name)
    return result
