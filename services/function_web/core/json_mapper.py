"""
JSON mapping and scalar string conversion.

Thin pydantic ``TypeAdapter`` layer used to coerce request bodies and path
arguments into the input types declared by cataloged functions.
"""

import functools
from typing import Any, List

from pydantic import TypeAdapter, ValidationError

_UNTYPED = (Any, object)


@functools.lru_cache(maxsize=256)
def _adapter(annotation: Any) -> TypeAdapter:
    return TypeAdapter(annotation)


def _cached_adapter(annotation: Any) -> TypeAdapter:
    try:
        return _adapter(annotation)
    except TypeError:
        # Unhashable annotation
        return TypeAdapter(annotation)


class JsonMapper:
    def to_list(self, body: str, item_type: Any) -> List[Any]:
        """Parse a JSON array into a list of ``item_type`` values."""
        if item_type in _UNTYPED:
            item_type = Any
        return _cached_adapter(List[item_type]).validate_json(body)

    def to_single(self, body: str, value_type: Any) -> Any:
        """Parse a JSON document into one ``value_type`` value."""
        if value_type in _UNTYPED:
            value_type = Any
        return _cached_adapter(value_type).validate_json(body)

    def convert_value(self, value: Any, value_type: Any) -> Any:
        """Validate an already decoded value against ``value_type``."""
        if value_type in _UNTYPED:
            return value
        return _cached_adapter(value_type).validate_python(value)


class StringConverter:
    """
    Converts a raw string (path argument or scalar body) to a function's
    declared input type.
    """

    def __init__(self, mapper: JsonMapper, inspector):
        self.mapper = mapper
        self.inspector = inspector

    def convert(self, function: Any, value: str) -> Any:
        if value is None or function is None:
            return value
        input_type = self.inspector.get_input_type(function)
        if input_type in _UNTYPED or input_type is str:
            return value
        try:
            return self.mapper.convert_value(value, input_type)
        except ValidationError:
            # Structured types given as JSON text
            return self.mapper.to_single(value, input_type)
