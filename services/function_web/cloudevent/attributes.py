"""
Cloud event attributes bundle.

An immutable mapping of ``ce_`` prefixed attribute names to values.
Every setter returns a new bundle with a single attribute replaced.
"""

from collections.abc import Mapping
from typing import Any, Dict, Iterator, Optional

_ATTR_PREFIX = "ce_"
_HTTP_PREFIX = "ce-"
_MANDATORY = ("id", "source", "specversion", "type")


def _attribute_key(name: str) -> str:
    if name.startswith(_ATTR_PREFIX):
        return name
    if name.startswith(_HTTP_PREFIX):
        return _ATTR_PREFIX + name[len(_HTTP_PREFIX):]
    return _ATTR_PREFIX + name


class CloudEventAttributes(Mapping):
    def __init__(self, attributes: Optional[Mapping[str, Any]] = None):
        self._attributes: Dict[str, Any] = dict(attributes or {})

    def __getitem__(self, key: str) -> Any:
        return self._attributes[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._attributes)

    def __len__(self) -> int:
        return len(self._attributes)

    def __repr__(self) -> str:
        return f"CloudEventAttributes({self._attributes!r})"

    def get_attribute(self, name: str) -> Any:
        """Return an attribute given its bare, ``ce_`` or ``ce-`` name."""
        return self._attributes.get(_attribute_key(name))

    def set_attribute(self, name: str, value: Any) -> "CloudEventAttributes":
        attributes = dict(self._attributes)
        attributes[_attribute_key(name)] = value
        return CloudEventAttributes(attributes)

    @property
    def id(self) -> Optional[str]:
        return self.get_attribute("id")

    @property
    def source(self) -> Optional[str]:
        return self.get_attribute("source")

    @property
    def specversion(self) -> Optional[str]:
        return self.get_attribute("specversion")

    @property
    def type(self) -> Optional[str]:
        return self.get_attribute("type")

    @property
    def datacontenttype(self) -> Optional[str]:
        return self.get_attribute("datacontenttype")

    @property
    def dataschema(self) -> Optional[str]:
        return self.get_attribute("dataschema")

    @property
    def subject(self) -> Optional[str]:
        return self.get_attribute("subject")

    @property
    def time(self) -> Optional[str]:
        return self.get_attribute("time")

    @property
    def data(self) -> Any:
        return self.get_attribute("data")

    def set_id(self, value: str) -> "CloudEventAttributes":
        return self.set_attribute("id", value)

    def set_source(self, value: str) -> "CloudEventAttributes":
        return self.set_attribute("source", value)

    def set_specversion(self, value: str) -> "CloudEventAttributes":
        return self.set_attribute("specversion", value)

    def set_type(self, value: str) -> "CloudEventAttributes":
        return self.set_attribute("type", value)

    def is_valid(self) -> bool:
        """True when all mandatory attributes are present and non-blank."""
        for name in _MANDATORY:
            value = self.get_attribute(name)
            if value is None or not str(value).strip():
                return False
        return True
