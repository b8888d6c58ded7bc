"""
Cloud Events header utilities - https://cloudevents.io/

Translates between the three naming conventions used for the same
attribute set: bare (``id``), internal (``ce_id``) and HTTP (``ce-id``).
"""

from typing import Any, Dict, Mapping

from .attributes import CloudEventAttributes

APPLICATION_CLOUDEVENTS_VALUE = "application/cloudevents"

# Prefix for internal attribute keys.
ATTR_PREFIX = "ce_"

# Prefix for HTTP headers.
HTTP_PREFIX = "ce-"

ID = "id"
SOURCE = "source"
SPECVERSION = "specversion"
TYPE = "type"
DATACONTENTTYPE = "datacontenttype"
DATASCHEMA = "dataschema"
SUBJECT = "subject"
TIME = "time"
DATA = "data"

CE_ID = ATTR_PREFIX + ID
CE_SOURCE = ATTR_PREFIX + SOURCE
CE_SPECVERSION = ATTR_PREFIX + SPECVERSION
CE_TYPE = ATTR_PREFIX + TYPE
CE_DATACONTENTTYPE = ATTR_PREFIX + DATACONTENTTYPE
CE_DATASCHEMA = ATTR_PREFIX + DATASCHEMA
CE_SUBJECT = ATTR_PREFIX + SUBJECT
CE_TIME = ATTR_PREFIX + TIME
CE_DATA = ATTR_PREFIX + DATA

HTTP_ID = HTTP_PREFIX + ID
HTTP_SOURCE = HTTP_PREFIX + SOURCE
HTTP_SPECVERSION = HTTP_PREFIX + SPECVERSION
HTTP_TYPE = HTTP_PREFIX + TYPE

MANDATORY_ATTRIBUTES = (CE_ID, CE_SOURCE, CE_SPECVERSION, CE_TYPE)

_BARE_TO_ATTR = {
    SOURCE: CE_SOURCE,
    TYPE: CE_TYPE,
    SPECVERSION: CE_SPECVERSION,
    ID: CE_ID,
}


def is_binary(headers: Mapping[str, Any]) -> bool:
    """Check whether the headers describe a cloud event in binary mode."""
    return all(key in headers for key in MANDATORY_ATTRIBUTES)


def is_structured(content_type: str) -> bool:
    """Check whether a Content-Type denotes a structured-mode cloud event."""
    return (content_type or "").lower().startswith(APPLICATION_CLOUDEVENTS_VALUE)


def canonicalize(headers: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Rewrite headers into the internal ``ce_`` form.

    Bare mandatory attribute names never overwrite an explicit ``ce_`` value
    already collected; ``ce-`` prefixed keys always do.
    """
    result: Dict[str, Any] = {}
    for key, value in headers.items():
        attr_key = _BARE_TO_ATTR.get(key)
        if attr_key is not None:
            result.setdefault(attr_key, value)
        elif key.startswith(HTTP_PREFIX):
            result[ATTR_PREFIX + key[len(HTTP_PREFIX):]] = value
        else:
            result[key] = value
    return result


def http(headers: Mapping[str, Any]) -> Dict[str, Any]:
    """Rewrite ``ce_`` prefixed keys into their ``ce-`` HTTP header form."""
    result: Dict[str, Any] = {}
    for key, value in headers.items():
        if key.startswith(ATTR_PREFIX):
            result[HTTP_PREFIX + key[len(ATTR_PREFIX):]] = value
        else:
            result[key] = value
    return result


def get_attributes(headers: Mapping[str, Any]) -> CloudEventAttributes:
    """Collect every cloud event attribute carried by the headers."""
    attributes = {}
    for key, value in headers.items():
        if key.startswith(ATTR_PREFIX):
            attributes[key] = value
        elif key.startswith(HTTP_PREFIX):
            attributes[ATTR_PREFIX + key[len(HTTP_PREFIX):]] = value
    return CloudEventAttributes(attributes)


def from_structured(event: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Split a structured-mode cloud event into ``ce_`` headers.

    The ``data`` member is left out; callers take it as the payload.
    """
    return {ATTR_PREFIX + key: value for key, value in event.items() if key != DATA}
