"""
HTTP <-> message header translation.
"""

from typing import Any, Dict, Iterable, List, Mapping, Tuple, Union

from ..cloudevent import message_utils

# Never propagated between a request, its messages and the response.
IGNORED_HEADERS = frozenset({"id", "content-length"})

HeaderValue = Union[str, List[str]]


def from_http(headers: Iterable[Tuple[str, str]]) -> Dict[str, Any]:
    """
    Build message headers from raw HTTP header pairs.

    Names are lower-cased, repeated headers become a list, and ``ce-``
    prefixed names are canonicalized to ``ce_``.

    Args:
        headers: (name, value) pairs, e.g. Starlette ``request.headers.items()``
    """
    collected: Dict[str, List[str]] = {}
    for name, value in headers:
        name = name.lower()
        if name in IGNORED_HEADERS:
            continue
        collected.setdefault(name, []).append(value)

    result: Dict[str, HeaderValue] = {
        name: values[0] if len(values) == 1 else values for name, values in collected.items()
    }
    return message_utils.canonicalize(result)


def from_message(headers: Mapping[str, Any]) -> Dict[str, str]:
    """
    Build HTTP response headers from message headers.

    ``ce_`` attributes are exposed as ``ce-`` headers; for list values the
    last element is kept.
    """
    result: Dict[str, str] = {}
    for name, value in message_utils.http(headers).items():
        name = name.lower()
        if name in IGNORED_HEADERS or value is None:
            continue
        values = value if isinstance(value, (list, tuple, set)) else [value]
        for item in values:
            result[name] = str(item)
    return result
