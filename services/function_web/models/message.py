"""
Message envelope model.

A payload paired with a header map. Used when a function declares
``Message[T]`` as its input or output type.
"""

import uuid
from typing import Any, Dict, Generic, Mapping, Optional, TypeVar

T = TypeVar("T")

ID = "id"


class Message(Generic[T]):
    """
    Immutable payload + headers pair.

    Every message carries an ``id`` header; a fresh UUID is generated
    unless the caller supplies one.
    """

    __slots__ = ("_payload", "_headers")

    def __init__(self, payload: T, headers: Optional[Mapping[str, Any]] = None):
        self._payload = payload
        merged: Dict[str, Any] = dict(headers or {})
        merged.setdefault(ID, str(uuid.uuid4()))
        self._headers = merged

    @classmethod
    def create(cls, payload: T, headers: Optional[Mapping[str, Any]] = None) -> "Message[T]":
        """Build a message with a newly generated id, ignoring any inbound ``id`` header."""
        copied = {k: v for k, v in (headers or {}).items() if k != ID}
        return cls(payload, copied)

    @property
    def payload(self) -> T:
        return self._payload

    @property
    def headers(self) -> Dict[str, Any]:
        return dict(self._headers)

    @property
    def id(self) -> str:
        return self._headers[ID]

    def with_payload(self, payload: Any) -> "Message":
        return Message(payload, self._headers)

    def with_headers(self, headers: Mapping[str, Any]) -> "Message[T]":
        """Copy with extra headers merged in (existing keys are replaced)."""
        merged = dict(self._headers)
        merged.update(headers)
        return Message(self._payload, merged)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Message):
            return NotImplemented
        return self._payload == other._payload and self._headers == other._headers

    def __repr__(self) -> str:
        return f"Message(payload={self._payload!r}, headers={self._headers!r})"
