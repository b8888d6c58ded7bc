"""
Function Web Utility Module
"""

import json
from typing import Any, Tuple

from fastapi.encoders import jsonable_encoder

TEXT_PLAIN = "text/plain"
APPLICATION_JSON = "application/json"
APPLICATION_OCTET_STREAM = "application/octet-stream"


def render_body(value: Any) -> Tuple[bytes, str]:
    """
    Render one response value.

    Returns:
        (content, media_type): ``str`` as text/plain, ``bytes`` as-is,
        anything else as JSON
    """
    if isinstance(value, (bytes, bytearray)):
        return bytes(value), APPLICATION_OCTET_STREAM
    if isinstance(value, str):
        return value.encode("utf-8"), TEXT_PLAIN
    return json_bytes(value), APPLICATION_JSON


def json_bytes(value: Any) -> bytes:
    return json.dumps(
        jsonable_encoder(value), ensure_ascii=False, separators=(",", ":")
    ).encode("utf-8")


def sse_event(value: Any) -> str:
    """Format one Server-Sent Events frame (multi-line data is split per line)."""
    if isinstance(value, (bytes, bytearray)):
        data = bytes(value).decode("utf-8", errors="replace")
    elif isinstance(value, str):
        data = value
    else:
        data = json_bytes(value).decode("utf-8")
    lines = data.splitlines() or [""]
    return "".join(f"data:{line}\n" for line in lines) + "\n"
