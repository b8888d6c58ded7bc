"""
Sample functions referenced by config/functions.yml.
"""

import logging
from typing import Iterator

from .models.message import Message

logger = logging.getLogger("function_web.samples")


def uppercase(value: str) -> str:
    return value.upper()


def reverse(value: str) -> str:
    return value[::-1]


def words() -> Iterator[str]:
    yield from ("foo", "bar")


def log_sink(value: str) -> None:
    logger.info(f"Received: {value}")


class Greeter:
    def __call__(self, message: Message[str]) -> Message[str]:
        return Message(f"Hello {message.payload}", {"greeted": "true"})
