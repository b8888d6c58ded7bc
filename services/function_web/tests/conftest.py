import os
from typing import Any, AsyncIterator, Dict, Iterator, List, Optional

import httpx
import pytest
from fastapi.testclient import TestClient
from pydantic import BaseModel

# Config is loaded at import time, so point it at files that do not exist.
os.environ.setdefault("FUNCTIONS_CONFIG_PATH", "/tmp/function-web-missing-functions.yml")
os.environ.setdefault("LOG_CONFIG_PATH", "/tmp/function-web-missing-log.yaml")
os.environ.setdefault("EXPORTER_ENABLED", "false")

from services.function_web.cloudevent.provider import DefaultCloudEventAttributesProvider  # noqa: E402
from services.function_web.models.message import Message  # noqa: E402
from services.function_web.services.function_catalog import FunctionCatalog  # noqa: E402


class Person(BaseModel):
    name: str
    age: int = 0


def uppercase(value: str) -> str:
    return value.upper()


def double(value: int) -> int:
    return value * 2


def echo_person(person: Person) -> Person:
    return Person(name=person.name.title(), age=person.age + 1)


def totals(values: List[int]) -> int:
    return sum(values)


async def shout(value: str) -> str:
    return value.upper() + "!"


def split(value: str) -> Iterator[str]:
    yield from value.split()


async def count(values: AsyncIterator[str]) -> int:
    n = 0
    async for _ in values:
        n += 1
    return n


async def echo_flux(values: AsyncIterator[str]) -> AsyncIterator[str]:
    async for value in values:
        yield value.upper()


def greet(message: Message[str]) -> Message[str]:
    return Message(
        f"Hello {message.payload}",
        {"x-greeting": "hello", "x-trace": message.headers.get("x-trace", "none")},
    )


def form_echo(form: Dict[str, Any]) -> Dict[str, Any]:
    return form


def maybe(value: str) -> Optional[str]:
    return None if value == "none" else value


def fail(value: str) -> str:
    raise RuntimeError("boom")


def words() -> Iterator[str]:
    yield from ("foo", "bar")


def answer() -> int:
    return 42


SAMPLE_FUNCTIONS = {
    "uppercase": uppercase,
    "double": double,
    "echo_person": echo_person,
    "totals": totals,
    "shout": shout,
    "split": split,
    "count": count,
    "echo_flux": echo_flux,
    "greet": greet,
    "form_echo": form_echo,
    "maybe": maybe,
    "fail": fail,
    "words": words,
    "answer": answer,
}


@pytest.fixture
def attributes_provider():
    return DefaultCloudEventAttributesProvider(application_name="function-web-test")


@pytest.fixture
def received():
    """Values seen by the ``sink`` consumer."""
    return []


@pytest.fixture
def catalog(attributes_provider, received):
    catalog = FunctionCatalog(
        attributes_provider=attributes_provider,
        config_path="/tmp/function-web-missing-functions.yml",
    )
    for name, target in SAMPLE_FUNCTIONS.items():
        catalog.register(name, target)

    def sink(value: str) -> None:
        received.append(value)

    catalog.register("sink", sink)
    return catalog


@pytest.fixture
def main_app(catalog):
    from services.function_web.api.deps import get_function_catalog
    from services.function_web.main import app

    app.dependency_overrides[get_function_catalog] = lambda: catalog
    yield app
    app.dependency_overrides = {}


@pytest.fixture
def client(main_app):
    with TestClient(main_app) as client:
        yield client


@pytest.fixture
async def async_client(main_app):
    transport = httpx.ASGITransport(app=main_app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client
