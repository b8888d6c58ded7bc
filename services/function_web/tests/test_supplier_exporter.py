"""
Where: services/function_web/tests/test_supplier_exporter.py
What: Forwarding supplier output to an HTTP sink and the exporter health flag.
Why: Sink failures must be visible on /health without crashing the service.
"""

import json
import logging
from typing import AsyncIterator, Iterator

import httpx
import pytest
import respx

from services.function_web.models.message import Message
from services.function_web.services.function_catalog import FunctionCatalog
from services.function_web.services.supplier_exporter import (
    DestinationResolver,
    RequestBuilder,
    SupplierExporter,
)

SINK = "http://sink.test/{destination}"


def words() -> Iterator[str]:
    yield from ("foo", "bar")


def orders() -> Iterator[Message[dict]]:
    yield Message({"id": 1}, {"destination": "orders-eu", "x-region": "eu"})


async def ticks() -> AsyncIterator[int]:
    for i in range(2):
        yield i


@pytest.fixture
def catalog():
    catalog = FunctionCatalog(config_path="unused.yml")
    catalog.register("words", words)
    catalog.register("orders", orders)
    catalog.register("ticks", ticks)
    return catalog


def _exporter(catalog, client, supplier_name=None, **kwargs):
    return SupplierExporter(
        RequestBuilder(SINK, {"x-api-key": "secret"}),
        DestinationResolver(),
        catalog,
        client,
        supplier_name=supplier_name,
        **kwargs,
    )


class TestRequestBuilder:
    def test_uri_substitutes_destination(self):
        assert RequestBuilder(SINK).uri("words") == "http://sink.test/words"

    def test_message_headers_are_merged(self):
        builder = RequestBuilder(SINK, {"x-api-key": "secret"})

        headers = builder.build_headers(Message("x", {"destination": "d", "ce_type": "t"}))

        assert headers == {"x-api-key": "secret", "ce-type": "t"}

    def test_destination_resolver(self):
        resolver = DestinationResolver()

        assert resolver.destination("words", "foo") == "words"
        assert resolver.destination("words", Message("foo", {"destination": "d"})) == "d"


class TestSupplierExporter:
    @pytest.mark.asyncio
    @respx.mock
    async def test_forwards_every_item(self, catalog):
        route = respx.post("http://sink.test/words").mock(return_value=httpx.Response(200))

        async with httpx.AsyncClient() as client:
            exporter = _exporter(catalog, client, "words")
            await exporter.start()
            assert exporter.is_running()
            await exporter.wait()

        assert exporter.is_ok()
        assert not exporter.is_running()
        assert [call.request.content for call in route.calls] == [b"foo", b"bar"]
        assert route.calls.last.request.headers["x-api-key"] == "secret"
        assert route.calls.last.request.headers["content-type"] == "text/plain"

    @pytest.mark.asyncio
    @respx.mock
    async def test_message_destination_and_payload(self, catalog):
        route = respx.post("http://sink.test/orders-eu").mock(return_value=httpx.Response(202))

        async with httpx.AsyncClient() as client:
            exporter = _exporter(catalog, client, "orders")
            await exporter.start()
            await exporter.wait()

        assert exporter.is_ok()
        request = route.calls.last.request
        assert json.loads(request.content) == {"id": 1}
        assert request.headers["x-region"] == "eu"
        assert "destination" not in request.headers

    @pytest.mark.asyncio
    @respx.mock
    async def test_all_suppliers_when_no_name(self, catalog):
        respx.post("http://sink.test/words").mock(return_value=httpx.Response(200))
        respx.post("http://sink.test/orders-eu").mock(return_value=httpx.Response(200))
        ticks_route = respx.post("http://sink.test/ticks").mock(return_value=httpx.Response(200))

        async with httpx.AsyncClient() as client:
            exporter = _exporter(catalog, client)
            await exporter.start()
            await exporter.wait()

        assert exporter.is_ok()
        assert [call.request.content for call in ticks_route.calls] == [b"0", b"1"]

    @pytest.mark.asyncio
    @respx.mock
    async def test_sink_error_flips_health(self, catalog, caplog):
        respx.post("http://sink.test/words").mock(return_value=httpx.Response(500))

        async with httpx.AsyncClient() as client:
            exporter = _exporter(catalog, client, "words")
            with caplog.at_level(logging.ERROR, logger="function_web.exporter"):
                await exporter.start()
                await exporter.wait()

        assert not exporter.is_ok()
        assert not exporter.is_running()
        assert "Supplier export failed" in caplog.text

    @pytest.mark.asyncio
    @respx.mock
    async def test_connection_error_flips_health(self, catalog):
        respx.post("http://sink.test/words").mock(side_effect=httpx.ConnectError("refused"))

        async with httpx.AsyncClient() as client:
            exporter = _exporter(catalog, client, "words")
            await exporter.start()
            await exporter.wait()

        assert not exporter.is_ok()

    @pytest.mark.asyncio
    @respx.mock
    async def test_restart_resets_health(self, catalog):
        route = respx.post("http://sink.test/words")
        route.side_effect = [httpx.Response(500), httpx.Response(200), httpx.Response(200)]

        async with httpx.AsyncClient() as client:
            exporter = _exporter(catalog, client, "words")
            await exporter.start()
            await exporter.wait()
            assert not exporter.is_ok()

            await exporter.start()
            await exporter.wait()

        assert exporter.is_ok()

    @pytest.mark.asyncio
    async def test_unknown_supplier_is_logged(self, catalog, caplog):
        async with httpx.AsyncClient() as client:
            exporter = _exporter(catalog, client, "missing")
            with caplog.at_level(logging.WARNING, logger="function_web.exporter"):
                await exporter.start()
                await exporter.wait()

        assert exporter.is_ok()
        assert "No such Supplier: missing" in caplog.text

    @pytest.mark.asyncio
    async def test_stop_is_safe_when_not_started(self, catalog):
        async with httpx.AsyncClient() as client:
            exporter = _exporter(catalog, client, "words")
            await exporter.stop()

        assert not exporter.is_running()

    @pytest.mark.asyncio
    @respx.mock
    async def test_debug_logs_each_post(self, catalog, caplog):
        respx.post("http://sink.test/words").mock(return_value=httpx.Response(200))

        async with httpx.AsyncClient() as client:
            exporter = _exporter(catalog, client, "words", debug=True)
            with caplog.at_level(logging.INFO, logger="function_web.exporter"):
                await exporter.start()
                await exporter.wait()

        assert "Posting to: http://sink.test/words" in caplog.text
