"""
SupplierExporter - Forwards supplier output to an HTTP sink

Drains one configured supplier (or every cataloged supplier) in a
background task and POSTs each produced item to the sink.
"""

import asyncio
import logging
from typing import Any, Dict, List, Mapping, Optional

import httpx

from ..core import header_utils
from ..core.utils import render_body
from ..models.function import FunctionKind
from ..models.message import Message

logger = logging.getLogger("function_web.exporter")

DESTINATION = "destination"


class DestinationResolver:
    """Picks the sink destination of an item: its ``destination`` header, else the supplier name."""

    def destination(self, supplier_name: str, value: Any) -> str:
        if isinstance(value, Message):
            destination = value.headers.get(DESTINATION)
            if destination:
                return str(destination)
        return supplier_name


class RequestBuilder:
    def __init__(self, url_template: str, headers: Optional[Mapping[str, str]] = None):
        """
        Args:
            url_template: Sink URL; ``{destination}`` is replaced per item
            headers: Extra headers sent with every request
        """
        self.url_template = url_template
        self.headers = dict(headers or {})

    def uri(self, destination: str) -> str:
        return self.url_template.replace("{destination}", destination)

    def build_headers(self, value: Any) -> Dict[str, str]:
        headers = dict(self.headers)
        if isinstance(value, Message):
            message_headers = header_utils.from_message(value.headers)
            message_headers.pop(DESTINATION, None)
            headers.update(message_headers)
        return headers


class SupplierExporter:
    """
    Background forwarding of supplier output.

    ``ok`` turns False when any request fails; the run then ends but the
    exporter stays inspectable and can be started again.
    """

    def __init__(
        self,
        request_builder: RequestBuilder,
        destination_resolver: DestinationResolver,
        function_catalog,
        client: httpx.AsyncClient,
        supplier_name: Optional[str] = None,
        debug: bool = False,
        auto_startup: bool = True,
    ):
        self.request_builder = request_builder
        self.destination_resolver = destination_resolver
        self.function_catalog = function_catalog
        self.client = client
        self.supplier_name = supplier_name or None
        self.debug = debug
        self.auto_startup = auto_startup
        self.ok = True
        self.running = False
        self._task: asyncio.Task | None = None

    def is_ok(self) -> bool:
        return self.ok

    def is_running(self) -> bool:
        return self.running

    async def start(self) -> None:
        """Start forwarding (no-op when already running)."""
        if self.running:
            return
        self.ok = True
        self.running = True
        self._task = asyncio.create_task(self._run())
        logger.info(f"Supplier exporter started (sink: {self.request_builder.url_template})")

    async def stop(self) -> None:
        """Stop forwarding and wait for the background task to finish."""
        task, self._task = self._task, None
        if task and not task.done():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
        self.running = False
        logger.info("Supplier exporter stopped")

    async def wait(self) -> None:
        """Wait until the current run finishes (all suppliers drained or failed)."""
        if self._task:
            await asyncio.shield(self._task)

    def _suppliers(self) -> List[Any]:
        if self.supplier_name:
            names = [self.supplier_name]
        else:
            names = sorted(self.function_catalog.get_names(FunctionKind.SUPPLIER))
        suppliers = []
        for name in names:
            supplier = self.function_catalog.lookup(FunctionKind.SUPPLIER, name)
            if supplier is None:
                logger.warning(f"No such Supplier: {name}")
                continue
            suppliers.append(supplier)
        return suppliers

    async def _run(self) -> None:
        tasks = [
            asyncio.create_task(self._forward(supplier)) for supplier in self._suppliers()
        ]
        try:
            if not tasks:
                return
            done, pending = await asyncio.wait(tasks, return_when=asyncio.FIRST_EXCEPTION)
            for task in pending:
                task.cancel()
            for task in done:
                error = task.exception()
                if error is not None:
                    self.ok = False
                    logger.error(f"Supplier export failed: {error}", exc_info=error)
        finally:
            for task in tasks:
                task.cancel()
            self.running = False

    async def _forward(self, supplier: Any) -> None:
        async for value in supplier.get():
            await self._post(supplier.name, value)

    async def _post(self, supplier_name: str, value: Any) -> None:
        destination = self.destination_resolver.destination(supplier_name, value)
        uri = self.request_builder.uri(destination)
        headers = self.request_builder.build_headers(value)
        payload = value.payload if isinstance(value, Message) else value
        content, media_type = render_body(payload)
        if not any(name.lower() == "content-type" for name in headers):
            headers["content-type"] = media_type

        if self.debug:
            logger.info(f"Posting to: {uri}")
        response = await self.client.post(uri, content=content, headers=headers)
        response.raise_for_status()
