"""
Where: services/function_web/lifecycle.py
What: Startup/shutdown orchestration for the catalog, controller and exporter.
Why: Keep main.py focused on app assembly while preserving lifecycle behavior.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI

from services.common.core.http_client import HttpClientFactory

from .cloudevent.provider import DefaultCloudEventAttributesProvider
from .config import FunctionWebConfig
from .core.json_mapper import JsonMapper, StringConverter
from .services.function_catalog import FunctionCatalog
from .services.function_controller import FunctionController
from .services.function_inspector import FunctionInspector
from .services.route_matcher import RouteMatcher
from .services.supplier_exporter import DestinationResolver, RequestBuilder, SupplierExporter

logger = logging.getLogger("function_web.main")


def build_exporter(
    web_config: FunctionWebConfig, function_catalog: FunctionCatalog, client
) -> Optional[SupplierExporter]:
    if not web_config.EXPORTER_ENABLED:
        return None
    if not web_config.EXPORTER_SINK_URL:
        logger.warning("Supplier exporter enabled without EXPORTER_SINK_URL; not starting it")
        return None
    return SupplierExporter(
        RequestBuilder(web_config.EXPORTER_SINK_URL, web_config.EXPORTER_SINK_HEADERS),
        DestinationResolver(),
        function_catalog,
        client,
        supplier_name=web_config.EXPORTER_SINK_NAME,
        debug=web_config.EXPORTER_DEBUG,
        auto_startup=web_config.EXPORTER_AUTO_STARTUP,
    )


@asynccontextmanager
async def manage_lifespan(app: FastAPI, web_config: FunctionWebConfig) -> AsyncIterator[None]:
    """Manage application lifecycle."""
    factory = HttpClientFactory(web_config)
    factory.configure_global_settings()
    client = factory.create_async_client(timeout=web_config.EXPORTER_TIMEOUT)

    exporter: Optional[SupplierExporter] = None

    try:
        attributes_provider = DefaultCloudEventAttributesProvider.from_config(web_config)
        function_catalog = FunctionCatalog(
            attributes_provider=attributes_provider,
            config_path=web_config.FUNCTIONS_CONFIG_PATH,
        )
        function_catalog.load_functions_config()

        mapper = JsonMapper()
        inspector = FunctionInspector()
        controller = FunctionController(
            mapper,
            inspector,
            StringConverter(mapper, inspector),
            debug=web_config.FUNCTION_WEB_DEBUG,
        )
        route_matcher = RouteMatcher(
            function_catalog,
            default_definition=web_config.FUNCTION_DEFINITION,
            path_prefix=web_config.FUNCTION_WEB_PATH,
        )

        exporter = build_exporter(web_config, function_catalog, client)
        if exporter and exporter.auto_startup:
            await exporter.start()

        app.state.http_client = client
        app.state.attributes_provider = attributes_provider
        app.state.function_catalog = function_catalog
        app.state.route_matcher = route_matcher
        app.state.function_controller = controller
        app.state.supplier_exporter = exporter

        logger.info(
            "Function web initialized",
            extra={
                "functions": sorted(function_catalog.get_names()),
                "default_function": web_config.FUNCTION_DEFINITION,
            },
        )
        yield
    finally:
        if exporter:
            await exporter.stop()

        logger.info("Function web shutting down, closing http client.")
        await client.aclose()
