"""
Services package.

Provides the function catalog, routing, invocation and export logic.
"""

from .function_catalog import FunctionCatalog
from .function_controller import FunctionController
from .function_inspector import FunctionInspector
from .route_matcher import RouteMatcher
from .supplier_exporter import DestinationResolver, RequestBuilder, SupplierExporter

__all__ = [
    "FunctionCatalog",
    "FunctionController",
    "FunctionInspector",
    "RouteMatcher",
    "DestinationResolver",
    "RequestBuilder",
    "SupplierExporter",
]
