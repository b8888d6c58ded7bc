"""
Route matching service.

Resolves the function, consumer or supplier addressed by a request path.

Note:
    Provides functionality different from FastAPI's APIRouter.
    Routes are not declared; they are derived from the function catalog.
"""

import logging
from typing import Optional

from ..models.function import FunctionKind
from ..models.target_function import FunctionTarget

logger = logging.getLogger("function_web.route_matcher")


class RouteMatcher:
    def __init__(
        self,
        function_catalog,
        default_definition: Optional[str] = None,
        path_prefix: str = "",
    ):
        """
        Args:
            function_catalog: FunctionCatalog instance
            default_definition: Name served on the root path
            path_prefix: Prefix stripped from request paths before matching
        """
        self.function_catalog = function_catalog
        self.default_definition = default_definition or None
        self.path_prefix = "/" + path_prefix.strip("/") if path_prefix.strip("/") else ""

    def _relative_path(self, request_path: str) -> Optional[str]:
        path = request_path or "/"
        if self.path_prefix:
            if path != self.path_prefix and not path.startswith(self.path_prefix + "/"):
                return None
            path = path[len(self.path_prefix):]
        return path.strip("/")

    def match_route(self, request_path: str, request_method: str) -> Optional[FunctionTarget]:
        """
        Resolve the target callables from request path and method.

        POST: ``/{name}`` resolves a function, else a consumer, else a
        supplier (which the controller rejects).
        GET: ``/{name}`` resolves a supplier, ``/{name}/{argument}`` a
        function applied to the last path segment.

        Returns:
            FunctionTarget, or None when nothing matches
        """
        path = self._relative_path(request_path)
        if path is None:
            return None
        name = path or self.default_definition
        if not name:
            return None

        lookup = self.function_catalog.lookup
        method = request_method.upper()

        if method == "POST":
            target = FunctionTarget(
                name=name,
                function=lookup(FunctionKind.FUNCTION, name),
                consumer=lookup(FunctionKind.CONSUMER, name),
                supplier=lookup(FunctionKind.SUPPLIER, name),
            )
            return target if target.handler is not None else None

        if method == "GET":
            supplier = lookup(FunctionKind.SUPPLIER, name)
            if supplier is not None:
                return FunctionTarget(name=name, supplier=supplier)

            function_name, sep, argument = name.rpartition("/")
            if not sep:
                if not (path and self.default_definition):
                    return None
                # Default function applied to the whole path.
                function_name, argument = self.default_definition, name
            function = lookup(FunctionKind.FUNCTION, function_name)
            if function is None:
                return None
            return FunctionTarget(name=function_name, function=function, argument=argument)

        logger.debug(f"Unsupported method {request_method} for {request_path}")
        return None
