"""
Dependency Injection for Function Web API.

Manage request handler dependencies using FastAPI Depends.
"""

from typing import Annotated, Dict, List

from fastapi import Depends, Request

from ..config import config
from ..core.exceptions import FunctionNotFoundError, InputConversionError
from ..core.json_mapper import JsonMapper, StringConverter
from ..models import FunctionTarget, InputContext
from ..services.function_catalog import FunctionCatalog
from ..services.function_controller import FunctionController
from ..services.function_inspector import FunctionInspector
from ..services.route_matcher import RouteMatcher
from ..services.supplier_exporter import SupplierExporter

FORM_URLENCODED = "application/x-www-form-urlencoded"


# ==========================================
# 1. Service Accessors
# ==========================================


def get_function_catalog(request: Request) -> FunctionCatalog:
    return request.app.state.function_catalog


def get_route_matcher(
    request: Request, catalog: Annotated[FunctionCatalog, Depends(get_function_catalog)]
) -> RouteMatcher:
    matcher = getattr(request.app.state, "route_matcher", None)
    if matcher is None or matcher.function_catalog is not catalog:
        matcher = RouteMatcher(
            catalog,
            default_definition=config.FUNCTION_DEFINITION,
            path_prefix=config.FUNCTION_WEB_PATH,
        )
        request.app.state.route_matcher = matcher
    return matcher


def get_function_controller(request: Request) -> FunctionController:
    controller = getattr(request.app.state, "function_controller", None)
    if controller is None:
        mapper = JsonMapper()
        inspector = FunctionInspector()
        controller = FunctionController(
            mapper,
            inspector,
            StringConverter(mapper, inspector),
            debug=config.FUNCTION_WEB_DEBUG,
        )
        request.app.state.function_controller = controller
    return controller


def get_supplier_exporter(request: Request) -> SupplierExporter | None:
    return getattr(request.app.state, "supplier_exporter", None)


# Service Dependency Type Aliases
FunctionCatalogDep = Annotated[FunctionCatalog, Depends(get_function_catalog)]
RouteMatcherDep = Annotated[RouteMatcher, Depends(get_route_matcher)]
FunctionControllerDep = Annotated[FunctionController, Depends(get_function_controller)]
SupplierExporterDep = Annotated[SupplierExporter | None, Depends(get_supplier_exporter)]


# ==========================================
# 2. Logic Dependencies (Resolution & Context)
# ==========================================


async def resolve_function_target(
    request: Request, route_matcher: RouteMatcherDep
) -> FunctionTarget:
    """
    Resolve the function, consumer or supplier addressed by the request.

    Raises:
        FunctionNotFoundError: 404 when nothing matches
    """
    path = "/" + request.path_params.get("path", "")
    target = route_matcher.match_route(path, request.method)
    if target is None:
        raise FunctionNotFoundError(path)
    return target


def _multi_dict(items) -> Dict[str, List[str]]:
    result: Dict[str, List[str]] = {}
    for key, value in items:
        result.setdefault(key, []).append(value)
    return result


async def build_input_context(request: Request) -> InputContext:
    """
    Capture everything the controller needs from the request.

    An urlencoded body is read as form parameters, any other body as text.
    """
    content_type = request.headers.get("content-type", "")
    body = ""
    form_params: Dict[str, List[str]] = {}
    if content_type.lower().startswith(FORM_URLENCODED):
        form = await request.form()
        form_params = _multi_dict((k, v) for k, v in form.multi_items() if isinstance(v, str))
    else:
        try:
            body = (await request.body()).decode("utf-8")
        except UnicodeDecodeError as e:
            raise InputConversionError(request.url.path.strip("/") or "/", e) from e

    return InputContext(
        method=request.method,
        path=request.url.path,
        headers=list(request.headers.items()),
        query_params=_multi_dict(request.query_params.multi_items()),
        form_params=form_params,
        body=body,
        content_type=content_type,
        accept=request.headers.get("accept", ""),
        request_id=request.headers.get("x-request-id"),
    )


# Logic Dependency Type Aliases
FunctionTargetDep = Annotated[FunctionTarget, Depends(resolve_function_target)]
InputContextDep = Annotated[InputContext, Depends(build_input_context)]
