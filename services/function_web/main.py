"""
Function Web - HTTP front end for cataloged functions

Exposes every registered function, consumer and supplier on
``GET /**`` and ``POST /**`` and optionally forwards supplier output to an
HTTP sink.
"""

import logging
from datetime import datetime, timezone

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from .api.deps import (
    FunctionControllerDep,
    FunctionTargetDep,
    InputContextDep,
    SupplierExporterDep,
)
from .config import config
from .core.logging_config import setup_logging
from .exceptions import register_exception_handlers
from .lifecycle import manage_lifespan
from .middleware import request_id_middleware

# Logger setup
setup_logging()
logger = logging.getLogger("function_web.main")


def lifespan(app: FastAPI):
    return manage_lifespan(app, config)


app = FastAPI(
    title="Function Web", version="1.0.0", lifespan=lifespan, root_path=config.root_path
)

app.middleware("http")(request_id_middleware)
register_exception_handlers(app)


# ===========================================
# Endpoint definitions.
# ===========================================


@app.get("/health")
async def health_check(exporter: SupplierExporterDep):
    """Health check endpoint (reports the supplier exporter state when enabled)."""
    body = {"status": "healthy", "timestamp": datetime.now(timezone.utc).isoformat()}
    if exporter is None:
        return body

    body["exporter"] = {"ok": exporter.is_ok(), "running": exporter.is_running()}
    if not exporter.is_ok():
        body["status"] = "unhealthy"
        return JSONResponse(status_code=503, content=body)
    return body


@app.get("/{path:path}")
async def get_handler(
    target: FunctionTargetDep,
    context: InputContextDep,
    controller: FunctionControllerDep,
):
    """Invoke a supplier, or a function with the last path segment as argument."""
    return await controller.get(context, target)


@app.post("/{path:path}")
async def post_handler(
    target: FunctionTargetDep,
    context: InputContextDep,
    controller: FunctionControllerDep,
):
    """Invoke a function or consumer with the request body."""
    return await controller.post(context, target)


def main() -> None:
    import uvicorn

    host, _, port = config.UVICORN_BIND_ADDR.rpartition(":")
    uvicorn.run(app, host=host or "0.0.0.0", port=int(port or 8080))


if __name__ == "__main__":
    main()
