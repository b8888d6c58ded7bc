"""
Function web configuration definition.

Loads configuration from environment variables and provides a Pydantic model.
Uses pydantic-settings for type safety and defaults.
"""

import sys
from typing import Dict, Optional

from pydantic import Field
from services.common.core.config import BaseAppConfig


class FunctionWebConfig(BaseAppConfig):
    """
    Configuration management for the function web service.
    """

    # Server settings
    UVICORN_BIND_ADDR: str = Field(default="0.0.0.0:8080", description="Listen address")

    # Function catalog
    FUNCTIONS_CONFIG_PATH: str = Field(
        default="/app/config/functions.yml", description="Function definition file path"
    )
    FUNCTION_DEFINITION: Optional[str] = Field(
        default=None, description="Function served on the root path"
    )
    FUNCTION_WEB_PATH: str = Field(default="", description="Path prefix for function routes")
    FUNCTION_WEB_DEBUG: bool = Field(default=False, description="Log every input/output item")

    # Cloud events
    CLOUDEVENT_SOURCE: Optional[str] = Field(default=None, description="Explicit ce_source")
    CLOUDEVENT_TYPE: Optional[str] = Field(default=None, description="Explicit ce_type")
    CLOUDEVENT_SOURCE_PREFIX: str = Field(
        default="http://spring.io/", description="Prefix of the computed default ce_source"
    )
    CLOUDEVENT_DEFAULT_TYPE: str = Field(
        default="spring.io.DefaultEventType", description="ce_type used for absent payloads"
    )

    # Supplier exporter
    EXPORTER_ENABLED: bool = Field(default=False, description="Forward supplier output to a sink")
    EXPORTER_SINK_URL: str = Field(
        default="", description="Sink URL, '{destination}' is replaced per item"
    )
    EXPORTER_SINK_NAME: Optional[str] = Field(
        default=None, description="Supplier to export (all suppliers when unset)"
    )
    EXPORTER_SINK_HEADERS: Dict[str, str] = Field(
        default_factory=dict, description="Extra headers sent to the sink"
    )
    EXPORTER_AUTO_STARTUP: bool = Field(default=True, description="Start exporting on startup")
    EXPORTER_DEBUG: bool = Field(default=False, description="Log every forwarded item")
    EXPORTER_TIMEOUT: float = Field(default=30.0, description="Sink request timeout (seconds)")

    # FastAPI settings
    root_path: str = Field(default="", description="API root path (for proxy)")

    # model_config is inherited


# Load config as a singleton.
# pydantic-settings reads environment variables during instantiation.
try:
    config = FunctionWebConfig()
except Exception as e:
    sys.stderr.write(f"Failed to load configuration: {e}\n")
    raise
