"""
Default cloud event attributes provider.

Builds attribute bundles for outbound cloud events and resolves the
``source`` and ``type`` attributes from explicit configuration, the inbound
headers, or computed defaults.
"""

import logging
import uuid
from typing import Any, Dict, Mapping, Optional

from ..core.exceptions import CloudEventValidationError
from ..models.message import Message
from . import message_utils
from .attributes import CloudEventAttributes

logger = logging.getLogger("function_web.cloudevent")

DEFAULT_SPECVERSION = "1.0"
DEFAULT_SOURCE_PREFIX = "http://spring.io/"
DEFAULT_TYPE = "spring.io.DefaultEventType"


def _require_text(value: Optional[str], name: str) -> str:
    if value is None or not str(value).strip():
        raise CloudEventValidationError(f"'{name}' must not be null or empty")
    return value


class DefaultCloudEventAttributesProvider:
    def __init__(
        self,
        source: Optional[str] = None,
        event_type: Optional[str] = None,
        application_name: Optional[str] = None,
        context_id: str = "application",
        source_prefix: str = DEFAULT_SOURCE_PREFIX,
        default_type: str = DEFAULT_TYPE,
    ):
        """
        Args:
            source: Explicit ``ce_source`` used for every generated event
            event_type: Explicit ``ce_type`` used for every generated event
            application_name: Name used to compute the default source
            context_id: Fallback for the default source when no name is set
            source_prefix: Prefix of the computed default source
            default_type: Type used when the result payload is absent
        """
        self.source = source or None
        self.type = event_type or None
        self.default_type = default_type
        self.default_source = source_prefix + (application_name or context_id)

    @classmethod
    def from_config(cls, config) -> "DefaultCloudEventAttributesProvider":
        return cls(
            source=config.CLOUDEVENT_SOURCE,
            event_type=config.CLOUDEVENT_TYPE,
            application_name=config.APPLICATION_NAME,
            context_id=config.CONTEXT_ID,
            source_prefix=config.CLOUDEVENT_SOURCE_PREFIX,
            default_type=config.CLOUDEVENT_DEFAULT_TYPE,
        )

    def get(
        self, ce_id: str, ce_specversion: str, ce_source: str, ce_type: str
    ) -> CloudEventAttributes:
        """
        Build a bundle holding the four mandatory attributes.

        Raises:
            CloudEventValidationError: any attribute is None or blank
        """
        return CloudEventAttributes(
            {
                message_utils.CE_ID: _require_text(ce_id, "ce_id"),
                message_utils.CE_SPECVERSION: _require_text(ce_specversion, "ce_specversion"),
                message_utils.CE_SOURCE: _require_text(ce_source, "ce_source"),
                message_utils.CE_TYPE: _require_text(ce_type, "ce_type"),
            }
        )

    def generate(self, ce_source: str, ce_type: str) -> CloudEventAttributes:
        """Build a bundle with a random id and specversion 1.0."""
        return self.get(str(uuid.uuid4()), DEFAULT_SPECVERSION, ce_source, ce_type)

    def from_headers(self, headers: Mapping[str, Any]) -> CloudEventAttributes:
        """Seed a bundle from the cloud event attributes found in the headers."""
        return (
            message_utils.get_attributes(headers)
            .set_source(self.resolve_source(headers))
            .set_type(self.resolve_type(None))
        )

    def generate_default_cloud_event_headers(
        self, input_message: Message, result: Any
    ) -> Dict[str, Any]:
        """
        Headers for the output of a function invoked with a cloud event.

        Non cloud event inputs yield an empty dict.
        """
        headers = input_message.headers
        if message_utils.CE_ID not in headers:
            return {}

        attributes = (
            self.from_headers(headers)
            .set_id(input_message.id)
            .set_type(self.resolve_type(result))
            .set_source(self.resolve_source(headers))
        )
        logger.debug("Generated cloud event attributes: %s", dict(attributes))
        return dict(attributes)

    def resolve_source(self, headers: Mapping[str, Any]) -> str:
        if self.source is not None:
            return self.source
        if message_utils.CE_SOURCE in headers:
            return headers[message_utils.CE_SOURCE]
        return self.default_source

    def resolve_type(self, result: Any) -> str:
        if self.type is not None:
            return self.type
        if result is None:
            return self.default_type
        if isinstance(result, Message):
            result = result.payload
        cls = type(result)
        return f"{cls.__module__}.{cls.__qualname__}"
