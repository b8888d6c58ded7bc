"""
Where: services/function_web/tests/test_cloudevent_provider.py
What: Attribute validation, generation and source/type resolution.
Why: Outbound cloud events must always carry valid mandatory attributes.
"""

from types import SimpleNamespace

import pytest

from services.function_web.cloudevent.provider import DefaultCloudEventAttributesProvider
from services.function_web.core.exceptions import CloudEventValidationError
from services.function_web.models.message import Message


class Order:
    pass


@pytest.fixture
def provider():
    return DefaultCloudEventAttributesProvider(application_name="orders")


class TestGet:
    def test_returns_exactly_the_four_attributes(self, provider):
        attributes = provider.get("1", "1.0", "src", "type")

        assert dict(attributes) == {
            "ce_id": "1",
            "ce_specversion": "1.0",
            "ce_source": "src",
            "ce_type": "type",
        }

    @pytest.mark.parametrize(
        "args",
        [
            ("", "1.0", "src", "type"),
            ("1", "   ", "src", "type"),
            ("1", "1.0", None, "type"),
            ("1", "1.0", "src", ""),
        ],
    )
    def test_blank_attribute_is_rejected(self, provider, args):
        with pytest.raises(CloudEventValidationError):
            provider.get(*args)

    def test_validation_error_names_the_attribute(self, provider):
        with pytest.raises(ValueError, match="ce_id"):
            provider.get("", "1.0", "src", "type")

    def test_generate_uses_fresh_ids(self, provider):
        first = provider.generate("src", "type")
        second = provider.generate("src", "type")

        assert first.id != second.id
        assert first.specversion == second.specversion == "1.0"


class TestResolution:
    def test_default_source_uses_application_name(self, provider):
        assert provider.resolve_source({}) == "http://spring.io/orders"

    def test_default_source_falls_back_to_context_id(self):
        provider = DefaultCloudEventAttributesProvider(context_id="ctx", source_prefix="urn:")

        assert provider.resolve_source({}) == "urn:ctx"

    def test_inbound_source_wins_over_default(self, provider):
        assert provider.resolve_source({"ce_source": "inbound"}) == "inbound"

    def test_configured_source_wins_over_inbound(self):
        provider = DefaultCloudEventAttributesProvider(source="configured")

        assert provider.resolve_source({"ce_source": "inbound"}) == "configured"

    def test_type_is_payload_class_name(self, provider):
        assert provider.resolve_type(Order()) == f"{__name__}.Order"
        assert provider.resolve_type(Message(Order())) == f"{__name__}.Order"

    def test_type_for_absent_payload(self, provider):
        assert provider.resolve_type(None) == "spring.io.DefaultEventType"

    def test_configured_type_wins(self):
        provider = DefaultCloudEventAttributesProvider(event_type="order.created")

        assert provider.resolve_type(Order()) == "order.created"

    def test_from_config(self):
        config = SimpleNamespace(
            CLOUDEVENT_SOURCE=None,
            CLOUDEVENT_TYPE="t",
            APPLICATION_NAME="",
            CONTEXT_ID="application",
            CLOUDEVENT_SOURCE_PREFIX="http://example.com/",
            CLOUDEVENT_DEFAULT_TYPE="default",
        )

        provider = DefaultCloudEventAttributesProvider.from_config(config)

        assert provider.resolve_source({}) == "http://example.com/application"
        assert provider.resolve_type(1) == "t"


class TestDefaultHeaders:
    def test_non_cloud_event_input_yields_nothing(self, provider):
        message = Message("x", {"content-type": "text/plain"})

        assert provider.generate_default_cloud_event_headers(message, "y") == {}

    def test_headers_follow_the_input_event(self, provider):
        message = Message.create(
            "x",
            {
                "ce_id": "inbound-id",
                "ce_source": "urn:in",
                "ce_specversion": "1.0",
                "ce_type": "in.type",
                "ce_subject": "sub",
                "content-type": "text/plain",
            },
        )

        headers = provider.generate_default_cloud_event_headers(message, Order())

        assert headers == {
            "ce_id": message.id,
            "ce_source": "urn:in",
            "ce_specversion": "1.0",
            "ce_type": f"{__name__}.Order",
            "ce_subject": "sub",
        }
