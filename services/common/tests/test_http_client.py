from unittest.mock import patch

import httpx

from services.common.core.config import BaseAppConfig
from services.common.core.http_client import HttpClientFactory


class TestHttpClientFactory:
    @patch("httpx.AsyncClient")
    def test_create_async_client_verify_false(self, mock_client):
        """VERIFY_SSL=False should produce client with verify=False"""
        config = BaseAppConfig(VERIFY_SSL=False)
        factory = HttpClientFactory(config)
        factory.create_async_client()

        mock_client.assert_called_once()
        _, kwargs = mock_client.call_args
        assert kwargs["verify"] is False
        assert kwargs["trust_env"] is False
        assert "timeout" not in kwargs

    @patch("httpx.AsyncClient")
    def test_create_async_client_passes_timeout_and_headers(self, mock_client):
        config = BaseAppConfig(VERIFY_SSL=True)
        factory = HttpClientFactory(config)
        factory.create_async_client(timeout=5.0, headers={"x-sink": "a"})

        _, kwargs = mock_client.call_args
        assert kwargs["verify"] is True
        assert kwargs["timeout"] == 5.0
        assert kwargs["headers"] == {"x-sink": "a"}

    @patch("httpx.AsyncClient")
    def test_create_async_client_defaults_limits(self, mock_client):
        config = BaseAppConfig(VERIFY_SSL=True)
        factory = HttpClientFactory(config)

        factory.create_async_client()

        _, kwargs = mock_client.call_args
        limits = kwargs.get("limits")
        assert isinstance(limits, httpx.Limits)
        assert limits.max_keepalive_connections == 20
        assert limits.max_connections == 100

    @patch("urllib3.disable_warnings")
    def test_configure_global_settings_disable_warnings(self, mock_disable):
        """VERIFY_SSL=False should trigger disable_warnings"""
        factory = HttpClientFactory(BaseAppConfig(VERIFY_SSL=False))
        factory.configure_global_settings()

        mock_disable.assert_called_once()

    @patch("urllib3.disable_warnings")
    def test_configure_global_settings_no_disable_warnings(self, mock_disable):
        """VERIFY_SSL=True should NOT trigger disable_warnings"""
        factory = HttpClientFactory(BaseAppConfig(VERIFY_SSL=True))
        factory.configure_global_settings()

        mock_disable.assert_not_called()
