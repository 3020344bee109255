"""
Tests for client configuration
"""
import os
import pytest
from unittest.mock import patch

from seam_jsonrpc.config import ClientConfig


class TestClientConfig:
    """Test ClientConfig"""

    def test_default_values(self):
        config = ClientConfig()
        assert config.endpoint == "tcp://localhost:5555"
        assert config.adapter == "zeromq"
        assert config.timeout_ms is None
        assert config.check_service is True
        assert config.include_version_tag is True
        assert config.propagate_trace_context is False

    def test_from_env_defaults(self):
        with patch.dict(os.environ, clear=True):
            config = ClientConfig.from_env()
            assert config == ClientConfig()

    def test_from_env(self):
        with patch.dict(os.environ, {
            "SEAM_JSONRPC_ENDPOINT": "tcp://rpc.internal:6000",
            "SEAM_JSONRPC_ADAPTER": "loopback",
            "SEAM_JSONRPC_TIMEOUT_MS": "1500",
            "SEAM_JSONRPC_CHECK": "false",
            "SEAM_JSONRPC_VERSION_TAG": "0",
            "SEAM_JSONRPC_TRACE": "yes",
            "SEAM_JSONRPC_SERVICE_NAME": "billing-client",
        }, clear=True):
            config = ClientConfig.from_env()
            assert config.endpoint == "tcp://rpc.internal:6000"
            assert config.adapter == "loopback"
            assert config.timeout_ms == 1500
            assert config.check_service is False
            assert config.include_version_tag is False
            assert config.propagate_trace_context is True
            assert config.service_name == "billing-client"

    def test_invalid_timeout(self):
        with patch.dict(os.environ, {"SEAM_JSONRPC_TIMEOUT_MS": "soon"}, clear=True):
            with pytest.raises(ValueError):
                ClientConfig.from_env()

    def test_to_dict(self):
        config_dict = ClientConfig(timeout_ms=100).to_dict()
        assert config_dict["timeout_ms"] == 100
        assert config_dict["endpoint"] == "tcp://localhost:5555"
        assert "include_version_tag" in config_dict
        assert "propagate_trace_context" in config_dict
