import pytest

from soniox_transcriber.config import API_BASE_URL, load_settings
from soniox_transcriber.errors import SonioxValidationError


def test_defaults() -> None:
    settings = load_settings({})
    assert settings.api_key is None
    assert settings.api_base_url == API_BASE_URL
    assert settings.polling_interval_ms == 1000
    assert settings.polling_timeout_ms == 180_000
    assert settings.health_path == "/healthz"


def test_reads_environment() -> None:
    settings = load_settings(
        {
            "SONIOX_API_KEY": "  key  ",
            "SONIOX_API_BASE_URL": "https://soniox.internal/v1",
            "SONIOX_POLLING_INTERVAL_MS": "2500",
            "SONIOX_POLLING_TIMEOUT_MS": "60000",
            "LOG_LEVEL": "debug",
            "MCP_PATH": "tools",
        }
    )
    assert settings.api_key == "key"
    assert settings.api_base_url == "https://soniox.internal/v1"
    assert settings.polling_interval_ms == 2500
    assert settings.polling_timeout_ms == 60000
    assert settings.log_level == "DEBUG"
    assert settings.mcp_path == "/tools"


def test_blank_api_key_is_missing() -> None:
    assert load_settings({"SONIOX_API_KEY": "   "}).api_key is None


def test_malformed_integer() -> None:
    with pytest.raises(SonioxValidationError, match="SONIOX_POLLING_INTERVAL_MS"):
        load_settings({"SONIOX_POLLING_INTERVAL_MS": "soon"})
