"""Tests for common utilities."""

import pytest
from libs.common.config import (
    BaseConfig,
    ContractConfig,
    InventoryConfig,
    SystemConfig,
    get_config,
    load_properties_file,
)
from libs.common.logging import configure_logging, get_logger
from libs.common.metrics import MetricsCollector, get_metrics_collector


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("SP_ENV", "SP_LOG_LEVEL", "SP_SERVER_NAME", "SP_SYSTEM_PORT", "SP_PACT_DIR"):
        monkeypatch.delenv(name, raising=False)


def test_config_loading():
    """Test configuration loading."""
    config = BaseConfig()
    assert config.sp_env == "local"
    assert config.sp_log_level == "INFO"
    assert config.sp_log_format == "json"
    assert config.sp_metrics_enabled is True


def test_system_config():
    """Test System service configuration."""
    config = SystemConfig()
    assert config.sp_system_port == 9080
    assert config.sp_system_root_path == ""
    assert config.sp_server_name == "defaultServer"
    assert config.sp_user_dir_is_default is True
    assert config.sp_properties_file is None


def test_inventory_and_contract_config():
    """Test consumer-side configuration."""
    assert InventoryConfig().sp_system_service_url == "http://localhost:9080"
    contract = ContractConfig()
    assert contract.sp_pact_consumer == "Inventory"
    assert contract.sp_pact_provider == "System"
    assert contract.sp_pact_dir == "target/pacts"


def test_config_from_environment(monkeypatch):
    """Test environment variables override defaults."""
    monkeypatch.setenv("SP_SERVER_NAME", "envServer")
    monkeypatch.setenv("SP_SYSTEM_PORT", "9443")

    config = SystemConfig()
    assert config.sp_server_name == "envServer"
    assert config.sp_system_port == 9443


def test_get_config():
    assert isinstance(get_config("system"), SystemConfig)
    assert isinstance(get_config("inventory"), InventoryConfig)
    assert isinstance(get_config("contract"), ContractConfig)
    assert type(get_config("unknown")) is BaseConfig


def test_load_properties_file(tmp_path):
    properties_file = tmp_path / "bootstrap.properties"
    properties_file.write_text("a=1\nb: two\n# c=3\nnot a property\nurl=http://host:80/x\n")

    assert load_properties_file(str(properties_file)) == {
        "a": "1",
        "b": "two",
        "url": "http://host:80/x",
    }
    assert load_properties_file(str(tmp_path / "absent.properties")) == {}


def test_logging_configuration():
    """Test logging configuration."""
    # This should not raise an exception
    configure_logging("test-service", "INFO", "json")
    get_logger("test").info("configured")


def test_metrics_collector():
    """Test metrics collector."""
    collector = MetricsCollector("test-service")
    assert collector.service_name == "test-service"

    collector.record_http_request("GET", "/properties", 200, 0.1)
    collector.record_properties_request(0.01)
    collector.record_property_lookup(found=False)

    metrics = collector.get_metrics()
    assert isinstance(metrics, str)
    assert "http_requests_total" in metrics
    assert "system_properties_request_duration_seconds" in metrics
    assert 'system_property_lookups_total{outcome="miss"} 1.0' in metrics


def test_metrics_collector_is_process_wide():
    assert get_metrics_collector("system-service") is get_metrics_collector("system-service")
