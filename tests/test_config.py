import pytest
import yaml
from pathlib import Path
from pydantic import ValidationError

from webapp_alerts.config import (
    AzureCredentials,
    MonitoringConfig,
    get_default_config,
    load_config,
)
from webapp_alerts.exceptions import ConfigurationError, CredentialsError


def test_credentials_from_env(credential_env):
    creds = AzureCredentials.from_env()

    assert creds.tenant_id == "tenant"
    assert creds.client_id == "client"
    assert creds.client_secret == "secret"
    assert creds.subscription_id == credential_env["SUBSCRIPTION_ID"]


def test_credentials_from_env_reports_missing_variables(credential_env, monkeypatch):
    monkeypatch.delenv("CLIENT_SECRET")
    monkeypatch.setenv("TENANT_ID", "")

    with pytest.raises(CredentialsError) as exc_info:
        AzureCredentials.from_env()

    assert exc_info.value.missing == ["TENANT_ID", "CLIENT_SECRET"]
    assert "CLIENT_SECRET" in str(exc_info.value)


def test_defaults_match_sample_resources():
    cfg = MonitoringConfig()

    assert cfg.environment == "dev"
    assert cfg.location == "eastus2"
    assert cfg.plan_location == "eastus2"
    assert cfg.app_service_plan.sku_name == "P1"
    assert cfg.action_group.location == "northcentralus"
    assert cfg.metric_alert.metric_name == "CPUPercentage"
    assert cfg.metric_alert.threshold == 80


def test_get_default_config_overrides():
    prod = get_default_config("prod")
    dev = get_default_config("dev")

    assert prod["structured_logging"] is True
    assert dev["log_level"] == "DEBUG"


def test_from_env_respects_env_vars(monkeypatch):
    monkeypatch.setenv("ENVIRONMENT", "staging")
    monkeypatch.setenv("AZURE_LOCATION", "westus2")
    monkeypatch.setenv("LOG_LEVEL", "warning")

    cfg = MonitoringConfig.from_env()

    assert cfg.environment == "staging"
    assert cfg.location == "westus2"
    assert cfg.log_level == "WARNING"


def test_load_config_from_yaml(tmp_path: Path):
    p = tmp_path / "staging.yml"
    p.write_text(yaml.safe_dump({"location": "westeurope", "metric_alert": {"threshold": 90}}))

    cfg = load_config("staging", config_path=p)

    assert isinstance(cfg, MonitoringConfig)
    assert cfg.environment == "staging"
    assert cfg.location == "westeurope"
    assert cfg.metric_alert.threshold == 90


def test_load_config_wraps_validation_errors(tmp_path: Path):
    p = tmp_path / "dev.yml"
    p.write_text(yaml.safe_dump({"metric_alert": {"severity": 9}}))

    with pytest.raises(ConfigurationError):
        load_config("dev", config_path=p)


def test_load_config_missing_file(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        load_config("dev", config_path=tmp_path / "missing.yml")


def test_shipped_config_files_are_valid():
    assert load_config("dev").log_level == "DEBUG"
    assert load_config("prod").structured_logging is True


def test_from_yaml_infers_environment_from_filename(tmp_path: Path):
    p = tmp_path / "prod.yml"
    p.write_text(yaml.safe_dump({"resource_group_prefix": "rgPerf"}))

    cfg = MonitoringConfig.from_yaml(p)

    assert cfg.environment == "prod"
    assert cfg.resource_group_prefix == "rgPerf"


def test_invalid_environment_raises():
    with pytest.raises(ValidationError):
        MonitoringConfig(environment="not-a-real-env")


@pytest.mark.parametrize(
    "alert",
    [
        {"severity": 5},
        {"operator": "Above"},
        {"time_aggregation": "Median"},
        {"evaluation_frequency_minutes": 15, "window_size_minutes": 5},
    ],
)
def test_invalid_metric_alert_settings(alert):
    with pytest.raises(ValidationError):
        MonitoringConfig(metric_alert=alert)


def test_invalid_receivers():
    with pytest.raises(ValidationError):
        MonitoringConfig(action_group={"webhook_receivers": [{"name": "hook", "service_uri": "ftp://x"}]})
    with pytest.raises(ValidationError):
        MonitoringConfig(action_group={"short_name": "WayTooLongShortName"})


def test_from_env_keeps_prod_structured_logging(monkeypatch):
    monkeypatch.setenv("ENVIRONMENT", "prod")
    monkeypatch.delenv("STRUCTURED_LOGGING", raising=False)

    assert MonitoringConfig.from_env().structured_logging is True


def test_from_env_structured_logging_override(monkeypatch):
    monkeypatch.setenv("STRUCTURED_LOGGING", "false")

    assert MonitoringConfig.from_env("prod").structured_logging is False


@pytest.mark.parametrize(
    "content, message",
    [
        ("location: [unclosed\n", "Invalid YAML"),
        ("- eastus2\n- westus2\n", "must be a mapping"),
    ],
)
def test_malformed_yaml_raises_configuration_error(tmp_path: Path, content, message):
    p = tmp_path / "dev.yml"
    p.write_text(content)

    with pytest.raises(ConfigurationError, match=message):
        MonitoringConfig.from_yaml(p)
    with pytest.raises(ConfigurationError, match=message):
        load_config("dev", config_path=p)


def test_empty_yaml_uses_defaults(tmp_path: Path):
    p = tmp_path / "staging.yml"
    p.write_text("")

    cfg = load_config("staging", config_path=p)

    assert cfg.environment == "staging"
    assert cfg.location == "eastus2"
