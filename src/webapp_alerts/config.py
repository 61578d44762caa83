"""Configuration management for WebApp Performance Alerts.

Provides credential loading and the resource settings used to build the
App Service plan, action group and metric alert request bodies.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from .exceptions import ConfigurationError, CredentialsError

# Environment variable names read for the service principal
CREDENTIAL_ENV_VARS = {
    "tenant_id": "TENANT_ID",
    "client_id": "CLIENT_ID",
    "client_secret": "CLIENT_SECRET",
    "subscription_id": "SUBSCRIPTION_ID",
}

ALLOWED_ENVIRONMENTS = ["dev", "staging", "prod"]
ALLOWED_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
ALLOWED_OPERATORS = ["Equals", "GreaterThan", "GreaterThanOrEqual", "LessThan", "LessThanOrEqual"]
ALLOWED_AGGREGATIONS = ["Average", "Count", "Minimum", "Maximum", "Total"]


class AzureCredentials(BaseModel):
    """Service principal credentials and target subscription."""

    tenant_id: str = Field(..., min_length=1, description="Azure AD tenant ID")
    client_id: str = Field(..., min_length=1, description="Service principal application ID")
    client_secret: str = Field(..., min_length=1, description="Service principal secret")
    subscription_id: str = Field(..., min_length=1, description="Target subscription ID")

    @classmethod
    def from_env(cls) -> "AzureCredentials":
        """Load credentials from TENANT_ID, CLIENT_ID, CLIENT_SECRET and SUBSCRIPTION_ID."""
        values = {field: os.environ.get(var) for field, var in CREDENTIAL_ENV_VARS.items()}
        missing = [CREDENTIAL_ENV_VARS[field] for field, value in values.items() if not value]
        if missing:
            raise CredentialsError(
                f"Missing Azure credential environment variables: {', '.join(missing)}",
                missing=missing,
            )
        return cls(**values)


class AppServicePlanConfig(BaseModel):
    """Configuration for the App Service plan being monitored."""

    name_prefix: str = Field("HighlyAvailableWebApps", description="Prefix for the random plan name")
    location: str | None = Field(None, description="Plan location, defaults to the main location")
    sku_name: str = Field("P1", description="Pricing tier SKU name")
    sku_tier: str = Field("Premium", description="Pricing tier")
    capacity: int = Field(1, ge=1, description="Number of workers")
    reserved: bool = Field(False, description="True for Linux plans")
    kind: str = Field("app", description="Plan kind")


class NotificationReceiverConfig(BaseModel):
    """An email or app-push receiver."""

    name: str
    email_address: str


class PhoneReceiverConfig(BaseModel):
    """An SMS or voice receiver."""

    name: str
    country_code: str
    phone_number: str


class WebhookReceiverConfig(BaseModel):
    """A webhook receiver."""

    name: str
    service_uri: str

    @field_validator("service_uri")
    @classmethod
    def validate_service_uri(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            raise ValueError("Webhook service URI must be an http(s) URL")
        return v


class ActionGroupConfig(BaseModel):
    """Configuration for the notification action group."""

    name_prefix: str = Field("criticalPerformanceActionGroup", description="Prefix for the random group name")
    location: str = Field("northcentralus", description="Action group location")
    short_name: str = Field("AG", max_length=12, description="Short name used in SMS and email")
    enabled: bool = Field(True, description="Whether notifications are sent")

    app_push_receivers: list[NotificationReceiverConfig] = Field(
        default_factory=lambda: [
            NotificationReceiverConfig(name="MAAPRtierOne", email_address="ops_on_duty@performancemonitoring.com")
        ]
    )
    email_receivers: list[NotificationReceiverConfig] = Field(
        default_factory=lambda: [
            NotificationReceiverConfig(name="MERtierOne", email_address="ops_on_duty@performancemonitoring.com"),
            NotificationReceiverConfig(name="MERtierTwo", email_address="ceo@performancemonitoring.com"),
        ]
    )
    sms_receivers: list[PhoneReceiverConfig] = Field(
        default_factory=lambda: [
            PhoneReceiverConfig(name="MSRtierOne", country_code="1", phone_number="4255655665")
        ]
    )
    voice_receivers: list[PhoneReceiverConfig] = Field(
        default_factory=lambda: [
            PhoneReceiverConfig(name="MVRtierOne", country_code="1", phone_number="2062066050")
        ]
    )
    webhook_receivers: list[WebhookReceiverConfig] = Field(
        default_factory=lambda: [
            WebhookReceiverConfig(
                name="MWRtierOne", service_uri="https://www.weeneedmorepower.performancemonitoring.com"
            )
        ]
    )


class MetricDimensionConfig(BaseModel):
    """Dimension filter applied to the alert criterion."""

    name: str
    operator: str = Field("Include", description="Include or Exclude")
    values: list[str] = Field(default_factory=lambda: ["*"])

    @field_validator("operator")
    @classmethod
    def validate_operator(cls, v: str) -> str:
        if v not in ("Include", "Exclude"):
            raise ValueError("Dimension operator must be Include or Exclude")
        return v


class MetricAlertConfig(BaseModel):
    """Configuration for the metric alert rule."""

    name_prefix: str = Field("metricAlert", description="Prefix for the random alert name")
    location: str = Field("global", description="Metric alerts are global resources")
    description: str = Field(
        "This alert rule is for U5 - Single resource-multiple criteria - with dimensions - with star"
    )
    severity: int = Field(3, description="Alert severity, 0 (critical) to 4 (verbose)")
    enabled: bool = Field(True)
    auto_mitigate: bool = Field(True, description="Resolve the alert when the condition clears")
    evaluation_frequency_minutes: int = Field(1, ge=1, description="How often the rule is evaluated")
    window_size_minutes: int = Field(5, ge=1, description="Lookback window")

    # Criterion
    criterion_name: str = Field("Metric1")
    metric_name: str = Field("CPUPercentage")
    time_aggregation: str = Field("Total")
    operator: str = Field("GreaterThan")
    threshold: float = Field(80.0)
    dimensions: list[MetricDimensionConfig] = Field(
        default_factory=lambda: [MetricDimensionConfig(name="Instance", operator="Include", values=["*"])]
    )

    @field_validator("severity")
    @classmethod
    def validate_severity(cls, v: int) -> int:
        if not 0 <= v <= 4:
            raise ValueError("Severity must be between 0 and 4")
        return v

    @field_validator("operator")
    @classmethod
    def validate_comparison_operator(cls, v: str) -> str:
        if v not in ALLOWED_OPERATORS:
            raise ValueError(f"Operator must be one of: {ALLOWED_OPERATORS}")
        return v

    @field_validator("time_aggregation")
    @classmethod
    def validate_time_aggregation(cls, v: str) -> str:
        if v not in ALLOWED_AGGREGATIONS:
            raise ValueError(f"Time aggregation must be one of: {ALLOWED_AGGREGATIONS}")
        return v

    @model_validator(mode="after")
    def validate_window(self) -> "MetricAlertConfig":
        if self.window_size_minutes < self.evaluation_frequency_minutes:
            raise ValueError("Window size must be greater than or equal to the evaluation frequency")
        return self


class MonitoringConfig(BaseModel):
    """Main configuration class for WebApp Performance Alerts."""

    # Environment
    environment: str = Field("dev", description="Deployment environment")
    location: str = Field("eastus2", description="Location for the resource group and plan")
    resource_group_prefix: str = Field("rgMonitor", description="Prefix for the random group name")

    # Sub-configurations
    app_service_plan: AppServicePlanConfig = Field(default_factory=AppServicePlanConfig)
    action_group: ActionGroupConfig = Field(default_factory=ActionGroupConfig)
    metric_alert: MetricAlertConfig = Field(default_factory=MetricAlertConfig)

    # Logging
    log_level: str = Field("INFO", description="Logging level")
    structured_logging: bool = Field(False, description="Emit JSON log lines instead of console output")

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate environment values."""
        if v not in ALLOWED_ENVIRONMENTS:
            raise ValueError(f"Environment must be one of: {ALLOWED_ENVIRONMENTS}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level values."""
        if v.upper() not in ALLOWED_LOG_LEVELS:
            raise ValueError(f"Log level must be one of: {ALLOWED_LOG_LEVELS}")
        return v.upper()

    @property
    def plan_location(self) -> str:
        return self.app_service_plan.location or self.location

    @classmethod
    def from_env(cls, environment: str | None = None) -> "MonitoringConfig":
        """Load configuration from environment variables."""
        environment = environment or os.environ.get("ENVIRONMENT", "dev")

        config_data = get_default_config(environment)
        config_data["location"] = os.environ.get("AZURE_LOCATION", config_data["location"])
        config_data["log_level"] = os.environ.get("LOG_LEVEL", config_data.get("log_level", "INFO"))
        if "STRUCTURED_LOGGING" in os.environ:
            config_data["structured_logging"] = os.environ["STRUCTURED_LOGGING"].lower() == "true"

        return cls(**config_data)

    @classmethod
    def from_yaml(cls, path: str | Path) -> "MonitoringConfig":
        """Load configuration from a YAML file.

        Args:
            path: Path to the YAML configuration file

        Returns:
            MonitoringConfig instance loaded from the file

        Raises:
            FileNotFoundError: If config file is not found
            ConfigurationError: If the file is not a valid YAML mapping
        """
        config_path = Path(path)
        data = _read_yaml(config_path)

        # Try to infer environment from filename if not provided
        if "environment" not in data:
            stem = config_path.stem.lower()
            if stem in ALLOWED_ENVIRONMENTS:
                data["environment"] = stem
            else:
                data["environment"] = os.environ.get("ENVIRONMENT", "dev")

        return _validate(data, config_path)


def default_config_path(environment: str) -> Path:
    """Return the bundled config/<environment>.yml path."""
    return Path(__file__).parent.parent.parent / "config" / f"{environment}.yml"


def _read_yaml(config_path: Path) -> dict[str, Any]:
    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    try:
        with open(config_path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {config_path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Configuration in {config_path} must be a mapping, got {type(data).__name__}"
        )
    return data


def _validate(data: dict[str, Any], config_path: Path) -> MonitoringConfig:
    try:
        return MonitoringConfig(**data)
    except ValidationError as e:
        raise ConfigurationError(
            f"Invalid configuration in {config_path}: {e.error_count()} error(s)",
            details={"errors": e.errors(include_url=False)},
        ) from e


def load_config(environment: str, config_path: Path | None = None) -> MonitoringConfig:
    """Load configuration for the specified environment.

    Args:
        environment: Target environment (dev/staging/prod)
        config_path: Optional custom config file path

    Returns:
        Loaded configuration object

    Raises:
        FileNotFoundError: If config file is not found
        ConfigurationError: If configuration is invalid
    """
    if config_path is None:
        config_path = default_config_path(environment)

    config_data = _read_yaml(config_path)
    config_data["environment"] = environment

    return _validate(config_data, config_path)


def get_default_config(environment: str) -> dict[str, Any]:
    """Get default configuration for an environment.

    Args:
        environment: Target environment

    Returns:
        Default configuration dictionary
    """
    base_config: dict[str, Any] = {
        "environment": environment,
        "location": "eastus2",
        "resource_group_prefix": "rgMonitor",
    }

    # Environment-specific overrides
    if environment == "prod":
        base_config["structured_logging"] = True
    elif environment == "dev":
        base_config["log_level"] = "DEBUG"

    return base_config
