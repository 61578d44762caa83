"""Pytest configuration and shared fixtures for WebApp Performance Alerts tests."""

from __future__ import annotations

import logging
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
import structlog

from webapp_alerts.clients import AzureClients
from webapp_alerts.config import MonitoringConfig

SUBSCRIPTION_ID = "00000000-0000-0000-0000-000000000000"
RESOURCE_GROUP_NAME = "rgMonitor0001"
RESOURCE_GROUP_ID = f"/subscriptions/{SUBSCRIPTION_ID}/resourceGroups/{RESOURCE_GROUP_NAME}"
PLAN_ID = f"{RESOURCE_GROUP_ID}/providers/Microsoft.Web/serverfarms/HighlyAvailableWebApps0001"
ACTION_GROUP_ID = f"{RESOURCE_GROUP_ID}/providers/microsoft.insights/actionGroups/criticalPerformanceActionGroup0001"
METRIC_ALERT_ID = f"{RESOURCE_GROUP_ID}/providers/Microsoft.Insights/metricAlerts/metricAlert0001"

CREDENTIAL_ENV = {
    "TENANT_ID": "tenant",
    "CLIENT_ID": "client",
    "CLIENT_SECRET": "secret",
    "SUBSCRIPTION_ID": SUBSCRIPTION_ID,
}


def _poller(result):
    poller = MagicMock()
    poller.result = AsyncMock(return_value=result)
    return poller


@pytest.fixture
def sample_config() -> MonitoringConfig:
    """Default configuration for testing."""
    return MonitoringConfig(environment="dev")


@pytest.fixture
def fake_clients() -> AzureClients:
    """AzureClients whose management operations all succeed."""
    resources = MagicMock()
    resources.close = AsyncMock()
    resources.resource_groups.create_or_update = AsyncMock(
        return_value=SimpleNamespace(id=RESOURCE_GROUP_ID, name=RESOURCE_GROUP_NAME)
    )
    resources.resource_groups.begin_delete = AsyncMock(return_value=_poller(None))

    web = MagicMock()
    web.close = AsyncMock()
    web.app_service_plans.begin_create_or_update = AsyncMock(
        return_value=_poller(SimpleNamespace(id=PLAN_ID, name="HighlyAvailableWebApps0001"))
    )

    monitor = MagicMock()
    monitor.close = AsyncMock()
    monitor.action_groups.create_or_update = AsyncMock(
        return_value=SimpleNamespace(id=ACTION_GROUP_ID, name="criticalPerformanceActionGroup0001")
    )
    monitor.metric_alerts.create_or_update = AsyncMock(
        return_value=SimpleNamespace(id=METRIC_ALERT_ID, name="metricAlert0001")
    )

    credential = MagicMock()
    credential.close = AsyncMock()

    return AzureClients(
        credential=credential,
        resources=resources,
        web=web,
        monitor=monitor,
        subscription_id=SUBSCRIPTION_ID,
    )


@pytest.fixture
def credential_env(monkeypatch):
    """Set the service principal environment variables."""
    for var, value in CREDENTIAL_ENV.items():
        monkeypatch.setenv(var, value)
    return CREDENTIAL_ENV


@pytest.fixture
def no_credential_env(monkeypatch):
    """Remove the service principal environment variables."""
    for var in CREDENTIAL_ENV:
        monkeypatch.delenv(var, raising=False)


@pytest.fixture(autouse=True)
def restore_root_logger():
    """Undo handler and level changes made by configure_logging."""
    root = logging.getLogger()
    level = root.level
    yield
    for handler in list(root.handlers):
        if isinstance(handler.formatter, structlog.stdlib.ProcessorFormatter):
            root.removeHandler(handler)
    root.setLevel(level)
    structlog.reset_defaults()
