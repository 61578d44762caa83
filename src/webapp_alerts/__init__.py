"""WebApp Performance Alerts - Azure Monitor metric alert sample.

This package provisions an App Service plan, an action group and a metric
alert on the plan's CPU usage, then deletes everything it created.
"""

__version__ = "0.1.0"

from .config import AzureCredentials, MonitoringConfig
from .exceptions import ProvisioningError, WebAppAlertsError
from .provisioner import MonitoringProvisioner, ProvisionedResources, run_from_env

__all__ = [
    "AzureCredentials",
    "MonitoringConfig",
    "MonitoringProvisioner",
    "ProvisionedResources",
    "ProvisioningError",
    "WebAppAlertsError",
    "run_from_env",
]
