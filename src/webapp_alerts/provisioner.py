"""Provision the WebApp performance alert resources, then tear them down.

The run is a single chain of awaited control-plane calls:

- create a resource group
- create an App Service plan in it
- create an action group that notifies the on-call receivers
- create a metric alert on the plan's CPU usage that triggers the action group

Whatever happens, the resource group is deleted afterwards. Child resources
are removed by Azure together with the group.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Optional

from azure.core.exceptions import AzureError
from azure.mgmt.core.tools import parse_resource_id

from .clients import AzureClients, create_clients
from .config import AzureCredentials, MonitoringConfig
from .exceptions import NoResourcesCreatedError, ProvisioningError
from .naming import create_random_name
from .payloads import (
    build_action_group,
    build_app_service_plan,
    build_metric_alert,
    build_resource_group,
)

logger = logging.getLogger(__name__)


@dataclass
class ProvisionedResources:
    """IDs of the resources created so far."""

    resource_group_id: Optional[str] = None
    resource_group_name: Optional[str] = None
    app_service_plan_id: Optional[str] = None
    action_group_id: Optional[str] = None
    metric_alert_id: Optional[str] = None

    def require_resource_group_id(self) -> str:
        if self.resource_group_id is None:
            raise NoResourcesCreatedError()
        return self.resource_group_id


class MonitoringProvisioner:
    """Creates the monitoring resources in order and cleans them up."""

    def __init__(
        self,
        clients: AzureClients,
        config: MonitoringConfig,
        name_factory: Callable[[str], str] = create_random_name,
    ):
        self.clients = clients
        self.config = config
        self.name_factory = name_factory
        self.resources = ProvisionedResources()

    async def create_resource_group(self) -> Any:
        name = self.name_factory(self.config.resource_group_prefix)
        logger.info(f"creating a resource group with name : {name}...")
        try:
            resource_group = await self.clients.resources.resource_groups.create_or_update(
                name, build_resource_group(self.config)
            )
        except AzureError as e:
            raise ProvisioningError(
                f"Failed to create resource group {name}: {e}",
                resource_type="resource_group",
                resource_name=name,
            ) from e

        self.resources.resource_group_id = resource_group.id
        self.resources.resource_group_name = resource_group.name
        logger.info(f"Created a resource group with name: {resource_group.name}")
        return resource_group

    async def create_app_service_plan(self, resource_group_name: str) -> Any:
        name = self.name_factory(self.config.app_service_plan.name_prefix)
        logger.info("Creating app service plan")
        try:
            poller = await self.clients.web.app_service_plans.begin_create_or_update(
                resource_group_name, name, build_app_service_plan(self.config)
            )
            plan = await poller.result()
        except AzureError as e:
            raise ProvisioningError(
                f"Failed to create app service plan {name}: {e}",
                resource_type="app_service_plan",
                resource_name=name,
            ) from e

        self.resources.app_service_plan_id = plan.id
        logger.info(f"Created app service plan with name: {plan.name}")
        return plan

    async def create_action_group(self, resource_group_name: str) -> Any:
        name = self.name_factory(self.config.action_group.name_prefix)
        logger.info("Creating actionGroup...")
        try:
            action_group = await self.clients.monitor.action_groups.create_or_update(
                resource_group_name, name, build_action_group(self.config)
            )
        except AzureError as e:
            raise ProvisioningError(
                f"Failed to create action group {name}: {e}",
                resource_type="action_group",
                resource_name=name,
            ) from e

        self.resources.action_group_id = action_group.id
        logger.info(f"Created actionGroup with name: {action_group.name}")
        return action_group

    async def create_metric_alert(
        self, resource_group_name: str, app_service_plan_id: str, action_group_id: str
    ) -> Any:
        name = self.name_factory(self.config.metric_alert.name_prefix)
        logger.info("Creating MetricAlerts...")
        parameters = build_metric_alert(self.config, [app_service_plan_id], action_group_id)
        try:
            metric_alert = await self.clients.monitor.metric_alerts.create_or_update(
                resource_group_name, name, parameters
            )
        except AzureError as e:
            raise ProvisioningError(
                f"Failed to create metric alert {name}: {e}",
                resource_type="metric_alert",
                resource_name=name,
            ) from e

        self.resources.metric_alert_id = metric_alert.id
        logger.info(f"Created MetricAlerts with Name : {metric_alert.name}")
        return metric_alert

    async def provision(self) -> ProvisionedResources:
        """Create all resources; a failing step aborts the rest."""
        resource_group = await self.create_resource_group()
        plan = await self.create_app_service_plan(resource_group.name)
        action_group = await self.create_action_group(resource_group.name)
        await self.create_metric_alert(resource_group.name, plan.id, action_group.id)
        return self.resources

    async def cleanup(self) -> bool:
        """Delete the resource group if one was created.

        Returns:
            True if the group was deleted, False otherwise. Never raises.
        """
        try:
            resource_group_id = self.resources.require_resource_group_id()
            logger.info(f"Deleting Resource Group: {resource_group_id}")
            resource_group_name = parse_resource_id(resource_group_id)["resource_group"]
            poller = await self.clients.resources.resource_groups.begin_delete(resource_group_name)
            await poller.result()
            logger.info(f"Deleted Resource Group: {resource_group_id}")
            return True
        except NoResourcesCreatedError:
            logger.info("Did not create any resources in Azure. No clean up is necessary")
        except Exception as e:
            logger.error(f"Failed to delete resource group: {e}", exc_info=True)
        return False

    async def run(self) -> ProvisionedResources:
        try:
            await self.provision()
        finally:
            await self.cleanup()
        return self.resources


async def run_sample(credentials: AzureCredentials, config: MonitoringConfig) -> ProvisionedResources:
    async with create_clients(credentials) as clients:
        provisioner = MonitoringProvisioner(clients, config)
        return await provisioner.run()


def run_from_env(config: MonitoringConfig | None = None) -> ProvisionedResources | None:
    """Run the sample with credentials from the environment.

    Any error is logged and swallowed so the process ends normally.
    """
    try:
        config = config or MonitoringConfig()
        credentials = AzureCredentials.from_env()
        return asyncio.run(run_sample(credentials, config))
    except Exception as e:
        logger.error(f"Monitoring sample failed: {e}", exc_info=True)
        return None
