"""Authenticated async Azure management clients."""

from __future__ import annotations

import logging
from contextlib import AsyncExitStack
from dataclasses import dataclass
from typing import Any

from azure.identity.aio import ClientSecretCredential
from azure.mgmt.monitor.aio import MonitorManagementClient
from azure.mgmt.resource.resources.aio import ResourceManagementClient
from azure.mgmt.web.aio import WebSiteManagementClient

from .config import AzureCredentials

logger = logging.getLogger(__name__)


@dataclass
class AzureClients:
    """Credential plus the management clients used by the provisioner."""

    credential: ClientSecretCredential
    resources: ResourceManagementClient
    web: WebSiteManagementClient
    monitor: MonitorManagementClient
    subscription_id: str

    async def close(self) -> None:
        """Close every client, then the credential, even if one of them fails."""
        async with AsyncExitStack() as stack:
            stack.push_async_callback(self.credential.close)
            for client in (self.resources, self.web, self.monitor):
                stack.push_async_callback(client.close)

    async def __aenter__(self) -> "AzureClients":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()


def create_clients(credentials: AzureCredentials) -> AzureClients:
    """Build a client-secret credential and the clients for its subscription."""
    credential = ClientSecretCredential(
        tenant_id=credentials.tenant_id,
        client_id=credentials.client_id,
        client_secret=credentials.client_secret,
    )
    subscription_id = credentials.subscription_id
    logger.debug(f"Creating management clients for subscription {subscription_id}")

    return AzureClients(
        credential=credential,
        resources=ResourceManagementClient(credential, subscription_id),
        web=WebSiteManagementClient(credential, subscription_id),
        monitor=MonitorManagementClient(credential, subscription_id),
        subscription_id=subscription_id,
    )
