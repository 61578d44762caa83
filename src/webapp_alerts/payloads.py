"""Request bodies for the Azure resources created by the provisioner.

Each builder returns an Azure SDK model object. Builders do no I/O, so the
same objects can be rendered by ``plan`` without touching Azure.
"""

from __future__ import annotations

from datetime import timedelta
from typing import Any

from azure.mgmt.monitor.models import (
    ActionGroupResource,
    AzureAppPushReceiver,
    EmailReceiver,
    MetricAlertAction,
    MetricAlertResource,
    MetricAlertSingleResourceMultipleMetricCriteria,
    MetricCriteria,
    MetricDimension,
    SmsReceiver,
    VoiceReceiver,
    WebhookReceiver,
)
from azure.mgmt.resource.resources.models import ResourceGroup
from azure.mgmt.web.models import AppServicePlan, SkuDescription

from .config import MonitoringConfig
from .exceptions import PayloadError

PLACEHOLDER_PLAN_ID = "<app-service-plan-id>"
PLACEHOLDER_ACTION_GROUP_ID = "<action-group-id>"


def build_resource_group(config: MonitoringConfig) -> ResourceGroup:
    return ResourceGroup(location=config.location)


def build_app_service_plan(config: MonitoringConfig) -> AppServicePlan:
    plan = config.app_service_plan
    return AppServicePlan(
        location=config.plan_location,
        kind=plan.kind,
        reserved=plan.reserved,
        sku=SkuDescription(name=plan.sku_name, tier=plan.sku_tier, capacity=plan.capacity),
    )


def build_action_group(config: MonitoringConfig) -> ActionGroupResource:
    """Build the action group with every configured notification channel."""
    group = config.action_group
    return ActionGroupResource(
        location=group.location,
        group_short_name=group.short_name,
        enabled=group.enabled,
        azure_app_push_receivers=[
            AzureAppPushReceiver(name=r.name, email_address=r.email_address)
            for r in group.app_push_receivers
        ],
        email_receivers=[
            EmailReceiver(name=r.name, email_address=r.email_address) for r in group.email_receivers
        ],
        sms_receivers=[
            SmsReceiver(name=r.name, country_code=r.country_code, phone_number=r.phone_number)
            for r in group.sms_receivers
        ],
        voice_receivers=[
            VoiceReceiver(name=r.name, country_code=r.country_code, phone_number=r.phone_number)
            for r in group.voice_receivers
        ],
        webhook_receivers=[
            WebhookReceiver(name=r.name, service_uri=r.service_uri) for r in group.webhook_receivers
        ],
    )


def build_metric_alert(
    config: MonitoringConfig, scopes: list[str], action_group_id: str
) -> MetricAlertResource:
    """Build a single-resource metric alert watching ``scopes``.

    Args:
        config: Monitoring configuration
        scopes: Resource IDs the rule evaluates, normally just the plan ID
        action_group_id: ID of the action group notified when the rule fires

    Raises:
        PayloadError: If there is nothing to watch or nobody to notify
    """
    if not scopes or not all(scopes):
        raise PayloadError("Metric alert requires at least one scope", resource_type="metric_alert")
    if not action_group_id:
        raise PayloadError("Metric alert requires an action group ID", resource_type="metric_alert")

    alert = config.metric_alert
    criterion = MetricCriteria(
        name=alert.criterion_name,
        metric_name=alert.metric_name,
        time_aggregation=alert.time_aggregation,
        operator=alert.operator,
        threshold=alert.threshold,
        dimensions=[
            MetricDimension(name=d.name, operator=d.operator, values=list(d.values))
            for d in alert.dimensions
        ],
    )

    return MetricAlertResource(
        location=alert.location,
        description=alert.description,
        severity=alert.severity,
        enabled=alert.enabled,
        auto_mitigate=alert.auto_mitigate,
        scopes=list(scopes),
        evaluation_frequency=timedelta(minutes=alert.evaluation_frequency_minutes),
        window_size=timedelta(minutes=alert.window_size_minutes),
        criteria=MetricAlertSingleResourceMultipleMetricCriteria(all_of=[criterion]),
        actions=[MetricAlertAction(action_group_id=action_group_id)],
    )


def _to_body(model: Any) -> dict[str, Any]:
    # msrest models expose serialize(); newer generated models only as_dict(), both keyed by REST names
    if hasattr(model, "serialize"):
        return model.serialize()
    return model.as_dict()


def describe_payloads(config: MonitoringConfig) -> dict[str, dict[str, Any]]:
    """Return the serialized REST bodies of every resource, keyed by resource type.

    IDs that only exist after creation are replaced with placeholders.
    """
    return {
        "resource_group": _to_body(build_resource_group(config)),
        "app_service_plan": _to_body(build_app_service_plan(config)),
        "action_group": _to_body(build_action_group(config)),
        "metric_alert": _to_body(
            build_metric_alert(config, [PLACEHOLDER_PLAN_ID], PLACEHOLDER_ACTION_GROUP_ID)
        ),
    }
