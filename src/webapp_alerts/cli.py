"""Command-line interface for WebApp Performance Alerts.

Provides commands to run the provision-and-teardown sample and to preview
the request bodies it would send.
"""

from __future__ import annotations

import json
import logging
import os
import sys
from pathlib import Path

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from .config import MonitoringConfig, default_config_path, load_config
from .exceptions import WebAppAlertsError
from .logging_config import configure_logging
from .payloads import describe_payloads
from .provisioner import run_from_env

app = typer.Typer(
    name="webapp-alerts",
    help="WebApp Performance Alerts - Azure Monitor metric alert sample",
    rich_markup_mode="rich",
)
console = Console()
logger = logging.getLogger(__name__)

CONFIG_ERRORS = (FileNotFoundError, ValidationError, WebAppAlertsError)


def _load(env: str | None, config_path: Path | None, log_level: str | None = None) -> MonitoringConfig:
    """Load config/<env>.yml (or ``config_path``), falling back to environment variables."""
    environment = env or os.environ.get("ENVIRONMENT", "dev")
    if config_path is not None or default_config_path(environment).exists():
        config = load_config(environment, config_path)
    else:
        config = MonitoringConfig.from_env(environment)

    if log_level is not None:
        config = MonitoringConfig.model_validate({**config.model_dump(), "log_level": log_level})
    return config


@app.command()
def run(
    env: str | None = typer.Option(None, help="Environment (dev/staging/prod), defaults to $ENVIRONMENT"),
    config_path: Path | None = typer.Option(None, help="Custom config file path"),
    log_level: str | None = typer.Option(None, help="Override the configured log level"),
) -> None:
    """Create the monitoring resources, then delete the resource group."""
    try:
        config = _load(env, config_path, log_level)
    except CONFIG_ERRORS as e:
        configure_logging("INFO")
        logger.error(f"Failed to load configuration: {e}")
        return

    configure_logging(config.log_level, config.structured_logging)
    console.print(f"[bold blue]🚀 Running monitoring sample ({config.environment})...[/bold blue]")

    resources = run_from_env(config)
    if resources is not None:
        _display_resources(resources)
        console.print("[bold green]✅ Sample completed and resources cleaned up[/bold green]")


@app.command()
def plan(
    env: str | None = typer.Option(None, help="Environment (dev/staging/prod), defaults to $ENVIRONMENT"),
    config_path: Path | None = typer.Option(None, help="Custom config file path"),
    out_dir: Path | None = typer.Option(None, help="Directory to write JSON request bodies to"),
) -> None:
    """Show the resources the sample would create without calling Azure."""
    try:
        config = _load(env, config_path)
        payloads = describe_payloads(config)
    except CONFIG_ERRORS as e:
        console.print(f"[bold red]❌ Plan failed: {e}[/bold red]")
        sys.exit(1)

    _display_plan(config)

    if out_dir:
        for path in save_payloads(out_dir, payloads):
            console.print(f"📄 Request body saved: {path}")


def save_payloads(out_dir: Path, payloads: dict[str, dict]) -> list[Path]:
    out_dir.mkdir(parents=True, exist_ok=True)
    paths = []
    for resource_type, body in payloads.items():
        path = out_dir / f"{resource_type}.json"
        with open(path, "w", encoding="utf-8") as fh:
            json.dump(body, fh, indent=2)
        paths.append(path)
    return paths


def _display_plan(config: MonitoringConfig) -> None:
    """Display planned resources table."""
    table = Table(title="Planned Azure Resources")
    table.add_column("Resource", style="cyan")
    table.add_column("Name Prefix", style="green")
    table.add_column("Location", style="yellow")
    table.add_column("Details", style="blue")

    plan_cfg = config.app_service_plan
    group_cfg = config.action_group
    alert_cfg = config.metric_alert

    table.add_row("Resource Group", config.resource_group_prefix, config.location, "")
    table.add_row(
        "App Service Plan",
        plan_cfg.name_prefix,
        config.plan_location,
        f"{plan_cfg.sku_tier} {plan_cfg.sku_name} x{plan_cfg.capacity}",
    )
    receivers = (
        len(group_cfg.app_push_receivers)
        + len(group_cfg.email_receivers)
        + len(group_cfg.sms_receivers)
        + len(group_cfg.voice_receivers)
        + len(group_cfg.webhook_receivers)
    )
    table.add_row("Action Group", group_cfg.name_prefix, group_cfg.location, f"{receivers} receivers")
    table.add_row(
        "Metric Alert",
        alert_cfg.name_prefix,
        alert_cfg.location,
        f"{alert_cfg.time_aggregation} {alert_cfg.metric_name} {alert_cfg.operator} {alert_cfg.threshold:g} "
        f"over {alert_cfg.window_size_minutes}m (sev {alert_cfg.severity})",
    )

    console.print(table)


def _display_resources(resources) -> None:
    """Display created resource IDs."""
    table = Table(title="Created Resources")
    table.add_column("Resource", style="cyan")
    table.add_column("ID", style="green")

    table.add_row("Resource Group", resources.resource_group_id or "-")
    table.add_row("App Service Plan", resources.app_service_plan_id or "-")
    table.add_row("Action Group", resources.action_group_id or "-")
    table.add_row("Metric Alert", resources.metric_alert_id or "-")

    console.print(table)


def main() -> None:
    """Main CLI entry point."""
    app()


if __name__ == "__main__":
    main()
