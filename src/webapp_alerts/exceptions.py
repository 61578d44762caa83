"""Custom exceptions for WebApp Performance Alerts.

Defines exception hierarchy for configuration, payload and provisioning errors.
"""

from __future__ import annotations

from typing import Any


class WebAppAlertsError(Exception):
    """Base exception for all webapp-alerts errors."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        error_code: str | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.error_code = error_code

    def __str__(self) -> str:
        if self.error_code:
            return f"[{self.error_code}] {self.message}"
        return self.message


class ConfigurationError(WebAppAlertsError):
    """Raised when configuration is invalid."""

    def __init__(self, message: str, config_key: str | None = None, **kwargs):
        super().__init__(message, **kwargs)
        self.config_key = config_key
        if config_key:
            self.details["config_key"] = config_key


class CredentialsError(ConfigurationError):
    """Raised when Azure service principal credentials are missing or invalid."""

    def __init__(self, message: str, missing: list[str] | None = None, **kwargs):
        super().__init__(message, **kwargs)
        self.missing = missing or []
        if self.missing:
            self.details["missing"] = self.missing


class PayloadError(WebAppAlertsError, ValueError):
    """Raised when a resource request body cannot be built."""

    def __init__(self, message: str, resource_type: str, **kwargs):
        super().__init__(message, **kwargs)
        self.resource_type = resource_type
        self.details["resource_type"] = resource_type


class ProvisioningError(WebAppAlertsError):
    """Raised when creating an Azure resource fails."""

    def __init__(self, message: str, resource_type: str, resource_name: str | None = None, **kwargs):
        super().__init__(message, **kwargs)
        self.resource_type = resource_type
        self.resource_name = resource_name
        self.details["resource_type"] = resource_type
        if resource_name:
            self.details["resource_name"] = resource_name


class NoResourcesCreatedError(WebAppAlertsError):
    """Raised when cleanup runs before the resource group was created."""

    def __init__(self, message: str = "No resource group was created", **kwargs):
        super().__init__(message, **kwargs)
