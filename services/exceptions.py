"""
Custom Exception Hierarchy for the Thrift Fashion Proxy

This module provides a structured exception hierarchy so handlers can raise
and the error middleware can map each kind to a status code.

Usage:
    from services.exceptions import (
        ProxyException,
        MissingParameterError,
        UpstreamSearchError,
    )

    if not q:
        raise MissingParameterError("q")
"""

from typing import Optional, Dict, Any


class ProxyException(Exception):
    """
    Base exception for all proxy errors.

    All custom exceptions should inherit from this class to enable
    unified error handling throughout the application.
    """

    def __init__(
        self,
        message: str,
        code: str = "PROXY_ERROR",
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}
        self.cause = cause

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {"error": self.message}

    def __str__(self) -> str:
        if self.cause:
            return f"{self.message} (caused by: {self.cause})"
        return self.message


# ============================================================
# Validation Errors
# ============================================================

class ValidationError(ProxyException):
    """Base class for client-correctable request errors."""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        code: str = "VALIDATION_ERROR",
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
    ):
        details = details or {}
        if field:
            details["field"] = field
        super().__init__(message, code, details, cause)


class MissingParameterError(ValidationError):
    """A required query parameter was not supplied."""

    def __init__(self, parameter: str, message: Optional[str] = None):
        super().__init__(
            message=message or f"Parameter '{parameter}' is required",
            field=parameter,
            code="MISSING_PARAMETER",
        )


# ============================================================
# External Service Errors
# ============================================================

class ExternalServiceError(ProxyException):
    """Base class for upstream (eBay) errors."""

    def __init__(
        self,
        service: str,
        message: str,
        code: str = "EXTERNAL_SERVICE_ERROR",
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
    ):
        details = details or {}
        details["service"] = service
        super().__init__(message, code, details, cause)


class UpstreamAuthError(ExternalServiceError):
    """eBay token refresh failed or returned no access token."""

    def __init__(
        self,
        message: str = "eBay token refresh failed",
        status_code: Optional[int] = None,
        cause: Optional[Exception] = None,
    ):
        details = {}
        if status_code:
            details["status_code"] = status_code
        super().__init__(
            service="ebay_oauth",
            message=message,
            code="UPSTREAM_AUTH_ERROR",
            details=details,
            cause=cause,
        )


class UpstreamSearchError(ExternalServiceError):
    """eBay search or item call returned a non-success status."""

    def __init__(
        self,
        message: str = "eBay search request failed",
        status_code: Optional[int] = None,
        cause: Optional[Exception] = None,
    ):
        details = {}
        if status_code:
            details["status_code"] = status_code
        super().__init__(
            service="ebay",
            message=message,
            code="UPSTREAM_SEARCH_ERROR",
            details=details,
            cause=cause,
        )


class UpstreamUnavailableError(ExternalServiceError):
    """Network failure or unreadable payload while talking to eBay."""

    def __init__(
        self,
        message: str = "eBay API unavailable",
        cause: Optional[Exception] = None,
    ):
        super().__init__(
            service="ebay",
            message=message,
            code="UPSTREAM_UNAVAILABLE",
            cause=cause,
        )


# ============================================================
# Configuration Errors
# ============================================================

class ConfigurationError(ProxyException):
    """Configuration is invalid or missing."""

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
    ):
        details = {}
        if config_key:
            details["config_key"] = config_key
        super().__init__(
            message=message,
            code="CONFIGURATION_ERROR",
            details=details,
        )


class MissingCredentialsError(ConfigurationError):
    """No eBay credential is configured for an upstream call."""

    def __init__(self, config_key: str):
        super().__init__(
            message=f"Missing eBay credential: {config_key}",
            config_key=config_key,
        )
        self.code = "MISSING_CREDENTIALS"
