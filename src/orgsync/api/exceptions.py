#!/usr/bin/env python3
"""Exception Hierarchy for the group membership sync.

This module provides a structured exception hierarchy for handling errors
across the directory client, credential lookup, and sync orchestration.

Design Principles:
    - All exceptions inherit from OrgSyncError base class
    - Exceptions preserve context (original error, timestamps, details)
    - Exceptions are categorized by recoverability
    - Fatal vs. local recovery is decided by the caller, not the raiser

Exception Hierarchy:
    OrgSyncError (base)
    ├── ConfigurationError (fatal - fix config)
    ├── AuthenticationError
    │   └── CredentialError (fatal - secret missing)
    ├── TransportError (recovered per page / per chunk)
    │   ├── APIError
    │   │   ├── InvalidCredentialsError
    │   │   ├── RateLimitError
    │   │   ├── NotFoundError
    │   │   ├── ValidationError
    │   │   └── ServerError
    │   └── NetworkError
    │       ├── ConnectionError
    │       └── TimeoutError
    └── SyncError
        └── EmptyMembershipError
"""
from datetime import datetime, timezone
from typing import Any, Optional

# ============================================
# Base Exception
# ============================================

class OrgSyncError(Exception):
    """Base exception for all sync-related errors.

    Attributes:
        message: Human-readable error description
        code: Machine-readable error code (e.g., "CONFIGURATION_ERROR")
        details: Additional context as a dictionary
        timestamp: When the error occurred
        cause: The original exception that caused this error
        recoverable: Whether the run can continue past this error
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
        cause: Optional[Exception] = None,
        recoverable: bool = False,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__.upper()
        self.details = details or {}
        self.timestamp = datetime.now(timezone.utc)
        self.cause = cause
        self.recoverable = recoverable

        if cause:
            self.__cause__ = cause

    def __str__(self) -> str:
        parts = [self.message]
        if self.code:
            parts.insert(0, f"[{self.code}]")
        if self.details:
            detail_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            parts.append(f"({detail_str})")
        return " ".join(parts)

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"code={self.code!r}, "
            f"details={self.details!r}, "
            f"recoverable={self.recoverable})"
        )


# ============================================
# Configuration Errors (Fatal)
# ============================================

class ConfigurationError(OrgSyncError):
    """Raised when configuration is missing, empty or unparsable."""

    def __init__(
        self,
        message: str,
        missing_keys: Optional[list[str]] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if missing_keys:
            details["missing_keys"] = missing_keys
        super().__init__(
            message,
            code="CONFIGURATION_ERROR",
            details=details,
            recoverable=False,
            **kwargs,
        )


# ============================================
# Authentication Errors
# ============================================

class AuthenticationError(OrgSyncError):
    """Base class for authentication-related errors."""

    def __init__(self, message: str, **kwargs):
        kwargs.setdefault("recoverable", False)
        super().__init__(message, **kwargs)


class CredentialError(AuthenticationError):
    """Raised when the secret store has no credential for a principal."""

    def __init__(
        self,
        message: str = "No credential found",
        principal: Optional[str] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if principal:
            details["principal"] = principal
        super().__init__(
            message,
            code="CREDENTIAL_ERROR",
            details=details,
            **kwargs,
        )
        self.principal = principal


# ============================================
# Transport Errors (Recovered Locally)
# ============================================

class TransportError(OrgSyncError):
    """Base class for a failed fetch or write call.

    A transport error is terminal for the page or chunk that raised it,
    never for the whole run.
    """

    def __init__(self, message: str, **kwargs):
        kwargs.setdefault("recoverable", True)
        super().__init__(message, **kwargs)


class APIError(TransportError):
    """Base class for API response errors.

    Attributes:
        status_code: HTTP status code
        endpoint: API endpoint that was called
        response_body: Raw response body (may be truncated)
    """

    def __init__(
        self,
        message: str,
        status_code: int,
        endpoint: Optional[str] = None,
        response_body: Optional[str] = None,
        method: str = "GET",
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        details["status_code"] = status_code
        if endpoint:
            details["endpoint"] = endpoint
        if method:
            details["method"] = method
        if response_body:
            details["response_body"] = response_body[:500]

        kwargs.setdefault("code", f"API_ERROR_{status_code}")

        super().__init__(
            message,
            details=details,
            **kwargs,
        )
        self.status_code = status_code
        self.endpoint = endpoint
        self.response_body = response_body
        self.method = method


class InvalidCredentialsError(APIError):
    """Raised when the directory rejects the credential (HTTP 401)."""

    def __init__(
        self,
        message: str = "Invalid username or secret",
        **kwargs,
    ):
        kwargs.setdefault("status_code", 401)
        super().__init__(message, code="INVALID_CREDENTIALS", **kwargs)


class RateLimitError(APIError):
    """Raised when API rate limit is exceeded (HTTP 429).

    Attributes:
        retry_after: Seconds the server asked us to wait (Retry-After header)
    """

    def __init__(
        self,
        message: str = "Rate limit exceeded",
        retry_after: Optional[int] = None,
        **kwargs,
    ):
        kwargs.setdefault("status_code", 429)
        details = kwargs.pop("details", {})
        if retry_after:
            details["retry_after_seconds"] = retry_after
        super().__init__(
            message,
            code="RATE_LIMIT_EXCEEDED",
            details=details,
            **kwargs,
        )
        self.retry_after = retry_after


class NotFoundError(APIError):
    """Raised when a group or organization is not found (HTTP 404)."""

    def __init__(
        self,
        resource_type: str,
        resource_id: Optional[str] = None,
        **kwargs,
    ):
        message = f"{resource_type} not found"
        if resource_id:
            message = f"{resource_type} '{resource_id}' not found"

        kwargs.setdefault("status_code", 404)
        details = kwargs.pop("details", {})
        details["resource_type"] = resource_type
        if resource_id:
            details["resource_id"] = resource_id

        super().__init__(
            message,
            code="NOT_FOUND",
            details=details,
            **kwargs,
        )


class ValidationError(APIError):
    """Raised when the API rejects a request payload (HTTP 400/422)."""

    def __init__(self, message: str, **kwargs):
        kwargs.setdefault("status_code", 400)
        super().__init__(message, code="VALIDATION_ERROR", **kwargs)


class ServerError(APIError):
    """Raised when server returns 5xx error."""

    def __init__(self, message: str = "Server error", **kwargs):
        kwargs.setdefault("status_code", 500)
        super().__init__(message, code="SERVER_ERROR", **kwargs)


class NetworkError(TransportError):
    """Base class for network-related errors."""


class ConnectionError(NetworkError):
    """Raised when connection to server fails."""

    def __init__(
        self,
        message: str = "Failed to connect to server",
        host: Optional[str] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if host:
            details["host"] = host
        super().__init__(
            message,
            code="CONNECTION_ERROR",
            details=details,
            **kwargs,
        )


class TimeoutError(NetworkError):
    """Raised when request times out."""

    def __init__(
        self,
        message: str = "Request timed out",
        timeout_seconds: Optional[float] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if timeout_seconds:
            details["timeout_seconds"] = timeout_seconds
        super().__init__(
            message,
            code="TIMEOUT_ERROR",
            details=details,
            **kwargs,
        )


# ============================================
# Sync Errors
# ============================================

class SyncError(OrgSyncError):
    """Base class for synchronization errors."""


class EmptyMembershipError(SyncError):
    """Raised when no source group of a sync-group yielded any member.

    Attributes:
        sync_group: Name of the sync-group, when known
        source_groups: Source groups that were aggregated
    """

    def __init__(
        self,
        message: str = "Aggregated membership is empty",
        sync_group: Optional[str] = None,
        source_groups: Optional[list[str]] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if sync_group:
            details["sync_group"] = sync_group
        if source_groups:
            details["source_groups"] = source_groups
        super().__init__(
            message,
            code="EMPTY_MEMBERSHIP",
            details=details,
            recoverable=False,
            **kwargs,
        )
        self.sync_group = sync_group
        self.source_groups = source_groups or []


# ============================================
# Exports
# ============================================

__all__ = [
    # Base
    "OrgSyncError",
    # Configuration
    "ConfigurationError",
    # Authentication
    "AuthenticationError",
    "CredentialError",
    # Transport
    "TransportError",
    "APIError",
    "InvalidCredentialsError",
    "RateLimitError",
    "NotFoundError",
    "ValidationError",
    "ServerError",
    "NetworkError",
    "ConnectionError",
    "TimeoutError",
    # Sync
    "SyncError",
    "EmptyMembershipError",
]
