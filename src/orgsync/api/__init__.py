"""Directory API modules.

This package provides the transport layer used by the sync adapters.

Classes:
    DirectoryClient: HTTP client for the directory and service desk REST APIs
    Credential: Username/secret pair for Basic auth
    CredentialStore: Contract for looking up credentials by principal
    EnvCredentialStore: Environment-backed credential store

Exceptions:
    OrgSyncError: Base exception for all sync errors
    ConfigurationError: Missing, empty or unparsable configuration
    CredentialError: No credential for the configured principal
    TransportError: A single fetch or write call failed
    EmptyMembershipError: Aggregation produced no members

Concurrency:
    process_concurrent: Bounded parallel processing preserving input order
"""
from .auth import (
    Credential,
    CredentialStore,
    EnvCredentialStore,
    build_auth_headers,
)
from .client import DirectoryClient
from .concurrency import process_concurrent
from .exceptions import (
    APIError,
    AuthenticationError,
    ConfigurationError,
    ConnectionError,
    CredentialError,
    EmptyMembershipError,
    InvalidCredentialsError,
    NetworkError,
    NotFoundError,
    OrgSyncError,
    RateLimitError,
    ServerError,
    SyncError,
    TimeoutError,
    TransportError,
    ValidationError,
)

__all__ = [
    # Auth
    "Credential",
    "CredentialStore",
    "EnvCredentialStore",
    "build_auth_headers",
    # Client
    "DirectoryClient",
    # Concurrency
    "process_concurrent",
    # Exceptions - Base
    "OrgSyncError",
    "ConfigurationError",
    # Exceptions - Auth
    "AuthenticationError",
    "CredentialError",
    # Exceptions - Transport
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
    # Exceptions - Sync
    "SyncError",
    "EmptyMembershipError",
]
