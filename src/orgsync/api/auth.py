#!/usr/bin/env python3
"""Basic-auth credential handling for the directory REST APIs.

Both the membership listing and the organization write endpoints authenticate
with HTTP Basic auth. The username/secret pair is looked up by principal name
from a secret store; this module defines the store contract and ships an
environment-backed implementation.

Security Notes:
    - Secrets are held in memory only (never persisted or logged)
    - Log lines use Credential.secret_id (SHA-256 prefix) instead of the secret
    - Secrets should be provided via environment variables or a .env file

Example:
    >>> store = EnvCredentialStore()
    >>> credential = store.get_credential("svc-sync")
    >>> headers = build_auth_headers(credential)
"""
import hashlib
import logging
import os
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field

import aiohttp
from dotenv import load_dotenv

from .exceptions import CredentialError

load_dotenv()

logger = logging.getLogger(__name__)

# Environment variable prefix for secrets looked up by EnvCredentialStore
SECRET_ENV_PREFIX = "ORGSYNC_SECRET_"

# Opt-in header required by the service desk organization endpoints
EXPERIMENTAL_API_HEADER = ("X-ExperimentalApi", "opt-in")


@dataclass(frozen=True)
class Credential:
    """Username/secret pair for Basic authentication.

    Attributes:
        username: Login name sent in the Authorization header.
        secret: Password or API token. Excluded from repr.
    """
    username: str
    secret: str = field(repr=False)

    @property
    def secret_id(self) -> str:
        """Get a safe identifier for logging (SHA-256 hash, first 8 chars)."""
        return hashlib.sha256(self.secret.encode()).hexdigest()[:8]


class CredentialStore(ABC):
    """Contract for looking up a credential by principal name."""

    @abstractmethod
    def get_credential(self, principal: str) -> Credential:
        """Return the credential for a principal.

        Raises:
            CredentialError: If the store holds no secret for the principal.
        """
        ...


class EnvCredentialStore(CredentialStore):
    """Secret store backed by environment variables.

    The secret for principal ``svc.sync-bot`` is read from
    ``ORGSYNC_SECRET_SVC_SYNC_BOT``.
    """

    def __init__(self, prefix: str = SECRET_ENV_PREFIX):
        self.prefix = prefix

    def env_key(self, principal: str) -> str:
        """Environment variable name holding the principal's secret."""
        return self.prefix + re.sub(r"[^A-Za-z0-9]", "_", principal).upper()

    def get_credential(self, principal: str) -> Credential:
        if not principal or not principal.strip():
            raise CredentialError("Principal name is empty")

        principal = principal.strip()
        key = self.env_key(principal)
        secret = os.getenv(key)
        if not secret:
            raise CredentialError(
                f"No secret found for principal '{principal}' (set {key})",
                principal=principal,
            )

        credential = Credential(username=principal, secret=secret)
        logger.debug(f"Loaded credential for {principal} (secret {credential.secret_id})")
        return credential


def build_auth_headers(credential: Credential) -> dict[str, str]:
    """Build the headers every directory request carries."""
    name, value = EXPERIMENTAL_API_HEADER
    return {
        "Authorization": aiohttp.BasicAuth(credential.username, credential.secret).encode(),
        "Content-Type": "application/json",
        "Accept": "application/json",
        name: value,
    }
