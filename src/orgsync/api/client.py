#!/usr/bin/env python3
"""HTTP Client for the directory and service desk REST APIs.

This module provides a small, composable HTTP client that handles the
common concerns of talking to the directory:

    - Basic authentication headers built from a Credential
    - Connection pooling via shared aiohttp session
    - Typed exceptions for every non-2xx status and network failure
    - Empty-body handling for write endpoints answering 204 No Content

Design Philosophy:
    This client knows HOW to talk to the directory, but not WHAT to fetch.
    It has no knowledge of groups, pages or organizations. That knowledge
    belongs in the adapters that compose this client.

    Each call issues exactly one request. Retrying is deliberately absent:
    a failed page or chunk is terminal for that page or chunk, and the
    caller decides what that means for the run.

Usage:
    async with DirectoryClient(base_url, credential) as client:
        data = await client.get("/rest/api/2/group/member", params={...})
        await client.post("/rest/servicedeskapi/organization/7/user", {...})
"""
import asyncio
import json
import logging
from typing import Any, Optional

import aiohttp

from .auth import Credential, build_auth_headers
from .exceptions import (
    APIError,
    ConfigurationError,
    ConnectionError,
    InvalidCredentialsError,
    NetworkError,
    NotFoundError,
    RateLimitError,
    ServerError,
    TimeoutError,
    ValidationError,
)

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 60


class DirectoryClient:
    """Async HTTP client for the directory REST APIs.

    Use it as an async context manager to ensure proper session lifecycle
    management:

        async with DirectoryClient(base_url, credential) as client:
            data = await client.get("/some/endpoint")

    Attributes:
        base_url: Base URL for API requests (e.g., "https://jira.example.com")
        credential: Credential used for every request
    """

    def __init__(
        self,
        base_url: str,
        credential: Credential,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        max_connections: int = 10,
    ):
        """Initialize the DirectoryClient.

        Args:
            base_url: API base URL, without trailing slash
            credential: Username/secret pair for Basic auth
            timeout: Total request timeout in seconds
            max_connections: Connection pool size

        Raises:
            ConfigurationError: If base_url is empty.
        """
        self.base_url = (base_url or "").rstrip("/")
        if not self.base_url:
            raise ConfigurationError("Base URL is required", missing_keys=["base_url"])

        self.credential = credential
        self.timeout = timeout
        self.max_connections = max_connections
        self._headers = build_auth_headers(credential)

        # Session is created in __aenter__, closed in __aexit__
        self._session: Optional[aiohttp.ClientSession] = None

    # ----------------------------------------
    # Context Manager Protocol
    # ----------------------------------------

    async def __aenter__(self) -> "DirectoryClient":
        """Enter async context: create the HTTP session."""
        self._session = aiohttp.ClientSession(
            connector=aiohttp.TCPConnector(
                limit=self.max_connections,
                limit_per_host=self.max_connections,
            ),
            timeout=aiohttp.ClientTimeout(
                total=self.timeout,
                connect=10,
            ),
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Exit async context: close the HTTP session."""
        if self._session:
            await self._session.close()
            self._session = None

    # ----------------------------------------
    # Low-Level Request Method
    # ----------------------------------------

    async def _request(
        self,
        method: str,
        endpoint: str,
        params: Optional[dict] = None,
        json_body: Optional[dict] = None,
    ) -> dict[str, Any]:
        """Make a single HTTP request.

        Args:
            method: HTTP method (GET, POST)
            endpoint: API endpoint path (e.g., "/rest/api/2/group/member")
            params: Query parameters
            json_body: JSON request body (for POST)

        Returns:
            Parsed JSON response as dict ({} for an empty body)

        Raises:
            APIError: If response status is not 2xx, or the body is not
                decodable JSON
            RuntimeError: If called outside of async context manager
            ConnectionError: If connection to server fails
            TimeoutError: If request times out
            NetworkError: For any other transport failure
        """
        if not self._session:
            raise RuntimeError(
                "DirectoryClient must be used as async context manager: "
                "async with DirectoryClient(...) as client:"
            )

        url = f"{self.base_url}{endpoint}"
        logger.debug(f"{method} {endpoint} params={params}")

        status = None
        try:
            async with self._session.request(
                method=method,
                url=url,
                headers=self._headers,
                params=params,
                json=json_body,
            ) as response:
                status = response.status
                if status >= 400:
                    error_text = await response.text(errors="replace")
                    raise self._create_api_error(
                        status=status,
                        method=method,
                        endpoint=endpoint,
                        response_body=error_text,
                        retry_after=response.headers.get("Retry-After"),
                    )

                body = await response.text()
                if not body:
                    return {}
                return json.loads(body)

        except aiohttp.ClientConnectionError as e:
            raise ConnectionError(
                f"Failed to connect to {self.base_url}",
                host=self.base_url,
                cause=e,
            )

        except asyncio.TimeoutError as e:
            raise TimeoutError(
                f"Request to {endpoint} timed out",
                timeout_seconds=self.timeout,
                cause=e,
            )

        except aiohttp.ClientError as e:
            raise NetworkError(
                f"Network error during {method} {endpoint}: {e}",
                cause=e,
            )

        except json.JSONDecodeError as e:
            raise APIError(
                f"{method} {endpoint} returned a non-JSON body",
                status_code=status,
                endpoint=endpoint,
                method=method,
                cause=e,
            )

        except UnicodeDecodeError as e:
            raise APIError(
                f"{method} {endpoint} returned a body that is not valid {e.encoding}",
                status_code=status,
                endpoint=endpoint,
                method=method,
                cause=e,
            )

    def _create_api_error(
        self,
        status: int,
        method: str,
        endpoint: str,
        response_body: str,
        retry_after: Optional[str] = None,
    ) -> APIError:
        """Create appropriate APIError subclass based on status code."""
        if status == 401:
            return InvalidCredentialsError(
                f"Credential for {self.credential.username} rejected",
                endpoint=endpoint,
                method=method,
            )

        if status == 404:
            return NotFoundError(
                resource_type="Resource",
                resource_id=endpoint,
                endpoint=endpoint,
                method=method,
                response_body=response_body,
            )

        if status == 429:
            seconds = int(retry_after) if retry_after and retry_after.isdigit() else None
            return RateLimitError(
                f"Rate limit exceeded for {endpoint}",
                retry_after=seconds,
                endpoint=endpoint,
                method=method,
                response_body=response_body,
            )

        if status in (400, 422):
            return ValidationError(
                f"Validation failed for {method} {endpoint}",
                status_code=status,
                endpoint=endpoint,
                method=method,
                response_body=response_body,
            )

        if status >= 500:
            return ServerError(
                f"Server error ({status}) for {method} {endpoint}",
                status_code=status,
                endpoint=endpoint,
                method=method,
                response_body=response_body,
            )

        return APIError(
            f"{method} {endpoint} failed",
            status_code=status,
            endpoint=endpoint,
            method=method,
            response_body=response_body,
        )

    # ----------------------------------------
    # High-Level Request Methods
    # ----------------------------------------

    async def get(
        self,
        endpoint: str,
        params: Optional[dict] = None,
    ) -> dict[str, Any]:
        """Make a GET request.

        Args:
            endpoint: API endpoint path
            params: Query parameters

        Returns:
            Parsed JSON response
        """
        return await self._request("GET", endpoint, params=params)

    async def post(
        self,
        endpoint: str,
        json_body: dict,
        params: Optional[dict] = None,
    ) -> dict[str, Any]:
        """Make a POST request.

        Args:
            endpoint: API endpoint path
            json_body: Request body as dict (will be JSON-encoded)
            params: Query parameters

        Returns:
            Parsed JSON response
        """
        return await self._request("POST", endpoint, params=params, json_body=json_body)
