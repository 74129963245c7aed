"""Base client for the hosted repository API.

Provides the shared HTTP session, bearer authentication and error
classification for all remote operations.
"""

import logging
from typing import Optional

import httpx

from .network_error_handler import NetworkErrorHandler

logger = logging.getLogger(__name__)

API_ACCEPT_HEADER = "application/vnd.github.v3+json"


class APIClientError(Exception):
    """Base exception for API client errors."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class AuthenticationError(APIClientError):
    """Exception raised when the token is rejected."""

    pass


class RemoteNotFoundError(APIClientError):
    """Exception raised when a path or object does not exist remotely."""

    pass


class ResponseDecodeError(APIClientError):
    """Exception raised when a response body does not have the expected shape."""

    pass


class RemoteAPIClient:
    """Base API client with authentication and common HTTP functionality."""

    def __init__(
        self,
        api_url: str,
        token: str,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize base API client.

        Args:
            api_url: Base URL of the hosted API
            token: Bearer token sent with every API request
            transport: Optional transport override, used by tests
        """
        self.api_url = api_url.rstrip("/")
        self._token = token
        self._transport = transport
        self._session: Optional[httpx.AsyncClient] = None
        self._network_error_handler = NetworkErrorHandler()

    @property
    def session(self) -> httpx.AsyncClient:
        """Get or create HTTP session."""
        if self._session is None or self._session.is_closed:
            timeouts = httpx.Timeout(
                connect=10.0,
                read=30.0,
                write=10.0,
                pool=None,  # leaf work is throttled by the caller
            )
            limits = httpx.Limits(
                max_connections=20,
                max_keepalive_connections=10,
                keepalive_expiry=30.0,
            )
            self._session = httpx.AsyncClient(
                timeout=timeouts,
                limits=limits,
                follow_redirects=True,
                transport=self._transport,
            )
        return self._session

    async def _send(
        self, method: str, url: str, target: str, **kwargs
    ) -> httpx.Response:
        """Send a request and classify failures.

        Raises:
            AuthenticationError: On 401/403
            RemoteNotFoundError: On 404
            RateLimitError: When the rate limit is exhausted
            ServerError: On 5xx
            NetworkConnectionError: If the connection fails
            NetworkTimeoutError: If the request times out
            APIClientError: For any other error status
        """
        try:
            response = await self.session.request(method, url, **kwargs)
        except httpx.TransportError as e:
            logger.debug(f"Transport failure for {target}: {e}")
            self._network_error_handler.classify_network_error(e)
            raise  # classify_network_error always raises

        if response.status_code >= 400:
            logger.debug(f"HTTP {response.status_code} for {target}")
            self._network_error_handler.classify_response(response, target)
        return response

    async def _authenticated_request(
        self, method: str, endpoint: str, target: Optional[str] = None, **kwargs
    ) -> httpx.Response:
        """Make an API request carrying the bearer token.

        Args:
            method: HTTP method (GET, POST, etc.)
            endpoint: API endpoint path
            target: Path or hash named in error messages, defaults to endpoint
            **kwargs: Additional arguments for httpx request

        Returns:
            HTTP response object with a success status
        """
        headers = kwargs.pop("headers", {})
        headers["Authorization"] = f"Bearer {self._token}"
        headers.setdefault("Accept", API_ACCEPT_HEADER)

        url = f"{self.api_url}{endpoint}"
        return await self._send(
            method, url, target or endpoint, headers=headers, **kwargs
        )

    async def _plain_get(
        self, url: str, target: Optional[str] = None
    ) -> httpx.Response:
        """GET an absolute URL without credentials."""
        return await self._send("GET", url, target or url)

    async def close(self) -> None:
        """Close HTTP session."""
        if self._session and not self._session.is_closed:
            await self._session.aclose()

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()
