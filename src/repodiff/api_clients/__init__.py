"""API Client Abstractions for the hosted repository API.

All HTTP functionality is contained within dedicated API client classes.
"""

from .base_client import (
    RemoteAPIClient,
    APIClientError,
    AuthenticationError,
    RemoteNotFoundError,
    ResponseDecodeError,
)
from .contents_client import ContentsAPIClient, decode_listing
from .network_error_handler import (
    NetworkErrorHandler,
    RemoteTransportError,
    NetworkConnectionError,
    NetworkTimeoutError,
    DNSResolutionError,
    ServerError,
    RateLimitError,
)

__all__ = [
    # Base client
    "RemoteAPIClient",
    "APIClientError",
    "AuthenticationError",
    "RemoteNotFoundError",
    "ResponseDecodeError",
    # Contents client
    "ContentsAPIClient",
    "decode_listing",
    # Network errors
    "NetworkErrorHandler",
    "RemoteTransportError",
    "NetworkConnectionError",
    "NetworkTimeoutError",
    "DNSResolutionError",
    "ServerError",
    "RateLimitError",
]
