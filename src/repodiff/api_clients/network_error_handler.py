"""Network Error Handler for the hosted contents API client.

Turns httpx transport failures and error responses into typed exceptions.
Transport-level exceptions carry a ``user_guidance`` text that the CLI
prints under the error panel. Nothing here re-issues a request.
"""

import json
import logging
import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Type

import httpx

logger = logging.getLogger(__name__)

DEFAULT_RETRY_AFTER = 60


@dataclass
class UserGuidance:
    """What went wrong and what the user can try next."""

    error_type: str
    troubleshooting_steps: List[str]
    additional_notes: List[str] = field(default_factory=list)

    def format_for_console(self) -> str:
        """Render as rich markup, numbered steps first, notes as bullets."""
        lines = [f"[bold red]Error Type:[/bold red] {self.error_type}", ""]
        lines.append("[bold yellow]Troubleshooting Steps:[/bold yellow]")
        lines.extend(
            f"{number}. {step}"
            for number, step in enumerate(self.troubleshooting_steps, 1)
        )
        if self.additional_notes:
            lines += ["", "[bold blue]Additional Notes:[/bold blue]"]
            lines.extend(f"• {note}" for note in self.additional_notes)
        return "\n".join(lines)


class RemoteTransportError(Exception):
    """Base for failures below the HTTP status level, and for 429/5xx."""

    def __init__(self, message: str, user_guidance: Optional[str] = None):
        super().__init__(message)
        self.user_guidance = user_guidance or ""


class NetworkConnectionError(RemoteTransportError):
    """The API host could not be reached or the connection broke."""


class NetworkTimeoutError(RemoteTransportError):
    """Connecting to or reading from the API host timed out."""


class DNSResolutionError(NetworkConnectionError):
    """The API hostname did not resolve."""


class ServerError(RemoteTransportError):
    """The API answered with a 5xx status."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        user_guidance: Optional[str] = None,
    ):
        super().__init__(message, user_guidance)
        self.status_code = status_code


class RateLimitError(RemoteTransportError):
    """The API rate limit for the token is used up."""

    def __init__(
        self,
        message: str,
        retry_after: Optional[int] = None,
        user_guidance: Optional[str] = None,
    ):
        super().__init__(message, user_guidance)
        self.retry_after = retry_after


class UserGuidanceProvider:
    """Maps each transport exception type to its guidance."""

    _STEPS: Dict[Type[Exception], UserGuidance] = {
        DNSResolutionError: UserGuidance(
            error_type="DNS Resolution Error",
            troubleshooting_steps=[
                "Check that this machine can resolve the API host",
                "Check the host part of GITHUB_API_URL when it is set",
            ],
            additional_notes=["Resolver failures are often temporary"],
        ),
        NetworkConnectionError: UserGuidance(
            error_type="Network Connection Error",
            troubleshooting_steps=[
                "Check that the API host is reachable from this machine",
                "Check GITHUB_API_URL if you use an enterprise server",
                "Check proxy and firewall settings",
            ],
        ),
        NetworkTimeoutError: UserGuidance(
            error_type="Network Timeout Error",
            troubleshooting_steps=[
                "Run again, slow responses are usually transient",
                "Lower --max-parallel to reduce concurrent downloads",
            ],
        ),
        ServerError: UserGuidance(
            error_type="Server Error",
            troubleshooting_steps=[
                "The API failed internally, wait a few minutes and run again",
                "Check the status page of the hosting service",
            ],
        ),
    }

    def get_guidance(self, error: Exception) -> UserGuidance:
        if isinstance(error, RateLimitError):
            return self._rate_limit_guidance(error)
        guidance = self._STEPS.get(type(error))
        if guidance is None:
            return UserGuidance(
                error_type="Unknown Network Error",
                troubleshooting_steps=["Check your network connection and run again"],
            )
        return guidance

    def _rate_limit_guidance(self, error: RateLimitError) -> UserGuidance:
        wait = error.retry_after or DEFAULT_RETRY_AFTER
        return UserGuidance(
            error_type="Rate Limit Error",
            troubleshooting_steps=[
                f"Wait {wait} seconds before running again",
                "Make sure GITHUB_TOKEN holds a valid token",
                "Narrow the run with --path or more ignore entries",
            ],
            additional_notes=["Authenticated requests get a much higher limit"],
        )


class NetworkErrorHandler:
    """Classifies httpx failures and error responses."""

    _DNS_FAILURE = re.compile(
        r"name.*resolution.*failed"
        r"|name.*or.*service.*not.*known"
        r"|nodename.*nor.*servname.*provided"
        r"|temporary.*failure.*in.*name.*resolution"
    )

    def __init__(self):
        self.guidance_provider = UserGuidanceProvider()

    def _with_guidance(self, error: RemoteTransportError) -> RemoteTransportError:
        guidance = self.guidance_provider.get_guidance(error)
        error.user_guidance = guidance.format_for_console()
        return error

    def classify_network_error(self, error: Exception) -> None:
        """Raise the typed exception for an httpx transport error.

        Raises:
            DNSResolutionError, NetworkConnectionError or NetworkTimeoutError,
            chained to ``error``
        """
        classified: RemoteTransportError
        if isinstance(error, httpx.ConnectError):
            if self._DNS_FAILURE.search(str(error).lower()):
                classified = DNSResolutionError(
                    "Cannot resolve API host. Check your internet connection."
                )
            else:
                classified = NetworkConnectionError(f"Connection failed: {error}")
        elif isinstance(error, httpx.ConnectTimeout):
            classified = NetworkTimeoutError("Connection timed out")
        elif isinstance(error, httpx.TimeoutException):
            classified = NetworkTimeoutError("Request timed out")
        elif isinstance(error, httpx.TransportError):
            classified = NetworkConnectionError(f"Network error: {error}")
        else:
            classified = NetworkConnectionError(f"Unknown network error: {error}")
        raise self._with_guidance(classified) from error

    def classify_response(self, response: httpx.Response, target: str) -> None:
        """Raise the exception matching an error response.

        Args:
            response: Response with a status code of 400 or above
            target: Path or hash the request was about, used in messages
        """
        from .base_client import (
            APIClientError,
            AuthenticationError,
            RemoteNotFoundError,
        )

        status_code = response.status_code
        error_detail = _error_detail(response)

        exhausted = response.headers.get("x-ratelimit-remaining") == "0"
        if status_code == 429 or (status_code == 403 and exhausted):
            raise self._with_guidance(
                RateLimitError(
                    f"Rate limited while requesting {target}: {error_detail}",
                    retry_after=_retry_after(response),
                )
            )

        if status_code in (401, 403):
            raise AuthenticationError(
                f"Authentication failed for {target}: {error_detail}", status_code
            )

        if status_code == 404:
            raise RemoteNotFoundError(
                f"unexpected status code: {status_code} -> {target}", status_code
            )

        if 500 <= status_code < 600:
            raise self._with_guidance(
                ServerError(
                    f"Server error for {target}: {error_detail}",
                    status_code=status_code,
                )
            )

        raise APIClientError(
            f"unexpected status code: {status_code} -> {target}: {error_detail}",
            status_code,
        )


def _retry_after(response: httpx.Response) -> Optional[int]:
    value = response.headers.get("Retry-After")
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return DEFAULT_RETRY_AFTER


def _error_detail(response: httpx.Response) -> str:
    """Extract the error message of an API error body."""
    try:
        body = response.json()
    except (json.JSONDecodeError, ValueError):
        return response.text.strip() or f"HTTP {response.status_code}"
    if isinstance(body, dict):
        detail = body.get("message") or body.get("detail")
        if detail:
            return str(detail)
    return f"HTTP {response.status_code}"
