"""Contents Client for the hosted repository API.

Lists remote directories, downloads raw files and resolves blobs by their
git object hash.
"""

import base64
import binascii
import json
import logging
from typing import Any, List, Optional
from urllib.parse import quote

import httpx
from pydantic import TypeAdapter, ValidationError

from ..models import BlobResponse, TreeEntry
from .base_client import RemoteAPIClient, ResponseDecodeError

logger = logging.getLogger(__name__)

_LISTING_ADAPTER = TypeAdapter(List[TreeEntry])


def decode_listing(payload: Any, target: str) -> List[TreeEntry]:
    """Decode a contents response into tree entries.

    The contents endpoint answers with a list for a directory and with a
    single object when the path names one file. The list shape is tried
    first; a single object becomes a one-element listing.

    Raises:
        ResponseDecodeError: If the payload matches neither shape
    """
    try:
        return _LISTING_ADAPTER.validate_python(payload)
    except ValidationError:
        logger.debug(f"Listing for {target} is not a list, decoding single entry")

    try:
        return [TreeEntry.model_validate(payload)]
    except ValidationError as e:
        raise ResponseDecodeError(
            f"failed to decode response for {target}: {e.error_count()} errors"
        ) from e


class ContentsAPIClient(RemoteAPIClient):
    """Client for the contents and blob endpoints of one repository."""

    def __init__(
        self,
        api_url: str,
        token: str,
        repository: str,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize contents client.

        Args:
            api_url: Base URL of the hosted API
            token: Bearer token
            repository: Repository identifier in owner/repo form
            transport: Optional transport override, used by tests
        """
        super().__init__(api_url=api_url, token=token, transport=transport)
        self.repository = repository

    def _contents_endpoint(self, path: str) -> str:
        return f"/repos/{self.repository}/contents/{quote(path.strip('/'), safe='/')}"

    async def list_or_get(self, path: str) -> List[TreeEntry]:
        """List the immediate children of ``path``.

        When ``path`` names a single file the result holds that one entry.

        Raises:
            ResponseDecodeError: If the body is not JSON or has neither shape
            APIClientError: If the request fails
        """
        logger.debug(f"Listing {self.repository}:{path}")
        response = await self._authenticated_request(
            "GET", self._contents_endpoint(path), target=path
        )
        try:
            payload = response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise ResponseDecodeError(
                f"failed to decode response for {path}: {e}"
            ) from e
        return decode_listing(payload, path)

    async def fetch_raw(self, locator: str) -> bytes:
        """Download the raw bytes behind a download locator.

        Raw locators are fetched without the bearer token.
        """
        response = await self._plain_get(locator)
        return response.content

    async def fetch_by_hash(self, sha: str) -> str:
        """Resolve a blob hash to its decoded text.

        Raises:
            ResponseDecodeError: If the body or its encoded content is invalid
            APIClientError: If the request fails
        """
        response = await self._authenticated_request(
            "GET", f"/repos/{self.repository}/git/blobs/{sha}", target=sha
        )
        try:
            blob = BlobResponse.model_validate(response.json())
        except (json.JSONDecodeError, UnicodeDecodeError, ValidationError) as e:
            raise ResponseDecodeError(f"failed to decode blob {sha}: {e}") from e

        if blob.encoding == "base64":
            try:
                content = base64.b64decode(blob.content)
            except (binascii.Error, ValueError) as e:
                raise ResponseDecodeError(f"failed to decode blob {sha}: {e}") from e
        elif blob.encoding in ("utf-8", "utf8"):
            content = blob.content.encode("utf-8")
        else:
            raise ResponseDecodeError(
                f"unsupported encoding '{blob.encoding}' for blob {sha}"
            )

        logger.debug(f"Fetched blob {sha} ({len(content)} bytes)")
        return content.decode("utf-8", errors="replace")
