"""Unit tests for ContentsAPIClient against an httpx.MockTransport."""

import base64

import httpx
import pytest

from repodiff.api_clients import (
    APIClientError,
    AuthenticationError,
    ContentsAPIClient,
    RateLimitError,
    RemoteNotFoundError,
    ResponseDecodeError,
    ServerError,
    decode_listing,
)
from repodiff.api_clients.network_error_handler import NetworkConnectionError

API_URL = "https://api.test"

FILE_ENTRY = {
    "name": "README.md",
    "path": "README.md",
    "type": "file",
    "sha": "3b18e512dba79e4c8300dd08aeb37f8e728b8dad",
    "download_url": "https://raw.test/README.md",
}
DIR_ENTRY = {
    "name": "src",
    "path": "src",
    "type": "dir",
    "sha": "4b825dc642cb6eb9a060e54bf8d69288fbee4904",
    "download_url": None,
}


def make_client(handler) -> ContentsAPIClient:
    return ContentsAPIClient(
        api_url=API_URL,
        token="test-token",
        repository="octo/widgets",
        transport=httpx.MockTransport(handler),
    )


class TestDecodeListing:
    def test_list_shape(self):
        entries = decode_listing([FILE_ENTRY, DIR_ENTRY], "")

        assert [e.path for e in entries] == ["README.md", "src"]

    def test_single_object_becomes_one_element_listing(self):
        entries = decode_listing(FILE_ENTRY, "README.md")

        assert len(entries) == 1
        assert entries[0].sha == FILE_ENTRY["sha"]

    def test_neither_shape_is_decode_error(self):
        with pytest.raises(ResponseDecodeError, match="README.md"):
            decode_listing({"message": "weird"}, "README.md")

    def test_list_with_bad_items_is_decode_error(self):
        with pytest.raises(ResponseDecodeError):
            decode_listing([{"path": "x"}], "x")


class TestListOrGet:
    @pytest.mark.asyncio
    async def test_lists_directory_with_bearer_token(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=[FILE_ENTRY, DIR_ENTRY])

        async with make_client(handler) as client:
            entries = await client.list_or_get("src")

        assert len(entries) == 2
        assert seen[0].url.path == "/repos/octo/widgets/contents/src"
        assert seen[0].headers["Authorization"] == "Bearer test-token"
        assert seen[0].headers["Accept"] == "application/vnd.github.v3+json"

    @pytest.mark.asyncio
    async def test_single_file_response_needs_one_request(self):
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(200, json=FILE_ENTRY)

        async with make_client(handler) as client:
            entries = await client.list_or_get("README.md")

        assert [e.path for e in entries] == ["README.md"]
        assert len(calls) == 1

    @pytest.mark.asyncio
    async def test_non_json_body_is_decode_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="<html>oops</html>")

        async with make_client(handler) as client:
            with pytest.raises(ResponseDecodeError, match="src"):
                await client.list_or_get("src")

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "status, expected",
        [
            (401, AuthenticationError),
            (404, RemoteNotFoundError),
            (422, APIClientError),
            (502, ServerError),
            (429, RateLimitError),
        ],
    )
    async def test_error_status_is_classified(self, status, expected):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(status, json={"message": "nope"})

        async with make_client(handler) as client:
            with pytest.raises(expected):
                await client.list_or_get("src")

    @pytest.mark.asyncio
    async def test_not_found_names_the_path(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(404, json={"message": "Not Found"})

        async with make_client(handler) as client:
            with pytest.raises(RemoteNotFoundError) as exc_info:
                await client.list_or_get("missing/dir")

        assert "404" in str(exc_info.value)
        assert "missing/dir" in str(exc_info.value)
        assert exc_info.value.status_code == 404

    @pytest.mark.asyncio
    async def test_exhausted_rate_limit_on_403(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                403,
                headers={"x-ratelimit-remaining": "0", "Retry-After": "30"},
                json={"message": "API rate limit exceeded"},
            )

        async with make_client(handler) as client:
            with pytest.raises(RateLimitError) as exc_info:
                await client.list_or_get("src")

        assert exc_info.value.retry_after == 30
        assert "Wait 30 seconds" in exc_info.value.user_guidance

    @pytest.mark.asyncio
    async def test_connection_failure_is_not_retried(self):
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            raise httpx.ConnectError("connection refused", request=request)

        async with make_client(handler) as client:
            with pytest.raises(NetworkConnectionError):
                await client.list_or_get("src")

        assert len(calls) == 1


class TestFetchRaw:
    @pytest.mark.asyncio
    async def test_raw_download_is_unauthenticated(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, content=b"\x00binary\xff")

        async with make_client(handler) as client:
            content = await client.fetch_raw("https://raw.test/a.bin")

        assert content == b"\x00binary\xff"
        assert "Authorization" not in seen[0].headers


class TestFetchByHash:
    @pytest.mark.asyncio
    async def test_decodes_base64_content_with_line_breaks(self):
        payload = base64.encodebytes(b"line one\nline two\n" * 20).decode()
        assert "\n" in payload

        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/repos/octo/widgets/git/blobs/abc123"
            return httpx.Response(200, json={"content": payload, "encoding": "base64"})

        async with make_client(handler) as client:
            text = await client.fetch_by_hash("abc123")

        assert text == "line one\nline two\n" * 20

    @pytest.mark.asyncio
    async def test_invalid_base64_is_decode_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"content": "a", "encoding": "base64"})

        async with make_client(handler) as client:
            with pytest.raises(ResponseDecodeError, match="abc123"):
                await client.fetch_by_hash("abc123")

    @pytest.mark.asyncio
    async def test_missing_blob_names_the_hash(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(404, json={"message": "Not Found"})

        async with make_client(handler) as client:
            with pytest.raises(RemoteNotFoundError, match="abc123"):
                await client.fetch_by_hash("abc123")
