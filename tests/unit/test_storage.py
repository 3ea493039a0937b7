"""
Tests for solapi.storage module.
"""
import pytest
from unittest.mock import AsyncMock, patch

import httpx

from solapi.exceptions import SolapiAPIError, SolapiConnectionError, ValidationError
from solapi.storage import encode_file, is_remote, read_source


class TestIsRemote:
    """Tests for is_remote function."""

    @pytest.mark.parametrize("source", ["https://example.com/a.jpg", "HTTP://example.com/a.jpg"])
    def test_urls(self, source):
        assert is_remote(source)

    @pytest.mark.parametrize("source", ["/tmp/a.jpg", "a.jpg", "ftp://example.com/a.jpg"])
    def test_paths(self, source):
        assert not is_remote(source)


class TestReadSource:
    """Tests for read_source and encode_file."""

    @pytest.mark.asyncio
    async def test_local_file(self, tmp_path):
        path = tmp_path / "image.jpg"
        path.write_bytes(b"\xff\xd8\xff")

        assert await read_source(path) == b"\xff\xd8\xff"
        assert await read_source(str(path)) == b"\xff\xd8\xff"

    @pytest.mark.asyncio
    async def test_local_read_off_event_loop(self, tmp_path):
        """Local files should be read in a worker thread."""
        path = tmp_path / "image.jpg"
        path.write_bytes(b"abc")

        with patch("solapi.storage.asyncio.to_thread", new=AsyncMock(return_value=b"abc")) as to_thread:
            assert await read_source(path) == b"abc"

        to_thread.assert_awaited_once()
        reader = to_thread.await_args.args[0]
        assert reader.__name__ == "read_bytes"
        assert reader.__self__ == path

    @pytest.mark.asyncio
    async def test_missing_file(self, tmp_path):
        with pytest.raises(ValidationError) as exc_info:
            await read_source(str(tmp_path / "missing.jpg"))
        assert exc_info.value.field == "file_path"

    @pytest.mark.asyncio
    async def test_remote_file(self):
        client = httpx.AsyncClient(
            transport=httpx.MockTransport(lambda request: httpx.Response(200, content=b"abc"))
        )

        assert await encode_file("https://example.com/a.jpg", client) == "YWJj"
        await client.aclose()

    @pytest.mark.asyncio
    async def test_remote_error_status(self):
        client = httpx.AsyncClient(
            transport=httpx.MockTransport(lambda request: httpx.Response(404))
        )

        with pytest.raises(SolapiAPIError) as exc_info:
            await read_source("https://example.com/a.jpg", client)

        assert exc_info.value.status_code == 404
        await client.aclose()

    @pytest.mark.asyncio
    async def test_remote_connection_error(self):
        def handler(request):
            raise httpx.ConnectError("unreachable", request=request)

        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))

        with pytest.raises(SolapiConnectionError):
            await read_source("https://example.com/a.jpg", client)
        await client.aclose()
