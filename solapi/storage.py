"""
File loading for the storage upload endpoint.

Uploads are sent as base64 strings. The source can be a local path or
an http(s) URL reachable from this machine.

Size limits enforced by the API: Kakao images 500KB, MMS 200KB,
documents for sender number verification 2MB.
"""
import asyncio
import base64
from pathlib import Path
from typing import Optional, Union

import httpx

from solapi.exceptions import SolapiConnectionError, SolapiAPIError, ValidationError
from solapi.observability import get_logger

logger = get_logger(__name__)

DOWNLOAD_TIMEOUT = 30.0


def is_remote(source: str) -> bool:
    """Check if the upload source is a URL rather than a local path."""
    return source.lower().startswith(("http://", "https://"))


async def read_source(
    source: Union[str, Path],
    client: Optional[httpx.AsyncClient] = None,
) -> bytes:
    """
    Read the raw bytes of a local file or a remote URL.

    Raises:
        ValidationError: If the local file does not exist
        SolapiConnectionError: If the remote file cannot be downloaded
        SolapiAPIError: If the remote server answers with an error status
    """
    if isinstance(source, Path) or not is_remote(source):
        path = Path(source).expanduser()
        if not path.is_file():
            raise ValidationError("file_path", "File not found", str(source))
        return await asyncio.to_thread(path.read_bytes)

    logger.debug(f"Downloading upload source {source}")
    owns_client = client is None
    client = client or httpx.AsyncClient(timeout=DOWNLOAD_TIMEOUT, follow_redirects=True)
    try:
        response = await client.get(source)
    except httpx.RequestError as e:
        raise SolapiConnectionError(f"Failed to download {source}", str(e)) from e
    finally:
        if owns_client:
            await client.aclose()

    if response.status_code >= 400:
        raise SolapiAPIError(
            f"Download returned {response.status_code}",
            details=source,
            status_code=response.status_code,
        )
    return response.content


async def encode_file(
    source: Union[str, Path],
    client: Optional[httpx.AsyncClient] = None,
) -> str:
    """Return the base64 encoded content of a local file or URL."""
    content = await read_source(source, client)
    return base64.b64encode(content).decode("ascii")
