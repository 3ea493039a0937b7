"""
Transport collaborator for the SOLAPI service.

The service only depends on the ``Transport`` protocol:

    await transport.fetch(auth_info, request_config, payload)

``HttpxTransport`` is the default implementation. It performs the HTTP call
with a pooled ``httpx.AsyncClient``, decodes JSON and translates failures
into the exception hierarchy. The ``Authorization`` header value comes from
the injected ``signer``; no retry or backoff is done here.

Usage:
    async with HttpxTransport(signer=my_signer) as transport:
        service = SolapiMessageService(api_key, api_secret, transport)
        await service.get_balance()
"""
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional, Protocol

import httpx

from solapi.config import config
from solapi.exceptions import SolapiAPIError, SolapiConnectionError, SolapiDataError
from solapi.observability import get_logger, get_correlation_id, Timer

logger = get_logger(__name__)


@dataclass(frozen=True)
class AuthInfo:
    """API credentials held by the service for its whole lifetime."""
    api_key: str
    api_secret: str = field(repr=False)

    def __post_init__(self):
        if not self.api_key:
            raise ValueError("api_key is required")
        if not self.api_secret:
            raise ValueError("api_secret is required")


@dataclass(frozen=True)
class RequestConfig:
    """HTTP method and absolute URL of one API call."""
    method: str
    url: str


class Transport(Protocol):
    """Performs one signed API call and returns the decoded JSON body."""

    async def fetch(
        self,
        auth_info: AuthInfo,
        request_config: RequestConfig,
        payload: Optional[Any] = None,
    ) -> Any:
        ...


Signer = Callable[[AuthInfo], str]


class HttpxTransport:
    """
    Default httpx-based transport.

    Args:
        signer: Returns the ``Authorization`` header value for the credentials
        timeout: Request timeout in seconds
        client: Pre-built ``httpx.AsyncClient`` (e.g. with a mock transport)
    """

    def __init__(
        self,
        signer: Signer,
        timeout: float = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.signer = signer
        self.timeout = timeout or config.api.request_timeout
        self._client = client
        self._owns_client = client is None

    async def connect(self) -> None:
        """Create HTTP client with connection pooling."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                headers={"Accept": "application/json"},
                limits=httpx.Limits(
                    max_keepalive_connections=10,
                    max_connections=20,
                )
            )
            self._owns_client = True

    async def close(self) -> None:
        """Close HTTP client if this transport created it."""
        if self._client and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "HttpxTransport":
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    def _headers(self, auth_info: AuthInfo) -> Dict[str, str]:
        headers = {
            "Authorization": self.signer(auth_info),
            "Content-Type": "application/json",
        }
        correlation_id = get_correlation_id()
        if correlation_id:
            headers["X-Request-ID"] = correlation_id
        return headers

    async def fetch(
        self,
        auth_info: AuthInfo,
        request_config: RequestConfig,
        payload: Optional[Any] = None,
    ) -> Any:
        """
        Execute a single API call.

        Returns:
            Decoded JSON body ({} for an empty body)

        Raises:
            SolapiConnectionError: Network/timeout errors
            SolapiAPIError: API returned an error response
            SolapiDataError: Response body is not JSON
        """
        if not self._client:
            await self.connect()

        method = request_config.method.upper()
        url = request_config.url

        try:
            with Timer(f"{method} {url}", logger):
                response = await self._client.request(
                    method=method,
                    url=url,
                    json=payload if payload is not None and method != "GET" else None,
                    headers=self._headers(auth_info),
                )
        except httpx.TimeoutException as e:
            logger.error(
                f"Request timeout: {method} {url}",
                extra={"url": url, "timeout": self.timeout}
            )
            raise SolapiConnectionError(
                f"Request timeout after {self.timeout}s",
                retry_after=5
            ) from e
        except httpx.RequestError as e:
            logger.error(
                f"Request failed: {method} {url} - {e}",
                extra={"url": url, "error": str(e)}
            )
            raise SolapiConnectionError(str(e)) from e

        if response.status_code >= 400:
            raise self._api_error(response, method, url)

        if not response.content:
            return {}

        try:
            return response.json()
        except ValueError as e:
            raise SolapiDataError(
                "Response body is not valid JSON",
                details=response.text[:200],
                expected="json",
                got=response.headers.get("content-type", "unknown")
            ) from e

    @staticmethod
    def _api_error(response: httpx.Response, method: str, url: str) -> SolapiAPIError:
        error_text = response.text[:500]
        error_code = None
        details = error_text

        try:
            body = response.json()
        except ValueError:
            body = None

        if isinstance(body, dict):
            error_code = body.get("errorCode")
            details = body.get("errorMessage") or error_text

        logger.error(
            f"API error {response.status_code}: {details}",
            extra={"url": url, "method": method, "status_code": response.status_code}
        )
        return SolapiAPIError(
            f"API returned {response.status_code}",
            details=details,
            status_code=response.status_code,
            error_code=error_code,
        )
