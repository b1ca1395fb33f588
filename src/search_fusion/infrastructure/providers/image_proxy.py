"""
Image proxy client.

Thumbnails from image search are fetched server-side so the browser only
talks to this service. The upstream body is streamed through in chunks and
never buffered whole; anything larger than ``max_bytes`` is cut off.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from dataclasses import dataclass
from urllib.parse import urlsplit

import httpx

from search_fusion.core.exceptions import (
    DataError,
    ErrorContext,
    InvalidParameterError,
    NetworkError,
    ProviderHttpError,
    ProviderTimeoutError,
)

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "application/octet-stream"
DEFAULT_MAX_BYTES = 10 * 1024 * 1024


@dataclass
class ProxiedImage:
    """An open upstream image response; iterate it once, then it is closed."""

    content_type: str
    response: httpx.Response
    max_bytes: int = DEFAULT_MAX_BYTES

    async def iter_bytes(self) -> AsyncIterator[bytes]:
        sent = 0
        try:
            async for chunk in self.response.aiter_bytes():
                sent += len(chunk)
                if sent > self.max_bytes:
                    logger.warning(f"[ImageProxy] {self.response.url} exceeded {self.max_bytes} bytes, truncated")
                    break
                yield chunk
        finally:
            await self.response.aclose()

    async def aclose(self) -> None:
        await self.response.aclose()


class ImageProxyClient:
    """Fetches remote images on behalf of the client."""

    name = "image-proxy"

    def __init__(
        self,
        *,
        timeout: float = 10.0,
        max_bytes: int = DEFAULT_MAX_BYTES,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._timeout = timeout
        self.max_bytes = max_bytes
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout, follow_redirects=True)

    async def fetch(self, url: str) -> ProxiedImage:
        """
        Open ``url`` for streaming.

        Raises:
            InvalidParameterError: not an absolute http(s) URL
            ProviderTimeoutError, NetworkError: upstream unreachable
            ProviderHttpError: upstream answered non-2xx
            DataError: declared Content-Length above ``max_bytes``
        """
        if not isinstance(url, str) or not url.strip():
            raise InvalidParameterError("url", url, "an absolute http(s) image URL")
        if urlsplit(url.strip()).scheme.lower() not in ("http", "https"):
            raise InvalidParameterError("url", url, "an absolute http(s) image URL")

        request = self._client.build_request("GET", url.strip())
        try:
            response = await self._client.send(request, stream=True)
        except httpx.TimeoutException as e:
            raise ProviderTimeoutError(self.name, self._timeout) from e
        except httpx.RequestError as e:
            raise NetworkError(str(e) or type(e).__name__, provider=self.name) from e

        if not response.is_success:
            await response.aclose()
            logger.warning(f"[ImageProxy] upstream returned {response.status_code} for {url}")
            raise ProviderHttpError(
                response.status_code,
                "Failed to fetch image from external source",
                provider=self.name,
            )

        declared = response.headers.get("content-length")
        if declared and declared.isdigit() and int(declared) > self.max_bytes:
            await response.aclose()
            raise DataError(
                f"Image is {declared} bytes, limit is {self.max_bytes}",
                context=ErrorContext(provider=self.name),
            )

        return ProxiedImage(
            content_type=response.headers.get("content-type", DEFAULT_CONTENT_TYPE),
            response=response,
            max_bytes=self.max_bytes,
        )

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
