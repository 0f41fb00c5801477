"""
httpx transport - performs the literal network exchange.
Races every request against its timeout and maps failures to ApiError.
"""

from __future__ import annotations
import asyncio
import logging
from typing import Optional

import httpx

from ...domain.models.envelope import RequestDescriptor
from ...domain.models.errors import NetworkError, RequestTimeoutError


class HttpxTransport:
    """Transport implementation over httpx.AsyncClient."""

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        logger: Optional[logging.Logger] = None
    ):
        self._owns_client = client is None
        # Timeouts are enforced by the race in send(), not by httpx
        self._client = client or httpx.AsyncClient(timeout=None, follow_redirects=True)
        self._logger = logger or logging.getLogger(__name__)

    async def send(self, request: RequestDescriptor) -> httpx.Response:
        """Execute one request; exactly one of response, timeout or network error results."""
        try:
            return await asyncio.wait_for(self._dispatch(request), timeout=request.timeout_ms / 1000.0)
        except asyncio.TimeoutError:
            self._logger.debug(f"{request.method.value} {request.path} timed out after {request.timeout_ms}ms")
            raise RequestTimeoutError("Request timeout")
        except httpx.TimeoutException as e:
            self._logger.debug(f"{request.method.value} {request.path} transport timeout: {e}")
            raise RequestTimeoutError("Request timeout") from e
        except (httpx.HTTPError, OSError) as e:
            self._logger.debug(f"{request.method.value} {request.path} failed: {e}")
            raise NetworkError(str(e) or "Network request failed") from e

    async def _dispatch(self, request: RequestDescriptor) -> httpx.Response:
        kwargs = {'headers': request.headers}
        if request.multipart is not None:
            kwargs['files'] = request.multipart.to_httpx_files()
            if request.multipart.fields:
                kwargs['data'] = dict(request.multipart.fields)
        elif request.content is not None:
            kwargs['content'] = request.content.encode('utf-8')
        return await self._client.request(request.method.value, request.url, **kwargs)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
