"""
API client - Application component composing request building, transport and
response normalization behind verb-oriented operations.
"""

from __future__ import annotations
import logging
from typing import Any, Callable, Dict, Optional

from ..domain.interfaces.transport import Transport
from ..domain.models.envelope import (
    HttpMethod,
    MultipartBody,
    RequestOptions,
    ResponseEnvelope,
    UploadFile,
)
from ..domain.models.errors import ServerError
from ..infrastructure.http.normalizer import normalize_response
from ..infrastructure.http.request_builder import DEFAULT_TIMEOUT_MS, RequestBuilder, TokenProvider
from ..infrastructure.http.transport import HttpxTransport

HEALTH_PATH = '/health'
HEALTH_TIMEOUT_MS = 5000

ProgressCallback = Callable[[int], None]


class ApiClient:
    """Generic backend client; never touches session state."""

    def __init__(
        self,
        base_url: str,
        transport: Optional[Transport] = None,
        token_provider: Optional[TokenProvider] = None,
        default_timeout_ms: int = DEFAULT_TIMEOUT_MS,
        health_timeout_ms: int = HEALTH_TIMEOUT_MS,
        logger: Optional[logging.Logger] = None
    ):
        self._logger = logger or logging.getLogger(__name__)
        self._builder = RequestBuilder(base_url, token_provider, default_timeout_ms)
        self._transport = transport or HttpxTransport(logger=self._logger)
        self._health_timeout_ms = health_timeout_ms

    @classmethod
    def from_settings(cls, settings, transport: Optional[Transport] = None, **kwargs) -> ApiClient:
        """Create a client from ApiSettings."""
        return cls(
            base_url=settings.url,
            transport=transport,
            default_timeout_ms=settings.timeout_ms,
            health_timeout_ms=settings.health_timeout_ms,
            **kwargs,
        )

    @property
    def base_url(self) -> str:
        return self._builder.base_url

    def set_token_provider(self, provider: Optional[TokenProvider]) -> None:
        """Bind the read-only token source used for Authorization headers."""
        self._builder.set_token_provider(provider)

    async def request(self, endpoint: str, options: Optional[RequestOptions] = None) -> ResponseEnvelope:
        """Build, send and normalize a single request. No implicit retry."""
        descriptor = self._builder.build(endpoint, options)
        self._logger.debug(f"{descriptor.method.value} {descriptor.url}")
        response = await self._transport.send(descriptor)
        return normalize_response(response)

    async def get(
        self,
        endpoint: str,
        params: Optional[Dict[str, Any]] = None,
        options: Optional[RequestOptions] = None
    ) -> ResponseEnvelope:
        return await self.request(endpoint, self._with(options, method=HttpMethod.GET, params=params, body=None))

    async def post(self, endpoint: str, data: Any = None, options: Optional[RequestOptions] = None) -> ResponseEnvelope:
        return await self.request(endpoint, self._with(options, method=HttpMethod.POST, body=data))

    async def put(self, endpoint: str, data: Any = None, options: Optional[RequestOptions] = None) -> ResponseEnvelope:
        return await self.request(endpoint, self._with(options, method=HttpMethod.PUT, body=data))

    async def patch(self, endpoint: str, data: Any = None, options: Optional[RequestOptions] = None) -> ResponseEnvelope:
        return await self.request(endpoint, self._with(options, method=HttpMethod.PATCH, body=data))

    async def delete(self, endpoint: str, options: Optional[RequestOptions] = None) -> ResponseEnvelope:
        return await self.request(endpoint, self._with(options, method=HttpMethod.DELETE))

    async def upload_file(
        self,
        endpoint: str,
        file: UploadFile,
        extra_fields: Optional[Dict[str, str]] = None,
        on_progress: Optional[ProgressCallback] = None,
        field_name: str = 'file'
    ) -> ResponseEnvelope:
        """Send file plus extra fields as multipart via POST.

        Progress is reported only at the start and end of the exchange; httpx
        does not expose upload progress for in-memory bodies.
        """
        body = MultipartBody()
        body.add_file(field_name, file)
        for key, value in (extra_fields or {}).items():
            body.add_field(key, value)

        if on_progress:
            on_progress(0)
        envelope = await self.post(endpoint, body)
        if on_progress:
            on_progress(100)
        return envelope

    async def health_check(self) -> ResponseEnvelope:
        """GET the liveness path without auth; any failure becomes a 503."""
        try:
            return await self.get(
                HEALTH_PATH,
                options=RequestOptions(requires_auth=False, timeout_ms=self._health_timeout_ms),
            )
        except Exception as e:
            self._logger.debug(f"Health check failed: {e}")
            raise ServerError("API health check failed", 503) from e

    async def aclose(self) -> None:
        await self._transport.aclose()

    async def __aenter__(self) -> ApiClient:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    @staticmethod
    def _with(options: Optional[RequestOptions], **overrides: Any) -> RequestOptions:
        """Copy caller options with verb-specific fields fixed."""
        base = options or RequestOptions()
        return RequestOptions(
            method=overrides.get('method', base.method),
            headers=dict(base.headers),
            params=overrides['params'] if 'params' in overrides else base.params,
            body=overrides['body'] if 'body' in overrides else base.body,
            requires_auth=base.requires_auth,
            timeout_ms=base.timeout_ms,
        )
