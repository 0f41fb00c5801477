"""
Request builder - assembles URL, query string, headers and body for one call.
"""

from __future__ import annotations
import json
from typing import Any, Callable, Dict, Mapping, Optional
from urllib.parse import quote

from ...domain.models.envelope import (
    HttpMethod,
    MultipartBody,
    RequestDescriptor,
    RequestOptions,
)

DEFAULT_TIMEOUT_MS = 30000

DEFAULT_HEADERS: Dict[str, str] = {
    'Content-Type': 'application/json',
    'Accept': 'application/json',
}

# Characters left unescaped, matching encodeURIComponent
_URI_COMPONENT_SAFE = "-_.!~*'()"

TokenProvider = Callable[[], Optional[str]]


def encode_query(params: Optional[Mapping[str, Any]]) -> str:
    """Encode params as a query string, dropping None values."""
    if not params:
        return ''
    parts = []
    for key, value in params.items():
        if value is None:
            continue
        parts.append(f"{quote(str(key), safe=_URI_COMPONENT_SAFE)}={quote(_param_text(value), safe=_URI_COMPONENT_SAFE)}")
    return '&'.join(parts)


def build_url(base_url: str, endpoint: str, params: Optional[Mapping[str, Any]] = None) -> str:
    """Join base URL and endpoint and append the query string when non-empty."""
    base = base_url.rstrip('/')
    url = f"{base}{'' if endpoint.startswith('/') else '/'}{endpoint}"
    query = encode_query(params)
    return f"{url}?{query}" if query else url


def merge_headers(*layers: Optional[Mapping[str, str]]) -> Dict[str, str]:
    """Merge header layers left to right; later layers win, names compare case-insensitively."""
    merged: Dict[str, str] = {}
    for layer in layers:
        if not layer:
            continue
        for name, value in layer.items():
            for existing in [k for k in merged if k.lower() == name.lower()]:
                del merged[existing]
            merged[name] = value
    return merged


def _has_header(headers: Mapping[str, str], name: str) -> bool:
    return any(k.lower() == name.lower() for k in headers)


def _drop_header(headers: Dict[str, str], name: str) -> None:
    for existing in [k for k in headers if k.lower() == name.lower()]:
        del headers[existing]


def _param_text(value: Any) -> str:
    if isinstance(value, bool):
        return 'true' if value else 'false'
    return str(value)


class RequestBuilder:
    """Builds RequestDescriptors against a fixed base URL."""

    def __init__(
        self,
        base_url: str,
        token_provider: Optional[TokenProvider] = None,
        default_timeout_ms: int = DEFAULT_TIMEOUT_MS
    ):
        self._base_url = base_url.rstrip('/')
        self._token_provider = token_provider
        self._default_timeout_ms = default_timeout_ms

    @property
    def base_url(self) -> str:
        return self._base_url

    def set_token_provider(self, provider: Optional[TokenProvider]) -> None:
        self._token_provider = provider

    def build(self, endpoint: str, options: Optional[RequestOptions] = None) -> RequestDescriptor:
        """Build a descriptor for endpoint from caller options."""
        options = options or RequestOptions()
        method = HttpMethod(options.method)

        headers = merge_headers(DEFAULT_HEADERS, options.headers)
        if options.requires_auth is not False and not _has_header(headers, 'Authorization'):
            token = self._token_provider() if self._token_provider else None
            if token:
                headers['Authorization'] = f"Bearer {token}"

        content: Optional[str] = None
        multipart: Optional[MultipartBody] = None
        if options.body is not None and method != HttpMethod.GET:
            if isinstance(options.body, MultipartBody):
                # The transport sets the multipart boundary itself
                _drop_header(headers, 'Content-Type')
                multipart = options.body
            else:
                content = json.dumps(options.body)

        params = {k: _param_text(v) for k, v in (options.params or {}).items() if v is not None}
        return RequestDescriptor(
            method=method,
            url=build_url(self._base_url, endpoint, params),
            path=endpoint,
            headers=headers,
            params=params,
            content=content,
            multipart=multipart,
            requires_auth=options.requires_auth is not False,
            timeout_ms=options.timeout_ms or self._default_timeout_ms,
        )
