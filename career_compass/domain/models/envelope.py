"""
Request and response data structures shared by every API call.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


class HttpMethod(str, Enum):
    """HTTP verbs used by the client."""
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"


@dataclass(frozen=True)
class UploadFile:
    """In-memory file to send as a multipart part."""
    filename: str
    content: bytes
    content_type: str = "application/octet-stream"

    @property
    def size(self) -> int:
        return len(self.content)


@dataclass
class MultipartBody:
    """Structured multipart payload: file parts plus plain string fields."""
    files: List[Tuple[str, UploadFile]] = field(default_factory=list)
    fields: Dict[str, str] = field(default_factory=dict)

    def add_file(self, name: str, file: UploadFile) -> None:
        self.files.append((name, file))

    def add_field(self, name: str, value: str) -> None:
        self.fields[name] = value

    def to_httpx_files(self) -> List[Tuple[str, Tuple[str, bytes, str]]]:
        """Convert file parts to the tuple shape httpx expects."""
        return [(name, (f.filename, f.content, f.content_type)) for name, f in self.files]


@dataclass
class RequestOptions:
    """Caller configuration for a single request."""
    method: HttpMethod = HttpMethod.GET
    headers: Dict[str, str] = field(default_factory=dict)
    params: Optional[Dict[str, Any]] = None
    body: Any = None
    requires_auth: bool = True
    timeout_ms: Optional[int] = None


@dataclass(frozen=True)
class RequestDescriptor:
    """Fully-formed request, built fresh for every call."""
    method: HttpMethod
    url: str
    path: str
    headers: Dict[str, str]
    params: Dict[str, str] = field(default_factory=dict)
    content: Optional[str] = None
    multipart: Optional[MultipartBody] = None
    requires_auth: bool = True
    timeout_ms: int = 30000

    def header(self, name: str) -> Optional[str]:
        """Case-insensitive header lookup."""
        lowered = name.lower()
        for key, value in self.headers.items():
            if key.lower() == lowered:
                return value
        return None

    @property
    def has_body(self) -> bool:
        return self.content is not None or self.multipart is not None


@dataclass(frozen=True)
class PaginationMeta:
    """Pagination info attached to list responses."""
    page: Optional[int] = None
    limit: Optional[int] = None
    total: Optional[int] = None
    total_pages: Optional[int] = None

    @classmethod
    def from_payload(cls, data: Dict[str, Any]) -> PaginationMeta:
        return cls(
            page=data.get('page'),
            limit=data.get('limit'),
            total=data.get('total'),
            total_pages=data.get('totalPages', data.get('total_pages')),
        )


@dataclass
class ResponseEnvelope:
    """Uniform success/data/error wrapper every backend response follows."""
    success: bool
    data: Any = None
    message: Optional[str] = None
    errors: Optional[Dict[str, List[str]]] = None
    meta: Optional[PaginationMeta] = None

    def __post_init__(self) -> None:
        # success never carries errors, failure never carries data
        if self.success:
            self.errors = None
        else:
            self.data = None

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> ResponseEnvelope:
        """Create an envelope from a decoded JSON body."""
        meta = payload.get('meta')
        errors = payload.get('errors')
        return cls(
            success=bool(payload.get('success', False)),
            data=payload.get('data'),
            message=payload.get('message'),
            errors=coerce_errors(errors) if isinstance(errors, dict) else None,
            meta=PaginationMeta.from_payload(meta) if isinstance(meta, dict) else None,
        )

    @classmethod
    def invalid_format(cls) -> ResponseEnvelope:
        return cls(success=False, message="Invalid response format")

    def to_dict(self) -> Dict[str, Any]:
        """Convert back to wire shape, omitting absent fields."""
        out: Dict[str, Any] = {'success': self.success}
        if self.data is not None:
            out['data'] = self.data
        if self.message is not None:
            out['message'] = self.message
        if self.errors is not None:
            out['errors'] = self.errors
        if self.meta is not None:
            out['meta'] = {
                k: v for k, v in {
                    'page': self.meta.page,
                    'limit': self.meta.limit,
                    'total': self.meta.total,
                    'totalPages': self.meta.total_pages,
                }.items() if v is not None
            }
        return out


def coerce_errors(errors: Dict[str, Any]) -> Dict[str, List[str]]:
    """Normalize field errors to field -> list of strings."""
    out: Dict[str, List[str]] = {}
    for name, value in errors.items():
        if isinstance(value, (list, tuple)):
            out[str(name)] = [str(v) for v in value]
        elif value is not None:
            out[str(name)] = [str(value)]
    return out
