"""
Transport protocol interface.
Defines the contract for performing a single network exchange.
"""

from __future__ import annotations
from typing import Protocol

from ..models.envelope import RequestDescriptor


class RawResponse(Protocol):
    """Minimal view of an HTTP response needed for normalization."""

    @property
    def status_code(self) -> int:
        ...

    @property
    def reason_phrase(self) -> str:
        ...

    @property
    def content(self) -> bytes:
        ...


class Transport(Protocol):
    """Protocol for transport implementations."""

    async def send(self, request: RequestDescriptor) -> RawResponse:
        """Execute exactly one request, raced against its timeout."""
        ...

    async def aclose(self) -> None:
        """Release pooled connections."""
        ...
