"""
Auth API - thin adapter over the /auth endpoints.
Returns envelopes and raises ApiError unlogged; the session manager logs
and converts auth failures and owns persistence.
"""

from __future__ import annotations

from ..domain.models.envelope import RequestOptions, ResponseEnvelope
from ..domain.models.session import LoginCredentials, SignupCredentials
from .api_client import ApiClient


class AuthApi:
    """Endpoint wrappers for authentication."""

    def __init__(self, client: ApiClient):
        self._client = client

    async def login(self, credentials: LoginCredentials) -> ResponseEnvelope:
        """POST /auth/login -> {user, token, refreshToken?}"""
        return await self._client.post('/auth/login', credentials.to_payload(), _public())

    async def signup(self, credentials: SignupCredentials) -> ResponseEnvelope:
        """POST /auth/signup -> {user, token, refreshToken?}"""
        return await self._client.post('/auth/signup', credentials.to_payload(), _public())

    async def logout(self) -> ResponseEnvelope:
        return await self._client.post('/auth/logout', {})

    async def profile(self) -> ResponseEnvelope:
        """GET /auth/profile -> {user}"""
        return await self._client.get('/auth/profile')

    async def refresh(self, refresh_token: str) -> ResponseEnvelope:
        """POST /auth/refresh -> {token, refreshToken?}"""
        return await self._client.post('/auth/refresh', {'refreshToken': refresh_token}, _public())

    async def forgot_password(self, email: str) -> ResponseEnvelope:
        return await self._client.post('/auth/forgot-password', {'email': email}, _public())

    async def reset_password(self, token: str, password: str) -> ResponseEnvelope:
        return await self._client.post('/auth/reset-password', {'token': token, 'password': password}, _public())


def _public() -> RequestOptions:
    return RequestOptions(requires_auth=False)
