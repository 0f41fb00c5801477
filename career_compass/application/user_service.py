"""
User service - endpoint wrappers for profile, preferences, experience,
education and account management.
"""

from __future__ import annotations
import logging
from typing import Any, Dict, Optional

from ..domain.models.envelope import RequestOptions, ResponseEnvelope, UploadFile
from ..domain.models.errors import ApiError
from .api_client import ApiClient, ProgressCallback

EXPORT_FORMATS = ('json', 'csv', 'pdf')


class UserService:
    """Application service for /user endpoints."""

    def __init__(self, client: ApiClient, logger: Optional[logging.Logger] = None):
        self._client = client
        self._logger = logger or logging.getLogger(__name__)

    async def get_profile(self) -> ResponseEnvelope:
        return await self._call('Get user profile', self._client.get('/user/profile'))

    async def update_profile(self, profile: Dict[str, Any]) -> ResponseEnvelope:
        return await self._call('Update user profile', self._client.put('/user/profile', profile))

    async def upload_avatar(self, image: UploadFile, on_progress: Optional[ProgressCallback] = None) -> ResponseEnvelope:
        """POST /user/avatar as multipart field 'avatar' -> {avatarUrl}"""
        return await self._call(
            'Upload avatar',
            self._client.upload_file('/user/avatar', image, on_progress=on_progress, field_name='avatar'),
        )

    async def get_preferences(self) -> ResponseEnvelope:
        return await self._call('Get user preferences', self._client.get('/user/preferences'))

    async def update_preferences(self, preferences: Dict[str, Any]) -> ResponseEnvelope:
        """PUT a partial preferences document; the backend returns the merged result."""
        return await self._call('Update user preferences', self._client.put('/user/preferences', preferences))

    async def add_experience(self, experience: Dict[str, Any]) -> ResponseEnvelope:
        return await self._call('Add experience', self._client.post('/user/experience', experience))

    async def update_experience(self, experience_id: str, experience: Dict[str, Any]) -> ResponseEnvelope:
        return await self._call('Update experience', self._client.put(f'/user/experience/{experience_id}', experience))

    async def delete_experience(self, experience_id: str) -> ResponseEnvelope:
        return await self._call('Delete experience', self._client.delete(f'/user/experience/{experience_id}'))

    async def add_education(self, education: Dict[str, Any]) -> ResponseEnvelope:
        return await self._call('Add education', self._client.post('/user/education', education))

    async def update_education(self, education_id: str, education: Dict[str, Any]) -> ResponseEnvelope:
        return await self._call('Update education', self._client.put(f'/user/education/{education_id}', education))

    async def delete_education(self, education_id: str) -> ResponseEnvelope:
        return await self._call('Delete education', self._client.delete(f'/user/education/{education_id}'))

    async def get_stats(self) -> ResponseEnvelope:
        return await self._call('Get user stats', self._client.get('/user/stats'))

    async def delete_account(self, confirmation_token: str) -> ResponseEnvelope:
        """DELETE /user/account; the confirmation token travels in the body."""
        return await self._call(
            'Delete account',
            self._client.delete('/user/account', RequestOptions(body={'confirmationToken': confirmation_token})),
        )

    async def export_data(self, format: str = 'json') -> ResponseEnvelope:
        """POST /user/export -> {downloadUrl}"""
        if format not in EXPORT_FORMATS:
            raise ValueError(f"Unsupported export format: {format}")
        return await self._call('Export user data', self._client.post('/user/export', {'format': format}))

    async def _call(self, action: str, pending) -> ResponseEnvelope:
        try:
            return await pending
        except ApiError as e:
            self._logger.error(f"{action} failed: {e.message} (status {e.status_code})")
            raise
