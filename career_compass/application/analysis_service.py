"""
Analysis service - endpoint wrappers for resume analysis operations.
"""

from __future__ import annotations
import logging
from typing import Any, Dict, List, Optional

from ..domain.models.analysis import ANALYSIS_TYPES, AnalysisHistoryQuery, AnalysisUploadRequest, ExportOptions
from ..domain.models.envelope import ResponseEnvelope
from ..domain.models.errors import ApiError
from .api_client import ApiClient, ProgressCallback


class AnalysisService:
    """Application service for /analysis endpoints."""

    def __init__(self, client: ApiClient, logger: Optional[logging.Logger] = None):
        self._client = client
        self._logger = logger or logging.getLogger(__name__)

    async def upload_and_analyze(
        self,
        upload: AnalysisUploadRequest,
        on_progress: Optional[ProgressCallback] = None
    ) -> ResponseEnvelope:
        """POST /analysis/upload with resume and job description as multipart."""
        if on_progress:
            on_progress(0)
        envelope = await self._call('Analysis upload', self._client.post('/analysis/upload', upload.to_multipart()))
        if on_progress:
            on_progress(100)
        return envelope

    async def get_result(self, analysis_id: str) -> ResponseEnvelope:
        return await self._call('Get analysis result', self._client.get(f'/analysis/{analysis_id}'))

    async def get_history(self, query: Optional[AnalysisHistoryQuery] = None) -> ResponseEnvelope:
        """GET /analysis/history; pagination arrives in envelope.meta."""
        params = (query or AnalysisHistoryQuery()).to_params()
        return await self._call('Get analysis history', self._client.get('/analysis/history', params))

    async def delete(self, analysis_id: str) -> ResponseEnvelope:
        return await self._call('Delete analysis', self._client.delete(f'/analysis/{analysis_id}'))

    async def export(self, analysis_id: str, options: ExportOptions) -> ResponseEnvelope:
        return await self._call(
            'Export analysis',
            self._client.post(f'/analysis/{analysis_id}/export', options.to_payload()),
        )

    async def get_stats(self) -> ResponseEnvelope:
        return await self._call('Get analysis stats', self._client.get('/analysis/stats'))

    async def reprocess(
        self,
        analysis_id: str,
        analysis_type: Optional[str] = None,
        include_skill_suggestions: Optional[bool] = None,
        include_experience_gaps: Optional[bool] = None
    ) -> ResponseEnvelope:
        if analysis_type is not None and analysis_type not in ANALYSIS_TYPES:
            raise ValueError(f"Unknown analysis type: {analysis_type}")
        payload: Dict[str, Any] = {}
        if analysis_type is not None:
            payload['analysisType'] = analysis_type
        if include_skill_suggestions is not None:
            payload['includeSkillSuggestions'] = include_skill_suggestions
        if include_experience_gaps is not None:
            payload['includeExperienceGaps'] = include_experience_gaps
        return await self._call('Reprocess analysis', self._client.post(f'/analysis/{analysis_id}/reprocess', payload))

    async def get_skill_suggestions(self, job_description: str, current_skills: List[str]) -> ResponseEnvelope:
        return await self._call(
            'Get skill suggestions',
            self._client.post('/analysis/skill-suggestions', {
                'jobDescription': job_description,
                'currentSkills': list(current_skills),
            }),
        )

    async def _call(self, action: str, pending) -> ResponseEnvelope:
        try:
            return await pending
        except ApiError as e:
            self._logger.error(f"{action} failed: {e.message} (status {e.status_code})")
            raise
