"""
Analysis request models - query, upload and export configuration.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Union

from .envelope import MultipartBody, UploadFile


class AnalysisStatus(Enum):
    """Processing state of an analysis."""
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"
    EXPIRED = "expired"


ANALYSIS_TYPES = ('standard', 'detailed', 'ats_focused')
EXPORT_FORMATS = ('pdf', 'docx', 'json')


@dataclass
class AnalysisUploadRequest:
    """Resume plus job description (file or text) with metadata."""
    resume: UploadFile
    job_description: Union[UploadFile, str]
    job_title: Optional[str] = None
    company_name: Optional[str] = None
    analysis_type: Optional[str] = None
    include_skill_suggestions: bool = True
    include_experience_gaps: bool = True

    def to_multipart(self) -> MultipartBody:
        body = MultipartBody()
        body.add_file('resume', self.resume)
        if isinstance(self.job_description, UploadFile):
            body.add_file('jobDescription', self.job_description)
        else:
            body.add_field('jobDescriptionText', self.job_description)
        if self.job_title:
            body.add_field('jobTitle', self.job_title)
        if self.company_name:
            body.add_field('companyName', self.company_name)
        if self.analysis_type:
            body.add_field('analysisType', self.analysis_type)
        body.add_field('includeSkillSuggestions', _flag(self.include_skill_suggestions))
        body.add_field('includeExperienceGaps', _flag(self.include_experience_gaps))
        return body


@dataclass
class AnalysisHistoryQuery:
    """Filtering and pagination for history retrieval."""
    page: Optional[int] = None
    limit: Optional[int] = None
    sort_by: Optional[str] = None
    sort_direction: Optional[str] = None
    status: Optional[AnalysisStatus] = None
    date_from: Optional[str] = None
    date_to: Optional[str] = None

    def to_params(self) -> Dict[str, str]:
        params: Dict[str, str] = {}
        if self.page:
            params['page'] = str(self.page)
        if self.limit:
            params['limit'] = str(self.limit)
        if self.sort_by:
            params['sortBy'] = self.sort_by
        if self.sort_direction:
            params['sortDirection'] = self.sort_direction
        if self.status:
            params['status'] = self.status.value
        if self.date_from:
            params['dateFrom'] = self.date_from
        if self.date_to:
            params['dateTo'] = self.date_to
        return params


@dataclass
class ExportOptions:
    format: str = 'pdf'
    include_charts: Optional[bool] = None
    include_recommendations: Optional[bool] = None
    include_full_feedback: Optional[bool] = None

    def __post_init__(self) -> None:
        if self.format not in EXPORT_FORMATS:
            raise ValueError(f"Unsupported export format: {self.format}")

    def to_payload(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {'format': self.format}
        if self.include_charts is not None:
            out['includeCharts'] = self.include_charts
        if self.include_recommendations is not None:
            out['includeRecommendations'] = self.include_recommendations
        if self.include_full_feedback is not None:
            out['includeFullFeedback'] = self.include_full_feedback
        return out


def _flag(value: bool) -> str:
    return "true" if value else "false"
