"""Response models for the results / dashboard endpoints.

These are API-layer response schemas, not direct table mappings.  Nothing in
here is persisted: ranks, pass/fail and counters are recomputed per request.
"""

from datetime import datetime

from pydantic import BaseModel

from app.models.enums import ResultStatus


# --- Results / leaderboard ---

class Result(BaseModel):
    """One ranked, completed candidate."""
    candidate_id: str
    candidate_name: str = ""
    email: str = ""
    campaign_id: str
    campaign_name: str = ""
    rank: int
    total_score: float
    passing_score: float
    status: ResultStatus
    time_taken_minutes: int = 0
    completed_at: datetime | None = None


class ResultsResponse(BaseModel):
    """Full response for GET /api/v1/results.

    ``results`` is filtered by status/search; the counters always describe
    the whole ranked scope.
    """
    campaign_id: str | None = None
    results: list[Result] = []
    total_ranked: int = 0
    passed: int = 0
    failed: int = 0
    average_score: float = 0.0


# --- Campaign stats ---

class CampaignStats(BaseModel):
    """Live counters for one campaign."""
    campaign_id: str
    campaign_name: str = ""
    total_candidates: int = 0
    completed_candidates: int = 0
    average_score: float = 0.0


# --- Dashboard ---

class DashboardResponse(BaseModel):
    """Full response for GET /api/v1/results/dashboard."""
    total_departments: int = 0
    total_questions: int = 0
    total_campaigns: int = 0
    active_campaigns: int = 0
    total_candidates: int = 0
    completed_candidates: int = 0
    in_progress_candidates: int = 0
    completion_rate: int = 0
    average_score: float = 0.0
    campaigns: list[CampaignStats] = []


# --- Relationship view ---

class DepartmentMapping(BaseModel):
    """Counts of everything linked to a department."""
    department_id: str
    department_name: str
    question_count: int = 0
    campaign_count: int = 0
    candidate_count: int = 0


class MappingsResponse(BaseModel):
    """Full response for GET /api/v1/results/mappings."""
    departments: list[DepartmentMapping] = []
