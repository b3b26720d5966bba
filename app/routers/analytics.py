"""Results, dashboard and relationship read endpoints.

All of these are pure reads recomputed per request; repeating a call has no
side effects.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Query

from app.models.analytics import (
    CampaignStats,
    DashboardResponse,
    MappingsResponse,
    ResultsResponse,
)
from app.models.enums import ResultStatus
from app.services.analytics import get_dashboard, get_department_mappings, get_results
from app.services.stats import get_campaign_stats

logger = logging.getLogger(__name__)

router = APIRouter()


# ---------------------------------------------------------------------------
# GET /api/v1/results
# ---------------------------------------------------------------------------

@router.get("", response_model=ResultsResponse)
async def results_list(
    campaign_id: str | None = Query(
        default=None,
        description="Campaign to rank (omit for a global leaderboard)",
    ),
    status: ResultStatus | None = Query(
        default=None,
        description="Only return passed or failed results",
    ),
    search: str | None = Query(
        default=None,
        description="Case-insensitive substring of name or email",
    ),
) -> ResultsResponse:
    """Return the ranked leaderboard with pass/fail counters."""
    return get_results(
        campaign_id=campaign_id,
        status_filter=status,
        search_text=search,
    )


# ---------------------------------------------------------------------------
# GET /api/v1/results/campaigns/{campaign_id}/stats
# ---------------------------------------------------------------------------

@router.get("/campaigns/{campaign_id}/stats", response_model=CampaignStats)
async def results_campaign_stats(campaign_id: str) -> CampaignStats:
    """Return live total / completed / average counters for one campaign."""
    return get_campaign_stats(campaign_id)


# ---------------------------------------------------------------------------
# GET /api/v1/results/dashboard
# ---------------------------------------------------------------------------

@router.get("/dashboard", response_model=DashboardResponse)
async def results_dashboard() -> DashboardResponse:
    return get_dashboard()


# ---------------------------------------------------------------------------
# GET /api/v1/results/mappings
# ---------------------------------------------------------------------------

@router.get("/mappings", response_model=MappingsResponse)
async def results_mappings() -> MappingsResponse:
    """Return per-department counts of questions, campaigns and candidates."""
    return get_department_mappings()
