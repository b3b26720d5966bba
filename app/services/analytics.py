"""Read-side views for the admin results, dashboard and mapping screens.

Every view is recomputed from the candidate and campaign rows on each call;
none of them writes to storage, so they are safe to retry.
"""

from __future__ import annotations

import logging
from collections import Counter

from app.core.errors import NotFoundError
from app.db.repository import (
    get_campaign,
    list_campaigns,
    list_candidates,
    list_candidates_by_campaign,
    list_departments,
    list_questions,
)
from app.models.analytics import (
    DashboardResponse,
    DepartmentMapping,
    MappingsResponse,
    ResultsResponse,
)
from app.models.enums import (
    CampaignStatus,
    CandidateStatus,
    RankingScope,
    ResultStatus,
)
from app.services.ranking import filter_results, rank_candidates
from app.services.scoring import round_half_up
from app.services.stats import campaign_stats, mean_score

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# GET /results
# ---------------------------------------------------------------------------

def get_results(
    campaign_id: str | None = None,
    status_filter: ResultStatus | None = None,
    search_text: str | None = None,
) -> ResultsResponse:
    """Ranked results for one campaign, or for all campaigns when omitted.

    Counters describe the full ranked scope; ``results`` is the filtered view.
    """
    if campaign_id:
        campaign = get_campaign(campaign_id)
        if campaign is None:
            raise NotFoundError(f"Campaign {campaign_id} not found")
        campaigns_by_id = {campaign.id: campaign}
        candidates = list_candidates_by_campaign(campaign_id)
        scope = RankingScope.campaign
    else:
        campaigns_by_id = {c.id: c for c in list_campaigns()}
        candidates = list_candidates()
        scope = RankingScope.global_

    ranked = rank_candidates(candidates, campaigns_by_id, scope)
    statuses = Counter(r.status for r in ranked)
    average = sum(r.total_score for r in ranked) / len(ranked) if ranked else 0.0

    return ResultsResponse(
        campaign_id=campaign_id,
        results=filter_results(ranked, status_filter, search_text),
        total_ranked=len(ranked),
        passed=statuses[ResultStatus.passed],
        failed=statuses[ResultStatus.failed],
        average_score=average,
    )


# ---------------------------------------------------------------------------
# GET /results/dashboard
# ---------------------------------------------------------------------------

def get_dashboard() -> DashboardResponse:
    """Headline counters plus live stats for every campaign."""
    departments = list_departments()
    questions = list_questions()
    campaigns = list_campaigns()
    candidates = list_candidates()

    by_status = Counter(c.status for c in candidates)
    completed = [c for c in candidates if c.status == CandidateStatus.completed]
    total = len(candidates)

    return DashboardResponse(
        total_departments=len(departments),
        total_questions=len(questions),
        total_campaigns=len(campaigns),
        active_campaigns=sum(1 for c in campaigns if c.status == CampaignStatus.active),
        total_candidates=total,
        completed_candidates=len(completed),
        in_progress_candidates=by_status[CandidateStatus.in_progress],
        completion_rate=round_half_up(len(completed) / total * 100) if total else 0,
        average_score=mean_score(completed),
        campaigns=[campaign_stats(c, candidates) for c in campaigns],
    )


# ---------------------------------------------------------------------------
# GET /results/mappings
# ---------------------------------------------------------------------------

def get_department_mappings() -> MappingsResponse:
    """How many questions, campaigns and candidates hang off each department."""
    questions = Counter(q.department_id for q in list_questions())
    campaigns = Counter(c.department_id for c in list_campaigns())
    candidates = Counter(c.preferred_department_id for c in list_candidates())

    return MappingsResponse(
        departments=[
            DepartmentMapping(
                department_id=d.id,
                department_name=d.name,
                question_count=questions[d.id],
                campaign_count=campaigns[d.id],
                candidate_count=candidates[d.id],
            )
            for d in list_departments()
        ]
    )
