"""Per-campaign live counters.

``campaign_stats`` is the only source of truth for total / completed /
average figures.  The matching columns on the ``campaigns`` table are a cache
written by ``refresh_campaign_counters`` (after every submission) and by the
scheduled ``sync_all_campaign_counters``; nothing reads them back as output.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from app.core.errors import NotFoundError
from app.db.repository import (
    get_campaign,
    list_campaigns,
    list_candidates,
    list_candidates_by_campaign,
    update_campaign,
)
from app.models.analytics import CampaignStats
from app.models.campaign import Campaign, CampaignCountersUpdate
from app.models.candidate import CandidateRecord
from app.models.enums import CandidateStatus

logger = logging.getLogger(__name__)


def candidate_score(candidate: CandidateRecord) -> float:
    """Recorded score, 0 when none was stored."""
    return float(candidate.score) if candidate.score is not None else 0.0


def mean_score(candidates: Iterable[CandidateRecord]) -> float:
    scores = [candidate_score(c) for c in candidates]
    return sum(scores) / len(scores) if scores else 0.0


def campaign_stats(
    campaign: Campaign, all_candidates: Iterable[CandidateRecord]
) -> CampaignStats:
    """Recompute the counters for ``campaign`` from the candidate rows.

    ``all_candidates`` may include other campaigns' candidates; they are
    ignored.  The average covers completed candidates only and is 0.0 when
    there are none.
    """
    mine = [c for c in all_candidates if c.campaign_id == campaign.id]
    completed = [c for c in mine if c.status == CandidateStatus.completed]
    return CampaignStats(
        campaign_id=campaign.id,
        campaign_name=campaign.name,
        total_candidates=len(mine),
        completed_candidates=len(completed),
        average_score=mean_score(completed),
    )


def get_campaign_stats(campaign_id: str) -> CampaignStats:
    campaign = get_campaign(campaign_id)
    if campaign is None:
        raise NotFoundError(f"Campaign {campaign_id} not found")
    return campaign_stats(campaign, list_candidates_by_campaign(campaign_id))


def _write_counters(campaign: Campaign, stats: CampaignStats) -> None:
    counters = CampaignCountersUpdate(
        total_candidates=stats.total_candidates,
        completed_candidates=stats.completed_candidates,
        average_score=stats.average_score,
    )
    update_campaign(campaign.id, counters.model_dump())


def refresh_campaign_counters(campaign_id: str) -> CampaignStats:
    """Recompute one campaign's counters and write them to its cache columns."""
    campaign = get_campaign(campaign_id)
    if campaign is None:
        raise NotFoundError(f"Campaign {campaign_id} not found")
    stats = campaign_stats(campaign, list_candidates_by_campaign(campaign_id))
    _write_counters(campaign, stats)
    return stats


def sync_all_campaign_counters() -> dict[str, Any]:
    """Rewrite the counter cache for every campaign whose cache is stale."""
    campaigns = list_campaigns()
    candidates = list_candidates()

    updated = 0
    for campaign in campaigns:
        stats = campaign_stats(campaign, candidates)
        stale = (
            campaign.total_candidates != stats.total_candidates
            or campaign.completed_candidates != stats.completed_candidates
            or abs(campaign.average_score - stats.average_score) > 1e-9
        )
        if stale:
            _write_counters(campaign, stats)
            updated += 1

    logger.info(
        "campaign_counters_synced",
        extra={"campaigns": len(campaigns), "updated": updated},
    )
    return {"campaigns": len(campaigns), "updated": updated}
