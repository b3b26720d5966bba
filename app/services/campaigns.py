"""Campaign lifecycle guard.

A campaign only becomes active after its question pool passes the integrity
checks in ``app.services.assignment``.
"""

from __future__ import annotations

import logging

from app.core.errors import ConsistencyError, NotFoundError
from app.db.repository import get_campaign, list_questions_by_ids, update_campaign
from app.models.campaign import Campaign
from app.models.enums import CampaignStatus
from app.models.question import Question
from app.services.assignment import validate_campaign_pool

logger = logging.getLogger(__name__)


def validate_campaign(campaign_id: str) -> tuple[Campaign, list[Question]]:
    """Load a campaign and its pool and check the pool invariants."""
    campaign = get_campaign(campaign_id)
    if campaign is None:
        raise NotFoundError(f"Campaign {campaign_id} not found")

    questions = list_questions_by_ids(campaign.question_set_ids)
    try:
        validate_campaign_pool(campaign, questions)
    except ConsistencyError as exc:
        logger.error(
            "campaign_pool_inconsistent",
            extra={"campaign_id": campaign_id, "error_message": exc.message},
        )
        raise
    return campaign, questions


def activate_campaign(campaign_id: str) -> Campaign:
    """Validate the pool, then move the campaign to ``active``."""
    campaign, _ = validate_campaign(campaign_id)
    if campaign.status == CampaignStatus.active:
        return campaign

    updated = update_campaign(campaign_id, {"status": CampaignStatus.active})
    logger.info(
        "campaign_activated",
        extra={"campaign_id": campaign_id, "previous_status": campaign.status.value},
    )
    return updated
