"""Campaign lifecycle endpoints.

POST /{id}/validate -- run the pool integrity checks.
POST /{id}/activate -- validate, then switch the campaign to active.
POST /sync-counters -- reconcile the cached counters now (409 if running).
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, HTTPException

from app.models.campaign import Campaign
from app.scheduler.jobs import run_counter_sync
from app.scheduler.lock import get_current_run_id, is_sync_running
from app.services.campaigns import activate_campaign, validate_campaign

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/sync-counters", status_code=200)
async def campaigns_sync_counters() -> dict[str, Any]:
    """Rewrite stale campaign counters from the candidate rows."""
    if is_sync_running():
        current_run = get_current_run_id()
        raise HTTPException(
            status_code=409,
            detail="Counter sync already in progress",
            headers={"X-Current-Run-Id": str(current_run) if current_run else "unknown"},
        )
    return run_counter_sync(trigger="manual")


@router.post("/{campaign_id}/validate")
async def campaigns_validate(campaign_id: str) -> dict[str, Any]:
    """Check that the pool is well formed and stays inside the department."""
    campaign, questions = validate_campaign(campaign_id)
    return {
        "campaign_id": campaign.id,
        "valid": True,
        "question_count": len(questions),
        "questions_per_candidate": campaign.questions_per_candidate,
    }


@router.post("/{campaign_id}/activate", response_model=Campaign)
async def campaigns_activate(campaign_id: str) -> Campaign:
    return activate_campaign(campaign_id)
