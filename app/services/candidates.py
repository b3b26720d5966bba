"""Candidate onboarding and access.

Creation draws the question assignment up front when the campaign pool is
usable; login repeats the draw only if it never happened.  Password reset
touches ``temp_password`` and nothing else.
"""

from __future__ import annotations

import logging
import secrets

from app.core.constants import (
    TEMP_PASSWORD_MAX,
    TEMP_PASSWORD_MIN,
    TEMP_PASSWORD_PREFIX,
)
from app.core.errors import (
    AuthenticationError,
    CampaignInactiveError,
    ConsistencyError,
    NotFoundError,
)
from app.db.repository import (
    find_candidate_by_credentials,
    get_campaign,
    get_candidate,
    insert_candidate,
    list_questions_by_ids,
    update_candidate,
)
from app.models.candidate import (
    CandidateCreate,
    CandidateCreated,
    CandidateRecord,
    CandidateSession,
    PasswordResetResponse,
)
from app.models.enums import CampaignStatus
from app.services.assignment import assign_questions, ensure_assignment
from app.services.locks import candidate_lock

logger = logging.getLogger(__name__)


def generate_temp_password() -> str:
    """``temp`` followed by four random digits."""
    span = TEMP_PASSWORD_MAX - TEMP_PASSWORD_MIN + 1
    return f"{TEMP_PASSWORD_PREFIX}{TEMP_PASSWORD_MIN + secrets.randbelow(span)}"


def create_candidate(payload: CandidateCreate) -> CandidateCreated:
    """Insert a candidate with its assignment and a temporary password.

    If the campaign pool is still empty (draft campaigns often are) the
    candidate is stored without an assignment; the first login draws it.
    """
    campaign = get_campaign(payload.campaign_id)
    if campaign is None:
        raise NotFoundError(f"Campaign {payload.campaign_id} not found")

    data = payload.model_dump(exclude={"temp_password"})
    data["email"] = str(payload.email).strip().lower()
    data["temp_password"] = payload.temp_password or generate_temp_password()
    data["answers"] = {}
    data["score"] = 0

    assigned: list[str] = []
    if campaign.question_set_ids:
        draft = CandidateRecord(id="", campaign_id=campaign.id)
        pool_questions = list_questions_by_ids(campaign.question_set_ids)
        assigned = assign_questions(campaign, draft, questions=pool_questions)
    data["assigned_questions"] = assigned

    record = insert_candidate(data)
    logger.info(
        "candidate_created",
        extra={
            "candidate_id": record.id,
            "campaign_id": campaign.id,
            "assigned_count": len(assigned),
        },
    )
    return CandidateCreated(
        id=record.id,
        email=record.email,
        campaign_id=campaign.id,
        status=record.status,
        assigned_questions=record.assigned_questions,
        temp_password=data["temp_password"],
    )


def authenticate_candidate(email: str, temp_password: str) -> CandidateSession:
    """Check credentials and make sure the candidate has questions to answer."""
    candidate = find_candidate_by_credentials(email, temp_password)
    if candidate is None:
        raise AuthenticationError("Invalid email or password")

    if not candidate.campaign_id:
        raise ConsistencyError(f"Candidate {candidate.id} is not linked to a campaign")
    campaign = get_campaign(candidate.campaign_id)
    if campaign is None:
        logger.error(
            "candidate_campaign_missing",
            extra={"candidate_id": candidate.id, "campaign_id": candidate.campaign_id},
        )
        raise ConsistencyError(f"Campaign not found for candidate {candidate.id}")
    if campaign.status != CampaignStatus.active:
        raise CampaignInactiveError("This campaign is not currently active")

    assigned = candidate.assigned_questions
    if not assigned:
        assigned = ensure_assignment(candidate.id).assigned_questions

    logger.info("candidate_login", extra={"candidate_id": candidate.id})
    return CandidateSession(
        id=candidate.id,
        first_name=candidate.first_name,
        last_name=candidate.last_name,
        email=candidate.email,
        status=candidate.status,
        campaign_id=campaign.id,
        campaign_name=campaign.name,
        duration_per_candidate=campaign.duration_per_candidate,
        assigned_questions=assigned,
        interview_started_at=candidate.interview_started_at,
        interview_completed_at=candidate.interview_completed_at,
    )


def reset_password(candidate_id: str) -> PasswordResetResponse:
    """Rotate the candidate's temporary password."""
    with candidate_lock(candidate_id):
        if get_candidate(candidate_id) is None:
            raise NotFoundError(f"Candidate {candidate_id} not found")
        new_password = generate_temp_password()
        update_candidate(candidate_id, {"temp_password": new_password})

    logger.info("candidate_password_reset", extra={"candidate_id": candidate_id})
    return PasswordResetResponse(candidate_id=candidate_id, temp_password=new_password)
