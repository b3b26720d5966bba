"""Campaign question-pool assignment.

A candidate gets a fixed, ordered subset of the campaign pool.  It is
computed once, persisted immediately and never recomputed on read; once the
interview has started it can no longer change.

Pool invariants enforced here:

* the pool is a non-empty ordered set (no duplicate ids)
* ``1 <= questions_per_candidate <= len(pool)``
* every pooled question exists and belongs to the campaign department
"""

from __future__ import annotations

import logging
import random
from collections.abc import Sequence
from datetime import datetime, timezone

from app.core.errors import (
    AssignmentLockedError,
    CampaignInactiveError,
    ConsistencyError,
    NotFoundError,
    ValidationError,
)
from app.db.repository import (
    assign_questions_if_unassigned,
    get_campaign,
    get_candidate,
    list_questions_by_ids,
    update_candidate,
)
from app.models.campaign import Campaign
from app.models.candidate import CandidateRecord
from app.models.enums import CampaignStatus, CandidateStatus
from app.models.question import CandidateQuestion, Question
from app.models.submission import AssignmentResponse
from app.services.locks import candidate_lock

logger = logging.getLogger(__name__)

_system_random = random.SystemRandom()


# ---------------------------------------------------------------------------
# Pure rules
# ---------------------------------------------------------------------------

def check_pool_bounds(campaign: Campaign) -> None:
    """Raise ``ValidationError`` unless the pool and per-candidate count fit."""
    pool = campaign.question_set_ids
    if not pool:
        raise ValidationError(f"Campaign {campaign.id} has no questions in its pool")
    if len(set(pool)) != len(pool):
        raise ValidationError(f"Campaign {campaign.id} lists a question more than once")
    count = campaign.questions_per_candidate
    if not 1 <= count <= len(pool):
        raise ValidationError(
            f"questions_per_candidate must be between 1 and {len(pool)}, got {count}"
        )


def validate_campaign_pool(campaign: Campaign, questions: Sequence[Question]) -> None:
    """Check the pool bounds and that every pooled question is usable.

    ``questions`` is whatever storage returned for the pool ids; ids without a
    row and rows from another department are both integrity violations.
    """
    check_pool_bounds(campaign)

    found = {q.id: q for q in questions}
    missing = [qid for qid in campaign.question_set_ids if qid not in found]
    if missing:
        raise ConsistencyError(
            f"Campaign {campaign.id} references missing questions: {', '.join(missing)}"
        )

    foreign = [
        qid for qid in campaign.question_set_ids
        if found[qid].department_id != campaign.department_id
    ]
    if foreign:
        raise ConsistencyError(
            f"Campaign {campaign.id} pools questions outside department "
            f"{campaign.department_id}: {', '.join(foreign)}"
        )


def assign_questions(
    campaign: Campaign,
    candidate: CandidateRecord,
    questions: Sequence[Question] | None = None,
    rng: random.Random | None = None,
) -> list[str]:
    """Pick the ordered question ids for ``candidate``.

    Randomized campaigns draw a uniform sample without replacement (already
    in random order); others take the first ``questions_per_candidate`` ids.
    When ``questions`` is given the department invariant is checked too.
    """
    if (
        candidate.interview_started_at is not None
        or candidate.status == CandidateStatus.completed
    ):
        raise AssignmentLockedError(
            f"Candidate {candidate.id} already started; assignment is locked"
        )

    if questions is not None:
        validate_campaign_pool(campaign, questions)
    else:
        check_pool_bounds(campaign)

    pool = list(campaign.question_set_ids)
    count = campaign.questions_per_candidate
    if campaign.is_randomized:
        return (rng or _system_random).sample(pool, count)
    return pool[:count]


# ---------------------------------------------------------------------------
# Storage-backed operations
# ---------------------------------------------------------------------------

def load_candidate_and_campaign(candidate_id: str) -> tuple[CandidateRecord, Campaign]:
    """Fetch a candidate and the campaign it belongs to."""
    candidate = get_candidate(candidate_id)
    if candidate is None:
        raise NotFoundError(f"Candidate {candidate_id} not found")
    if not candidate.campaign_id:
        raise ConsistencyError(f"Candidate {candidate_id} is not linked to a campaign")
    campaign = get_campaign(candidate.campaign_id)
    if campaign is None:
        logger.error(
            "candidate_campaign_missing",
            extra={"candidate_id": candidate_id, "campaign_id": candidate.campaign_id},
        )
        raise ConsistencyError(
            f"Candidate {candidate_id} references missing campaign {candidate.campaign_id}"
        )
    return candidate, campaign


def build_assignment_view(
    candidate: CandidateRecord, campaign: Campaign
) -> AssignmentResponse:
    """Assignment ids plus the candidate-facing question bodies, in order."""
    questions = list_questions_by_ids(candidate.assigned_questions)
    return AssignmentResponse(
        candidate_id=candidate.id,
        campaign_id=campaign.id,
        assigned_questions=candidate.assigned_questions,
        questions=[CandidateQuestion.from_question(q) for q in questions],
        locked=candidate.interview_started_at is not None,
    )


def _ensure_assignment_locked(
    candidate: CandidateRecord,
    campaign: Campaign,
    rng: random.Random | None,
) -> CandidateRecord:
    """Body of ``ensure_assignment``; caller holds the candidate lock."""
    if candidate.assigned_questions:
        return candidate
    if campaign.status != CampaignStatus.active:
        raise CampaignInactiveError(f"Campaign {campaign.id} is not currently active")

    pool_questions = list_questions_by_ids(campaign.question_set_ids)
    ids = assign_questions(campaign, candidate, questions=pool_questions, rng=rng)

    updated = assign_questions_if_unassigned(candidate.id, ids)
    if updated is None:
        # Lost the conditional update: keep whatever was stored first.
        current = get_candidate(candidate.id)
        if current is not None and current.assigned_questions:
            logger.info(
                "assignment_already_present",
                extra={"candidate_id": candidate.id},
            )
            return current
        raise AssignmentLockedError(
            f"Candidate {candidate.id} started before questions were assigned"
        )

    logger.info(
        "questions_assigned",
        extra={
            "candidate_id": candidate.id,
            "campaign_id": campaign.id,
            "count": len(ids),
            "randomized": campaign.is_randomized,
        },
    )
    return updated


def ensure_assignment(
    candidate_id: str, rng: random.Random | None = None
) -> AssignmentResponse:
    """Return the candidate's assignment, creating and persisting it if absent.

    A new draw is only made while the campaign is active.
    """
    with candidate_lock(candidate_id):
        candidate, campaign = load_candidate_and_campaign(candidate_id)
        candidate = _ensure_assignment_locked(candidate, campaign, rng)
    return build_assignment_view(candidate, campaign)


def reassign_questions(
    candidate_id: str, rng: random.Random | None = None
) -> AssignmentResponse:
    """Admin action: draw a fresh assignment for a candidate who has not started."""
    with candidate_lock(candidate_id):
        candidate, campaign = load_candidate_and_campaign(candidate_id)
        pool_questions = list_questions_by_ids(campaign.question_set_ids)
        ids = assign_questions(campaign, candidate, questions=pool_questions, rng=rng)
        candidate = update_candidate(candidate_id, {"assigned_questions": ids})
        logger.info(
            "questions_reassigned",
            extra={"candidate_id": candidate_id, "campaign_id": campaign.id},
        )
    return build_assignment_view(candidate, campaign)


def start_interview(
    candidate_id: str, now: datetime | None = None
) -> AssignmentResponse:
    """Stamp the interview start, which locks the assignment.

    Starting twice is harmless: the first timestamp is kept.
    """
    with candidate_lock(candidate_id):
        candidate, campaign = load_candidate_and_campaign(candidate_id)
        if campaign.status != CampaignStatus.active:
            raise CampaignInactiveError(f"Campaign {campaign.id} is not currently active")
        if candidate.status == CandidateStatus.completed:
            raise AssignmentLockedError(
                f"Candidate {candidate_id} already submitted; the interview cannot restart"
            )

        if candidate.interview_started_at is None:
            candidate = _ensure_assignment_locked(candidate, campaign, rng=None)
            candidate = update_candidate(
                candidate_id,
                {
                    "interview_started_at": now or datetime.now(timezone.utc),
                    "status": CandidateStatus.in_progress,
                },
            )
            logger.info(
                "interview_started",
                extra={"candidate_id": candidate_id, "campaign_id": campaign.id},
            )
    return build_assignment_view(candidate, campaign)
