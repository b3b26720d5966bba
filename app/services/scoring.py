"""Scoring of candidate submissions.

Two paths produce a score:

1. **External grade** -- the submission carries a numeric ``score`` computed
   outside this service (a code runner, an exact-match grader).  It is
   trusted, only clamped to ``[0, 100]``.
2. **Completion ratio** -- otherwise the score is the share of assigned
   questions that have an entry in ``answers``.  This is a coarse proxy for
   effort, not a grade, and it is the same approximation the dashboards use.

Pass/fail compares the score with the campaign ``passing_score``.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any

from app.core.constants import FALLBACK_QUESTION_COUNT, SCORE_MAX, SCORE_MIN
from app.core.errors import CampaignInactiveError, InterviewError, ValidationError
from app.db.repository import update_candidate
from app.models.campaign import Campaign
from app.models.candidate import CandidateRecord
from app.models.enums import CampaignStatus, CandidateStatus, ResultStatus
from app.models.submission import SubmissionRequest, SubmissionResponse
from app.services.assignment import load_candidate_and_campaign
from app.services.locks import candidate_lock
from app.services.stats import refresh_campaign_counters

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Input validation
# ---------------------------------------------------------------------------

def round_half_up(value: float) -> int:
    """Round .5 away from zero for non-negative values (``round`` is banker's)."""
    return int(math.floor(value + 0.5))


def clamp_score(value: float) -> float:
    return max(SCORE_MIN, min(SCORE_MAX, value))


def validate_answers(answers: Any) -> dict[str, Any]:
    """Return ``answers`` as a plain dict keyed by question id."""
    if not isinstance(answers, Mapping):
        raise ValidationError(
            f"answers must be a mapping of question id to answer, got {type(answers).__name__}"
        )
    return {str(key): value for key, value in answers.items()}


def parse_external_score(raw: Any) -> float | None:
    """Validate a client-supplied score; ``None`` means "not supplied"."""
    if raw is None:
        return None
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        raise ValidationError(f"score must be a number, got {type(raw).__name__}")
    value = float(raw)
    if not math.isfinite(value):
        raise ValidationError("score must be a finite number")
    if value != clamp_score(value):
        logger.warning("external_score_clamped", extra={"raw_score": value})
    return clamp_score(value)


def parse_timestamp(raw: str | None, field: str) -> datetime | None:
    """Parse an ISO-8601 timestamp; missing values are allowed."""
    if raw is None or raw == "":
        return None
    try:
        parsed = datetime.fromisoformat(raw.replace("Z", "+00:00"))
    except (TypeError, ValueError) as exc:
        raise ValidationError(f"{field} is not a valid ISO-8601 timestamp: {raw!r}") from exc
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


# ---------------------------------------------------------------------------
# Scoring rules
# ---------------------------------------------------------------------------

def count_answered(candidate: CandidateRecord, answers: Mapping[str, Any]) -> int:
    """Distinct assigned question ids that appear in ``answers``."""
    return len(set(candidate.assigned_questions) & set(answers))


def completion_score(candidate: CandidateRecord, answers: Mapping[str, Any]) -> int:
    denominator = len(candidate.assigned_questions) or FALLBACK_QUESTION_COUNT
    return round_half_up(100 * count_answered(candidate, answers) / denominator)


def result_status(score: float, passing_score: float) -> ResultStatus:
    return ResultStatus.passed if score >= passing_score else ResultStatus.failed


def compute_score(
    candidate: CandidateRecord,
    campaign: Campaign,
    answers: Any,
    external_score: Any = None,
) -> tuple[float, ResultStatus]:
    """Score one submission.  Pure: nothing is read from or written to storage."""
    answers_map = validate_answers(answers)
    graded = parse_external_score(external_score)

    score = graded if graded is not None else float(completion_score(candidate, answers_map))
    return score, result_status(score, campaign.passing_score)


# ---------------------------------------------------------------------------
# Submission
# ---------------------------------------------------------------------------

def submit_answers(candidate_id: str, submission: SubmissionRequest) -> SubmissionResponse:
    """Record a submission and its score for ``candidate_id``.

    The answers, status, score and timestamps go out in one update while the
    candidate lock is held.  Submitting again replaces the previous attempt.
    """
    answers = validate_answers(submission.answers)
    started_at = parse_timestamp(submission.interview_started_at, "interview_started_at")
    completed_at = parse_timestamp(submission.interview_completed_at, "interview_completed_at")

    with candidate_lock(candidate_id):
        candidate, campaign = load_candidate_and_campaign(candidate_id)
        if campaign.status != CampaignStatus.active:
            raise CampaignInactiveError(f"Campaign {campaign.id} is not currently active")

        score, status = compute_score(candidate, campaign, answers, submission.score)

        update_candidate(
            candidate_id,
            {
                "answers": answers,
                "status": CandidateStatus.completed,
                "score": score,
                # keep the server-side start stamp when the client omits it
                "interview_started_at": started_at or candidate.interview_started_at,
                "interview_completed_at": completed_at,
            },
        )

    logger.info(
        "submission_scored",
        extra={
            "candidate_id": candidate_id,
            "campaign_id": campaign.id,
            "score": score,
            "result": status.value,
            "graded_externally": submission.score is not None,
        },
    )

    try:
        refresh_campaign_counters(campaign.id)
    except InterviewError:
        # Counters are a cache; the scheduled sync reconciles them.
        logger.warning(
            "counter_refresh_failed",
            extra={"campaign_id": campaign.id},
            exc_info=True,
        )

    return SubmissionResponse(
        candidate_id=candidate_id,
        status=CandidateStatus.completed,
        score=score,
        result=status,
    )
