"""Leaderboard construction.

Only completed candidates are ranked.  Ordering is by score, highest first,
using a stable sort: equal scores keep their input order, and ranks run
1..N with no shared positions.  Pass/fail is judged against each candidate's
own campaign, so a global leaderboard can mix thresholds.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import datetime, timezone

from app.core.errors import ConsistencyError, ValidationError
from app.models.analytics import Result
from app.models.campaign import Campaign
from app.models.candidate import CandidateRecord
from app.models.enums import CandidateStatus, RankingScope, ResultStatus
from app.services.scoring import result_status, round_half_up
from app.services.stats import candidate_score


def time_taken_minutes(started: datetime | None, completed: datetime | None) -> int:
    """Whole minutes between start and completion, never negative."""
    if started is None or completed is None:
        return 0
    # timestamp columns without a zone hold UTC
    if started.tzinfo is None:
        started = started.replace(tzinfo=timezone.utc)
    if completed.tzinfo is None:
        completed = completed.replace(tzinfo=timezone.utc)
    minutes = (completed - started).total_seconds() / 60
    return max(0, round_half_up(minutes))


def rank_candidates(
    candidates: Iterable[CandidateRecord],
    campaigns_by_id: Mapping[str, Campaign],
    scope: RankingScope = RankingScope.campaign,
) -> list[Result]:
    """Build the ordered results for the completed ``candidates``."""
    completed = [c for c in candidates if c.status == CandidateStatus.completed]

    if scope == RankingScope.campaign:
        campaign_ids = {c.campaign_id for c in completed}
        if len(campaign_ids) > 1:
            raise ValidationError(
                "Campaign-scoped ranking received candidates from several campaigns"
            )

    # sorted() is stable, also with reverse=True
    ordered = sorted(completed, key=candidate_score, reverse=True)

    results: list[Result] = []
    for position, candidate in enumerate(ordered, start=1):
        campaign = campaigns_by_id.get(candidate.campaign_id or "")
        if campaign is None:
            raise ConsistencyError(
                f"Candidate {candidate.id} references missing campaign {candidate.campaign_id}"
            )
        total = candidate_score(candidate)
        results.append(
            Result(
                candidate_id=candidate.id,
                candidate_name=candidate.full_name,
                email=candidate.email,
                campaign_id=campaign.id,
                campaign_name=campaign.name,
                rank=position,
                total_score=total,
                passing_score=campaign.passing_score,
                status=result_status(total, campaign.passing_score),
                time_taken_minutes=time_taken_minutes(
                    candidate.interview_started_at,
                    candidate.interview_completed_at,
                ),
                completed_at=candidate.interview_completed_at or candidate.updated_at,
            )
        )
    return results


def filter_results(
    results: Iterable[Result],
    status_filter: ResultStatus | None = None,
    search_text: str | None = None,
) -> list[Result]:
    """Narrow ranked results by pass/fail and a name/email substring.

    Applied after ranking, so ranks are those of the unfiltered board.
    """
    needle = (search_text or "").strip().lower()
    out: list[Result] = []
    for result in results:
        if status_filter is not None and result.status != status_filter:
            continue
        if needle and needle not in result.candidate_name.lower() and needle not in result.email.lower():
            continue
        out.append(result)
    return out
