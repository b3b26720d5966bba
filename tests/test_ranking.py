"""Unit tests for the ranking engine and the results endpoint."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from app.core.errors import ConsistencyError, ValidationError
from app.models.campaign import Campaign
from app.models.candidate import CandidateRecord
from app.models.enums import RankingScope, ResultStatus


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _campaign(campaign_id: str = "camp-1", passing_score: float = 70) -> Campaign:
    return Campaign(
        id=campaign_id,
        name=f"Campaign {campaign_id}",
        department_id="dept-eng",
        passing_score=passing_score,
    )


def _candidate(
    candidate_id: str,
    score: float | None,
    status: str = "completed",
    campaign_id: str = "camp-1",
    **extra: object,
) -> CandidateRecord:
    return CandidateRecord(
        id=candidate_id,
        first_name=candidate_id.title(),
        last_name="Tester",
        email=f"{candidate_id}@example.com",
        campaign_id=campaign_id,
        status=status,
        score=score,
        **extra,
    )


CAMPAIGNS = {"camp-1": _campaign()}


# ---------------------------------------------------------------------------
# rank_candidates
# ---------------------------------------------------------------------------


class TestRankCandidates:
    """Filtering, ordering and rank numbering."""

    def test_only_completed_are_ranked(self) -> None:
        from app.services.ranking import rank_candidates

        candidates = [
            _candidate("a", 50),
            _candidate("b", 99, status="in_progress"),
            _candidate("c", 0, status="not_started"),
            _candidate("d", 80, status="in progress"),
            _candidate("e", 70),
        ]

        results = rank_candidates(candidates, CAMPAIGNS)

        assert [r.candidate_id for r in results] == ["e", "a"]

    def test_ranks_are_sequential(self) -> None:
        from app.services.ranking import rank_candidates

        candidates = [_candidate(str(i), score) for i, score in enumerate([10, 90, 55, 90, 0])]

        results = rank_candidates(candidates, CAMPAIGNS)

        assert [r.rank for r in results] == [1, 2, 3, 4, 5]
        assert [r.total_score for r in results] == [90, 90, 55, 10, 0]

    def test_ties_keep_input_order(self) -> None:
        """Two 85s get consecutive ranks in their original order."""
        from app.services.ranking import rank_candidates

        candidates = [_candidate("first", 85), _candidate("second", 85)]

        results = rank_candidates(candidates, CAMPAIGNS)

        assert [(r.candidate_id, r.rank) for r in results] == [("first", 1), ("second", 2)]

        reversed_results = rank_candidates(list(reversed(candidates)), CAMPAIGNS)
        assert [r.candidate_id for r in reversed_results] == ["second", "first"]

    def test_missing_score_ranks_as_zero(self) -> None:
        from app.services.ranking import rank_candidates

        results = rank_candidates([_candidate("a", None), _candidate("b", 5)], CAMPAIGNS)

        assert [(r.candidate_id, r.total_score) for r in results] == [("b", 5), ("a", 0)]

    def test_pass_fail_uses_own_campaign_threshold(self) -> None:
        """Global boards judge each candidate against their own campaign."""
        from app.services.ranking import rank_candidates

        campaigns = {
            "easy": _campaign("easy", passing_score=50),
            "hard": _campaign("hard", passing_score=90),
        }
        candidates = [
            _candidate("a", 60, campaign_id="easy"),
            _candidate("b", 80, campaign_id="hard"),
        ]

        results = rank_candidates(candidates, campaigns, RankingScope.global_)

        by_id = {r.candidate_id: r for r in results}
        assert by_id["a"].status == ResultStatus.passed
        assert by_id["b"].status == ResultStatus.failed
        assert by_id["b"].rank == 1

    def test_campaign_scope_rejects_mixed_campaigns(self) -> None:
        from app.services.ranking import rank_candidates

        campaigns = {"camp-1": _campaign(), "camp-2": _campaign("camp-2")}
        candidates = [_candidate("a", 1), _candidate("b", 2, campaign_id="camp-2")]

        with pytest.raises(ValidationError):
            rank_candidates(candidates, campaigns, RankingScope.campaign)

    def test_missing_campaign_is_consistency_error(self) -> None:
        from app.services.ranking import rank_candidates

        with pytest.raises(ConsistencyError):
            rank_candidates([_candidate("a", 50, campaign_id="gone")], CAMPAIGNS)

    def test_incomplete_candidate_with_missing_campaign_is_ignored(self) -> None:
        from app.services.ranking import rank_candidates

        results = rank_candidates(
            [_candidate("a", 50, status="invited", campaign_id="gone")], CAMPAIGNS
        )

        assert results == []

    def test_result_carries_time_taken(self) -> None:
        from app.services.ranking import rank_candidates

        candidate = _candidate(
            "a",
            75,
            interview_started_at="2024-01-01T10:00:00Z",
            interview_completed_at="2024-01-01T10:45:00Z",
        )

        (result,) = rank_candidates([candidate], CAMPAIGNS)

        assert result.time_taken_minutes == 45
        assert result.completed_at == datetime(2024, 1, 1, 10, 45, tzinfo=timezone.utc)
        assert result.candidate_name == "A Tester"

    def test_ranking_twice_is_identical(self) -> None:
        from app.services.ranking import rank_candidates

        candidates = [_candidate("a", 40), _candidate("b", 70), _candidate("c", 70)]

        assert rank_candidates(candidates, CAMPAIGNS) == rank_candidates(candidates, CAMPAIGNS)


class TestTimeTaken:
    """Elapsed minutes between start and completion."""

    def test_rounds_to_nearest_minute(self) -> None:
        from app.services.ranking import time_taken_minutes

        start = datetime(2024, 1, 1, 10, 0, tzinfo=timezone.utc)

        assert time_taken_minutes(start, start + timedelta(minutes=12, seconds=30)) == 13
        assert time_taken_minutes(start, start + timedelta(minutes=12, seconds=29)) == 12

    def test_negative_floors_at_zero(self) -> None:
        from app.services.ranking import time_taken_minutes

        start = datetime(2024, 1, 1, 10, 0, tzinfo=timezone.utc)

        assert time_taken_minutes(start, start - timedelta(minutes=5)) == 0

    def test_missing_timestamp_is_zero(self) -> None:
        from app.services.ranking import time_taken_minutes

        now = datetime.now(timezone.utc)

        assert time_taken_minutes(None, now) == 0
        assert time_taken_minutes(now, None) == 0

    def test_naive_start_with_aware_completion(self) -> None:
        """A start read from a zoneless column is taken as UTC."""
        from app.services.ranking import time_taken_minutes

        naive_start = datetime(2024, 1, 1, 10, 0)
        aware_end = datetime(2024, 1, 1, 10, 45, tzinfo=timezone.utc)

        assert time_taken_minutes(naive_start, aware_end) == 45
        aware_start = aware_end - timedelta(minutes=20)
        assert time_taken_minutes(aware_start, datetime(2024, 1, 1, 10, 45)) == 20


class TestFilterResults:
    """Post-ranking filters keep the original ranks."""

    def test_status_and_search_filters(self) -> None:
        from app.services.ranking import filter_results, rank_candidates

        candidates = [_candidate("alice", 95), _candidate("bob", 40), _candidate("alina", 72)]
        ranked = rank_candidates(candidates, CAMPAIGNS)

        passed = filter_results(ranked, status_filter=ResultStatus.passed)
        assert [(r.candidate_id, r.rank) for r in passed] == [("alice", 1), ("alina", 2)]

        searched = filter_results(ranked, search_text="  ALI ")
        assert [r.candidate_id for r in searched] == ["alice", "alina"]

        failed_bob = filter_results(ranked, ResultStatus.failed, "bob@")
        assert [(r.candidate_id, r.rank) for r in failed_bob] == [("bob", 3)]


# ---------------------------------------------------------------------------
# get_results / endpoint
# ---------------------------------------------------------------------------


class TestGetResults:
    """Storage-backed leaderboard with counters."""

    @patch("app.services.analytics.list_candidates_by_campaign")
    @patch("app.services.analytics.get_campaign")
    def test_campaign_scope_counters(
        self, mock_get_campaign: MagicMock, mock_list: MagicMock
    ) -> None:
        from app.services.analytics import get_results

        mock_get_campaign.return_value = _campaign()
        mock_list.return_value = [
            _candidate("a", 90),
            _candidate("b", 60),
            _candidate("c", None, status="invited"),
        ]

        response = get_results("camp-1", status_filter=ResultStatus.failed)

        assert response.total_ranked == 2
        assert response.passed == 1
        assert response.failed == 1
        assert response.average_score == 75
        assert [r.candidate_id for r in response.results] == ["b"]
        assert response.results[0].rank == 2

    @patch("app.services.analytics.get_campaign", return_value=None)
    def test_unknown_campaign(self, mock_get_campaign: MagicMock) -> None:
        from app.core.errors import NotFoundError
        from app.services.analytics import get_results

        with pytest.raises(NotFoundError):
            get_results("nope")

    @patch("app.services.analytics.list_candidates")
    @patch("app.services.analytics.list_campaigns")
    def test_global_scope_empty(
        self, mock_campaigns: MagicMock, mock_candidates: MagicMock
    ) -> None:
        from app.services.analytics import get_results

        mock_campaigns.return_value = [_campaign()]
        mock_candidates.return_value = []

        response = get_results()

        assert response.results == []
        assert response.average_score == 0.0


class TestResultsEndpoint:
    """GET /api/v1/results query handling."""

    @patch("app.services.analytics.list_candidates")
    @patch("app.services.analytics.list_campaigns")
    def test_global_leaderboard(
        self,
        mock_campaigns: MagicMock,
        mock_candidates: MagicMock,
        test_client: TestClient,
    ) -> None:
        mock_campaigns.return_value = [_campaign("camp-1"), _campaign("camp-2", 95)]
        mock_candidates.return_value = [
            _candidate("a", 85, campaign_id="camp-1"),
            _candidate("b", 90, campaign_id="camp-2"),
        ]

        response = test_client.get("/api/v1/results", params={"search": "a@"})

        assert response.status_code == 200
        body = response.json()
        assert body["total_ranked"] == 2
        assert body["passed"] == 1
        assert [(r["candidate_id"], r["rank"], r["status"]) for r in body["results"]] == [
            ("a", 2, "passed"),
        ]

    def test_invalid_status_filter_is_422(self, test_client: TestClient) -> None:
        response = test_client.get("/api/v1/results", params={"status": "maybe"})

        assert response.status_code == 422
