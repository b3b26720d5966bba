"""Unit tests for campaign validation and activation."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from app.core.errors import ConsistencyError, NotFoundError, ValidationError
from app.models.campaign import Campaign
from app.models.enums import CampaignStatus
from app.models.question import Question


def _campaign(**overrides: object) -> Campaign:
    data: dict = {
        "id": "camp-1",
        "name": "Platform Hiring",
        "department_id": "dept-eng",
        "status": CampaignStatus.draft,
        "question_set_ids": ["q1", "q2", "q3"],
        "questions_per_candidate": 2,
    }
    data.update(overrides)
    return Campaign(**data)


def _questions(*ids: str, department_id: str = "dept-eng") -> list[Question]:
    return [
        Question(id=qid, title=qid, answer_type="code_editor", department_id=department_id)
        for qid in ids
    ]


class TestValidateCampaign:
    """Pool integrity check before activation."""

    @patch("app.services.campaigns.list_questions_by_ids")
    @patch("app.services.campaigns.get_campaign")
    def test_valid_pool(self, mock_get: MagicMock, mock_questions: MagicMock) -> None:
        from app.services.campaigns import validate_campaign

        mock_get.return_value = _campaign()
        mock_questions.return_value = _questions("q1", "q2", "q3")

        campaign, questions = validate_campaign("camp-1")

        assert campaign.id == "camp-1"
        assert [q.id for q in questions] == ["q1", "q2", "q3"]

    @patch("app.services.campaigns.get_campaign", return_value=None)
    def test_unknown_campaign(self, mock_get: MagicMock) -> None:
        from app.services.campaigns import validate_campaign

        with pytest.raises(NotFoundError):
            validate_campaign("nope")

    @patch("app.services.campaigns.list_questions_by_ids")
    @patch("app.services.campaigns.get_campaign")
    def test_missing_question(self, mock_get: MagicMock, mock_questions: MagicMock) -> None:
        from app.services.campaigns import validate_campaign

        mock_get.return_value = _campaign()
        mock_questions.return_value = _questions("q1", "q3")

        with pytest.raises(ConsistencyError, match="q2"):
            validate_campaign("camp-1")

    @patch("app.services.campaigns.list_questions_by_ids")
    @patch("app.services.campaigns.get_campaign")
    def test_count_out_of_bounds(self, mock_get: MagicMock, mock_questions: MagicMock) -> None:
        from app.services.campaigns import validate_campaign

        mock_get.return_value = _campaign(questions_per_candidate=4)
        mock_questions.return_value = _questions("q1", "q2", "q3")

        with pytest.raises(ValidationError):
            validate_campaign("camp-1")


class TestActivateCampaign:
    """Activation only happens for consistent pools."""

    @patch("app.services.campaigns.update_campaign")
    @patch("app.services.campaigns.list_questions_by_ids")
    @patch("app.services.campaigns.get_campaign")
    def test_activate(
        self,
        mock_get: MagicMock,
        mock_questions: MagicMock,
        mock_update: MagicMock,
    ) -> None:
        from app.services.campaigns import activate_campaign

        mock_get.return_value = _campaign()
        mock_questions.return_value = _questions("q1", "q2", "q3")
        mock_update.return_value = _campaign(status=CampaignStatus.active)

        campaign = activate_campaign("camp-1")

        mock_update.assert_called_once_with("camp-1", {"status": CampaignStatus.active})
        assert campaign.status == CampaignStatus.active

    @patch("app.services.campaigns.update_campaign")
    @patch("app.services.campaigns.list_questions_by_ids")
    @patch("app.services.campaigns.get_campaign")
    def test_already_active_is_noop(
        self,
        mock_get: MagicMock,
        mock_questions: MagicMock,
        mock_update: MagicMock,
    ) -> None:
        from app.services.campaigns import activate_campaign

        mock_get.return_value = _campaign(status=CampaignStatus.active)
        mock_questions.return_value = _questions("q1", "q2", "q3")

        activate_campaign("camp-1")

        mock_update.assert_not_called()

    @patch("app.services.campaigns.update_campaign")
    @patch("app.services.campaigns.list_questions_by_ids")
    @patch("app.services.campaigns.get_campaign")
    def test_foreign_department_blocks_activation(
        self,
        mock_get: MagicMock,
        mock_questions: MagicMock,
        mock_update: MagicMock,
        test_client: TestClient,
    ) -> None:
        mock_get.return_value = _campaign()
        mock_questions.return_value = _questions("q1", "q2") + _questions(
            "q3", department_id="dept-sales"
        )

        response = test_client.post("/api/v1/campaigns/camp-1/activate")

        assert response.status_code == 500
        assert response.json()["error"]["type"] == "consistency_error"
        mock_update.assert_not_called()

    @patch("app.services.campaigns.list_questions_by_ids")
    @patch("app.services.campaigns.get_campaign")
    def test_validate_endpoint(
        self,
        mock_get: MagicMock,
        mock_questions: MagicMock,
        test_client: TestClient,
    ) -> None:
        mock_get.return_value = _campaign()
        mock_questions.return_value = _questions("q1", "q2", "q3")

        response = test_client.post("/api/v1/campaigns/camp-1/validate")

        assert response.status_code == 200
        assert response.json() == {
            "campaign_id": "camp-1",
            "valid": True,
            "question_count": 3,
            "questions_per_candidate": 2,
        }
