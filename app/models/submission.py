"""Request / response models for candidate answer submission."""

from typing import Any

from pydantic import BaseModel

from app.models.enums import CandidateStatus, ResultStatus
from app.models.question import CandidateQuestion


class SubmissionRequest(BaseModel):
    """Payload posted when a candidate finishes the interview.

    ``answers`` and ``score`` are deliberately loose here; the scoring service
    validates them so that malformed input maps to a 400 with a domain message
    instead of a schema error.  ``score`` is only present when an external
    grader already graded the attempt.
    """
    answers: Any = None
    interview_started_at: str | None = None
    interview_completed_at: str | None = None
    score: Any = None


class SubmissionResponse(BaseModel):
    candidate_id: str
    status: CandidateStatus
    score: float
    result: ResultStatus


class AssignmentResponse(BaseModel):
    """Ordered question ids assigned to a candidate."""
    candidate_id: str
    campaign_id: str
    assigned_questions: list[str]
    questions: list[CandidateQuestion] = []
    locked: bool = False
