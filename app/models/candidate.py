"""Pydantic models for the ``candidates`` table.

Status values are normalized on the way in so that every consumer sees the
canonical ``CandidateStatus`` regardless of which spelling was stored.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from app.core.constants import CANDIDATE_STATUS_ALIASES
from app.models.enums import CandidateStatus


def normalize_status(value: Any) -> Any:
    """Map legacy spellings (``"in progress"``) onto canonical values."""
    if isinstance(value, str):
        key = value.strip().lower()
        return CANDIDATE_STATUS_ALIASES.get(key, value)
    return value


def normalize_answers(value: Any) -> Any:
    """Accept the legacy list-of-answers shape and turn it into a mapping.

    Older rows store ``[]`` or ``[{"questionId": ..., "answer": ...}]``.
    """
    if value is None:
        return {}
    if isinstance(value, list):
        mapping: dict[str, Any] = {}
        for item in value:
            if not isinstance(item, dict):
                continue
            qid = item.get("question_id") or item.get("questionId")
            if qid:
                mapping[str(qid)] = item.get("answer", item)
        return mapping
    return value


class CandidateCreate(BaseModel):
    """Payload for creating a candidate (insert)."""
    first_name: str
    last_name: str
    email: EmailStr
    phone: str | None = None
    education: dict[str, Any] = Field(default_factory=dict)
    preferred_department_id: str | None = None
    campaign_id: str
    status: CandidateStatus = CandidateStatus.not_started
    temp_password: str | None = None

    _normalize_status = field_validator("status", mode="before")(normalize_status)


class CandidateRecord(BaseModel):
    """Full candidate record returned from the database."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    phone: str | None = None
    education: dict[str, Any] = Field(default_factory=dict)
    preferred_department_id: str | None = None
    campaign_id: str | None = None
    status: CandidateStatus = CandidateStatus.not_started
    assigned_questions: list[str] = Field(default_factory=list)
    answers: dict[str, Any] = Field(default_factory=dict)
    score: float | None = None
    rank: int | None = None  # computed on read, never stored
    temp_password: str | None = None
    interview_started_at: datetime | None = None
    interview_completed_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    _normalize_status = field_validator("status", mode="before")(normalize_status)
    _normalize_answers = field_validator("answers", mode="before")(normalize_answers)

    @field_validator("education", mode="before")
    @classmethod
    def _default_education(cls, value: Any) -> Any:
        return value or {}

    @field_validator("assigned_questions", mode="before")
    @classmethod
    def _null_assignment_is_empty(cls, value: Any) -> Any:
        # rows created before assignment existed store NULL
        return [] if value is None else value

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class CandidateLogin(BaseModel):
    """Credentials posted by the candidate app."""
    email: str
    temp_password: str


class CandidateSession(BaseModel):
    """Response for a successful candidate login."""
    id: str
    first_name: str
    last_name: str
    email: str
    status: CandidateStatus
    campaign_id: str
    campaign_name: str
    duration_per_candidate: int
    assigned_questions: list[str] = []
    interview_started_at: datetime | None = None
    interview_completed_at: datetime | None = None


class CandidateCreated(BaseModel):
    """Response for candidate creation; includes the temporary password."""
    id: str
    email: str
    campaign_id: str
    status: CandidateStatus
    assigned_questions: list[str] = []
    temp_password: str


class PasswordResetResponse(BaseModel):
    candidate_id: str
    temp_password: str
    message: str = "Password reset successfully"
