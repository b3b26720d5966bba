"""Pydantic models for the ``campaigns`` table.

``total_candidates``, ``completed_candidates`` and ``average_score`` are a
denormalized cache refreshed by ``app.services.stats``; read paths always
recompute them from the candidate rows.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.models.enums import CampaignStatus


class Campaign(BaseModel):
    """Full campaign record returned from the database."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    description: str = ""
    department_id: str
    start_date: datetime | None = None
    end_date: datetime | None = None
    duration_per_candidate: int = 60
    status: CampaignStatus = CampaignStatus.draft
    question_set_ids: list[str] = Field(default_factory=list)
    questions_per_candidate: int = 0
    is_randomized: bool = True
    passing_score: float = Field(default=70.0, ge=0.0, le=100.0)
    passing_criteria: str | None = None
    # Cached counters -- never authoritative
    total_candidates: int = 0
    completed_candidates: int = 0
    average_score: float = 0.0
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @field_validator("question_set_ids", mode="before")
    @classmethod
    def _null_pool_is_empty(cls, value: Any) -> Any:
        return [] if value is None else value


class CampaignCountersUpdate(BaseModel):
    """Payload written when the counter cache is refreshed."""
    total_candidates: int
    completed_candidates: int
    average_score: float
