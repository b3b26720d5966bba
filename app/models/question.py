"""Pydantic models for the ``questions`` and ``departments`` tables."""

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.core.constants import QUESTION_MARKS
from app.models.enums import AnswerType, Difficulty, SkillType


class Department(BaseModel):
    """Full department record returned from the database."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    description: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class Question(BaseModel):
    """Full question record returned from the database.

    The type-specific payload fields are only populated for the matching
    ``answer_type`` (options/correct_answer for multiple choice, and so on).
    """
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    description: str = ""
    answer_type: AnswerType
    department_id: str
    difficulty: Difficulty = Difficulty.intermediate
    skill_type: SkillType = SkillType.technical
    tags: list[str] = Field(default_factory=list)
    marks: Literal[10] = 10
    options: list[str] | None = None
    correct_answer: str | list[str] | None = None
    code_template: str | None = None
    rubric: str | None = None
    file_types: list[str] | None = None
    rating_scale: int | None = None
    solution_template: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @field_validator("tags", mode="before")
    @classmethod
    def _null_tags_are_empty(cls, value: Any) -> Any:
        return [] if value is None else value


class CandidateQuestion(BaseModel):
    """Question as shown to a candidate (no answer key)."""
    id: str
    title: str
    description: str = ""
    answer_type: AnswerType
    difficulty: Difficulty
    skill_type: SkillType
    marks: int = QUESTION_MARKS
    options: list[str] | None = None
    code_template: str | None = None
    file_types: list[str] | None = None
    rating_scale: int | None = None

    @classmethod
    def from_question(cls, question: Question) -> "CandidateQuestion":
        data: dict[str, Any] = question.model_dump(
            include=set(cls.model_fields),
        )
        return cls(**data)
