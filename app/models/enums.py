"""Enum types mirroring the Postgres enums used by the interview tables."""

from enum import Enum


class AnswerType(str, Enum):
    """How a question expects to be answered."""
    multiple_choice = "multiple_choice"
    code_editor = "code_editor"
    essay = "essay"
    file_upload = "file_upload"
    rating_scale = "rating_scale"


class Difficulty(str, Enum):
    beginner = "beginner"
    intermediate = "intermediate"
    advanced = "advanced"


class SkillType(str, Enum):
    technical = "technical"
    behavioral = "behavioral"
    logical = "logical"


class CampaignStatus(str, Enum):
    """Lifecycle status of a hiring campaign."""
    draft = "draft"
    active = "active"
    completed = "completed"
    archived = "archived"


class CandidateStatus(str, Enum):
    """Canonical candidate status (see ``CANDIDATE_STATUS_ALIASES``)."""
    not_started = "not_started"
    invited = "invited"
    in_progress = "in_progress"
    completed = "completed"


class ResultStatus(str, Enum):
    """Pass/fail outcome against the campaign passing score."""
    passed = "passed"
    failed = "failed"


class RankingScope(str, Enum):
    """Whether a leaderboard covers one campaign or all of them."""
    campaign = "campaign"
    global_ = "global"
