"""Application constants.

Scoring bounds, the completion-ratio fallback, temporary password format and
the candidate status aliases accepted from older producers.
"""

# ---------------------------------------------------------------------------
# Scoring
# ---------------------------------------------------------------------------
SCORE_MIN: float = 0.0
SCORE_MAX: float = 100.0

# Denominator used by the completion ratio when a candidate has no
# assigned questions.
FALLBACK_QUESTION_COUNT: int = 10

# Every question is worth the same fixed number of marks.
QUESTION_MARKS: int = 10

# ---------------------------------------------------------------------------
# Temporary passwords ("temp" followed by four digits)
# ---------------------------------------------------------------------------
TEMP_PASSWORD_PREFIX: str = "temp"
TEMP_PASSWORD_MIN: int = 1000
TEMP_PASSWORD_MAX: int = 9999

# ---------------------------------------------------------------------------
# Candidate status normalization
# Keys are lower-cased, whitespace-trimmed spellings seen in stored rows and
# client payloads; values are canonical CandidateStatus values.
# ---------------------------------------------------------------------------
CANDIDATE_STATUS_ALIASES: dict[str, str] = {
    "not_started": "not_started",
    "not started": "not_started",
    "not-started": "not_started",
    "invited": "invited",
    "in_progress": "in_progress",
    "in progress": "in_progress",
    "in-progress": "in_progress",
    "completed": "completed",
}
