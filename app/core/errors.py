"""Domain error taxonomy.

Every error raised by the services derives from ``InterviewError`` and carries
the HTTP status the API layer should answer with.  The services never
translate or swallow these; ``app.main`` renders them.
"""


class InterviewError(Exception):
    """Base exception for all domain errors."""

    status_code: int = 500
    error_type: str = "interview_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(InterviewError):
    """Raised for malformed input (bad answers payload, bad pool bounds)."""

    status_code = 400
    error_type = "validation_error"


class AuthenticationError(InterviewError):
    """Raised when candidate credentials do not match."""

    status_code = 401
    error_type = "authentication_error"


class CampaignInactiveError(InterviewError):
    """Raised when a candidate acts on a campaign that is not active."""

    status_code = 403
    error_type = "campaign_inactive"


class NotFoundError(InterviewError):
    """Raised when a candidate, campaign or question does not exist."""

    status_code = 404
    error_type = "not_found"


class AssignmentLockedError(InterviewError):
    """Raised when questions would be reassigned after the interview began."""

    status_code = 409
    error_type = "assignment_locked"


class ConsistencyError(InterviewError):
    """Raised for data integrity violations that must reach an admin."""

    status_code = 500
    error_type = "consistency_error"


class StorageError(InterviewError):
    """Raised when the storage layer fails."""

    status_code = 500
    error_type = "storage_error"
