"""Candidate-facing and per-candidate admin endpoints.

Domain errors propagate to the handlers registered in ``app.main``; nothing
here catches them.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter

from app.models.candidate import (
    CandidateCreate,
    CandidateCreated,
    CandidateLogin,
    CandidateSession,
    PasswordResetResponse,
)
from app.models.submission import (
    AssignmentResponse,
    SubmissionRequest,
    SubmissionResponse,
)
from app.services.assignment import ensure_assignment, reassign_questions, start_interview
from app.services.candidates import authenticate_candidate, create_candidate, reset_password
from app.services.scoring import submit_answers

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("", response_model=CandidateCreated, status_code=201)
async def candidate_create(payload: CandidateCreate) -> CandidateCreated:
    """Create a candidate and draw their question assignment."""
    return create_candidate(payload)


@router.post("/login", response_model=CandidateSession)
async def candidate_login(credentials: CandidateLogin) -> CandidateSession:
    """Authenticate with the temporary password (active campaigns only)."""
    return authenticate_candidate(credentials.email, credentials.temp_password)


@router.post("/{candidate_id}/questions", response_model=AssignmentResponse)
async def candidate_questions(candidate_id: str) -> AssignmentResponse:
    """Return the assigned questions, assigning them first if needed."""
    return ensure_assignment(candidate_id)


@router.post("/{candidate_id}/reassign", response_model=AssignmentResponse)
async def candidate_reassign(candidate_id: str) -> AssignmentResponse:
    """Redraw the assignment; 409 once the interview has started."""
    return reassign_questions(candidate_id)


@router.post("/{candidate_id}/start", response_model=AssignmentResponse)
async def candidate_start(candidate_id: str) -> AssignmentResponse:
    """Mark the interview as started, locking the assignment."""
    return start_interview(candidate_id)


@router.post("/{candidate_id}/submit", response_model=SubmissionResponse)
async def candidate_submit(
    candidate_id: str, submission: SubmissionRequest
) -> SubmissionResponse:
    """Record answers and score them.  Re-submitting overwrites."""
    return submit_answers(candidate_id, submission)


@router.post("/{candidate_id}/reset-password", response_model=PasswordResetResponse)
async def candidate_reset_password(candidate_id: str) -> PasswordResetResponse:
    return reset_password(candidate_id)
