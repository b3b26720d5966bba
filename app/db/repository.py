"""Table access for candidates, campaigns, questions and departments.

Every function issues one PostgREST request through the shared Supabase
client.  Candidate updates are a single ``UPDATE ... WHERE id = ?`` statement,
so a patch either commits whole or not at all.

Failures are mapped onto the domain taxonomy:

* PostgREST / transport errors -> ``StorageError``
* rows that do not fit the models -> ``ConsistencyError``
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from datetime import datetime
from enum import Enum
from typing import Any, TypeVar

import pydantic
from postgrest.exceptions import APIError

from app.core.errors import ConsistencyError, NotFoundError, StorageError
from app.db.supabase import get_supabase
from app.models.campaign import Campaign
from app.models.candidate import CandidateRecord
from app.models.question import Department, Question

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=pydantic.BaseModel)

# Columns that older rows store as JSON-encoded text instead of jsonb
_JSON_COLUMNS = (
    "question_set_ids",
    "assigned_questions",
    "answers",
    "education",
    "tags",
    "options",
    "correct_answer",
    "file_types",
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _execute(query: Any, action: str) -> Any:
    """Run a PostgREST query, wrapping failures in ``StorageError``."""
    try:
        return query.execute()
    except APIError as exc:
        logger.error(
            "storage_error",
            extra={"action": action, "error_message": exc.message},
        )
        raise StorageError(f"Storage failure during {action}: {exc.message}") from exc


def _decode_row(row: dict[str, Any]) -> dict[str, Any]:
    decoded = dict(row)
    for column in _JSON_COLUMNS:
        value = decoded.get(column)
        if isinstance(value, str):
            try:
                decoded[column] = json.loads(value) if value else None
            except json.JSONDecodeError:
                # correct_answer may legitimately be a bare string
                if column != "correct_answer":
                    raise ConsistencyError(
                        f"Column {column} of row {row.get('id')} is not valid JSON"
                    ) from None
    return decoded


def _to_model(model: type[ModelT], row: dict[str, Any]) -> ModelT:
    try:
        return model.model_validate(_decode_row(row))
    except pydantic.ValidationError as exc:
        raise ConsistencyError(
            f"Stored {model.__name__} row {row.get('id')} is invalid: {exc}"
        ) from exc


def _to_models(model: type[ModelT], rows: Iterable[dict[str, Any]]) -> list[ModelT]:
    return [_to_model(model, row) for row in rows]


def _serialize(patch: dict[str, Any]) -> dict[str, Any]:
    """Turn datetimes and enums into JSON-friendly values."""
    out: dict[str, Any] = {}
    for key, value in patch.items():
        if isinstance(value, datetime):
            out[key] = value.isoformat()
        elif isinstance(value, Enum):
            out[key] = value.value
        else:
            out[key] = value
    return out


def _first(result: Any) -> dict[str, Any] | None:
    rows = result.data or []
    return rows[0] if rows else None


# ---------------------------------------------------------------------------
# Candidates
# ---------------------------------------------------------------------------

def get_candidate(candidate_id: str) -> CandidateRecord | None:
    client = get_supabase()
    result = _execute(
        client.table("candidates").select("*").eq("id", candidate_id).limit(1),
        "get_candidate",
    )
    row = _first(result)
    return _to_model(CandidateRecord, row) if row else None


def list_candidates() -> list[CandidateRecord]:
    client = get_supabase()
    result = _execute(
        client.table("candidates").select("*").order("created_at"),
        "list_candidates",
    )
    return _to_models(CandidateRecord, result.data or [])


def list_candidates_by_campaign(campaign_id: str) -> list[CandidateRecord]:
    client = get_supabase()
    result = _execute(
        client.table("candidates")
        .select("*")
        .eq("campaign_id", campaign_id)
        .order("created_at"),
        "list_candidates_by_campaign",
    )
    return _to_models(CandidateRecord, result.data or [])


def find_candidate_by_credentials(
    email: str, temp_password: str
) -> CandidateRecord | None:
    client = get_supabase()
    result = _execute(
        client.table("candidates")
        .select("*")
        .eq("email", email.strip().lower())
        .eq("temp_password", temp_password)
        .limit(1),
        "find_candidate_by_credentials",
    )
    row = _first(result)
    return _to_model(CandidateRecord, row) if row else None


def insert_candidate(data: dict[str, Any]) -> CandidateRecord:
    client = get_supabase()
    result = _execute(
        client.table("candidates").insert(_serialize(data)),
        "insert_candidate",
    )
    row = _first(result)
    if row is None:
        raise StorageError("Candidate insert returned no row")
    return _to_model(CandidateRecord, row)


def update_candidate(candidate_id: str, patch: dict[str, Any]) -> CandidateRecord:
    """Apply ``patch`` to one candidate as a single statement."""
    client = get_supabase()
    result = _execute(
        client.table("candidates").update(_serialize(patch)).eq("id", candidate_id),
        "update_candidate",
    )
    row = _first(result)
    if row is None:
        raise NotFoundError(f"Candidate {candidate_id} not found")
    return _to_model(CandidateRecord, row)


def assign_questions_if_unassigned(
    candidate_id: str, question_ids: list[str]
) -> CandidateRecord | None:
    """Persist an assignment only if none exists and the interview has not begun.

    "None exists" covers both an empty list and a NULL column.

    Returns the updated record, or ``None`` when the condition did not hold
    (another request assigned first, or the interview started).
    """
    client = get_supabase()
    result = _execute(
        client.table("candidates")
        .update({"assigned_questions": question_ids})
        .eq("id", candidate_id)
        .or_("assigned_questions.eq.[],assigned_questions.is.null")
        .is_("interview_started_at", "null"),
        "assign_questions_if_unassigned",
    )
    row = _first(result)
    return _to_model(CandidateRecord, row) if row else None


# ---------------------------------------------------------------------------
# Campaigns
# ---------------------------------------------------------------------------

def get_campaign(campaign_id: str) -> Campaign | None:
    client = get_supabase()
    result = _execute(
        client.table("campaigns").select("*").eq("id", campaign_id).limit(1),
        "get_campaign",
    )
    row = _first(result)
    return _to_model(Campaign, row) if row else None


def list_campaigns() -> list[Campaign]:
    client = get_supabase()
    result = _execute(
        client.table("campaigns").select("*").order("created_at"),
        "list_campaigns",
    )
    return _to_models(Campaign, result.data or [])


def update_campaign(campaign_id: str, patch: dict[str, Any]) -> Campaign:
    client = get_supabase()
    result = _execute(
        client.table("campaigns").update(_serialize(patch)).eq("id", campaign_id),
        "update_campaign",
    )
    row = _first(result)
    if row is None:
        raise NotFoundError(f"Campaign {campaign_id} not found")
    return _to_model(Campaign, row)


# ---------------------------------------------------------------------------
# Questions / departments
# ---------------------------------------------------------------------------

def list_questions_by_ids(question_ids: list[str]) -> list[Question]:
    """Return the questions for ``question_ids`` in the order given.

    Ids with no matching row are simply absent from the result.
    """
    if not question_ids:
        return []
    client = get_supabase()
    result = _execute(
        client.table("questions").select("*").in_("id", question_ids),
        "list_questions_by_ids",
    )
    by_id = {q.id: q for q in _to_models(Question, result.data or [])}
    return [by_id[qid] for qid in question_ids if qid in by_id]


def list_questions() -> list[Question]:
    client = get_supabase()
    result = _execute(
        client.table("questions").select("*").order("created_at"),
        "list_questions",
    )
    return _to_models(Question, result.data or [])


def list_departments() -> list[Department]:
    client = get_supabase()
    result = _execute(
        client.table("departments").select("*").order("name"),
        "list_departments",
    )
    return _to_models(Department, result.data or [])
