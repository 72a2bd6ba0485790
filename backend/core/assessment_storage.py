"""
Persistent storage of finalized assessments keyed by id and owning user.
- Backend: JSON file (data/assessments.json) by default; integer ids, autoincrement.
- Optional: set ASSESSMENT_STORE=supabase and configure Supabase to use the assessments table.
- Records are stored verbatim: score/status are computed by the engine before they get here.
"""
import json
import logging
from datetime import datetime, timezone
from typing import Any, Optional

from core.config import (
    SUPABASE_ASSESSMENTS_TABLE,
    get_assessment_store_backend,
    get_assessments_path,
    get_supabase_key,
    get_supabase_url,
)
from core.models.assessment import AssessmentRecord

logger = logging.getLogger(__name__)

_supabase_client = None


def _use_supabase() -> bool:
    return get_assessment_store_backend() == "supabase"


def _supabase():
    global _supabase_client
    if _supabase_client is None:
        from supabase import create_client
        url, key = get_supabase_url(), get_supabase_key()
        if not url or not key:
            raise RuntimeError("ASSESSMENT_STORE=supabase but Supabase credentials are missing")
        _supabase_client = create_client(url, key)
    return _supabase_client


def _row_to_dict(row: dict) -> dict[str, Any]:
    answers = row.get("answers") or {}
    if isinstance(answers, str):
        answers = json.loads(answers)
    return {
        "id": int(row["id"]),
        "userId": str(row["user_id"]),
        "productCategory": row["product_category"],
        "answers": answers,
        "score": int(row["score"]),
        "status": row["status"],
        "containsMeat": row.get("contains_meat"),
        "createdAt": row.get("created_at"),
    }


# --- JSON file backend ---

def _load_all() -> dict:
    path = get_assessments_path()
    if not path.exists():
        return {"next_id": 1, "assessments": {}}
    try:
        with open(path, encoding="utf-8") as f:
            return json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.warning("Failed to load assessments from %s: %s", path, e)
        return {"next_id": 1, "assessments": {}}


def _save_all(data: dict) -> None:
    path = get_assessments_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)


# --- public API ---

def create_assessment(user_id: str, record: AssessmentRecord) -> dict[str, Any]:
    """Store a finalized record for user_id. Returns the stored assessment with id and createdAt."""
    created_at = datetime.now(timezone.utc).isoformat()
    if _use_supabase():
        resp = _supabase().table(SUPABASE_ASSESSMENTS_TABLE).insert({
            "user_id": user_id,
            "product_category": record.product_category,
            "answers": dict(record.answers),
            "score": record.score,
            "status": record.status.value,
            "contains_meat": record.contains_meat,
            "created_at": created_at,
        }).execute()
        stored = _row_to_dict(resp.data[0])
    else:
        data = _load_all()
        assessment_id = int(data.get("next_id", 1))
        stored = {"id": assessment_id, "userId": user_id, **record.to_dict(), "createdAt": created_at}
        data.setdefault("assessments", {})[str(assessment_id)] = stored
        data["next_id"] = assessment_id + 1
        _save_all(data)
    logger.info(
        "ASSESSMENT_SAVE id=%s user_id=%s category=%s score=%s status=%s",
        stored["id"], user_id, record.product_category, record.score, record.status.value,
    )
    return stored


def get_assessment(assessment_id: int) -> Optional[dict[str, Any]]:
    """Load by id regardless of owner (the caller checks ownership). None if not found."""
    if _use_supabase():
        resp = _supabase().table(SUPABASE_ASSESSMENTS_TABLE).select("*").eq("id", assessment_id).execute()
        return _row_to_dict(resp.data[0]) if resp.data else None
    return _load_all().get("assessments", {}).get(str(assessment_id))


def list_assessments(user_id: str) -> list[dict[str, Any]]:
    """User's assessments, newest first."""
    if _use_supabase():
        resp = (
            _supabase().table(SUPABASE_ASSESSMENTS_TABLE)
            .select("*")
            .eq("user_id", user_id)
            .order("created_at", desc=True)
            .execute()
        )
        return [_row_to_dict(r) for r in resp.data or []]
    items = [a for a in _load_all().get("assessments", {}).values() if a.get("userId") == user_id]
    return sorted(items, key=lambda a: (a.get("createdAt") or "", a["id"]), reverse=True)


def delete_assessment(assessment_id: int, user_id: str) -> bool:
    """Delete only if owned by user_id. Returns True when something was deleted."""
    if _use_supabase():
        resp = (
            _supabase().table(SUPABASE_ASSESSMENTS_TABLE)
            .delete()
            .eq("id", assessment_id)
            .eq("user_id", user_id)
            .execute()
        )
        deleted = bool(resp.data)
    else:
        data = _load_all()
        existing = data.get("assessments", {}).get(str(assessment_id))
        deleted = existing is not None and existing.get("userId") == user_id
        if deleted:
            del data["assessments"][str(assessment_id)]
            _save_all(data)
    logger.info("ASSESSMENT_DELETE id=%s user_id=%s deleted=%s", assessment_id, user_id, deleted)
    return deleted
