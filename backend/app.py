"""
FDA Ready compliance assessment API.

Endpoints:
    GET    /                                Health check
    GET    /api/health                      Health check
    GET    /api/categories                  Two-level product category catalog
    GET    /api/sections                    Checklist sections, questions, weights
    POST   /api/assessments/preview         Live sections, steps, gating and score for wizard state
    POST   /api/assessments                 Score and store a finalized assessment
    GET    /api/assessments                 Current user's assessments
    GET    /api/assessments/{id}            One assessment with per-section breakdown
    DELETE /api/assessments/{id}            Delete own assessment
    POST   /api/assessments/{id}/summary    AI improvement plan for a stored assessment
    POST   /api/ai/analyze-packaging        AI labeling check of a package photo
    POST   /api/ai/summarize-results        AI improvement plan from failed items
"""
from fastapi import FastAPI, UploadFile, File, Form, Header, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel
from typing import Dict, List, Optional
import logging
from dotenv import load_dotenv
from pathlib import Path

# Load env vars
load_dotenv(Path(__file__).parent / ".env")

# Initialize App
app = FastAPI(title="FDA Ready Compliance API")

try:
    from core.config import log_config
    log_config()
except ImportError:
    pass

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Logger
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# --- Eagerly import core modules ---
from core import assessment_storage
from core.ai import (
    AIServiceError,
    ImageValidationError,
    analyze_packaging,
    summarize_results,
    validate_image,
)
from core.checklist import (
    ANSWER_OPTIONS,
    all_sections,
    answers_for_sections,
    resolve_for_record,
    resolve_sections,
    section_ids,
)
from core.evaluation.score_engine import failed_questions, score, section_breakdown
from core.models import classification as cls
from core.models.assessment import AssessmentRecord
from core.taxonomy import CategoryTokenError, display_text, list_main_categories, validate_token
from core.wizard import CaptureMode, WizardState, build_steps, can_advance, step_labels


# --- Request/Response Models ---
class PreviewRequest(BaseModel):
    mode: Optional[CaptureMode] = None
    main_category: Optional[str] = None
    sub_category: Optional[str] = None
    custom_name: Optional[str] = None
    contains_meat: Optional[bool] = None
    answers: Dict[str, str] = {}
    image_selected: bool = False


class AssessmentCreate(BaseModel):
    productCategory: str
    answers: Dict[str, str]
    containsMeat: Optional[bool] = None


class SummarizeRequest(BaseModel):
    productCategory: str
    failedItems: List[str]
    answers: Dict[str, str] = {}
    language: str = "en"
    score: int


class StoredSummaryRequest(BaseModel):
    language: str = "en"


# --- Helper Functions ---

def _require_user(user_id: Optional[str]) -> str:
    """Owning user comes from the auth layer in front of this service via X-User-Id."""
    if not user_id or not user_id.strip():
        raise HTTPException(status_code=401, detail="Missing X-User-Id header")
    return user_id.strip()


def _validate_answers(answers: Dict[str, str]) -> None:
    bad = {qid: v for qid, v in answers.items() if v not in ANSWER_OPTIONS}
    if bad:
        raise HTTPException(status_code=400, detail=f"Unknown answer values: {bad}")


def _build_classification(req: PreviewRequest) -> cls.ClassificationState:
    """Replay selections through the transition functions so the catalog invariants are enforced."""
    state = cls.EMPTY_CLASSIFICATION
    if req.main_category:
        state = cls.select_main_category(state, req.main_category)
        if req.sub_category:
            state = cls.select_subcategory(state, req.sub_category)
        if req.custom_name is not None:
            state = cls.set_custom_name(state, req.custom_name)
        if req.contains_meat is not None and cls.meat_inquiry_required(state):
            state = cls.answer_meat_inquiry(state, req.contains_meat)
    return state


def _owned_assessment(assessment_id: int, user_id: str) -> dict:
    assessment = assessment_storage.get_assessment(assessment_id)
    if assessment is None:
        raise HTTPException(status_code=404, detail="Assessment not found")
    if assessment.get("userId") != user_id:
        raise HTTPException(status_code=403, detail="Access denied")
    return assessment


def _record_sections(assessment: dict):
    return resolve_for_record(
        assessment["productCategory"], assessment["answers"], assessment.get("containsMeat"),
    )


def _with_breakdown(assessment: dict) -> dict:
    sections = _record_sections(assessment)
    return {
        **assessment,
        "categoryDisplay": display_text(assessment["productCategory"]),
        "sections": section_breakdown(assessment["answers"], sections),
    }


# --- Endpoints ---

@app.get("/")
def health_check():
    return {"status": "ok", "service": "FDA Ready Compliance API"}


@app.get("/api/health")
def api_health():
    return {"status": "ok"}


@app.get("/api/categories")
def get_categories():
    return {"categories": [c.to_dict() for c in list_main_categories()]}


@app.get("/api/sections")
def get_sections():
    return {
        "answer_options": list(ANSWER_OPTIONS),
        "sections": [s.to_dict() for s in all_sections()],
    }


@app.post("/api/assessments/preview")
async def preview_assessment(request: PreviewRequest):
    """Everything the wizard needs to render its current state; nothing is stored."""
    try:
        classification = _build_classification(request)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    _validate_answers(request.answers)

    sections = resolve_sections(
        classification.main_id,
        classification.sub_id,
        cls.effective_contains_meat(classification),
    )
    steps = build_steps(request.mode, classification, sections)
    state = WizardState(
        mode=request.mode,
        classification=classification,
        answers=dict(request.answers),
        image_selected=request.image_selected,
    )
    result = score(request.answers, sections)
    token = cls.to_token(classification) if cls.is_complete(classification) else None
    logger.info(
        "PREVIEW category=%s sections=%s percentage=%d status=%s",
        token, section_ids(sections), result.percentage, result.status.value,
    )
    return {
        "classification": classification.to_dict(),
        "productCategory": token,
        "sections": section_ids(sections),
        "steps": [s.value for s in steps],
        "labels": step_labels(steps),
        "canAdvance": {s.value: can_advance(s, state, sections) for s in steps},
        "score": result.to_dict(),
        "breakdown": section_breakdown(request.answers, sections),
    }


@app.post("/api/assessments", status_code=201)
async def create_assessment(body: AssessmentCreate, x_user_id: Optional[str] = Header(default=None)):
    """Score is always recomputed here; clients cannot submit their own score/status."""
    user_id = _require_user(x_user_id)
    _validate_answers(body.answers)
    try:
        validate_token(body.productCategory)
        sections = resolve_for_record(body.productCategory, body.answers, body.containsMeat)
    except CategoryTokenError as e:
        raise HTTPException(status_code=400, detail=str(e))
    # only answers to the resolved sections are stored, so GET recomputes the same score
    answers = answers_for_sections(body.answers, sections)
    try:
        result = score(answers, sections)
        record = AssessmentRecord(
            product_category=body.productCategory,
            answers=answers,
            score=result.percentage,
            status=result.status,
            contains_meat=body.containsMeat,
        )
        return assessment_storage.create_assessment(user_id, record)
    except Exception as e:
        logger.error("Create assessment failed: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to create assessment")


@app.get("/api/assessments")
async def list_assessments(x_user_id: Optional[str] = Header(default=None)):
    user_id = _require_user(x_user_id)
    try:
        return assessment_storage.list_assessments(user_id)
    except Exception as e:
        logger.error("List assessments failed: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to fetch assessments")


@app.get("/api/assessments/{assessment_id}")
async def get_assessment(assessment_id: int, x_user_id: Optional[str] = Header(default=None)):
    user_id = _require_user(x_user_id)
    return _with_breakdown(_owned_assessment(assessment_id, user_id))


@app.delete("/api/assessments/{assessment_id}")
async def delete_assessment(assessment_id: int, x_user_id: Optional[str] = Header(default=None)):
    user_id = _require_user(x_user_id)
    if not assessment_storage.delete_assessment(assessment_id, user_id):
        raise HTTPException(status_code=404, detail="Assessment not found or access denied")
    return {"message": "Assessment deleted successfully"}


@app.post("/api/assessments/{assessment_id}/summary")
async def summarize_stored_assessment(
    assessment_id: int,
    body: StoredSummaryRequest,
    x_user_id: Optional[str] = Header(default=None),
):
    """Builds the summary request from the stored record: failed questions, category text, score."""
    user_id = _require_user(x_user_id)
    assessment = _owned_assessment(assessment_id, user_id)
    sections = _record_sections(assessment)
    failed = [q.text for q in failed_questions(assessment["answers"], sections)]
    return _summarize(
        display_text(assessment["productCategory"]),
        failed,
        assessment["answers"],
        assessment["score"],
        body.language,
    )


@app.post("/api/ai/analyze-packaging")
async def analyze_packaging_image(image: UploadFile = File(...), language: str = Form("en")):
    """Proposed labeling answers from a package photo. Failure leaves the caller's answers untouched."""
    logger.info("Analyze packaging filename=%s content_type=%s", image.filename, image.content_type)
    image_bytes = await image.read()
    try:
        validate_image(image_bytes, image.content_type)
    except ImageValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    analysis = analyze_packaging(image_bytes, image.content_type, language)
    if not analysis.success:
        raise HTTPException(status_code=502, detail=analysis.error)
    return analysis.to_dict()


@app.post("/api/ai/summarize-results")
async def summarize(request: SummarizeRequest):
    return _summarize(request.productCategory, request.failedItems, request.answers, request.score, request.language)


def _summarize(product_category: str, failed_items: List[str], answers: Dict[str, str], score_value: int, language: str):
    if not failed_items:
        raise HTTPException(status_code=400, detail="No failed items to summarize")
    try:
        summary = summarize_results(product_category, failed_items, answers, score_value, language)
    except AIServiceError as e:
        logger.warning("AI summary failed: %s", e)
        raise HTTPException(status_code=502, detail=str(e))
    return {"success": True, "summary": summary.to_dict()}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("app:app", host="0.0.0.0", port=8000, reload=True)
